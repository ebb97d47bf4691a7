# src/cache/cache_factory.py — v3
"""Factory for cache store instantiation."""

from __future__ import annotations

from pathlib import Path

from figmadump.cache.base_cache_store import BaseCacheStore
from figmadump.codec.codec_factory import create_codec


def create_cache_store(
    output_dir: str | Path,
    output_format: str = "csv",
) -> BaseCacheStore:
    """Instantiate the file cache store for an output directory.

    Args:
        output_dir: Directory holding one file per scope key.
        output_format: "json" or "csv", applied uniformly to every stage.

    Returns:
        Configured BaseCacheStore implementation.

    Raises:
        ValueError: If the output format is not supported.
    """
    from figmadump.cache.file_store import FileCacheStore
    from figmadump.storage.local_writer import LocalWriter

    codec = create_codec(output_format)
    writer = LocalWriter(base_path=output_dir)
    return FileCacheStore(writer=writer, codec=codec)
