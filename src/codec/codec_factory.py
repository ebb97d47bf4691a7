# src/codec/codec_factory.py — v1
"""Factory for entity codec instantiation."""

from __future__ import annotations

from figmadump.codec.base_codec import BaseCodec


def create_codec(output_format: str) -> BaseCodec:
    """Instantiate the codec for an output format.

    Args:
        output_format: "json" or "csv".

    Returns:
        Configured BaseCodec implementation.

    Raises:
        ValueError: If the format is not supported.
    """
    fmt = output_format.strip().lower()

    if fmt == "json":
        from figmadump.codec.json_codec import JsonCodec
        return JsonCodec()

    if fmt == "csv":
        from figmadump.codec.csv_codec import CsvCodec
        return CsvCodec()

    raise ValueError(f"Unsupported output format: {output_format!r}")
