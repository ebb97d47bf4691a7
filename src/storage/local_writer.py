# src/storage/local_writer.py — v3
"""Local filesystem output writer (default backend)."""

from __future__ import annotations

import os
import tempfile
from pathlib import Path

from figmadump.storage.base_output_writer import BaseOutputWriter


class LocalWriter(BaseOutputWriter):
    """Write outputs under a local root directory."""

    def __init__(self, base_path: str | Path) -> None:
        """Initialize with the root directory for all reads and writes.

        Args:
            base_path: Root directory; created lazily by ensure_root().
        """
        self._base = Path(base_path).expanduser()

    @property
    def base_path(self) -> Path:
        return self._base

    def _resolve(self, path: str) -> Path:
        """Resolve a path relative to base_path."""
        return self._base / path

    async def ensure_root(self) -> None:
        self._base.mkdir(parents=True, exist_ok=True)

    async def write(self, path: str, content: bytes | str) -> None:
        """Write content atomically: temp file in the same dir, then rename."""
        p = self._resolve(path)
        p.parent.mkdir(parents=True, exist_ok=True)
        data = content.encode("utf-8") if isinstance(content, str) else content

        fd, tmp_name = tempfile.mkstemp(prefix=f".{p.name}.", dir=str(p.parent))
        try:
            with os.fdopen(fd, "wb") as f:
                f.write(data)
            os.replace(tmp_name, p)
        except BaseException:
            Path(tmp_name).unlink(missing_ok=True)
            raise

    async def read(self, path: str) -> bytes:
        return self._resolve(path).read_bytes()

    async def exists(self, path: str) -> bool:
        return self._resolve(path).exists()

    async def delete(self, path: str) -> None:
        self._resolve(path).unlink(missing_ok=True)

    async def list_dir(self, path: str = "") -> list[str]:
        p = self._resolve(path)
        if not p.is_dir():
            return []
        return [entry.name for entry in sorted(p.iterdir()) if entry.is_file()]
