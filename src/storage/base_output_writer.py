# src/storage/base_output_writer.py — v2
"""Abstract output writer interface."""

from __future__ import annotations

from abc import ABC, abstractmethod


class BaseOutputWriter(ABC):
    """Unified interface for output storage backends.

    Paths are relative to the writer's root.
    """

    @abstractmethod
    async def ensure_root(self) -> None:
        """Create the root directory if it does not exist."""

    @abstractmethod
    async def write(self, path: str, content: bytes | str) -> None:
        """Write content to the given path, replacing any existing file."""

    @abstractmethod
    async def read(self, path: str) -> bytes:
        """Read content from the given path."""

    @abstractmethod
    async def exists(self, path: str) -> bool:
        """Check if path exists."""

    @abstractmethod
    async def delete(self, path: str) -> None:
        """Remove a file. Missing files are ignored."""

    @abstractmethod
    async def list_dir(self, path: str = "") -> list[str]:
        """List directory contents."""
