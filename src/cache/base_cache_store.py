# src/cache/base_cache_store.py — v2
"""Abstract cache store interface."""

from __future__ import annotations

from abc import ABC, abstractmethod
from collections.abc import Sequence

from figmadump.cache.models import ScopeKey
from figmadump.core.models import Record


class BaseCacheStore(ABC):
    """Read-through / write-through persistence keyed by ScopeKey."""

    @abstractmethod
    async def prepare(self) -> None:
        """Create the backing location (output directory) if needed."""

    @abstractmethod
    async def read_scope(self, key: ScopeKey) -> list[Record] | None:
        """Load the records for a scope key.

        Returns None on any miss: absent file, empty file, read or decode
        failure. Never raises.
        """

    @abstractmethod
    async def write_scope(self, key: ScopeKey, records: Sequence[Record]) -> None:
        """Persist records for a scope key, overwriting any existing file.

        Raises:
            PersistError: If encoding or writing fails.
        """

    @abstractmethod
    async def exists(self, key: ScopeKey) -> bool:
        """True if a cache file is present for the scope key."""

    @abstractmethod
    async def delete_scope(self, key: ScopeKey) -> None:
        """Remove the cache file for a scope key, if any."""

    @abstractmethod
    async def list_scopes(self, entity: str | None = None) -> list[ScopeKey]:
        """List cached scope keys, optionally filtered by entity type."""
