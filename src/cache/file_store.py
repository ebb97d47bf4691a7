# src/cache/file_store.py — v3
"""File-based cache store: one encoded file per scope key.

Records are encoded with the run's codec (JSON or CSV) and written through
an output writer rooted at the output directory. A corrupt or unreadable
cache file is treated exactly like a missing one so the stage refetches.
"""

from __future__ import annotations

import logging
from collections.abc import Sequence

from figmadump.cache.base_cache_store import BaseCacheStore
from figmadump.cache.models import ScopeKey
from figmadump.codec.base_codec import BaseCodec, CodecError
from figmadump.core.errors import PersistError
from figmadump.core.models import Record
from figmadump.storage import layout
from figmadump.storage.base_output_writer import BaseOutputWriter

logger = logging.getLogger(__name__)


class FileCacheStore(BaseCacheStore):
    """Cache store persisting each scope key as a single file."""

    def __init__(self, writer: BaseOutputWriter, codec: BaseCodec) -> None:
        self._writer = writer
        self._codec = codec

    @property
    def codec(self) -> BaseCodec:
        return self._codec

    def path_for(self, key: ScopeKey) -> str:
        """Return the writer-relative path for a scope key."""
        return key.filename(self._codec.extension)

    async def prepare(self) -> None:
        await self._writer.ensure_root()

    async def read_scope(self, key: ScopeKey) -> list[Record] | None:
        """Retrieve cached records by scope key."""
        path = self.path_for(key)
        try:
            if not await self._writer.exists(path):
                return None
            data = await self._writer.read(path)
        except OSError as e:
            logger.warning("Failed to read cache file %s: %s", path, e)
            return None

        if not data.strip():
            logger.debug("Cache file %s is empty, treating as miss", path)
            return None

        try:
            return self._codec.decode(data)
        except CodecError as e:
            logger.warning("Corrupt cache file %s, will refetch: %s", path, e)
            return None

    async def write_scope(self, key: ScopeKey, records: Sequence[Record]) -> None:
        """Encode and store records for a scope key."""
        path = self.path_for(key)
        try:
            payload = self._codec.encode(records, columns=key.columns)
            await self._writer.write(path, payload)
        except (OSError, TypeError, ValueError) as e:
            raise PersistError(str(key), str(e)) from e
        logger.debug("Persisted %d record(s) to %s", len(records), path)

    async def exists(self, key: ScopeKey) -> bool:
        return await self._writer.exists(self.path_for(key))

    async def delete_scope(self, key: ScopeKey) -> None:
        await self._writer.delete(self.path_for(key))

    async def list_scopes(self, entity: str | None = None) -> list[ScopeKey]:
        """List cached scope keys for the configured format."""
        keys: list[ScopeKey] = []
        for name in await self._writer.list_dir():
            parsed = layout.parse_scope_filename(name, self._codec.extension)
            if parsed is None:
                continue
            found_entity, scope_id = parsed
            if entity is not None and found_entity != entity:
                continue
            keys.append(ScopeKey(found_entity, scope_id))
        return keys
