# src/codec/json_codec.py — v2
"""JSON codec: a compact JSON array of records."""

from __future__ import annotations

import json
from collections.abc import Sequence

from figmadump.codec.base_codec import BaseCodec, CodecError
from figmadump.core.models import Record


class JsonCodec(BaseCodec):
    """Encode records as a single JSON array (UTF-8)."""

    @property
    def format_name(self) -> str:
        return "json"

    @property
    def extension(self) -> str:
        return "json"

    def encode(self, records: Sequence[Record], columns: Sequence[str] = ()) -> bytes:
        return json.dumps(list(records), ensure_ascii=False).encode("utf-8")

    def decode(self, data: bytes) -> list[Record]:
        try:
            parsed = json.loads(data.decode("utf-8"))
        except (UnicodeDecodeError, json.JSONDecodeError) as e:
            raise CodecError(f"Invalid JSON payload: {e}") from e

        # A bare object is accepted as a one-record list.
        if isinstance(parsed, dict):
            return [parsed]
        if not isinstance(parsed, list):
            raise CodecError(f"Expected a JSON array, got {type(parsed).__name__}")
        if not all(isinstance(item, dict) for item in parsed):
            raise CodecError("JSON array must contain only objects")
        return parsed
