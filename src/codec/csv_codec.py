# src/codec/csv_codec.py — v2
"""CSV codec with dotted-path flattening of nested objects.

Nested dicts become dotted column names (``document.name``). Lists and
booleans are written as JSON text and None as an empty cell. On decode the
dotted columns are folded back into nested dicts; cell values stay strings.

An empty record list is written as a header row only, so it reads back as
an empty list rather than as a missing file.
"""

from __future__ import annotations

import csv
import io
import json
import sys
from collections.abc import Sequence
from typing import Any

from figmadump.codec.base_codec import BaseCodec, CodecError
from figmadump.core.models import Record

_SEP = "."


def _lift_field_size_limit() -> None:
    """Allow cells of any size; a whole document subtree can sit in one cell."""
    limit = sys.maxsize
    while True:
        try:
            csv.field_size_limit(limit)
            return
        except OverflowError:
            # C long is 32-bit on some platforms.
            limit //= 10


_lift_field_size_limit()


def flatten_record(record: Record, prefix: str = "") -> dict[str, str]:
    """Flatten nested dicts into a single-level dict of CSV cell strings."""
    flat: dict[str, str] = {}
    for key, value in record.items():
        name = f"{prefix}{key}"
        if isinstance(value, dict) and value:
            flat.update(flatten_record(value, prefix=f"{name}{_SEP}"))
        else:
            flat[name] = _to_cell(value)
    return flat


def unflatten_record(row: dict[str, str]) -> Record:
    """Fold dotted column names back into nested dicts."""
    record: Record = {}
    for name, value in row.items():
        parts = name.split(_SEP)
        target: Record | None = record
        for part in parts[:-1]:
            child = target.setdefault(part, {})
            if not isinstance(child, dict):
                # A scalar already owns this prefix; keep the column flat.
                target = None
                break
            target = child
        if target is None:
            record[name] = value
        else:
            target[parts[-1]] = value
    return record


def _to_cell(value: Any) -> str:
    if value is None:
        return ""
    if isinstance(value, str):
        return value
    if isinstance(value, (bool, list, tuple, dict)):
        return json.dumps(value, ensure_ascii=False)
    return str(value)


class CsvCodec(BaseCodec):
    """Encode records as CSV with a header row."""

    @property
    def format_name(self) -> str:
        return "csv"

    @property
    def extension(self) -> str:
        return "csv"

    def encode(self, records: Sequence[Record], columns: Sequence[str] = ()) -> bytes:
        rows = [flatten_record(r) for r in records]
        if not rows and not columns:
            return b""

        fieldnames: list[str] = list(columns) if not rows else []
        seen: set[str] = set(fieldnames)
        for row in rows:
            for name in row:
                if name not in seen:
                    seen.add(name)
                    fieldnames.append(name)

        buf = io.StringIO()
        writer = csv.DictWriter(buf, fieldnames=fieldnames, lineterminator="\n")
        writer.writeheader()
        for row in rows:
            writer.writerow(row)
        return buf.getvalue().encode("utf-8")

    def decode(self, data: bytes) -> list[Record]:
        try:
            text = data.decode("utf-8")
        except UnicodeDecodeError as e:
            raise CodecError(f"Invalid CSV encoding: {e}") from e
        if not text.strip():
            return []

        reader = csv.DictReader(io.StringIO(text))
        if not reader.fieldnames:
            raise CodecError("CSV payload has no header row")

        records: list[Record] = []
        try:
            for row in reader:
                if None in row:
                    raise CodecError(
                        f"CSV row {reader.line_num} has more cells than the header"
                    )
                records.append(unflatten_record({k: v or "" for k, v in row.items()}))
        except csv.Error as e:
            raise CodecError(f"Malformed CSV: {e}") from e
        return records
