# src/codec/base_codec.py — v2
"""Abstract entity codec interface."""

from __future__ import annotations

from abc import ABC, abstractmethod
from collections.abc import Sequence

from figmadump.core.models import Record


class CodecError(ValueError):
    """Raised when bytes cannot be decoded into records."""


class BaseCodec(ABC):
    """Unified interface for serialization formats.

    Both directions are order-preserving: ``decode(encode(records))`` yields
    records in the same order they were given.
    """

    @property
    @abstractmethod
    def format_name(self) -> str:
        """Format identifier (e.g., 'json', 'csv')."""

    @property
    @abstractmethod
    def extension(self) -> str:
        """File extension without the dot (e.g., 'json')."""

    @abstractmethod
    def encode(self, records: Sequence[Record], columns: Sequence[str] = ()) -> bytes:
        """Encode records to bytes.

        Args:
            records: Records to encode, in order.
            columns: Header to write when ``records`` is empty. Formats that
                carry no header ignore it.
        """

    @abstractmethod
    def decode(self, data: bytes) -> list[Record]:
        """Decode bytes to records. Raises CodecError on malformed input."""
