# src/client/models.py — v1
"""Typed fetch results: FetchOk | TooLarge | OtherFailure.

The client never raises for HTTP-level failures; callers branch on the
result type instead of inspecting status codes inside exceptions.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Any, Union


@dataclass(frozen=True)
class FetchOk:
    """Successful response with its decoded JSON body."""

    data: dict[str, Any] = field(default_factory=dict)


@dataclass(frozen=True)
class TooLarge:
    """The service refused to build the response (HTTP 500 from Figma)."""

    detail: str = ""


@dataclass(frozen=True)
class OtherFailure:
    """Any other failure: non-2xx status, transport error, bad JSON, timeout."""

    detail: str
    status_code: int | None = None


FetchResult = Union[FetchOk, TooLarge, OtherFailure]


def describe(result: FetchResult) -> str:
    """Short human-readable description of a non-Ok result."""
    if isinstance(result, TooLarge):
        return f"response too large ({result.detail})" if result.detail else "response too large"
    if isinstance(result, OtherFailure):
        if result.status_code is not None:
            return f"HTTP {result.status_code}: {result.detail}"
        return result.detail
    return "ok"
