# src/core/errors.py — v1
"""Exception hierarchy for the download pipeline.

Cache misses are not errors and never appear here.
"""

from __future__ import annotations


class FigmaDumpError(Exception):
    """Base class for all pipeline errors."""


class StageFatalError(FigmaDumpError):
    """A Projects or Files fetch failed; the whole run aborts."""

    def __init__(self, stage: str, detail: str) -> None:
        self.stage = stage
        self.detail = detail
        super().__init__(f"Stage '{stage}' failed: {detail}")


class DocumentFetchError(FigmaDumpError):
    """A single document could not be fetched, even after degradation."""

    def __init__(self, file_key: str, detail: str) -> None:
        self.file_key = file_key
        self.detail = detail
        super().__init__(f"Document '{file_key}' failed: {detail}")


class PersistError(FigmaDumpError):
    """Writing a scope key to storage failed; the whole run aborts."""

    def __init__(self, scope: str, detail: str) -> None:
        self.scope = scope
        self.detail = detail
        super().__init__(f"Failed to persist '{scope}': {detail}")


class FetchTimeoutError(FigmaDumpError):
    """A queued network call exceeded the per-call timeout."""

    def __init__(self, label: str, timeout_s: float) -> None:
        self.label = label
        self.timeout_s = timeout_s
        super().__init__(f"Fetch '{label}' timed out after {timeout_s:.1f}s")
