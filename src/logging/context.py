# src/logging/context.py — v2
"""Contextual logging support — attach run_id, stage and scope to log records."""

from __future__ import annotations

import contextvars
from dataclasses import dataclass
from typing import Any

# Context variables for structured logging. asyncio tasks copy the context
# at creation, so a scope set inside a fan-out task stays local to it.
_run_id: contextvars.ContextVar[str | None] = contextvars.ContextVar(
    "run_id", default=None
)
_stage: contextvars.ContextVar[str | None] = contextvars.ContextVar(
    "stage", default=None
)
_scope: contextvars.ContextVar[str | None] = contextvars.ContextVar(
    "scope", default=None
)


@dataclass
class LogContext:
    """Immutable snapshot of current logging context."""

    run_id: str | None = None
    stage: str | None = None
    scope: str | None = None

    def as_dict(self) -> dict[str, Any]:
        """Return non-None fields as dict for JSON log injection."""
        return {k: v for k, v in self.__dict__.items() if v is not None}


def get_context() -> LogContext:
    """Snapshot current context variables."""
    return LogContext(
        run_id=_run_id.get(),
        stage=_stage.get(),
        scope=_scope.get(),
    )


def set_run_context(run_id: str) -> None:
    """Set run-level context (called once per pipeline execution)."""
    _run_id.set(run_id)


def set_stage_context(stage: str | None, scope: str | None = None) -> None:
    """Set stage-level context (called per stage and per fan-out task)."""
    _stage.set(stage)
    _scope.set(scope)


def set_scope_context(scope: str | None) -> None:
    """Set only the scope (file key, project id) inside a fan-out task."""
    _scope.set(scope)


def clear_context() -> None:
    """Reset all context variables."""
    _run_id.set(None)
    _stage.set(None)
    _scope.set(None)
