# src/core/models.py — v2
"""Shared domain models used across modules.

Entities (projects, files, documents) are kept as flat dict records: the
pipeline only reads a few scoping fields out of them and never interprets
the rest of the Figma payload.
"""

from __future__ import annotations

from dataclasses import dataclass
from pathlib import Path
from typing import Any, Literal, Union

from pydantic import BaseModel, field_validator

# A single entity record as returned by the API or decoded from cache.
Record = dict[str, Any]

OutputFormat = Literal["json", "csv"]

# project_id given to the synthetic file enumeration built from --file.
SYNTHETIC_PROJECT_ID = 0


class Arguments(BaseModel):
    """Immutable run arguments produced by the CLI (or any other caller).

    Empty strings mean "not supplied".
    """

    model_config = {"frozen": True}

    team: str = ""
    project: str = ""
    file: str = ""
    output: Path = Path("./out")
    format: OutputFormat = "csv"

    @field_validator("team", "project", "file", mode="before")
    @classmethod
    def _strip_ids(cls, v: object) -> str:
        if v is None:
            return ""
        return str(v).strip()

    @property
    def has_identifier(self) -> bool:
        """True if at least one of team / project / file was supplied."""
        return bool(self.team or self.project or self.file)


# === STAGE DECISIONS ===


@dataclass(frozen=True)
class Run:
    """The stage's precondition holds."""


@dataclass(frozen=True)
class Skip:
    """The stage does not run, for the given reason."""

    reason: str


StageDecision = Union[Run, Skip]


@dataclass
class StageOutcome:
    """What a single stage did during a run."""

    stage: str
    decision: StageDecision
    cache_hit: bool = False
    fetched: int = 0
    persisted: int = 0

    @property
    def skipped(self) -> bool:
        return isinstance(self.decision, Skip)
