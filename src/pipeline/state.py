# src/pipeline/state.py — v2
"""Run result aggregation.

The orchestrator owns a single RunResult and fills it from the return
values of its fan-out tasks; sub-tasks never write to it directly.
"""

from __future__ import annotations

import uuid
from dataclasses import dataclass, field
from datetime import datetime, timezone

from figmadump.core.models import Arguments, Record, StageOutcome


def generate_run_id(timestamp: datetime | None = None) -> str:
    """Generate a run_id: yyyymmdd_hhmmss_{uuid4_short}."""
    ts = timestamp or datetime.now(timezone.utc)
    short_uuid = uuid.uuid4().hex[:5]
    return f"{ts.strftime('%Y%m%d_%H%M%S')}_{short_uuid}"


@dataclass
class RunResult:
    """Everything a pipeline run produced, in memory."""

    run_id: str
    arguments: Arguments
    projects: list[Record] = field(default_factory=list)
    # project_id -> file records
    files: dict[str, list[Record]] = field(default_factory=dict)
    # file key -> document record
    documents: dict[str, Record] = field(default_factory=dict)
    # file key -> failure detail (entity-fatal, run continued)
    failures: dict[str, str] = field(default_factory=dict)
    stages: dict[str, StageOutcome] = field(default_factory=dict)
    progress: dict[str, int] = field(default_factory=dict)
    network_calls: int = 0
    duration_ms: int = 0

    @property
    def success(self) -> bool:
        return not self.failures

    @property
    def all_files(self) -> list[Record]:
        return [f for project_files in self.files.values() for f in project_files]

    def summary(self) -> str:
        """One-line human summary."""
        return (
            f"run {self.run_id}: {len(self.projects)} project(s), "
            f"{len(self.all_files)} file(s), {len(self.documents)} document(s), "
            f"{len(self.failures)} failure(s), {self.network_calls} network call(s) "
            f"in {self.duration_ms}ms"
        )
