# src/pipeline/progress.py — v1
"""Per-task progress tracking for stage fan-out.

Cosmetic: nothing in the pipeline branches on it. Every fan-out task is
reported independently as pending / running / done / skipped / failed.
"""

from __future__ import annotations

import logging
from collections import Counter
from dataclasses import dataclass
from enum import Enum
from typing import Callable

logger = logging.getLogger(__name__)


class TaskStatus(str, Enum):
    PENDING = "pending"
    RUNNING = "running"
    DONE = "done"
    SKIPPED = "skipped"
    FAILED = "failed"


@dataclass
class TaskRecord:
    """Current status of one fan-out task."""

    stage: str
    name: str
    status: TaskStatus = TaskStatus.PENDING
    detail: str = ""


class ProgressTracker:
    """Record task status transitions and log them.

    Args:
        on_change: Optional callback invoked with the task after each change
            (a UI layer can hook in here).
    """

    def __init__(self, on_change: Callable[[TaskRecord], None] | None = None) -> None:
        self._tasks: dict[tuple[str, str], TaskRecord] = {}
        self._on_change = on_change

    def add(self, stage: str, name: str) -> TaskRecord:
        task = TaskRecord(stage=stage, name=name)
        self._tasks[(stage, name)] = task
        self._notify(task)
        return task

    def start(self, stage: str, name: str) -> None:
        self._set(stage, name, TaskStatus.RUNNING)

    def done(self, stage: str, name: str, detail: str = "") -> None:
        self._set(stage, name, TaskStatus.DONE, detail)

    def skip(self, stage: str, name: str, reason: str) -> None:
        self._set(stage, name, TaskStatus.SKIPPED, reason)

    def fail(self, stage: str, name: str, detail: str) -> None:
        self._set(stage, name, TaskStatus.FAILED, detail)

    def tasks(self, stage: str | None = None) -> list[TaskRecord]:
        return [t for t in self._tasks.values() if stage is None or t.stage == stage]

    def summary(self) -> dict[str, int]:
        """Count of tasks per status."""
        counts = Counter(t.status.value for t in self._tasks.values())
        return {status.value: counts.get(status.value, 0) for status in TaskStatus}

    def _set(self, stage: str, name: str, status: TaskStatus, detail: str = "") -> None:
        task = self._tasks.get((stage, name))
        if task is None:
            task = self.add(stage, name)
        task.status = status
        task.detail = detail
        self._notify(task)

    def _notify(self, task: TaskRecord) -> None:
        if task.status is TaskStatus.FAILED:
            logger.warning("[%s] %s failed: %s", task.stage, task.name, task.detail)
        elif task.status is TaskStatus.SKIPPED:
            logger.info("[%s] %s skipped: %s", task.stage, task.name, task.detail)
        else:
            logger.debug("[%s] %s %s", task.stage, task.name, task.status.value)
        if self._on_change is not None:
            self._on_change(task)
