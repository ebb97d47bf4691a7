# src/pipeline/stages.py — v1
"""Stage preconditions, enumeration and record stamping.

Preconditions are pure functions over the run arguments and an immutable
snapshot of the previous stage's output. ``None`` as a snapshot means the
previous stage did not run at all, which is different from "ran and found
nothing".

    projects   team id supplied, no explicit project / file override
    files      projects found, or explicit project id; no explicit file key
    documents  files known, or explicit file key
"""

from __future__ import annotations

import logging
from collections.abc import Mapping, Sequence
from typing import Any

from figmadump.core.models import (
    SYNTHETIC_PROJECT_ID,
    Arguments,
    Record,
    Run,
    Skip,
    StageDecision,
)

logger = logging.getLogger(__name__)


# ------------------------------------------------------------------
# Preconditions
# ------------------------------------------------------------------


def projects_precondition(args: Arguments) -> StageDecision:
    if args.file:
        return Skip("explicit file key supplied (-f)")
    if args.project:
        return Skip("explicit project id supplied (-p)")
    if not args.team:
        return Skip("no team id supplied (-t)")
    return Run()


def files_precondition(
    args: Arguments,
    projects: Sequence[Record] | None,
) -> StageDecision:
    if args.file:
        return Skip("explicit file key supplied (-f)")
    if args.project:
        return Run()
    if projects is None:
        return Skip("no team (-t) or project (-p) supplied")
    if not projects:
        return Skip("team has no projects")
    return Run()


def documents_precondition(
    args: Arguments,
    files: Mapping[str, Sequence[Record]] | None,
) -> StageDecision:
    if args.file:
        return Run()
    if files is None:
        return Skip("no team (-t), project (-p) or file (-f) supplied")
    if not any(files.values()):
        return Skip("no files to download")
    return Run()


# ------------------------------------------------------------------
# Enumeration
# ------------------------------------------------------------------


def project_ids(args: Arguments, projects: Sequence[Record]) -> list[str]:
    """Project ids the Files stage fans out over, in order, deduplicated."""
    if args.project:
        return [args.project]

    ids: list[str] = []
    seen: set[str] = set()
    for project in projects:
        raw = project.get("id")
        if raw is None or str(raw) == "":
            logger.warning("Project record without id, ignoring: %s", project.get("name"))
            continue
        pid = str(raw)
        if pid not in seen:
            seen.add(pid)
            ids.append(pid)
    return ids


def file_key_of(record: Record) -> str | None:
    """File key of a File record ("key", falling back to "id")."""
    raw = record.get("key") or record.get("id")
    if raw is None or str(raw) == "":
        return None
    return str(raw)


def file_enumeration(
    args: Arguments,
    files: Mapping[str, Sequence[Record]],
) -> list[Record]:
    """Files the Documents stage fans out over, deduplicated by key.

    An explicit file key yields one synthetic File scoped to project id 0.
    """
    if args.file:
        return [{"key": args.file, "project_id": SYNTHETIC_PROJECT_ID}]

    result: list[Record] = []
    seen: set[str] = set()
    for project_files in files.values():
        for record in project_files:
            key = file_key_of(record)
            if key is None:
                logger.warning("File record without key, ignoring: %s", record.get("name"))
                continue
            if key not in seen:
                seen.add(key)
                result.append(record)
    return result


# ------------------------------------------------------------------
# Stamping
# ------------------------------------------------------------------


def stamp_projects(projects: Sequence[Any], team_id: str) -> list[Record]:
    """Copy project records with team_id set to the run's team id."""
    return [{**dict(p), "team_id": team_id} for p in projects if isinstance(p, Mapping)]


def stamp_files(files: Sequence[Any], project_id: str) -> list[Record]:
    """Copy file records with project_id set to the owning project."""
    return [{**dict(f), "project_id": project_id} for f in files if isinstance(f, Mapping)]


def stamp_document(document: Mapping[str, Any], file_key: str) -> Record:
    """Copy a file response with id forced to the file key it was fetched for."""
    return {**dict(document), "id": file_key}
