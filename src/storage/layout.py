# src/storage/layout.py — v3
"""Output directory layout: one file per scope key.

    {output}/team_projects_by_team_{team_id}.{ext}
    {output}/project_files_by_project_{project_id}.{ext}
    {output}/file_by_file_{file_key}.{ext}

Ids are percent-encoded, so distinct ids never share a file and the id can
be recovered from the name.
"""

from __future__ import annotations

from urllib.parse import quote, unquote

PROJECTS_PREFIX = "team_projects_by_team_"
FILES_PREFIX = "project_files_by_project_"
DOCUMENT_PREFIX = "file_by_file_"

# Entity type -> file name prefix
PREFIXES: dict[str, str] = {
    "projects": PROJECTS_PREFIX,
    "files": FILES_PREFIX,
    "document": DOCUMENT_PREFIX,
}


def safe_id(scope_id: str) -> str:
    """Percent-encode an id so it is one reversible path component."""
    return quote(str(scope_id), safe="")


def scope_filename(entity: str, scope_id: str, extension: str) -> str:
    """Return the file name for an entity type + scoping id."""
    prefix = PREFIXES.get(entity)
    if prefix is None:
        raise ValueError(f"Unknown entity type: {entity!r}")
    return f"{prefix}{safe_id(scope_id)}.{extension}"


def parse_scope_filename(name: str, extension: str) -> tuple[str, str] | None:
    """Inverse of scope_filename(): (entity, scope_id) or None if not ours."""
    suffix = f".{extension}"
    if not name.endswith(suffix):
        return None
    stem = name[: -len(suffix)]
    for entity, prefix in PREFIXES.items():
        if stem.startswith(prefix) and len(stem) > len(prefix):
            return entity, unquote(stem[len(prefix):])
    return None
