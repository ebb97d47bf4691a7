# src/cache/models.py — v3
"""Cache domain models: ScopeKey."""

from __future__ import annotations

from dataclasses import dataclass

from figmadump.storage import layout

# Header written for an empty listing: the id plus the column the stage stamps.
EMPTY_COLUMNS: dict[str, tuple[str, ...]] = {
    "projects": ("id", "name", "team_id"),
    "files": ("key", "name", "project_id"),
    "document": ("id",),
}


@dataclass(frozen=True)
class ScopeKey:
    """Deterministic cache slot: entity type + the parent id that scopes it.

    Projects are scoped by team id, files by project id, documents by
    file key.
    """

    entity: str
    scope_id: str

    def __post_init__(self) -> None:
        if self.entity not in layout.PREFIXES:
            raise ValueError(f"Unknown entity type: {self.entity!r}")
        object.__setattr__(self, "scope_id", str(self.scope_id))

    @classmethod
    def projects(cls, team_id: str) -> ScopeKey:
        return cls("projects", team_id)

    @classmethod
    def files(cls, project_id: str | int) -> ScopeKey:
        return cls("files", str(project_id))

    @classmethod
    def document(cls, file_key: str) -> ScopeKey:
        return cls("document", file_key)

    @property
    def columns(self) -> tuple[str, ...]:
        return EMPTY_COLUMNS[self.entity]

    def filename(self, extension: str) -> str:
        return layout.scope_filename(self.entity, self.scope_id, extension)

    def __str__(self) -> str:
        return f"{self.entity}:{self.scope_id}"
