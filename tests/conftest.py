# tests/conftest.py — v2
"""Shared test fixtures for all unit and integration tests.

Provides an in-memory Figma client with scripted responses, a sample
team tree, settings without .env leakage, and temp output directories.
No network: every fetch is served from dicts.
"""

from __future__ import annotations

import asyncio
import copy
from collections.abc import Sequence
from pathlib import Path
from typing import Any

import pytest

from figmadump.cache.cache_factory import create_cache_store
from figmadump.client.base_client import BaseFigmaClient
from figmadump.client.models import FetchOk, FetchResult, OtherFailure, TooLarge
from figmadump.config.settings import Settings


class FakeFigmaClient(BaseFigmaClient):
    """Scripted client. Values are payload lists/dicts or FetchResult objects.

    Args:
        teams: team_id -> list of project dicts.
        projects: project_id -> list of file dicts.
        documents: file_key -> full file response.
        shallow: file_key -> depth=1 file response.
        scoped: (file_key, node_id) -> ids-scoped file response.
        delay: Seconds each call sleeps (to observe concurrency).
    """

    def __init__(
        self,
        teams: dict[str, Any] | None = None,
        projects: dict[str, Any] | None = None,
        documents: dict[str, Any] | None = None,
        shallow: dict[str, Any] | None = None,
        scoped: dict[tuple[str, str], Any] | None = None,
        delay: float = 0.0,
    ) -> None:
        self.teams = teams or {}
        self.projects = projects or {}
        self.documents = documents or {}
        self.shallow = shallow or {}
        self.scoped = scoped or {}
        self.delay = delay
        self.calls: list[tuple[Any, ...]] = []
        self.in_flight = 0
        self.max_in_flight = 0
        self.closed = False

    async def list_projects(self, team_id: str) -> FetchResult:
        self.calls.append(("projects", team_id))
        return await self._serve(self.teams.get(team_id), "projects")

    async def list_files(self, project_id: str) -> FetchResult:
        self.calls.append(("files", project_id))
        return await self._serve(self.projects.get(project_id), "files")

    async def get_document(
        self,
        file_key: str,
        depth: int | None = None,
        ids: Sequence[str] | None = None,
    ) -> FetchResult:
        self.calls.append(("document", file_key, depth, tuple(ids) if ids else None))
        if ids:
            value = self.scoped.get((file_key, ids[0]))
        elif depth == 1:
            value = self.shallow.get(file_key)
        else:
            value = self.documents.get(file_key)
        return await self._serve(value, None)

    async def close(self) -> None:
        self.closed = True

    def calls_of(self, kind: str) -> list[tuple[Any, ...]]:
        return [c for c in self.calls if c[0] == kind]

    async def _serve(self, value: Any, field: str | None) -> FetchResult:
        self.in_flight += 1
        self.max_in_flight = max(self.max_in_flight, self.in_flight)
        try:
            if self.delay:
                await asyncio.sleep(self.delay)
        finally:
            self.in_flight -= 1

        if value is None:
            return OtherFailure("Not found", status_code=404)
        if isinstance(value, (FetchOk, TooLarge, OtherFailure)):
            return value
        payload = copy.deepcopy(value)
        if field is not None:
            return FetchOk({field: payload})
        return FetchOk(payload)


def make_document(name: str, pages: Sequence[str] = ("Page 1",)) -> dict[str, Any]:
    """Minimal Figma file response with one CANVAS per page name."""
    return {
        "name": name,
        "version": "1",
        "document": {
            "id": "0:0",
            "type": "DOCUMENT",
            "children": [
                {"id": f"{i}:1", "type": "CANVAS", "name": page}
                for i, page in enumerate(pages, start=1)
            ],
        },
    }


# === FIXTURES: Sample data ===


@pytest.fixture
def team_tree() -> dict[str, Any]:
    """Team T1 with two projects and three files."""
    return {
        "teams": {
            "T1": [
                {"id": 1, "name": "Alpha", "team_id": "stale"},
                {"id": 2, "name": "Beta"},
            ],
        },
        "projects": {
            "1": [{"key": "FA", "name": "File A"}, {"key": "FB", "name": "File B"}],
            "2": [{"key": "FC", "name": "File C", "project_id": 99}],
        },
        "documents": {
            "FA": make_document("File A"),
            "FB": make_document("File B", pages=("Cover", "Flows")),
            "FC": make_document("File C"),
        },
    }


@pytest.fixture
def fake_client(team_tree: dict[str, Any]) -> FakeFigmaClient:
    return FakeFigmaClient(**team_tree)


@pytest.fixture
def fake_client_factory():
    """Build a FakeFigmaClient with arbitrary scripted responses."""
    return FakeFigmaClient


@pytest.fixture
def document_factory():
    return make_document


# === FIXTURES: Config & storage ===


@pytest.fixture
def settings() -> Settings:
    """Settings with a dummy token, isolated from any local .env file."""
    return Settings(_env_file=None, figma_api_pat="test-token")


@pytest.fixture
def output_dir(tmp_path: Path) -> Path:
    out = tmp_path / "out"
    out.mkdir()
    return out


@pytest.fixture
def csv_store(output_dir: Path):
    return create_cache_store(output_dir, "csv")


@pytest.fixture
def json_store(output_dir: Path):
    return create_cache_store(output_dir, "json")
