# src/client/base_client.py — v1
"""Abstract Remote Fetch Client interface."""

from __future__ import annotations

from abc import ABC, abstractmethod
from collections.abc import Sequence

from figmadump.client.models import FetchResult


class BaseFigmaClient(ABC):
    """Unified interface for the four fetch operations the pipeline uses."""

    @abstractmethod
    async def list_projects(self, team_id: str) -> FetchResult:
        """Projects of a team. FetchOk.data = {"projects": [...]}."""

    @abstractmethod
    async def list_files(self, project_id: str) -> FetchResult:
        """Files of a project. FetchOk.data = {"files": [...]}."""

    @abstractmethod
    async def get_document(
        self,
        file_key: str,
        depth: int | None = None,
        ids: Sequence[str] | None = None,
    ) -> FetchResult:
        """Document tree of a file.

        Args:
            file_key: Figma file key.
            depth: Limit traversal depth (1 = top-level children as stubs).
            ids: Restrict the response to these node ids.
        """

    async def close(self) -> None:
        """Release transport resources."""

    async def __aenter__(self) -> BaseFigmaClient:
        return self

    async def __aexit__(self, *exc: object) -> None:
        await self.close()
