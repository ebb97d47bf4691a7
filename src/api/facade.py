# src/api/facade.py — v2
"""Public API facade — single entry point for a download run.

Usage:
    from figmadump.api.facade import download
    result = await download(Arguments(team="123", output=Path("./out")))
"""

from __future__ import annotations

import logging
from typing import TYPE_CHECKING

from figmadump.cache.cache_factory import create_cache_store
from figmadump.config.settings import Settings
from figmadump.core.models import Arguments
from figmadump.pipeline.fetch_queue import FetchQueue
from figmadump.pipeline.orchestrator import PipelineOrchestrator
from figmadump.pipeline.progress import ProgressTracker
from figmadump.pipeline.state import RunResult

if TYPE_CHECKING:
    from figmadump.cache.base_cache_store import BaseCacheStore
    from figmadump.client.base_client import BaseFigmaClient

logger = logging.getLogger(__name__)


async def download(
    arguments: Arguments,
    settings: Settings | None = None,
    client: BaseFigmaClient | None = None,
    cache_store: BaseCacheStore | None = None,
    progress: ProgressTracker | None = None,
) -> RunResult:
    """Download a team / project / file tree into the output directory.

    Orchestrates the full pipeline:
      1. Resolve settings and open the cache store for the output directory
      2. Create the Figma client, only if some identifier was supplied
      3. Run Projects → Files → Documents through a shared fetch queue
      4. Return the RunResult

    Args:
        arguments: Run arguments (team / project / file, output, format).
        settings: Global settings. Loaded from .env if None.
        client: Figma client. Created from settings when None and needed.
        cache_store: Cache backend. Defaults to a file store rooted at
            ``arguments.output`` using ``arguments.format``.
        progress: Optional progress tracker for per-task status.

    Returns:
        RunResult with every record fetched or loaded from cache.

    Raises:
        ConfigurationError: If a network stage is needed and no token is set.
        StageFatalError: If a Projects or Files fetch fails.
        PersistError: If a scope key cannot be written.
    """
    settings = settings or Settings()

    if cache_store is None:
        cache_store = create_cache_store(arguments.output, arguments.format)
    await cache_store.prepare()

    owns_client = False
    if client is None and arguments.has_identifier:
        from figmadump.client.client_factory import create_client

        client = create_client(settings)
        owns_client = True
    elif not arguments.has_identifier:
        logger.info("No team, project or file supplied; nothing to download")

    queue = FetchQueue(
        concurrency=settings.fetch_concurrency,
        timeout_s=settings.fetch_timeout_seconds,
    )
    orchestrator = PipelineOrchestrator(
        client=client,
        cache_store=cache_store,
        queue=queue,
        cache_policy=settings.cache_policy,
        progress=progress,
    )

    try:
        return await orchestrator.run(arguments)
    finally:
        if owns_client and client is not None:
            await client.close()
