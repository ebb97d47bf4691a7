# src/pipeline/orchestrator.py — v3
"""Pipeline orchestrator — fixed three-stage download sequence.

Drives the pipeline in dependency order:
  Stage 1: Projects-by-Team   (one scope key: the team)
  Stage 2: Files-by-Project   (one scope key per project)
  Stage 3: Documents-by-File  (one scope key per file)

Each stage runs check-cache → fetch → persist. Fetch and persist are skipped
when the cache satisfies the stage. Fan-out tasks run concurrently; every
network call goes through the shared FetchQueue.
"""

from __future__ import annotations

import asyncio
import logging
import time
from collections.abc import Awaitable, Callable, Iterable, Sequence
from typing import Any, TypeVar

from figmadump.cache.base_cache_store import BaseCacheStore
from figmadump.cache.models import ScopeKey
from figmadump.client.base_client import BaseFigmaClient
from figmadump.client.models import FetchOk, FetchResult, OtherFailure, describe
from figmadump.core.errors import DocumentFetchError, FetchTimeoutError, StageFatalError
from figmadump.core.models import Arguments, Record, Skip, StageDecision, StageOutcome
from figmadump.logging.context import set_run_context, set_scope_context, set_stage_context
from figmadump.pipeline import stages
from figmadump.pipeline.degradation import fetch_document
from figmadump.pipeline.fetch_queue import FetchQueue
from figmadump.pipeline.progress import ProgressTracker
from figmadump.pipeline.state import RunResult, generate_run_id

logger = logging.getLogger(__name__)

T = TypeVar("T")

CACHE_POLICIES = ("all", "per_scope")


class PipelineOrchestrator:
    """Run the Projects → Files → Documents pipeline for one set of arguments.

    Args:
        client: Figma client. May be None when no stage will touch the network.
        cache_store: Store addressing one cache file per scope key.
        queue: Shared fetch queue (default: concurrency 1, no timeout).
        cache_policy: "all" refetches the whole stage on any cache miss;
            "per_scope" refetches only the missing scope keys.
        progress: Optional tracker for per-task status reporting.
    """

    def __init__(
        self,
        client: BaseFigmaClient | None,
        cache_store: BaseCacheStore,
        queue: FetchQueue | None = None,
        cache_policy: str = "all",
        progress: ProgressTracker | None = None,
    ) -> None:
        if cache_policy not in CACHE_POLICIES:
            raise ValueError(f"Unsupported cache policy: {cache_policy!r}")
        self._client = client
        self._cache = cache_store
        self._queue = queue or FetchQueue()
        self._cache_policy = cache_policy
        self._progress = progress or ProgressTracker()

    @property
    def queue(self) -> FetchQueue:
        return self._queue

    @property
    def progress(self) -> ProgressTracker:
        return self._progress

    @property
    def _api(self) -> BaseFigmaClient:
        if self._client is None:
            raise RuntimeError("No Figma client configured for a stage that needs the network")
        return self._client

    async def run(self, args: Arguments) -> RunResult:
        """Execute all stages in order.

        Returns:
            RunResult with every record loaded or fetched during the run.

        Raises:
            StageFatalError: A Projects or Files fetch failed.
            PersistError: Writing a scope key failed.
        """
        run_id = generate_run_id()
        set_run_context(run_id)
        result = RunResult(run_id=run_id, arguments=args)
        start_ns = time.monotonic_ns()
        calls_before = self._queue.submitted
        completed: list[str] = []

        logger.info(
            "Starting run %s: team=%r project=%r file=%r format=%s output=%s",
            run_id, args.team, args.project, args.file, args.format, args.output,
        )

        try:
            projects = await self._run_projects_stage(args, result)
            completed.append("projects")

            files = await self._run_files_stage(args, projects, result)
            completed.append("files")

            await self._run_documents_stage(args, files, result)
            completed.append("documents")
        except Exception:
            logger.exception("Run failed after stages: %s", completed)
            raise
        finally:
            set_stage_context(None)
            result.network_calls = self._queue.submitted - calls_before
            result.progress = self._progress.summary()
            result.duration_ms = (time.monotonic_ns() - start_ns) // 1_000_000
            logger.debug("Fetch queue: %s", self._queue.stats())

        logger.info("Run complete: %s", result.summary())
        return result

    # ------------------------------------------------------------------
    # Stage 1: Projects
    # ------------------------------------------------------------------

    async def _run_projects_stage(
        self, args: Arguments, result: RunResult,
    ) -> list[Record] | None:
        decision = stages.projects_precondition(args)
        if self._skip_stage("projects", decision, result):
            return None

        set_stage_context("projects")
        key = ScopeKey.projects(args.team)
        outcome = StageOutcome(stage="projects", decision=decision)
        task_name = f"team {args.team}"
        self._progress.add("projects", task_name)

        cached = await self._check_cache([key])
        if not self._plan_fetch("projects", [key], cached):
            projects = cached[key] or []
            outcome.cache_hit = True
            self._progress.skip("projects", task_name, "cached")
        else:
            raw = await self._fetch_listing(
                "projects", task_name,
                lambda: self._api.list_projects(args.team),
                field="projects",
            )
            projects = stages.stamp_projects(raw, args.team)
            outcome.fetched = 1
            await self._cache.write_scope(key, projects)
            outcome.persisted = 1
            self._progress.done("projects", task_name, f"{len(projects)} project(s)")

        logger.info(
            "Projects stage: %d project(s) for team %s (%s)",
            len(projects), args.team, "cache" if outcome.cache_hit else "fetched",
        )
        result.stages["projects"] = outcome
        result.projects = projects
        return projects

    # ------------------------------------------------------------------
    # Stage 2: Files
    # ------------------------------------------------------------------

    async def _run_files_stage(
        self,
        args: Arguments,
        projects: Sequence[Record] | None,
        result: RunResult,
    ) -> dict[str, list[Record]] | None:
        decision = stages.files_precondition(args, projects)
        if self._skip_stage("files", decision, result):
            return None

        set_stage_context("files")
        outcome = StageOutcome(stage="files", decision=decision)
        ids = stages.project_ids(args, projects or [])
        keys = {pid: ScopeKey.files(pid) for pid in ids}
        for pid in ids:
            self._progress.add("files", f"project {pid}")

        cached = await self._check_cache(keys.values())
        to_fetch = set(self._plan_fetch("files", list(keys.values()), cached))
        fetch_ids = [pid for pid in ids if keys[pid] in to_fetch]
        for pid in ids:
            if keys[pid] not in to_fetch:
                self._progress.skip("files", f"project {pid}", "cached")

        fetched_lists = await _gather_or_raise(
            self._fetch_project_files(pid) for pid in fetch_ids
        )
        fetched = dict(zip(fetch_ids, fetched_lists))

        # Persist only once every sibling fetched successfully.
        await _gather_or_raise(
            self._cache.write_scope(keys[pid], fetched[pid]) for pid in fetch_ids
        )

        files: dict[str, list[Record]] = {}
        for pid in ids:
            files[pid] = fetched[pid] if pid in fetched else (cached[keys[pid]] or [])

        outcome.cache_hit = not fetch_ids
        outcome.fetched = len(fetch_ids)
        outcome.persisted = len(fetch_ids)
        logger.info(
            "Files stage: %d file(s) across %d project(s), %d fetched",
            sum(len(v) for v in files.values()), len(ids), len(fetch_ids),
        )
        result.stages["files"] = outcome
        result.files = files
        return files

    async def _fetch_project_files(self, project_id: str) -> list[Record]:
        set_scope_context(f"project {project_id}")
        task_name = f"project {project_id}"
        raw = await self._fetch_listing(
            "files", task_name,
            lambda: self._api.list_files(project_id),
            field="files",
        )
        records = stages.stamp_files(raw, project_id)
        self._progress.done("files", task_name, f"{len(records)} file(s)")
        return records

    # ------------------------------------------------------------------
    # Stage 3: Documents
    # ------------------------------------------------------------------

    async def _run_documents_stage(
        self,
        args: Arguments,
        files: dict[str, list[Record]] | None,
        result: RunResult,
    ) -> None:
        decision = stages.documents_precondition(args, files)
        if self._skip_stage("documents", decision, result):
            return

        set_stage_context("documents")
        outcome = StageOutcome(stage="documents", decision=decision)
        file_keys = [
            key for key in (stages.file_key_of(f) for f in stages.file_enumeration(args, files or {}))
            if key is not None
        ]
        keys = {fk: ScopeKey.document(fk) for fk in file_keys}
        for fk in file_keys:
            self._progress.add("documents", f"file {fk}")

        cached = await self._check_cache(keys.values())
        # A document cache file must hold the document itself.
        cached = {k: (v if v else None) for k, v in cached.items()}
        to_fetch = set(self._plan_fetch("documents", list(keys.values()), cached))
        fetch_keys = [fk for fk in file_keys if keys[fk] in to_fetch]
        for fk in file_keys:
            if keys[fk] not in to_fetch:
                self._progress.skip("documents", f"file {fk}", "cached")

        outcomes = await asyncio.gather(
            *(self._document_task(fk) for fk in fetch_keys),
            return_exceptions=True,
        )

        fetched: dict[str, Record] = {}
        fatal: list[BaseException] = []
        for fk, out in zip(fetch_keys, outcomes):
            if isinstance(out, DocumentFetchError):
                result.failures[fk] = out.detail
            elif isinstance(out, BaseException):
                fatal.append(out)
            else:
                fetched[fk] = out

        for fk in file_keys:
            if fk in fetched:
                result.documents[fk] = fetched[fk]
            elif keys[fk] not in to_fetch and cached[keys[fk]]:
                result.documents[fk] = cached[keys[fk]][0]

        outcome.cache_hit = not fetch_keys
        outcome.fetched = len(fetch_keys)
        outcome.persisted = len(fetched)
        result.stages["documents"] = outcome

        if fatal:
            raise fatal[0]

        logger.info(
            "Documents stage: %d document(s), %d fetched, %d failed",
            len(result.documents), len(fetched), len(result.failures),
        )

    async def _document_task(self, file_key: str) -> Record:
        """Fetch, stamp and persist one document. Owns its scope key."""
        set_scope_context(f"file {file_key}")
        task_name = f"file {file_key}"
        self._progress.start("documents", task_name)
        try:
            data = await fetch_document(self._api, self._queue, file_key)
        except DocumentFetchError as e:
            self._progress.fail("documents", task_name, e.detail)
            raise

        record = stages.stamp_document(data, file_key)
        await self._cache.write_scope(ScopeKey.document(file_key), [record])
        self._progress.done("documents", task_name)
        return record

    # ------------------------------------------------------------------
    # Helpers
    # ------------------------------------------------------------------

    def _skip_stage(self, stage: str, decision: StageDecision, result: RunResult) -> bool:
        if not isinstance(decision, Skip):
            return False
        logger.info("Skipping %s stage: %s", stage, decision.reason)
        result.stages[stage] = StageOutcome(stage=stage, decision=decision)
        return True

    async def _check_cache(
        self, keys: Iterable[ScopeKey],
    ) -> dict[ScopeKey, list[Record] | None]:
        key_list = list(keys)
        records = await asyncio.gather(*(self._cache.read_scope(k) for k in key_list))
        return dict(zip(key_list, records))

    def _plan_fetch(
        self,
        stage: str,
        keys: Sequence[ScopeKey],
        cached: dict[ScopeKey, list[Record] | None],
    ) -> list[ScopeKey]:
        """Scope keys the stage must fetch, according to the cache policy."""
        missing = [k for k in keys if cached.get(k) is None]
        if not missing:
            logger.info("%s: all %d scope key(s) cached, skipping fetch", stage, len(keys))
            return []
        if self._cache_policy == "all" and len(missing) < len(keys):
            logger.info(
                "%s: partial cache hit (%d/%d cached), refetching the whole stage",
                stage, len(keys) - len(missing), len(keys),
            )
            return list(keys)
        return missing

    async def _fetch_listing(
        self,
        stage: str,
        task_name: str,
        call: Callable[[], Awaitable[FetchResult]],
        field: str,
    ) -> list[Any]:
        """Queue a listing call; any failure is fatal for the whole stage."""
        self._progress.start(stage, task_name)
        try:
            response = await self._queue.submit(call, label=f"{stage}: {task_name}")
        except FetchTimeoutError as e:
            response = OtherFailure(str(e))

        if not isinstance(response, FetchOk):
            detail = f"{task_name}: {describe(response)}"
            self._progress.fail(stage, task_name, detail)
            raise StageFatalError(stage, detail)

        items = response.data.get(field)
        if not isinstance(items, list):
            detail = f"{task_name}: response has no '{field}' list"
            self._progress.fail(stage, task_name, detail)
            raise StageFatalError(stage, detail)
        return items


async def _gather_or_raise(aws: Iterable[Awaitable[T]]) -> list[T]:
    """Run awaitables concurrently; after all finish, raise the first error."""
    results = await asyncio.gather(*aws, return_exceptions=True)
    for r in results:
        if isinstance(r, BaseException):
            raise r
    return list(results)  # type: ignore[arg-type]
