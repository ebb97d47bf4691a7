# src/pipeline/degradation.py — v1
"""Document fetch with degrade-and-retry for responses that are too large.

    1. GET /v1/files/{key}                       full tree in one call
    2. on TooLarge: GET ...?depth=1              top-level children as stubs
    3. per stub:    GET ...?ids={child_id}       one call per child
    4. pick the node whose id matches the stub and splice it in place

The split happens once, at the top level. A child that is itself too large,
or any other failure along the way, fails this file only.
"""

from __future__ import annotations

import asyncio
import logging
from collections.abc import Iterable
from typing import Any

from figmadump.client.base_client import BaseFigmaClient
from figmadump.client.models import FetchOk, FetchResult, OtherFailure, TooLarge, describe
from figmadump.core.errors import DocumentFetchError, FetchTimeoutError
from figmadump.core.models import Record
from figmadump.pipeline.fetch_queue import FetchQueue

logger = logging.getLogger(__name__)


async def fetch_document(
    client: BaseFigmaClient,
    queue: FetchQueue,
    file_key: str,
) -> Record:
    """Fetch the full file response for a key, degrading if it is too large.

    Returns:
        The Figma file response ({"document": {...}, "name": ..., ...}).

    Raises:
        DocumentFetchError: If the file cannot be fetched.
    """
    primary = await _submit(client, queue, file_key, label=f"file {file_key}")
    if isinstance(primary, FetchOk):
        return primary.data
    if not isinstance(primary, TooLarge):
        raise DocumentFetchError(file_key, describe(primary))

    logger.warning("File %s too large for a single response, splitting by top-level child", file_key)
    return await fetch_document_degraded(client, queue, file_key)


async def fetch_document_degraded(
    client: BaseFigmaClient,
    queue: FetchQueue,
    file_key: str,
) -> Record:
    """Rebuild a file from a depth-1 fetch plus one fetch per top-level child."""
    shallow = await _submit(client, queue, file_key, depth=1, label=f"file {file_key} depth=1")
    if not isinstance(shallow, FetchOk):
        raise DocumentFetchError(file_key, f"depth-1 fallback failed: {describe(shallow)}")

    data = shallow.data
    document = data.get("document")
    if not isinstance(document, dict):
        raise DocumentFetchError(file_key, "depth-1 response has no document node")

    stubs = document.get("children") or []
    if not isinstance(stubs, list):
        raise DocumentFetchError(file_key, "depth-1 document children is not a list")

    # All child fetches run to completion before any failure is raised, so
    # no orphaned task keeps a queue slot after this file is abandoned.
    results = await asyncio.gather(
        *(_resolve_child(client, queue, file_key, stub) for stub in stubs),
        return_exceptions=True,
    )
    children: list[Record] = []
    for result in results:
        if isinstance(result, BaseException):
            raise result
        children.append(result)

    logger.info("File %s reassembled from %d top-level children", file_key, len(children))
    return {**data, "document": {**document, "children": children}}


async def _resolve_child(
    client: BaseFigmaClient,
    queue: FetchQueue,
    file_key: str,
    stub: Any,
) -> Record:
    if not isinstance(stub, dict) or not stub.get("id"):
        raise DocumentFetchError(file_key, f"top-level child without id: {stub!r:.80}")
    child_id = str(stub["id"])

    scoped = await _submit(
        client, queue, file_key, ids=[child_id], label=f"file {file_key} ids={child_id}",
    )
    if not isinstance(scoped, FetchOk):
        raise DocumentFetchError(file_key, f"child {child_id} failed: {describe(scoped)}")

    scoped_document = scoped.data.get("document")
    roots = scoped_document.get("children") if isinstance(scoped_document, dict) else None
    node = find_node(roots or [], child_id)
    if node is None:
        raise DocumentFetchError(file_key, f"child {child_id} missing from scoped response")
    return node


def find_node(nodes: Iterable[Any], node_id: str) -> Record | None:
    """Find a node by id: the given level first, then depth-first below it."""
    candidates = [n for n in nodes if isinstance(n, dict)]
    for node in candidates:
        if str(node.get("id")) == node_id:
            return node
    for node in candidates:
        found = find_node(node.get("children") or [], node_id)
        if found is not None:
            return found
    return None


async def _submit(
    client: BaseFigmaClient,
    queue: FetchQueue,
    file_key: str,
    depth: int | None = None,
    ids: list[str] | None = None,
    label: str = "",
) -> FetchResult:
    """Queue one get_document call; a queue timeout becomes OtherFailure."""
    try:
        return await queue.submit(
            lambda: client.get_document(file_key, depth=depth, ids=ids),
            label=label or f"file {file_key}",
        )
    except FetchTimeoutError as e:
        return OtherFailure(str(e))
