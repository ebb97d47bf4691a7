# src/pipeline/fetch_queue.py — v2
"""Bounded fetch queue: FIFO admission, fixed number of in-flight calls.

Decouples logical concurrency (a stage may fan out over hundreds of files
at once) from physical concurrency against the Figma API. Every network
call in every stage is submitted through one shared queue.
"""

from __future__ import annotations

import asyncio
import logging
from typing import Awaitable, Callable, TypeVar

from figmadump.core.errors import FetchTimeoutError

logger = logging.getLogger(__name__)

T = TypeVar("T")

DEFAULT_CONCURRENCY = 1


class FetchQueue:
    """Run async thunks with at most ``concurrency`` in flight.

    Waiters are admitted in submission order. When ``timeout_s`` is set, a
    thunk running longer is cancelled and FetchTimeoutError is raised to the
    submitter; the slot is released either way.

    Args:
        concurrency: Max simultaneous in-flight thunks (>= 1).
        timeout_s: Optional per-call timeout in seconds.
    """

    def __init__(
        self,
        concurrency: int = DEFAULT_CONCURRENCY,
        timeout_s: float | None = None,
    ) -> None:
        if concurrency < 1:
            raise ValueError("concurrency must be >= 1")
        if timeout_s is not None and timeout_s <= 0:
            raise ValueError("timeout_s must be > 0")
        self._concurrency = concurrency
        self._timeout_s = timeout_s
        self._semaphore = asyncio.Semaphore(concurrency)

        self.submitted = 0
        self.completed = 0
        self.failed = 0
        self.waiting = 0
        self.in_flight = 0
        self.max_in_flight = 0

    @property
    def concurrency(self) -> int:
        return self._concurrency

    @property
    def timeout_s(self) -> float | None:
        return self._timeout_s

    async def submit(self, thunk: Callable[[], Awaitable[T]], label: str = "fetch") -> T:
        """Queue a thunk and wait for its result.

        Raises:
            FetchTimeoutError: If the thunk exceeds the per-call timeout.
            Exception: Whatever the thunk itself raises.
        """
        self.submitted += 1
        self.waiting += 1
        try:
            await self._semaphore.acquire()
        finally:
            self.waiting -= 1

        self.in_flight += 1
        self.max_in_flight = max(self.max_in_flight, self.in_flight)
        logger.debug("Fetch start: %s (%d in flight)", label, self.in_flight)
        try:
            if self._timeout_s is None:
                result = await thunk()
            else:
                result = await asyncio.wait_for(thunk(), timeout=self._timeout_s)
        except asyncio.TimeoutError as e:
            self.failed += 1
            logger.warning("Fetch timed out after %.1fs: %s", self._timeout_s, label)
            raise FetchTimeoutError(label, self._timeout_s or 0.0) from e
        except BaseException:
            self.failed += 1
            raise
        finally:
            self.in_flight -= 1
            self._semaphore.release()

        self.completed += 1
        return result

    def stats(self) -> dict[str, int]:
        """Counters snapshot."""
        return {
            "submitted": self.submitted,
            "completed": self.completed,
            "failed": self.failed,
            "waiting": self.waiting,
            "in_flight": self.in_flight,
            "max_in_flight": self.max_in_flight,
        }
