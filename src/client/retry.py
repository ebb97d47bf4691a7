# src/client/retry.py — v2
"""Rate-limit retry policy with exponential backoff.

Only HTTP 429 is retried here. Every other status is returned to the caller
untouched; the pipeline decides what a failure means for the entity.
"""

from __future__ import annotations

import asyncio
import logging
import random
from dataclasses import dataclass
from typing import Awaitable, Callable

import httpx

logger = logging.getLogger(__name__)

RATE_LIMIT_STATUS = 429


@dataclass(frozen=True)
class RetryConfig:
    """Retry configuration for rate-limited responses."""

    max_retries: int = 3
    base_delay_s: float = 2.0
    backoff_factor: float = 2.0
    max_delay_s: float = 60.0
    jitter: bool = True


def compute_delay(config: RetryConfig, attempt: int, retry_after: str | None = None) -> float:
    """Compute delay for a given attempt (0-based).

    A numeric Retry-After header wins over the computed backoff.
    """
    if retry_after:
        try:
            return min(float(retry_after), config.max_delay_s)
        except ValueError:
            pass
    delay = config.base_delay_s * (config.backoff_factor ** attempt)
    if config.jitter:
        delay *= 0.5 + random.random()  # noqa: S311
    return min(delay, config.max_delay_s)


async def send_with_retry(
    send: Callable[[], Awaitable[httpx.Response]],
    config: RetryConfig,
    label: str = "request",
    sleep: Callable[[float], Awaitable[None]] = asyncio.sleep,
) -> httpx.Response:
    """Send a request, retrying while the service answers 429.

    Returns the last response, which is still a 429 once retries run out.
    """
    attempts = 0
    while True:
        response = await send()
        if response.status_code != RATE_LIMIT_STATUS or attempts >= config.max_retries:
            return response

        delay = compute_delay(config, attempts, response.headers.get("Retry-After"))
        attempts += 1
        logger.warning(
            "%s rate limited (attempt %d/%d), retrying in %.1fs",
            label, attempts, config.max_retries, delay,
        )
        await sleep(delay)
