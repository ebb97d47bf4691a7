# tests/unit/client/test_unit_retry.py — v2
"""Tests for client/retry.py — 429 backoff."""

from __future__ import annotations

import httpx
import pytest

from figmadump.client.retry import RetryConfig, compute_delay, send_with_retry


class TestComputeDelay:
    def test_exponential_without_jitter(self):
        config = RetryConfig(base_delay_s=1.0, backoff_factor=2.0, jitter=False)
        assert [compute_delay(config, a) for a in range(4)] == [1.0, 2.0, 4.0, 8.0]

    def test_capped(self):
        config = RetryConfig(base_delay_s=10.0, max_delay_s=15.0, jitter=False)
        assert compute_delay(config, 5) == 15.0

    def test_jitter_bounds(self):
        config = RetryConfig(base_delay_s=2.0, jitter=True)
        for _ in range(50):
            assert 1.0 <= compute_delay(config, 0) <= 3.0

    def test_retry_after_wins(self):
        config = RetryConfig(base_delay_s=2.0, jitter=False)
        assert compute_delay(config, 0, "7") == 7.0

    def test_retry_after_capped(self):
        config = RetryConfig(max_delay_s=30.0)
        assert compute_delay(config, 0, "600") == 30.0

    def test_non_numeric_retry_after_ignored(self):
        config = RetryConfig(base_delay_s=2.0, jitter=False)
        assert compute_delay(config, 1, "Wed, 21 Oct 2015 07:28:00 GMT") == 4.0


class TestSendWithRetry:
    @pytest.mark.asyncio
    async def test_non_429_returned_immediately(self):
        calls = 0

        async def send() -> httpx.Response:
            nonlocal calls
            calls += 1
            return httpx.Response(500)

        sleeps: list[float] = []

        async def sleep(d: float) -> None:
            sleeps.append(d)

        response = await send_with_retry(send, RetryConfig(), sleep=sleep)
        assert response.status_code == 500
        assert calls == 1
        assert sleeps == []

    @pytest.mark.asyncio
    async def test_retries_until_exhausted(self):
        calls = 0

        async def send() -> httpx.Response:
            nonlocal calls
            calls += 1
            return httpx.Response(429)

        sleeps: list[float] = []

        async def sleep(d: float) -> None:
            sleeps.append(d)

        config = RetryConfig(max_retries=2, base_delay_s=1.0, jitter=False)
        response = await send_with_retry(send, config, sleep=sleep)
        assert response.status_code == 429
        assert calls == 3
        assert sleeps == [1.0, 2.0]
