from __future__ import annotations

import asyncio

import pytest

from tools.retry import RetryPolicy, with_retry


def _policy(**kwargs) -> RetryPolicy:
    data = dict(max_attempts=3, initial_delay_seconds=1.0, max_delay_seconds=10.0, backoff_factor=2.0)
    data.update(kwargs)
    return RetryPolicy(**data)


def test_delays_back_off_and_cap():
    assert list(_policy().delays()) == [1.0, 2.0]
    assert list(_policy(max_attempts=6, max_delay_seconds=5.0).delays()) == [1.0, 2.0, 4.0, 5.0, 5.0]
    assert list(_policy(max_attempts=1).delays()) == []


def test_succeeds_after_transient_failures():
    async def _run():
        attempts = 0
        slept = []

        async def flaky():
            nonlocal attempts
            attempts += 1
            if attempts < 3:
                raise ConnectionError("reset")
            return "ok"

        async def fake_sleep(seconds):
            slept.append(seconds)

        assert await with_retry(flaky, _policy(), sleep=fake_sleep) == "ok"
        assert attempts == 3
        assert slept == [1.0, 2.0]

    asyncio.run(_run())


def test_last_error_propagates_after_max_attempts():
    async def _run():
        attempts = 0

        async def broken():
            nonlocal attempts
            attempts += 1
            raise ConnectionError(f"attempt {attempts}")

        async def fake_sleep(seconds):
            return None

        with pytest.raises(ConnectionError, match="attempt 3"):
            await with_retry(broken, _policy(), sleep=fake_sleep)
        assert attempts == 3

    asyncio.run(_run())


def test_non_retryable_error_is_raised_immediately():
    async def _run():
        attempts = 0

        async def bad():
            nonlocal attempts
            attempts += 1
            raise ValueError("bad request")

        async def fake_sleep(seconds):
            return None

        with pytest.raises(ValueError):
            await with_retry(bad, _policy(retry_on=(ConnectionError,)), sleep=fake_sleep)
        assert attempts == 1

    asyncio.run(_run())
