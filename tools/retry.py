from __future__ import annotations

import asyncio
import logging
from dataclasses import dataclass
from typing import Awaitable, Callable, Tuple, Type, TypeVar

from settings import SETTINGS

logger = logging.getLogger(__name__)

T = TypeVar("T")


@dataclass(frozen=True)
class RetryPolicy:
    max_attempts: int = SETTINGS.retry_max_attempts
    initial_delay_seconds: float = SETTINGS.retry_initial_delay_seconds
    max_delay_seconds: float = SETTINGS.retry_max_delay_seconds
    backoff_factor: float = SETTINGS.retry_backoff_factor
    retry_on: Tuple[Type[BaseException], ...] = (Exception,)

    def delays(self):
        delay = self.initial_delay_seconds
        for _ in range(max(0, self.max_attempts - 1)):
            yield delay
            delay = min(delay * self.backoff_factor, self.max_delay_seconds)


async def with_retry(
    operation: Callable[[], Awaitable[T]],
    policy: RetryPolicy | None = None,
    *,
    sleep: Callable[[float], Awaitable[None]] = asyncio.sleep,
) -> T:
    """Run ``operation`` with exponential backoff; the last failure propagates."""
    policy = policy or RetryPolicy()
    attempt = 1
    for delay in policy.delays():
        try:
            return await operation()
        except policy.retry_on as exc:
            logger.warning("operation_failed_retrying", extra={"attempt": attempt, "delay": delay, "error": repr(exc)})
        await sleep(delay)
        attempt += 1
    return await operation()
