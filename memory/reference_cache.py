from __future__ import annotations

import asyncio
import concurrent.futures
import logging
import time
from dataclasses import dataclass
from threading import Lock
from typing import Any, Awaitable, Callable, Dict, Generic, Hashable, Optional, Set, Tuple, TypeVar

from settings import SETTINGS

logger = logging.getLogger(__name__)

T = TypeVar("T")


@dataclass(frozen=True)
class _Entry(Generic[T]):
    value: T
    stored_at: float
    expires_at: float


class ReferenceDataCache:
    """TTL cache with single-flight fetches for reference-data lookups.

    Concurrent ``get_or_fetch`` calls for one key share a single in-flight
    fetch and all observe its outcome, including callers running on other
    threads' event loops. The fetch itself runs on the loop of the caller
    that started it. Failures are never cached or retried.

    Entries are evicted by ``sweep_expired`` (run periodically once
    ``start_sweeper`` is called) and, past ``max_entries``, oldest-inserted
    first. ``invalidate`` and ``clear`` also detach in-flight fetches: their
    callers still get the result, but it is not stored, and the next caller
    starts a fresh fetch.
    """

    def __init__(
        self,
        *,
        default_ttl_seconds: float | None = None,
        max_entries: int | None = None,
        sweep_interval_seconds: float | None = None,
        clock: Callable[[], float] = time.monotonic,
    ) -> None:
        self.default_ttl_seconds = SETTINGS.reference_cache_ttl_seconds if default_ttl_seconds is None else default_ttl_seconds
        self.max_entries = SETTINGS.reference_cache_max_entries if max_entries is None else max_entries
        self.sweep_interval_seconds = (
            SETTINGS.reference_cache_sweep_seconds if sweep_interval_seconds is None else sweep_interval_seconds
        )
        self._clock = clock
        self._lock = Lock()
        self._entries: Dict[Hashable, _Entry[Any]] = {}
        self._pending: Dict[Hashable, concurrent.futures.Future] = {}
        # bumped by invalidate (per key) and clear (whole cache)
        self._generations: Dict[Hashable, int] = {}
        self._epoch = 0
        self._fetch_tasks: Set[asyncio.Task] = set()
        self._sweeper: Optional[asyncio.Task] = None

    def __len__(self) -> int:
        with self._lock:
            return len(self._entries)

    def peek(self, key: Hashable) -> Optional[Any]:
        """Fresh cached value for ``key`` or None, without fetching."""
        now = self._clock()
        with self._lock:
            entry = self._entries.get(key)
            if entry is None or entry.expires_at <= now:
                return None
            return entry.value

    async def get_or_fetch(
        self,
        key: Hashable,
        fetch_fn: Callable[[], Awaitable[T]],
        ttl_seconds: float | None = None,
    ) -> T:
        now = self._clock()
        started = False
        with self._lock:
            entry = self._entries.get(key)
            if entry is not None and entry.expires_at > now:
                logger.debug("reference_cache_hit", extra={"key": key})
                return entry.value
            pending = self._pending.get(key)
            if pending is None:
                pending = concurrent.futures.Future()
                self._pending[key] = pending
                stamp = self._stamp(key)
                started = True
            else:
                logger.debug("reference_cache_join_in_flight", extra={"key": key})
        if started:
            task = asyncio.get_running_loop().create_task(self._fetch(key, fetch_fn, ttl_seconds, pending, stamp))
            self._fetch_tasks.add(task)
            task.add_done_callback(self._fetch_tasks.discard)
        # shield: a caller giving up must not cancel the fetch other callers share
        return await asyncio.shield(asyncio.wrap_future(pending))

    async def _fetch(
        self,
        key: Hashable,
        fetch_fn: Callable[[], Awaitable[T]],
        ttl_seconds: float | None,
        future: concurrent.futures.Future,
        stamp: Tuple[int, int],
    ) -> None:
        try:
            value = await fetch_fn()
        except asyncio.CancelledError:
            self._release(key, future)
            future.cancel()
            raise
        except Exception as exc:
            logger.warning("reference_cache_fetch_failed", extra={"key": key, "error": repr(exc)})
            self._release(key, future)
            future.set_exception(exc)
            return
        with self._lock:
            if self._stamp(key) == stamp:
                self._store_locked(key, value, ttl_seconds)
            else:
                logger.debug("reference_cache_stale_fetch_discarded", extra={"key": key})
            if self._pending.get(key) is future:
                del self._pending[key]
        future.set_result(value)

    def _release(self, key: Hashable, future: concurrent.futures.Future) -> None:
        with self._lock:
            if self._pending.get(key) is future:
                del self._pending[key]

    def _stamp(self, key: Hashable) -> Tuple[int, int]:
        return self._epoch, self._generations.get(key, 0)

    def set(self, key: Hashable, value: Any, *, ttl_seconds: float | None = None) -> None:
        with self._lock:
            self._store_locked(key, value, ttl_seconds)

    def _store_locked(self, key: Hashable, value: Any, ttl_seconds: float | None) -> None:
        ttl = self.default_ttl_seconds if ttl_seconds is None else ttl_seconds
        now = self._clock()
        # re-inserting moves the key to the back of the insertion order
        self._entries.pop(key, None)
        self._entries[key] = _Entry(value=value, stored_at=now, expires_at=now + max(0.0, ttl))
        while len(self._entries) > self.max_entries:
            oldest = next(iter(self._entries))
            self._entries.pop(oldest, None)
            logger.debug("reference_cache_evicted_oldest", extra={"key": oldest})

    def invalidate(self, key: Hashable) -> bool:
        with self._lock:
            removed = self._entries.pop(key, None) is not None
            self._generations[key] = self._generations.get(key, 0) + 1
            self._pending.pop(key, None)
        logger.debug("reference_cache_invalidated", extra={"key": key, "removed": removed})
        return removed

    def clear(self) -> None:
        with self._lock:
            self._entries.clear()
            self._pending.clear()
            self._generations.clear()
            self._epoch += 1
        logger.debug("reference_cache_cleared")

    def sweep_expired(self) -> int:
        now = self._clock()
        with self._lock:
            expired = [k for k, entry in self._entries.items() if entry.expires_at <= now]
            for k in expired:
                self._entries.pop(k, None)
        if expired:
            logger.debug("reference_cache_swept", extra={"removed": len(expired)})
        return len(expired)

    def start_sweeper(self) -> asyncio.Task:
        if self._sweeper is None or self._sweeper.done():
            self._sweeper = asyncio.get_running_loop().create_task(self._sweep_loop())
        return self._sweeper

    async def stop_sweeper(self) -> None:
        task, self._sweeper = self._sweeper, None
        if task is None:
            return
        task.cancel()
        try:
            await task
        except asyncio.CancelledError:
            pass

    async def _sweep_loop(self) -> None:
        while True:
            await asyncio.sleep(self.sweep_interval_seconds)
            self.sweep_expired()
