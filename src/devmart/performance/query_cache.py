"""Query performance wrapper: timing, TTL cache and in-flight de-duplication."""

from __future__ import annotations

import asyncio
import time
from dataclasses import dataclass
from functools import partial
from typing import Any, Awaitable, Callable, TypeVar

import structlog

logger = structlog.get_logger(__name__)

T = TypeVar("T")

QueryFunction = Callable[[], Awaitable[T]]

DEFAULT_CACHE_TTL_SECONDS = 5 * 60
SLOW_QUERY_THRESHOLD_MS = 1000.0


@dataclass(slots=True)
class CacheEntry:
    data: Any
    timestamp: float
    ttl: float

    def is_fresh(self, now: float) -> bool:
        return now - self.timestamp < self.ttl


class QueryPerformanceManager:
    """Execute backend queries with optional caching and de-duplication.

    Concurrent calls sharing a ``cache_key`` join the first call's in-flight
    task, so the underlying query runs once. Calls without a key are never
    de-duplicated. Entries are only written when caching is enabled, a key is
    supplied and the query returned something other than ``None``.
    """

    def __init__(
        self,
        *,
        clock: Callable[[], float] = time.monotonic,
        slow_query_ms: float = SLOW_QUERY_THRESHOLD_MS,
    ) -> None:
        self._clock = clock
        self._slow_query_ms = slow_query_ms
        self._cache: dict[str, CacheEntry] = {}
        self._in_flight: dict[str, asyncio.Task[Any]] = {}

    async def execute(
        self,
        query_fn: QueryFunction[T],
        *,
        enable_timing: bool = True,
        enable_caching: bool = False,
        cache_key: str | None = None,
        cache_ttl: float = DEFAULT_CACHE_TTL_SECONDS,
    ) -> T:
        started = time.perf_counter()

        if enable_caching and cache_key:
            entry = self._cache.get(cache_key)
            if entry is not None and entry.is_fresh(self._clock()):
                if enable_timing:
                    logger.info("query.cache_hit", cache_key=cache_key, elapsed_ms=_elapsed_ms(started))
                return entry.data

        if not cache_key:
            return await self._run(query_fn, started, enable_timing)

        if cache_key in self._in_flight:
            logger.info("query.deduplicated", cache_key=cache_key)
            return await asyncio.shield(self._in_flight[cache_key])

        task = asyncio.ensure_future(self._run(query_fn, started, enable_timing))
        self._in_flight[cache_key] = task
        # Registered before any awaiter, so it runs before callers resume.
        task.add_done_callback(partial(self._settle, cache_key, enable_caching, cache_ttl))
        return await asyncio.shield(task)

    def _settle(self, cache_key: str, enable_caching: bool, cache_ttl: float, task: asyncio.Task[Any]) -> None:
        if self._in_flight.get(cache_key) is task:
            del self._in_flight[cache_key]
        if task.cancelled() or task.exception() is not None:
            return
        result = task.result()
        if enable_caching and result is not None:
            self._cache[cache_key] = CacheEntry(data=result, timestamp=self._clock(), ttl=cache_ttl)

    async def _run(self, query_fn: QueryFunction[T], started: float, enable_timing: bool) -> T:
        try:
            result = await query_fn()
        except Exception as exc:
            logger.error("query.failed", error=str(exc), elapsed_ms=_elapsed_ms(started))
            raise

        elapsed = _elapsed_ms(started)
        if enable_timing:
            if elapsed > self._slow_query_ms:
                logger.warning("query.slow", elapsed_ms=elapsed)
            else:
                logger.debug("query.completed", elapsed_ms=elapsed)
        return result

    def clear_cache(self, pattern: str | None = None) -> int:
        """Drop all entries, or only those whose key contains ``pattern``."""
        if pattern is None:
            removed = len(self._cache)
            self._cache.clear()
            return removed
        keys = [key for key in self._cache if pattern in key]
        for key in keys:
            del self._cache[key]
        return len(keys)

    def cache_stats(self) -> dict[str, Any]:
        return {
            "size": len(self._cache),
            "active_queries": len(self._in_flight),
            "entries": list(self._cache),
        }

    def cleanup_cache(self) -> int:
        """Evict expired entries and return how many were removed."""
        now = self._clock()
        expired = [key for key, entry in self._cache.items() if not entry.is_fresh(now)]
        for key in expired:
            del self._cache[key]
        return len(expired)


async def run_cache_cleanup(
    manager: QueryPerformanceManager,
    *,
    shutdown_event: asyncio.Event,
    interval_seconds: float = DEFAULT_CACHE_TTL_SECONDS,
) -> None:
    """Sweep expired cache entries until ``shutdown_event`` is signalled."""

    interval = max(1.0, float(interval_seconds))
    while not shutdown_event.is_set():
        removed = manager.cleanup_cache()
        if removed:
            logger.info("query.cache_cleanup", removed=removed)
        try:
            await asyncio.wait_for(shutdown_event.wait(), timeout=interval)
        except asyncio.TimeoutError:
            continue


def _elapsed_ms(started: float) -> float:
    return round((time.perf_counter() - started) * 1000, 2)
