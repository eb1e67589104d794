"""Periodic health polling with a bounded rolling history."""

from __future__ import annotations

import asyncio
from collections import deque

import structlog

from .health_models import HealthStatus
from .health_service import HealthChecker

logger = structlog.get_logger(__name__)

# 24 hours of samples at the default 5-minute interval.
DEFAULT_HISTORY_LIMIT = 288


class SystemMonitor:
    """Process-scoped monitor; one instance is created per app and kept on ``app.state``."""

    def __init__(self, checker: HealthChecker, *, history_limit: int = DEFAULT_HISTORY_LIMIT) -> None:
        self._checker = checker
        self._history: deque[HealthStatus] = deque(maxlen=history_limit)
        self._task: asyncio.Task[None] | None = None
        self._shutdown: asyncio.Event | None = None

    @property
    def running(self) -> bool:
        return self._task is not None and not self._task.done()

    def history(self) -> list[HealthStatus]:
        return list(self._history)

    async def current_health(self) -> HealthStatus:
        return await self._checker.perform_health_check()

    async def poll_once(self) -> HealthStatus:
        health = await self._checker.perform_health_check()
        self._history.append(health)
        if health.status != "healthy":
            logger.warning(
                "health.degraded",
                status=health.status,
                checks=health.checks.model_dump(),
                db_latency_ms=health.performance.db_latency_ms,
            )
        return health

    def start(self, interval_seconds: float = 300.0) -> None:
        if self.running:
            return
        self._shutdown = asyncio.Event()
        self._task = asyncio.create_task(self._run(max(1.0, float(interval_seconds)), self._shutdown))
        logger.info("health.monitor.started", interval_seconds=interval_seconds)

    async def stop(self) -> None:
        if self._task is None or self._shutdown is None:
            return
        self._shutdown.set()
        await self._task
        self._task = None
        self._shutdown = None
        logger.info("health.monitor.stopped")

    async def _run(self, interval: float, shutdown_event: asyncio.Event) -> None:
        while not shutdown_event.is_set():
            try:
                await self.poll_once()
            except Exception:  # pragma: no cover - defensive logging
                logger.exception("health.poll_failed")
            try:
                await asyncio.wait_for(shutdown_event.wait(), timeout=interval)
            except asyncio.TimeoutError:
                continue
