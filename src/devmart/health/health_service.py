"""Health checks against the backend subsystems.

Checks never raise: a failure or timeout marks that subsystem as failed for
the current cycle. Each check is bounded by ``check_timeout_seconds`` so one
hung subsystem cannot stall the aggregate.
"""

from __future__ import annotations

import asyncio
import time
from collections.abc import Callable, Mapping
from dataclasses import dataclass
from datetime import datetime, timezone
from typing import Awaitable, TypeVar

import structlog
from sqlalchemy import select
from sqlalchemy.orm import Session

from ..backend.backend_base import AuthBackend, FunctionsBackend, StorageBackend
from ..db.db_models import PageModel
from .health_models import HealthChecks, HealthPerformance, HealthState, HealthStatus

logger = structlog.get_logger(__name__)

T = TypeVar("T")

DEGRADED_THRESHOLD = 0.75


def classify_health(checks: Mapping[str, bool]) -> HealthState:
    """All pass -> healthy; at least 75% pass -> degraded; otherwise unhealthy."""
    total = len(checks)
    passed = sum(1 for ok in checks.values() if ok)
    if total and passed == total:
        return "healthy"
    if total and passed >= total * DEGRADED_THRESHOLD:
        return "degraded"
    return "unhealthy"


@dataclass(slots=True)
class HealthChecker:
    session_factory: Callable[[], Session]
    auth: AuthBackend
    storage: StorageBackend
    functions: FunctionsBackend
    check_timeout_seconds: float | None = 10.0

    async def check_database(self) -> tuple[bool, float]:
        started = time.perf_counter()
        healthy = await self._guard("database", asyncio.to_thread(self._db_round_trip))
        return bool(healthy), _elapsed_ms(started)

    def _db_round_trip(self) -> bool:
        with self.session_factory() as session:
            session.execute(select(PageModel.id).limit(1)).first()
        return True

    async def check_auth(self) -> bool:
        session = await self._guard("auth", self.auth.get_session())
        return session is not None

    async def check_storage(self) -> bool:
        buckets = await self._guard("storage", self.storage.list_buckets())
        return isinstance(buckets, list)

    async def check_functions(self) -> bool:
        return bool(await self._guard("functions", self.functions.ping()))

    async def perform_health_check(self) -> HealthStatus:
        timestamp = datetime.now(timezone.utc)
        (db_healthy, db_latency), auth_ok, storage_ok, functions_ok = await asyncio.gather(
            self.check_database(),
            self.check_auth(),
            self.check_storage(),
            self.check_functions(),
        )
        checks = HealthChecks(
            database=db_healthy,
            auth=auth_ok,
            storage=storage_ok,
            functions=functions_ok,
        )
        return HealthStatus(
            status=classify_health(checks.model_dump()),
            timestamp=timestamp,
            checks=checks,
            performance=HealthPerformance(db_latency_ms=db_latency),
        )

    async def _guard(self, check: str, awaitable: Awaitable[T]) -> T | None:
        try:
            if self.check_timeout_seconds is None:
                return await awaitable
            return await asyncio.wait_for(awaitable, timeout=self.check_timeout_seconds)
        except asyncio.TimeoutError:
            logger.warning("health.check.timeout", check=check, timeout_seconds=self.check_timeout_seconds)
        except Exception as exc:
            logger.warning("health.check.failed", check=check, error=str(exc)[:200])
        return None


def _elapsed_ms(started: float) -> float:
    return round((time.perf_counter() - started) * 1000, 2)
