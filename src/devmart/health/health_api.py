"""Health endpoints: public status, ping and admin history."""

from __future__ import annotations

from fastapi import APIRouter, Depends, Request, Response, status

from ..auth.auth_dependencies import require_admin_user
from .health_models import HealthStatus
from .health_monitor import SystemMonitor

router = APIRouter(tags=["health"])


def get_system_monitor(request: Request) -> SystemMonitor:
    try:
        return request.app.state.system_monitor  # type: ignore[attr-defined]
    except AttributeError as exc:  # pragma: no cover - defensive path
        raise RuntimeError("SystemMonitor is not configured") from exc


@router.head("/api/health")
def ping() -> Response:
    return Response(status_code=status.HTTP_200_OK)


@router.get("/api/health", response_model=HealthStatus)
async def read_health(
    response: Response,
    monitor: SystemMonitor = Depends(get_system_monitor),
) -> HealthStatus:
    health = await monitor.current_health()
    if health.status == "unhealthy":
        response.status_code = status.HTTP_503_SERVICE_UNAVAILABLE
    return health


@router.get("/api/admin/health/history", response_model=list[HealthStatus])
def read_health_history(
    _: dict = Depends(require_admin_user),
    monitor: SystemMonitor = Depends(get_system_monitor),
) -> list[HealthStatus]:
    return monitor.history()
