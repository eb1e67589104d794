"""Admin endpoints for inspecting and flushing the query cache."""

from __future__ import annotations

from typing import Any

from fastapi import APIRouter, Depends, Request

from ..auth.auth_dependencies import require_admin_user
from .query_cache import QueryPerformanceManager

router = APIRouter(prefix="/api/admin/performance", tags=["performance"])


def get_query_manager(request: Request) -> QueryPerformanceManager:
    try:
        return request.app.state.query_manager  # type: ignore[attr-defined]
    except AttributeError as exc:  # pragma: no cover - defensive path
        raise RuntimeError("QueryPerformanceManager is not configured") from exc


@router.get("/cache")
def read_cache_stats(
    _: dict = Depends(require_admin_user),
    manager: QueryPerformanceManager = Depends(get_query_manager),
) -> dict[str, Any]:
    return manager.cache_stats()


@router.delete("/cache")
def clear_cache(
    pattern: str | None = None,
    _: dict = Depends(require_admin_user),
    manager: QueryPerformanceManager = Depends(get_query_manager),
) -> dict[str, int]:
    return {"removed": manager.clear_cache(pattern)}
