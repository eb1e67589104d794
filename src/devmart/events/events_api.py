"""Admin read access to the application event log."""

from __future__ import annotations

from datetime import datetime
from typing import Any

from fastapi import APIRouter, Depends, Query, Request
from pydantic import BaseModel, ConfigDict

from ..auth.auth_dependencies import require_admin_user
from .events_repository import EventsRepository

router = APIRouter(prefix="/api/admin/events", tags=["events"])


class AppEvent(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    id: int
    level: str
    area: str
    message: str
    meta: dict[str, Any] | None = None
    created_at: datetime


def get_events_repo(request: Request) -> EventsRepository:
    try:
        return request.app.state.events_repo  # type: ignore[attr-defined]
    except AttributeError as exc:  # pragma: no cover - defensive path
        raise RuntimeError("EventsRepository is not configured") from exc


@router.get("", response_model=list[AppEvent])
def list_events(
    area: str | None = None,
    limit: int = Query(default=100, ge=1, le=500),
    _: dict = Depends(require_admin_user),
    repo: EventsRepository = Depends(get_events_repo),
) -> list[AppEvent]:
    return [AppEvent.model_validate(row) for row in repo.list_events(area=area, limit=limit)]
