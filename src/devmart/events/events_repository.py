"""Append-only application event log (``app_events`` table)."""

from __future__ import annotations

from collections.abc import Callable
from datetime import datetime
from typing import Any

from sqlalchemy import select
from sqlalchemy.orm import Session

from ..db.db_models import AppEventModel


class EventsRepository:
    def __init__(self, session_factory: Callable[[], Session]) -> None:
        self._session_factory = session_factory

    def log_event(
        self,
        *,
        level: str,
        area: str,
        message: str,
        meta: dict[str, Any] | None = None,
    ) -> AppEventModel:
        model = AppEventModel(
            level=level,
            area=area,
            message=message,
            meta=meta or {},
            created_at=datetime.utcnow(),
        )
        with self._session_factory() as session:
            session.add(model)
            session.commit()
            session.refresh(model)
        return model

    def list_events(self, *, area: str | None = None, limit: int = 100) -> list[AppEventModel]:
        with self._session_factory() as session:
            stmt = select(AppEventModel).order_by(AppEventModel.id.desc()).limit(limit)
            if area:
                stmt = stmt.where(AppEventModel.area == area)
            return list(session.execute(stmt).scalars())
