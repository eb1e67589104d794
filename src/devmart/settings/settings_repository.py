"""Persistence for configuration blobs and site-wide key-value settings."""

from __future__ import annotations

from collections.abc import Callable
from datetime import datetime

from sqlalchemy import select
from sqlalchemy.orm import Session

from ..db.db_models import AppConfigModel, SettingModel
from ..exceptions import handle_sqlalchemy_errors


class AppConfigRepository:
    """JSON blobs keyed by name (``payments``, ``proposals``) in ``app_config``."""

    def __init__(self, session_factory: Callable[[], Session]) -> None:
        self._session_factory = session_factory

    def read_many(self, keys: list[str]) -> dict[str, str]:
        with self._session_factory() as session:
            stmt = select(AppConfigModel).where(AppConfigModel.key.in_(keys))
            return {row.key: row.value for row in session.execute(stmt).scalars()}

    def upsert(self, key: str, value: str) -> None:
        with handle_sqlalchemy_errors(entity="app_config"), self._session_factory() as session:
            model = session.get(AppConfigModel, key)
            if model is None:
                model = AppConfigModel(key=key)
            model.value = value
            model.updated_at = datetime.utcnow()
            session.add(model)
            session.commit()


class SettingsRepository:
    """Key-value wrapper backed by the settings table."""

    def __init__(self, session_factory: Callable[[], Session]) -> None:
        self._session_factory = session_factory

    def read_all(self) -> dict[str, str]:
        with self._session_factory() as session:
            rows = session.query(SettingModel).all()
            return {row.key: row.value for row in rows}

    def upsert(self, key: str, value: str, *, updated_by: str | None = None) -> None:
        self.bulk_upsert({key: value}, updated_by=updated_by)

    def bulk_upsert(self, payload: dict[str, str], *, updated_by: str | None = None) -> None:
        with handle_sqlalchemy_errors(entity="settings"), self._session_factory() as session:
            now = datetime.utcnow()
            for key, value in payload.items():
                model = session.get(SettingModel, key)
                if model is None:
                    model = SettingModel(key=key)
                model.value = value
                model.updated_at = now
                model.updated_by = updated_by
                session.add(model)
            session.commit()
