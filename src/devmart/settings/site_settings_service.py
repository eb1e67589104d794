"""Public contact and SEO views over the key-value ``settings`` table."""

from __future__ import annotations

from dataclasses import dataclass

import structlog
from sqlalchemy.exc import SQLAlchemyError

from ..exceptions import RepositoryError
from .settings_models import ContactSettings, SEOSettings
from .settings_repository import SettingsRepository

logger = structlog.get_logger(__name__)


@dataclass(slots=True)
class SiteSettingsService:
    repo: SettingsRepository

    def contact_settings(self) -> ContactSettings:
        """Stored values override defaults; empty strings fall back to them."""
        try:
            store = self.repo.read_all()
        except (SQLAlchemyError, RepositoryError) as exc:
            logger.error("settings.contact.load_failed", error=str(exc))
            return ContactSettings()

        values = {
            name: store[name]
            for name in ContactSettings.model_fields
            if store.get(name)
        }
        return ContactSettings(**values)

    def seo_settings(self) -> SEOSettings:
        try:
            store = self.repo.read_all()
        except (SQLAlchemyError, RepositoryError) as exc:
            logger.error("settings.seo.load_failed", error=str(exc))
            return SEOSettings()
        return SEOSettings(**{name: store.get(name) for name in SEOSettings.model_fields})

    def upsert(self, key: str, value: str, *, updated_by: str | None = None) -> None:
        self.repo.upsert(key, value, updated_by=updated_by)
        logger.info("settings.site.updated", key=key, updated_by=updated_by)
