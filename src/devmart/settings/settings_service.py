"""Cached access to the ``payments`` and ``proposals`` configuration blobs."""

from __future__ import annotations

import json
import time
from collections.abc import Callable
from dataclasses import dataclass, field
from typing import TypeVar

import pydantic
import structlog
from sqlalchemy.exc import SQLAlchemyError

from ..exceptions import RepositoryError
from .settings_models import PaymentSettings, ProposalSettings
from .settings_repository import AppConfigRepository

logger = structlog.get_logger(__name__)

PAYMENTS_KEY = "payments"
PROPOSALS_KEY = "proposals"
DEFAULT_TTL_SECONDS = 300.0

ModelT = TypeVar("ModelT", bound=pydantic.BaseModel)


@dataclass(slots=True, frozen=True)
class SettingsSnapshot:
    payments: PaymentSettings
    proposals: ProposalSettings


@dataclass(slots=True)
class SettingsCache:
    """Serve both blobs from memory for ``ttl_seconds`` after a successful read.

    Backend failures never reach the caller: defaults are returned and the
    failure is not cached, so the next call retries the database.
    """

    repo: AppConfigRepository
    ttl_seconds: float = DEFAULT_TTL_SECONDS
    clock: Callable[[], float] = time.monotonic
    _snapshot: SettingsSnapshot | None = field(default=None, init=False)
    _fetched_at: float = field(default=0.0, init=False)

    def fetch_settings(self) -> SettingsSnapshot:
        now = self.clock()
        if self._snapshot is not None and (now - self._fetched_at) < self.ttl_seconds:
            return self._snapshot

        try:
            raw = self.repo.read_many([PAYMENTS_KEY, PROPOSALS_KEY])
        except (SQLAlchemyError, RepositoryError) as exc:
            logger.error("settings.fetch_failed", error=str(exc))
            return SettingsSnapshot(payments=PaymentSettings(), proposals=ProposalSettings())

        snapshot = SettingsSnapshot(
            payments=_decode(raw.get(PAYMENTS_KEY), PaymentSettings),
            proposals=_decode(raw.get(PROPOSALS_KEY), ProposalSettings),
        )
        self._snapshot = snapshot
        self._fetched_at = now
        return snapshot

    def payment_settings(self) -> PaymentSettings:
        return self.fetch_settings().payments

    def proposal_settings(self) -> ProposalSettings:
        return self.fetch_settings().proposals

    def clear_cache(self) -> None:
        self._snapshot = None
        self._fetched_at = 0.0

    def update_payment_settings(self, settings: PaymentSettings) -> None:
        self.repo.upsert(PAYMENTS_KEY, settings.model_dump_json())
        self.clear_cache()
        logger.info("settings.updated", key=PAYMENTS_KEY)

    def update_proposal_settings(self, settings: ProposalSettings) -> None:
        self.repo.upsert(PROPOSALS_KEY, settings.model_dump_json())
        self.clear_cache()
        logger.info("settings.updated", key=PROPOSALS_KEY)


def _decode(value: str | None, model: type[ModelT]) -> ModelT:
    if not value:
        return model()
    try:
        return model.model_validate(json.loads(value))
    except (ValueError, pydantic.ValidationError):
        logger.warning("settings.decode_failed", model=model.__name__)
        return model()
