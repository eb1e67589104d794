from __future__ import annotations

import json

import pytest
from sqlalchemy.exc import OperationalError

from devmart.settings.settings_models import (
    BankTransferSettings,
    PaymentSettings,
    ProposalSettings,
    TokenSettings,
    mask_secret_key,
)
from devmart.settings.settings_repository import AppConfigRepository, SettingsRepository
from devmart.settings.settings_service import PAYMENTS_KEY, SettingsCache
from devmart.settings.site_settings_service import SiteSettingsService


class FakeClock:
    def __init__(self) -> None:
        self.now = 1000.0

    def __call__(self) -> float:
        return self.now


class CountingRepo:
    def __init__(self, values: dict[str, str] | None = None) -> None:
        self.values = values or {}
        self.reads = 0
        self.writes: list[tuple[str, str]] = []

    def read_many(self, keys: list[str]) -> dict[str, str]:
        self.reads += 1
        return {key: self.values[key] for key in keys if key in self.values}

    def upsert(self, key: str, value: str) -> None:
        self.writes.append((key, value))
        self.values[key] = value


class BrokenRepo:
    def read_many(self, keys: list[str]) -> dict[str, str]:
        raise OperationalError("SELECT", {}, Exception("database is locked"))

    def read_all(self) -> dict[str, str]:
        raise OperationalError("SELECT", {}, Exception("database is locked"))


def test_defaults_when_nothing_stored() -> None:
    cache = SettingsCache(CountingRepo())

    snapshot = cache.fetch_settings()

    assert snapshot.payments.provider_order == ["stripe", "bank_transfer"]
    assert snapshot.payments.stripe.mode == "test"
    assert snapshot.payments.bank_transfer.enabled is False
    assert snapshot.proposals.branding.primary_color == "#6366f1"
    assert snapshot.proposals.tokens.ttl_hours == 168
    assert snapshot.proposals.attachments.max_mb == 10


def test_snapshot_is_cached_until_ttl_expires() -> None:
    repo = CountingRepo()
    clock = FakeClock()
    cache = SettingsCache(repo, ttl_seconds=300, clock=clock)

    cache.fetch_settings()
    clock.now += 299
    cache.fetch_settings()
    assert repo.reads == 1

    clock.now += 2
    cache.fetch_settings()
    assert repo.reads == 2


def test_backend_failure_returns_defaults_without_caching() -> None:
    cache = SettingsCache(BrokenRepo())  # type: ignore[arg-type]

    snapshot = cache.fetch_settings()

    assert snapshot.payments == PaymentSettings()
    assert snapshot.proposals == ProposalSettings()
    assert cache._snapshot is None  # type: ignore[attr-defined]


def test_partial_blob_is_filled_with_defaults() -> None:
    repo = CountingRepo({PAYMENTS_KEY: json.dumps({"bank_transfer": {"enabled": True}})})

    settings = SettingsCache(repo).payment_settings()

    assert settings.bank_transfer.enabled is True
    assert settings.provider_order == ["stripe", "bank_transfer"]


def test_corrupt_blob_falls_back_to_defaults() -> None:
    repo = CountingRepo({PAYMENTS_KEY: "{not json"})

    assert SettingsCache(repo).payment_settings() == PaymentSettings()


def test_update_writes_blob_and_clears_cache() -> None:
    repo = CountingRepo()
    cache = SettingsCache(repo, clock=FakeClock())
    cache.fetch_settings()

    cache.update_payment_settings(PaymentSettings(bank_transfer=BankTransferSettings(enabled=True)))
    settings = cache.payment_settings()

    assert repo.writes[0][0] == "payments"
    assert repo.reads == 2
    assert settings.bank_transfer.enabled is True


def test_proposal_settings_round_trip_through_database(session_factory) -> None:
    cache = SettingsCache(AppConfigRepository(session_factory))

    cache.update_proposal_settings(ProposalSettings(tokens=TokenSettings(ttl_hours=24, single_use=True)))

    assert cache.proposal_settings().tokens.ttl_hours == 24
    assert cache.proposal_settings().tokens.single_use is True


@pytest.mark.parametrize(
    ("value", "expected"),
    [
        (None, None),
        ("", ""),
        ("short", "short"),
        ("whsec_1234567890abcd", "whse************abcd"),
    ],
)
def test_mask_secret_key(value, expected) -> None:
    assert mask_secret_key(value) == expected


def test_contact_settings_defaults_and_overrides(session_factory) -> None:
    repo = SettingsRepository(session_factory)
    service = SiteSettingsService(repo)
    repo.bulk_upsert({"contact_email": "hello@devmart.sr", "contact_phone": ""}, updated_by="admin-1")

    contact = service.contact_settings()

    assert contact.contact_email == "hello@devmart.sr"
    assert contact.contact_phone == "+555-759-9854"
    assert contact.site_title == "Devmart"


def test_contact_settings_survive_backend_failure() -> None:
    service = SiteSettingsService(BrokenRepo())  # type: ignore[arg-type]

    assert service.contact_settings().contact_email == "info@devmart.sr"
    assert service.seo_settings().seo_title_template is None


def test_site_setting_upsert_records_author(session_factory) -> None:
    repo = SettingsRepository(session_factory)
    service = SiteSettingsService(repo)

    service.upsert("seo_title_template", "%s | Devmart", updated_by="admin-1")
    service.upsert("seo_title_template", "%s - Devmart", updated_by="admin-2")

    assert repo.read_all() == {"seo_title_template": "%s - Devmart"}
    assert service.seo_settings().seo_title_template == "%s - Devmart"
