from __future__ import annotations

import pytest
from fastapi import FastAPI
from fastapi.testclient import TestClient

from devmart.settings.settings_api import router
from devmart.settings.settings_repository import AppConfigRepository, SettingsRepository
from devmart.settings.settings_service import SettingsCache
from devmart.settings.site_settings_service import SiteSettingsService


@pytest.fixture
def client(session_factory, auth_service) -> TestClient:
    app = FastAPI()
    app.include_router(router)
    app.state.auth_service = auth_service
    app.state.settings_cache = SettingsCache(AppConfigRepository(session_factory))
    app.state.site_settings_service = SiteSettingsService(SettingsRepository(session_factory))
    return TestClient(app)


@pytest.fixture
def admin_headers(issue_token) -> dict[str, str]:
    return {"Authorization": f"Bearer {issue_token('admin')}"}


def test_public_contact_settings_use_defaults(client) -> None:
    response = client.get("/api/settings/contact")

    assert response.status_code == 200
    assert response.json()["contact_email"] == "info@devmart.sr"


def test_admin_updates_site_setting(client, admin_headers) -> None:
    response = client.put(
        "/api/admin/settings/site/contact_email",
        json={"value": "sales@devmart.sr"},
        headers=admin_headers,
    )

    assert response.status_code == 204
    assert client.get("/api/settings/contact").json()["contact_email"] == "sales@devmart.sr"


def test_site_setting_value_is_length_limited(client, admin_headers) -> None:
    response = client.put(
        "/api/admin/settings/site/site_description",
        json={"value": "x" * 5001},
        headers=admin_headers,
    )

    assert response.status_code == 422


def test_payment_settings_require_admin(client, issue_token) -> None:
    assert client.get("/api/admin/settings/payments").status_code == 401

    editor = {"Authorization": f"Bearer {issue_token('editor')}"}
    assert client.get("/api/admin/settings/payments", headers=editor).status_code == 403


def test_payment_settings_mask_webhook_secret(client, admin_headers) -> None:
    payload = {
        "provider_order": ["bank_transfer", "stripe"],
        "stripe": {"mode": "live", "webhook_secret": "whsec_1234567890abcd"},
        "bank_transfer": {"enabled": True, "bank_name": "DSB"},
    }

    updated = client.put("/api/admin/settings/payments", json=payload, headers=admin_headers)
    fetched = client.get("/api/admin/settings/payments", headers=admin_headers)

    assert updated.status_code == 200
    for body in (updated.json(), fetched.json()):
        assert body["provider_order"] == ["bank_transfer", "stripe"]
        assert body["stripe"]["webhook_secret"] == "whse************abcd"
        assert body["bank_transfer"]["bank_name"] == "DSB"


def test_unknown_provider_is_rejected(client, admin_headers) -> None:
    response = client.put(
        "/api/admin/settings/payments",
        json={"provider_order": ["paypal"]},
        headers=admin_headers,
    )

    assert response.status_code == 422


def test_proposal_settings_round_trip(client, admin_headers) -> None:
    response = client.put(
        "/api/admin/settings/proposals",
        json={"email": {"from_name": "Devmart", "from_email": "info@devmart.sr"}},
        headers=admin_headers,
    )

    assert response.status_code == 200
    body = client.get("/api/admin/settings/proposals", headers=admin_headers).json()
    assert body["email"]["from_name"] == "Devmart"
    assert body["tokens"]["ttl_hours"] == 168
