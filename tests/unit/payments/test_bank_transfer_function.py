from __future__ import annotations

import re

import pytest
from fastapi import FastAPI
from fastapi.testclient import TestClient

from devmart.auth.auth_backend import JwtAuthBackend
from devmart.payments.bank_transfer_function import (
    DEFAULT_INSTRUCTIONS,
    BankTransferOrderRequest,
    BankTransferOrderService,
    generate_bank_reference,
    router,
)
from devmart.payments.orders_repository import OrdersRepository
from devmart.payments.payments_base import PaymentValidationError
from devmart.settings.settings_models import BankTransferSettings, PaymentSettings
from devmart.settings.settings_repository import AppConfigRepository
from devmart.settings.settings_service import SettingsCache

REFERENCE_RE = re.compile(r"^BT-[0-9A-Z]+-[0-9A-Z]{4}$")


@pytest.fixture
def orders(session_factory) -> OrdersRepository:
    return OrdersRepository(session_factory)


@pytest.fixture
def settings_cache(session_factory) -> SettingsCache:
    return SettingsCache(AppConfigRepository(session_factory))


@pytest.fixture
def service(orders, settings_cache) -> BankTransferOrderService:
    return BankTransferOrderService(orders=orders, settings=settings_cache)


def make_request(**overrides) -> BankTransferOrderRequest:
    payload = {
        "amount": 2500,
        "currency": "usd",
        "productName": "Website Starter",
        "customerInfo": {"name": "Ana", "email": "ana@devmart.sr"},
    }
    payload.update(overrides)
    return BankTransferOrderRequest.model_validate(payload)


def test_reference_format() -> None:
    assert REFERENCE_RE.match(generate_bank_reference())
    assert generate_bank_reference(now_ms=36).startswith("BT-10-")


def test_create_order_uses_fallback_bank_details(service, orders) -> None:
    body = service.create_order(make_request())

    assert REFERENCE_RE.match(body["bankReference"])
    details = body["bankDetails"]
    assert details["bankName"] == "Suriname Commercial Bank"
    assert details["swiftCode"] == "SCBKSR22"
    assert details["amount"] == 25.0
    assert details["currency"] == "USD"
    assert details["instructions"] == DEFAULT_INSTRUCTIONS
    assert body["order"]["status"] == "awaiting_verification"

    stored = orders.get_by_provider_order_id(body["bankReference"])
    assert stored is not None
    assert stored.provider == "bank_transfer"
    assert stored.order_metadata["created_via"] == "bank_transfer_flow"


def test_create_order_uses_configured_bank_details(service, settings_cache) -> None:
    settings_cache.update_payment_settings(
        PaymentSettings(
            bank_transfer=BankTransferSettings(
                enabled=True,
                bank_name="Hakrinbank",
                beneficiary_name="Devmart N.V.",
                instructions_md="Line one\n\nLine two\n",
            )
        )
    )

    details = service.create_order(make_request())["bankDetails"]

    assert details["bankName"] == "Hakrinbank"
    assert details["accountName"] == "Devmart N.V."
    assert details["instructions"] == ["Line one", "Line two"]


@pytest.mark.parametrize(
    "overrides",
    [
        {"amount": 0},
        {"amount": None},
        {"customerInfo": None},
        {"customerInfo": {"name": "Ana"}},
    ],
)
def test_create_order_validates_input(service, overrides) -> None:
    with pytest.raises(PaymentValidationError):
        service.create_order(make_request(**overrides))


def build_client(service, auth_service, profiles_repo) -> TestClient:
    app = FastAPI()
    app.include_router(router)
    app.state.bank_transfer_service = service
    app.state.auth_backend = JwtAuthBackend(service=auth_service, profiles=profiles_repo)
    return TestClient(app)


def test_endpoint_links_order_to_signed_in_user(service, orders, auth_service, profiles_repo, issue_token) -> None:
    client = build_client(service, auth_service, profiles_repo)
    token = issue_token("viewer", email="buyer@devmart.sr")

    response = client.post(
        "/functions/v1/create-bank-transfer-order",
        json=make_request().model_dump(),
        headers={"Authorization": f"Bearer {token}"},
    )

    assert response.status_code == 200
    stored = orders.get_by_provider_order_id(response.json()["bankReference"])
    assert stored.user_id == profiles_repo.get_by_email("buyer@devmart.sr").id


def test_endpoint_accepts_guest_checkout(service, auth_service, profiles_repo) -> None:
    client = build_client(service, auth_service, profiles_repo)

    response = client.post(
        "/functions/v1/create-bank-transfer-order",
        json=make_request().model_dump(),
        headers={"Authorization": "Bearer service-role-key"},
    )

    assert response.status_code == 200
    assert response.json()["orderId"]


def test_endpoint_reports_errors_as_500(service, auth_service, profiles_repo) -> None:
    client = build_client(service, auth_service, profiles_repo)

    response = client.post("/functions/v1/create-bank-transfer-order", json={"amount": 100})

    assert response.status_code == 500
    assert response.json() == {"error": "Customer name and email are required"}
