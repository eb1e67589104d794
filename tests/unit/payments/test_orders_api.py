from __future__ import annotations

import pytest
from fastapi import FastAPI
from fastapi.testclient import TestClient

from devmart.events.events_repository import EventsRepository
from devmart.payments.orders_api import router
from devmart.payments.orders_repository import OrdersRepository
from devmart.payments.orders_service import OrdersService


@pytest.fixture
def orders(session_factory) -> OrdersRepository:
    return OrdersRepository(session_factory)


@pytest.fixture
def client(session_factory, auth_service, orders) -> TestClient:
    app = FastAPI()
    app.include_router(router)
    app.state.auth_service = auth_service
    app.state.orders_service = OrdersService(repo=orders, events=EventsRepository(session_factory))
    return TestClient(app)


@pytest.fixture
def order_id(orders) -> str:
    return orders.create(
        email="client@devmart.sr",
        amount=99900,
        currency="usd",
        provider="bank_transfer",
        provider_order_id="BT-2-WXYZ",
        status="awaiting_verification",
        metadata={"product_name": "Website Package"},
    ).id


def test_orders_require_admin(client, issue_token, order_id) -> None:
    editor = {"Authorization": f"Bearer {issue_token('editor')}"}

    assert client.get("/api/admin/orders").status_code == 401
    response = client.get("/api/admin/orders", headers=editor)
    assert response.status_code == 403


def test_admin_lists_and_verifies_order(client, issue_token, order_id, session_factory) -> None:
    headers = {"Authorization": f"Bearer {issue_token('admin')}"}

    listed = client.get("/api/admin/orders", params={"status": "awaiting_verification"}, headers=headers)
    assert listed.status_code == 200
    [order] = listed.json()
    assert order["id"] == order_id
    assert order["metadata"] == {"product_name": "Website Package"}

    updated = client.put(
        f"/api/admin/orders/{order_id}/status",
        json={"status": "paid", "notes": "Transfer received"},
        headers=headers,
    )
    assert updated.status_code == 200
    assert updated.json()["status"] == "paid"
    assert client.get(f"/api/admin/orders/{order_id}", headers=headers).json()["status"] == "paid"

    [event] = EventsRepository(session_factory).list_events(area="payments")
    assert event.meta["admin_notes"] == "Transfer received"
    assert event.meta["verified_by"]


def test_invalid_status_is_422(client, issue_token, order_id) -> None:
    headers = {"Authorization": f"Bearer {issue_token('admin')}"}

    response = client.put(f"/api/admin/orders/{order_id}/status", json={"status": "refunded"}, headers=headers)

    assert response.status_code == 422


def test_missing_order_is_404(client, issue_token) -> None:
    headers = {"Authorization": f"Bearer {issue_token('admin')}"}

    assert client.get("/api/admin/orders/missing", headers=headers).status_code == 404
    response = client.put("/api/admin/orders/missing/status", json={"status": "paid"}, headers=headers)
    assert response.status_code == 404


def test_export_orders_csv(client, issue_token, order_id) -> None:
    headers = {"Authorization": f"Bearer {issue_token('admin')}"}

    response = client.get("/api/admin/orders/export", headers=headers)

    assert response.status_code == 200
    assert response.headers["content-type"].startswith("text/csv")
    assert 'filename="payments_' in response.headers["content-disposition"]
    assert "BT-2-WXYZ" in response.text


def test_export_without_matches_is_404(client, issue_token, order_id) -> None:
    headers = {"Authorization": f"Bearer {issue_token('admin')}"}

    response = client.get("/api/admin/orders/export", params={"status": "paid"}, headers=headers)

    assert response.status_code == 404
    assert response.json()["detail"]["failure_reason"] == "no_data"
