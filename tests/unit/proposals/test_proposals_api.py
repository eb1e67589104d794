from __future__ import annotations

import pytest
from fastapi import FastAPI
from fastapi.testclient import TestClient

from devmart.events.events_api import router as events_router
from devmart.events.events_repository import EventsRepository
from devmart.proposals.proposals_api import router
from devmart.proposals.proposals_repository import ProposalTemplatesRepository
from devmart.proposals.proposals_service import ProposalTemplateService


@pytest.fixture
def client(session_factory, auth_service) -> TestClient:
    events = EventsRepository(session_factory)
    app = FastAPI()
    app.include_router(router)
    app.include_router(events_router)
    app.state.auth_service = auth_service
    app.state.events_repo = events
    app.state.proposal_template_service = ProposalTemplateService(
        ProposalTemplatesRepository(session_factory), events
    )
    return TestClient(app)


def test_template_lifecycle(client, issue_token) -> None:
    headers = {"Authorization": f"Bearer {issue_token('editor')}"}

    created = client.post(
        "/api/admin/proposal-templates",
        json={"name": "SEO Audit", "content": "<p>{{client_name}}</p>", "status": "active"},
        headers=headers,
    )
    assert created.status_code == 201
    template_id = created.json()["id"]

    duplicated = client.post(f"/api/admin/proposal-templates/{template_id}/duplicate", headers=headers)
    assert duplicated.status_code == 201
    assert duplicated.json()["name"] == "Copy of SEO Audit"

    archived = client.post(f"/api/admin/proposal-templates/{template_id}/toggle-archive", headers=headers)
    assert archived.json()["status"] == "archived"

    exported = client.get(f"/api/admin/proposal-templates/{template_id}/export", headers=headers)
    assert exported.status_code == 200
    assert 'filename="template-seo-audit.json"' in exported.headers["content-disposition"]

    listed = client.get("/api/admin/proposal-templates", headers=headers)
    assert len(listed.json()) == 2


def test_missing_template_is_404(client, issue_token) -> None:
    headers = {"Authorization": f"Bearer {issue_token('admin')}"}

    response = client.post("/api/admin/proposal-templates/missing/duplicate", headers=headers)

    assert response.status_code == 404


def test_events_are_visible_to_admins_only(client, issue_token) -> None:
    editor = {"Authorization": f"Bearer {issue_token('editor')}"}
    admin = {"Authorization": f"Bearer {issue_token('admin')}"}
    client.post("/api/admin/proposal-templates", json={"name": "Retainer"}, headers=editor)

    assert client.get("/api/admin/events", headers=editor).status_code == 403

    response = client.get("/api/admin/events", params={"area": "proposals-templates"}, headers=admin)
    assert response.status_code == 200
    assert response.json()[0]["message"] == "Template created: Retainer"
    assert client.get("/api/admin/events", params={"limit": 0}, headers=admin).status_code == 422
