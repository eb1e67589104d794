from __future__ import annotations

import pytest
from fastapi import FastAPI
from fastapi.testclient import TestClient

from devmart.cms.cms_api import router
from devmart.cms.cms_repository import (
    CONTENT_MODELS,
    BlogCategoriesRepository,
    ContactSubmissionsRepository,
    ContentRepository,
    FAQRepository,
    ProjectImagesRepository,
)
from devmart.cms.cms_service import BlogCategoryService, ContactService, ContentService, FAQService
from devmart.performance.query_cache import QueryPerformanceManager


@pytest.fixture
def client(session_factory, auth_service) -> TestClient:
    manager = QueryPerformanceManager()
    app = FastAPI()
    app.include_router(router)
    app.state.auth_service = auth_service
    app.state.content_services = {
        kind: ContentService(ContentRepository(session_factory, kind), manager) for kind in CONTENT_MODELS
    }
    app.state.project_images_repo = ProjectImagesRepository(session_factory)
    app.state.contact_service = ContactService(ContactSubmissionsRepository(session_factory))
    app.state.faq_service = FAQService(FAQRepository(session_factory), manager)
    app.state.blog_category_service = BlogCategoryService(BlogCategoriesRepository(session_factory), manager)
    return TestClient(app)


@pytest.fixture
def editor_headers(issue_token) -> dict[str, str]:
    return {"Authorization": f"Bearer {issue_token('editor')}"}


@pytest.fixture
def admin_headers(issue_token) -> dict[str, str]:
    return {"Authorization": f"Bearer {issue_token('admin')}"}


def test_contact_form_validation(client) -> None:
    ok = client.post(
        "/api/contact",
        json={"name": "Ana", "email": "ana@devmart.sr", "message": "Please call me back."},
    )
    bad_email = client.post(
        "/api/contact",
        json={"name": "Ana", "email": "not-an-email", "message": "Please call me back."},
    )
    short_message = client.post(
        "/api/contact",
        json={"name": "Ana", "email": "ana@devmart.sr", "message": "Hi"},
    )

    assert ok.status_code == 201
    assert ok.json()["email"] == "ana@devmart.sr"
    assert bad_email.status_code == 422
    assert short_message.status_code == 422


def test_contact_submissions_are_admin_only(client, editor_headers, admin_headers) -> None:
    client.post(
        "/api/contact",
        json={"name": "Ana", "email": "ana@devmart.sr", "message": "Please call me back."},
    )

    assert client.get("/api/admin/contact-submissions", headers=editor_headers).status_code == 403
    listed = client.get("/api/admin/contact-submissions", headers=admin_headers)
    assert listed.status_code == 200
    assert len(listed.json()) == 1

    exported = client.get("/api/admin/contact-submissions/export", headers=admin_headers)
    assert exported.status_code == 200
    assert exported.headers["content-type"].startswith("text/csv")
    assert "contact_submissions_" in exported.headers["content-disposition"]


def test_export_without_rows_is_404(client, admin_headers) -> None:
    response = client.get("/api/admin/contact-submissions/export", headers=admin_headers)

    assert response.status_code == 404
    assert response.json()["detail"]["failure_reason"] == "no_data"


def test_editor_manages_content_and_public_sees_published(client, editor_headers) -> None:
    created = client.post(
        "/api/admin/content/services",
        json={"title": "Web Development", "excerpt": "Sites that sell"},
        headers=editor_headers,
    )
    assert created.status_code == 201
    item = created.json()
    assert item["slug"] == "web-development"
    assert client.get("/api/content/services").json() == []

    published = client.put(
        f"/api/admin/content/services/{item['id']}",
        json={"status": "published"},
        headers=editor_headers,
    )
    assert published.status_code == 200
    assert published.json()["published_at"] is not None

    public = client.get("/api/content/services/web-development")
    assert public.status_code == 200
    assert public.json()["title"] == "Web Development"


def test_unknown_kind_and_missing_slug_are_404(client) -> None:
    assert client.get("/api/content/invoices").status_code == 404
    assert client.get("/api/content/pages/nope").status_code == 404


def test_admin_routes_require_token(client) -> None:
    response = client.post("/api/admin/content/pages", json={"title": "About"})

    assert response.status_code == 401
    assert response.json()["detail"]["failure_reason"] == "missing_token"


def test_only_admin_can_delete(client, editor_headers, admin_headers) -> None:
    item = client.post("/api/admin/content/pages", json={"title": "About"}, headers=editor_headers).json()

    assert client.delete(f"/api/admin/content/pages/{item['id']}", headers=editor_headers).status_code == 403
    assert client.delete(f"/api/admin/content/pages/{item['id']}", headers=admin_headers).status_code == 204
    assert client.get(f"/api/admin/content/pages/{item['id']}", headers=admin_headers).status_code == 404


def test_project_image_routes(client, editor_headers) -> None:
    project = client.post(
        "/api/admin/content/projects",
        json={"title": "Shop", "status": "published"},
        headers=editor_headers,
    ).json()

    image = client.post(
        f"/api/admin/projects/{project['id']}/images",
        json={"url": "/media/shop.png", "alt": "Shop"},
        headers=editor_headers,
    )
    assert image.status_code == 201

    reordered = client.put(
        f"/api/admin/project-images/{image.json()['id']}/order",
        json={"sort_order": 3},
        headers=editor_headers,
    )
    assert reordered.json()["sort_order"] == 3

    public = client.get("/api/content/projects/shop").json()
    assert public["images"][0]["url"] == "/media/shop.png"

    missing = client.post(
        "/api/admin/projects/unknown/images",
        json={"url": "/media/x.png"},
        headers=editor_headers,
    )
    assert missing.status_code == 404

    deleted = client.delete(f"/api/admin/project-images/{image.json()['id']}", headers=editor_headers)
    assert deleted.status_code == 204


def test_content_export(client, editor_headers) -> None:
    client.post("/api/admin/content/blog_posts", json={"title": "Hello", "tags": ["a", "b"]}, headers=editor_headers)

    response = client.get("/api/admin/content/blog_posts/export", headers=editor_headers)

    assert response.status_code == 200
    body = response.content.decode("utf-8-sig")
    assert body.splitlines()[0] == "id,title,slug,status,tags,published_at,created_at"
    assert '"a,b"' in body


def test_public_faqs_empty(client) -> None:
    response = client.get("/api/faqs")

    assert response.status_code == 200
    assert response.json() == []


def test_blog_category_assignment(client, editor_headers, admin_headers) -> None:
    created = client.post("/api/admin/blog-categories", json={"name": "Branding"}, headers=editor_headers)
    assert created.status_code == 201
    category = created.json()
    assert category["slug"] == "branding"
    assert client.get("/api/blog/categories").json() == [category]

    post = client.post(
        "/api/admin/content/blog_posts",
        json={"title": "Logo refresh", "status": "published", "category_ids": [category["id"]]},
        headers=editor_headers,
    )
    assert post.status_code == 201
    assert post.json()["categories"] == [category]
    public = client.get("/api/content/blog_posts/logo-refresh").json()
    assert public["categories"] == [category]

    bad = client.put(
        f"/api/admin/content/blog_posts/{post.json()['id']}",
        json={"category_ids": ["nope"]},
        headers=editor_headers,
    )
    assert bad.status_code == 400

    assert client.delete(f"/api/admin/blog-categories/{category['id']}", headers=editor_headers).status_code == 403
    assert client.delete(f"/api/admin/blog-categories/{category['id']}", headers=admin_headers).status_code == 204
    assert client.get("/api/content/blog_posts/logo-refresh").json()["categories"] == []


def test_faq_admin_routes(client, editor_headers, admin_headers) -> None:
    assert client.get("/api/admin/faqs").status_code == 401

    created = client.post(
        "/api/admin/faqs",
        json={"question": "Do you offer maintenance?", "answer": "Monthly plans.", "status": "published"},
        headers=editor_headers,
    )
    assert created.status_code == 201
    faq = created.json()
    assert faq["slug"] == "do-you-offer-maintenance"
    assert [item["id"] for item in client.get("/api/faqs").json()] == [faq["id"]]

    updated = client.put(f"/api/admin/faqs/{faq['id']}", json={"status": "draft"}, headers=editor_headers)
    assert updated.status_code == 200
    assert client.get("/api/faqs").json() == []
    assert [item["status"] for item in client.get("/api/admin/faqs", headers=editor_headers).json()] == ["draft"]

    assert client.post("/api/admin/faqs", json={"question": "", "answer": "x"}, headers=editor_headers).status_code == 422
    assert client.put("/api/admin/faqs/missing", json={"answer": "x"}, headers=editor_headers).status_code == 404
    assert client.delete(f"/api/admin/faqs/{faq['id']}", headers=editor_headers).status_code == 403
    assert client.delete(f"/api/admin/faqs/{faq['id']}", headers=admin_headers).status_code == 204
    assert client.delete(f"/api/admin/faqs/{faq['id']}", headers=admin_headers).status_code == 404
