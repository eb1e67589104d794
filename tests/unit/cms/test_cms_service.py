from __future__ import annotations

import asyncio

import pytest

from devmart.cms.cms_export import BOM
from devmart.cms.cms_repository import (
    BlogCategoriesRepository,
    ContactSubmissionsRepository,
    ContentRepository,
    FAQRepository,
    ProjectImagesRepository,
)
from devmart.cms.cms_schemas import ContactSubmissionCreate
from devmart.cms.cms_service import BlogCategoryService, ContactService, ContentService, FAQService
from devmart.cms.cms_slugs import ensure_unique_slug, generate_slug
from devmart.db.db_models import FAQModel, ServiceModel
from devmart.exceptions import NotFoundError, ValidationError
from devmart.performance.query_cache import QueryPerformanceManager


@pytest.fixture
def query_manager() -> QueryPerformanceManager:
    return QueryPerformanceManager()


def build_service(session_factory, query_manager, kind: str = "services") -> ContentService:
    return ContentService(ContentRepository(session_factory, kind), query_manager)


def test_generate_slug() -> None:
    assert generate_slug("Web Development & SEO!") == "web-development-seo"
    assert generate_slug("") == ""


def test_unique_slug_appends_counter(session_factory, query_manager) -> None:
    service = build_service(session_factory, query_manager)

    first = service.create({"title": "Web Design"})
    second = service.create({"title": "Web Design"})
    third = service.create({"title": "Web design"})

    assert [first.slug, second.slug, third.slug] == ["web-design", "web-design-2", "web-design-3"]


def test_unique_slug_ignores_own_row(session_factory, query_manager) -> None:
    service = build_service(session_factory, query_manager)
    item = service.create({"title": "Branding"})

    assert ensure_unique_slug(session_factory, ServiceModel, "branding", exclude_id=item.id) == "branding"
    assert service.update(item.id, {"slug": "Branding"}).slug == "branding"


def test_untitled_slug_is_rejected(session_factory, query_manager) -> None:
    service = build_service(session_factory, query_manager)

    with pytest.raises(ValidationError):
        service.create({"title": "!!!"})


def test_published_at_is_set_on_first_publish_only(session_factory, query_manager) -> None:
    service = build_service(session_factory, query_manager, "blog_posts")
    draft = service.create({"title": "Launch notes", "tags": ["news"]})
    assert draft.published_at is None
    assert draft.tags == ["news"]

    published = service.update(draft.id, {"status": "published"})
    assert published.published_at is not None

    edited = service.update(draft.id, {"status": "published", "excerpt": "Updated"})
    assert edited.published_at == published.published_at


def test_public_reads_are_cached_and_invalidated(session_factory, query_manager) -> None:
    service = build_service(session_factory, query_manager)
    service.create({"title": "SEO", "status": "published"})

    first = asyncio.run(service.list_published())
    assert [item.slug for item in first] == ["seo"]
    assert "content:services:published" in query_manager.cache_stats()["entries"]

    service.create({"title": "Ads", "status": "published"})
    assert query_manager.cache_stats()["size"] == 0

    second = asyncio.run(service.list_published())
    assert {item.slug for item in second} == {"seo", "ads"}


def test_drafts_are_not_public(session_factory, query_manager) -> None:
    service = build_service(session_factory, query_manager)
    service.create({"title": "Hidden"})

    assert asyncio.run(service.list_published()) == []
    with pytest.raises(NotFoundError):
        asyncio.run(service.get_published("hidden"))


def test_delete_removes_item(session_factory, query_manager) -> None:
    service = build_service(session_factory, query_manager)
    item = service.create({"title": "Temp"})

    service.delete(item.id)

    with pytest.raises(NotFoundError):
        service.get(item.id)


def test_export_uses_kind_preset(session_factory, query_manager) -> None:
    service = build_service(session_factory, query_manager, "projects")
    service.create({"title": "Shop, Inc. site"})

    filename, content = service.export_csv()

    assert filename.startswith("projects_") and filename.endswith(".csv")
    lines = content.removeprefix(BOM).splitlines()
    assert lines[0] == "id,title,slug,status,published_at,created_at"
    assert '"Shop, Inc. site"' in lines[1]


def test_project_images_get_sequential_order(session_factory, query_manager) -> None:
    service = build_service(session_factory, query_manager, "projects")
    project = service.create({"title": "Portfolio"})
    images = ProjectImagesRepository(session_factory)

    first = images.add(project.id, url="/media/a.png")
    second = images.add(project.id, url="/media/b.png")
    images.update_order(first.id, 5)

    assert [first.sort_order, second.sort_order] == [0, 1]
    assert [image.url for image in images.list_for_project(project.id)] == ["/media/b.png", "/media/a.png"]
    assert [image.url for image in service.get(project.id).images] == ["/media/b.png", "/media/a.png"]

    images.delete(second.id)
    with pytest.raises(NotFoundError):
        images.delete(second.id)
    with pytest.raises(NotFoundError):
        images.add("missing", url="/media/c.png")


def test_contact_submission_and_export(session_factory) -> None:
    service = ContactService(ContactSubmissionsRepository(session_factory), export_chunk_size=1)
    payload = ContactSubmissionCreate(
        name="  Ana  ",
        email="Ana@Example.com",
        subject="Quote",
        message="We need a new website soon.",
    )

    submission = service.submit(payload, ip="127.0.0.1")
    service.submit(payload.model_copy(update={"subject": None}))

    assert submission.name == "Ana"
    assert submission.email == "ana@example.com"
    assert len(service.list_submissions()) == 2

    filename, content = asyncio.run(service.export_csv())
    lines = content.removeprefix(BOM).splitlines()
    assert filename.startswith("contact_submissions_")
    assert lines[0] == "id,name,email,subject,created_at"
    assert len(lines) == 3


def test_faqs_only_published_in_order(session_factory, query_manager) -> None:
    with session_factory() as session:
        session.add_all(
            [
                FAQModel(question="Second?", answer="B", slug="second", status="published", sort_order=2),
                FAQModel(question="First?", answer="A", slug="first", status="published", sort_order=1),
                FAQModel(question="Draft?", answer="C", slug="draft", status="draft", sort_order=0),
            ]
        )
        session.commit()
    service = FAQService(FAQRepository(session_factory), query_manager)

    faqs = asyncio.run(service.list_published())

    assert [faq.slug for faq in faqs] == ["first", "second"]
    assert "faqs:published" in query_manager.cache_stats()["entries"]


def test_blog_posts_carry_assigned_categories(session_factory, query_manager) -> None:
    categories = BlogCategoryService(BlogCategoriesRepository(session_factory), query_manager)
    design = categories.create("Web Design")
    news = categories.create("Agency News")
    posts = build_service(session_factory, query_manager, "blog_posts")

    post = posts.create({"title": "Launch", "status": "published", "category_ids": [design.id, design.id]})
    assert [category.slug for category in post.categories] == ["web-design"]

    updated = posts.update(post.id, {"category_ids": [news.id]})
    assert [category.name for category in updated.categories] == ["Agency News"]

    untouched = posts.update(post.id, {"title": "Launch day"})
    assert [category.id for category in untouched.categories] == [news.id]

    public = asyncio.run(posts.get_published(post.slug))
    assert [category.id for category in public.categories] == [news.id]


def test_unknown_category_is_rejected(session_factory, query_manager) -> None:
    posts = build_service(session_factory, query_manager, "blog_posts")

    with pytest.raises(ValidationError, match="missing-id"):
        posts.create({"title": "Orphan", "category_ids": ["missing-id"]})


def test_categories_only_apply_to_blog_posts(session_factory, query_manager) -> None:
    with pytest.raises(ValidationError):
        build_service(session_factory, query_manager).create({"title": "SEO", "category_ids": []})


def test_deleting_category_detaches_posts(session_factory, query_manager) -> None:
    categories = BlogCategoryService(BlogCategoriesRepository(session_factory), query_manager)
    design = categories.create("Design", slug="design")
    duplicate = categories.create("Design again", slug="design")
    posts = build_service(session_factory, query_manager, "blog_posts")
    post = posts.create({"title": "Colour", "category_ids": [design.id]})

    categories.delete(design.id)

    assert duplicate.slug == "design-2"
    assert posts.get(post.id).categories == []
    assert [category.slug for category in categories.list_all()] == ["design-2"]
    with pytest.raises(NotFoundError):
        categories.delete(design.id)


def test_faq_admin_crud_invalidates_public_cache(session_factory, query_manager) -> None:
    service = FAQService(FAQRepository(session_factory), query_manager)

    first = service.create({"question": "How long does a website take?", "answer": "Six weeks.", "status": "published"})
    second = service.create({"question": "Do you host?", "answer": "Yes.", "status": "draft"})
    assert first.slug == "how-long-does-a-website-take"
    assert (first.sort_order, second.sort_order) == (0, 1)
    assert [faq.id for faq in asyncio.run(service.list_published())] == [first.id]

    service.update(second.id, {"status": "published", "sort_order": None})
    assert "faqs:published" not in query_manager.cache_stats()["entries"]
    assert [faq.id for faq in asyncio.run(service.list_published())] == [first.id, second.id]

    service.delete(first.id)
    assert [faq.id for faq in service.list_all()] == [second.id]
    with pytest.raises(NotFoundError):
        service.update(first.id, {"answer": "Gone"})
