"""Content lifecycle rules on top of the repositories."""

from __future__ import annotations

import asyncio
from dataclasses import dataclass
from datetime import datetime
from typing import Any

import structlog

from ..exceptions import ValidationError
from ..performance.query_cache import QueryPerformanceManager
from .cms_export import EXPORT_PRESETS, export_large_csv, export_preset
from .cms_repository import (
    BlogCategoriesRepository,
    ContactSubmissionsRepository,
    ContentRepository,
    FAQRepository,
)
from .cms_schemas import (
    BlogCategory,
    ContactSubmission,
    ContactSubmissionCreate,
    ContentItem,
    FAQAdminItem,
    FAQItem,
)
from .cms_slugs import ensure_unique_slug, generate_slug

logger = structlog.get_logger(__name__)

PUBLIC_CACHE_TTL_SECONDS = 300.0


def _unique_slug(repo: Any, source: str, *, exclude_id: str | None = None) -> str:
    base = generate_slug(source)
    if not base:
        raise ValidationError("Slug cannot be derived from the given title")
    return ensure_unique_slug(repo.session_factory, repo.model, base, exclude_id=exclude_id)


@dataclass(slots=True)
class ContentService:
    """Admin CRUD plus cached public reads for one content kind."""

    repo: ContentRepository
    query_manager: QueryPerformanceManager
    cache_ttl: float = PUBLIC_CACHE_TTL_SECONDS

    @property
    def kind(self) -> str:
        return self.repo.kind

    @property
    def cache_prefix(self) -> str:
        return f"content:{self.kind}:"

    def list_all(self) -> list[ContentItem]:
        return self.repo.list_all()

    def get(self, item_id: str) -> ContentItem:
        return self.repo.get(item_id)

    def create(self, values: dict[str, Any]) -> ContentItem:
        data = dict(values)
        data["slug"] = _unique_slug(self.repo, data.get("slug") or data["title"])
        if data.get("status") == "published":
            data["published_at"] = datetime.utcnow()
        item = self.repo.create(data)
        self._invalidate()
        logger.info("content.created", kind=self.kind, id=item.id, slug=item.slug, status=item.status)
        return item

    def update(self, item_id: str, values: dict[str, Any]) -> ContentItem:
        current = self.repo.get(item_id)
        data = dict(values)
        if data.get("slug"):
            data["slug"] = _unique_slug(self.repo, data["slug"], exclude_id=item_id)
        else:
            data.pop("slug", None)
        if data.get("status") == "published" and current.status != "published":
            data["published_at"] = datetime.utcnow()
        item = self.repo.update(item_id, data)
        self._invalidate()
        logger.info("content.updated", kind=self.kind, id=item_id, status=item.status)
        return item

    def delete(self, item_id: str) -> None:
        self.repo.delete(item_id)
        self._invalidate()
        logger.info("content.deleted", kind=self.kind, id=item_id)

    async def list_published(self) -> list[ContentItem]:
        return await self.query_manager.execute(
            lambda: asyncio.to_thread(self.repo.list_published),
            enable_caching=True,
            cache_key=f"{self.cache_prefix}published",
            cache_ttl=self.cache_ttl,
        )

    async def get_published(self, slug: str) -> ContentItem:
        return await self.query_manager.execute(
            lambda: asyncio.to_thread(self.repo.get_published_by_slug, slug),
            enable_caching=True,
            cache_key=f"{self.cache_prefix}slug:{slug}",
            cache_ttl=self.cache_ttl,
        )

    def export_csv(self) -> tuple[str, str]:
        rows = [item.model_dump() for item in self.repo.list_all()]
        return export_preset(self.kind, rows)

    def _invalidate(self) -> None:
        self.query_manager.clear_cache(self.cache_prefix)


@dataclass(slots=True)
class ContactService:
    repo: ContactSubmissionsRepository
    export_chunk_size: int = 1000

    def submit(self, payload: ContactSubmissionCreate, *, ip: str | None = None) -> ContactSubmission:
        submission = self.repo.create(
            name=payload.name.strip(),
            email=payload.email.strip().lower(),
            subject=payload.subject.strip() if payload.subject else None,
            message=payload.message.strip(),
            ip=ip,
        )
        logger.info("contact.submitted", id=submission.id)
        return submission

    def list_submissions(self, *, offset: int = 0, limit: int = 100) -> list[ContactSubmission]:
        return self.repo.list_page(offset=offset, limit=limit)

    async def export_csv(self) -> tuple[str, str]:
        total = await asyncio.to_thread(self.repo.count)

        async def fetch(offset: int, limit: int) -> list[dict[str, Any]]:
            page = await asyncio.to_thread(self.repo.list_page, offset=offset, limit=limit)
            return [row.model_dump() for row in page]

        filename, headers = EXPORT_PRESETS["contact_submissions"]
        return await export_large_csv(
            fetch,
            total,
            filename,
            chunk_size=self.export_chunk_size,
            custom_headers=headers,
        )


@dataclass(slots=True)
class FAQService:
    repo: FAQRepository
    query_manager: QueryPerformanceManager
    cache_ttl: float = PUBLIC_CACHE_TTL_SECONDS

    async def list_published(self) -> list[FAQItem]:
        return await self.query_manager.execute(
            lambda: asyncio.to_thread(self.repo.list_published),
            enable_caching=True,
            cache_key="faqs:published",
            cache_ttl=self.cache_ttl,
        )

    def list_all(self) -> list[FAQAdminItem]:
        return self.repo.list_all()

    def create(self, values: dict[str, Any]) -> FAQAdminItem:
        data = dict(values)
        data["slug"] = _unique_slug(self.repo, data.get("slug") or data["question"])
        if data.get("sort_order") is None:
            data["sort_order"] = self.repo.next_sort_order()
        faq = self.repo.create(data)
        self._invalidate()
        logger.info("faq.created", id=faq.id, slug=faq.slug, status=faq.status)
        return faq

    def update(self, faq_id: str, values: dict[str, Any]) -> FAQAdminItem:
        self.repo.get(faq_id)
        data = {key: value for key, value in values.items() if value is not None}
        if "slug" in data:
            data["slug"] = _unique_slug(self.repo, data["slug"], exclude_id=faq_id)
        faq = self.repo.update(faq_id, data)
        self._invalidate()
        logger.info("faq.updated", id=faq_id, status=faq.status)
        return faq

    def delete(self, faq_id: str) -> None:
        self.repo.delete(faq_id)
        self._invalidate()
        logger.info("faq.deleted", id=faq_id)

    def _invalidate(self) -> None:
        self.query_manager.clear_cache("faqs:")


@dataclass(slots=True)
class BlogCategoryService:
    repo: BlogCategoriesRepository
    query_manager: QueryPerformanceManager

    def list_all(self) -> list[BlogCategory]:
        return self.repo.list_all()

    def create(self, name: str, slug: str | None = None) -> BlogCategory:
        category = self.repo.create(name=name.strip(), slug=_unique_slug(self.repo, slug or name))
        logger.info("blog_category.created", id=category.id, slug=category.slug)
        return category

    def delete(self, category_id: str) -> None:
        self.repo.delete(category_id)
        # Cached posts embed their categories.
        self.query_manager.clear_cache("content:blog_posts:")
        logger.info("blog_category.deleted", id=category_id)
