"""Request and response models for content management routes."""

from __future__ import annotations

from datetime import datetime
from typing import Any, Literal

from pydantic import BaseModel, ConfigDict, Field

ContentStatus = Literal["draft", "published"]

EMAIL_PATTERN = r"^[^\s@]+@[^\s@]+\.[^\s@]+$"


class ProjectImage(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    id: str
    project_id: str
    url: str
    alt: str | None = None
    sort_order: int = 0
    created_at: datetime


class BlogCategory(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    id: str
    name: str
    slug: str


class BlogCategoryCreate(BaseModel):
    name: str = Field(min_length=1, max_length=128)
    slug: str | None = Field(default=None, max_length=128)


class ContentItem(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    id: str
    title: str
    slug: str
    excerpt: str | None = None
    body: Any | None = None
    status: ContentStatus
    published_at: datetime | None = None
    seo_title: str | None = None
    seo_description: str | None = None
    og_image: str | None = None
    tags: list[str] | None = None
    images: list[ProjectImage] | None = None
    categories: list[BlogCategory] | None = None
    created_at: datetime
    updated_at: datetime


class ContentCreate(BaseModel):
    title: str = Field(min_length=1, max_length=255)
    slug: str | None = Field(default=None, max_length=255)
    excerpt: str | None = None
    body: Any | None = None
    status: ContentStatus = "draft"
    seo_title: str | None = Field(default=None, max_length=255)
    seo_description: str | None = Field(default=None, max_length=512)
    og_image: str | None = Field(default=None, max_length=512)
    tags: list[str] | None = None
    category_ids: list[str] | None = None


class ContentUpdate(BaseModel):
    title: str | None = Field(default=None, min_length=1, max_length=255)
    slug: str | None = Field(default=None, max_length=255)
    excerpt: str | None = None
    body: Any | None = None
    status: ContentStatus | None = None
    seo_title: str | None = Field(default=None, max_length=255)
    seo_description: str | None = Field(default=None, max_length=512)
    og_image: str | None = Field(default=None, max_length=512)
    tags: list[str] | None = None
    category_ids: list[str] | None = None


class ProjectImageCreate(BaseModel):
    url: str = Field(min_length=1, max_length=1024)
    alt: str | None = Field(default=None, max_length=255)
    sort_order: int | None = Field(default=None, ge=0)


class ProjectImageOrder(BaseModel):
    sort_order: int = Field(ge=0)


class FAQItem(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    id: str
    question: str
    answer: str
    slug: str
    sort_order: int


class FAQAdminItem(FAQItem):
    status: ContentStatus
    created_at: datetime
    updated_at: datetime


class FAQCreate(BaseModel):
    question: str = Field(min_length=1, max_length=512)
    answer: str = Field(min_length=1, max_length=5000)
    slug: str | None = Field(default=None, max_length=255)
    status: ContentStatus = "draft"
    sort_order: int | None = Field(default=None, ge=0)


class FAQUpdate(BaseModel):
    question: str | None = Field(default=None, min_length=1, max_length=512)
    answer: str | None = Field(default=None, min_length=1, max_length=5000)
    slug: str | None = Field(default=None, max_length=255)
    status: ContentStatus | None = None
    sort_order: int | None = Field(default=None, ge=0)


class ContactSubmissionCreate(BaseModel):
    name: str = Field(min_length=2, max_length=100)
    email: str = Field(max_length=255, pattern=EMAIL_PATTERN)
    subject: str | None = Field(default=None, max_length=200)
    message: str = Field(min_length=10, max_length=2000)


class ContactSubmission(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    id: str
    name: str
    email: str
    subject: str | None = None
    message: str
    created_at: datetime
