"""Slug generation and per-table uniqueness."""

from __future__ import annotations

from collections.abc import Callable
from typing import Any

from slugify import slugify
from sqlalchemy import select
from sqlalchemy.orm import Session


def generate_slug(title: str) -> str:
    return slugify(title or "")


def ensure_unique_slug(
    session_factory: Callable[[], Session],
    model: type[Any],
    base_slug: str,
    *,
    exclude_id: str | None = None,
) -> str:
    """Return ``base_slug`` or the first free ``base_slug-N`` (N starting at 2)."""
    slug = base_slug
    counter = 2
    with session_factory() as session:
        while True:
            stmt = select(model.id).where(model.slug == slug)
            if exclude_id:
                stmt = stmt.where(model.id != exclude_id)
            if session.execute(stmt.limit(1)).first() is None:
                return slug
            slug = f"{base_slug}-{counter}"
            counter += 1
