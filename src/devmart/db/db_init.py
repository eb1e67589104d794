"""Database initialization helpers."""

from __future__ import annotations

from datetime import datetime

from sqlalchemy.engine import Engine
from sqlalchemy.orm import Session, sessionmaker

from .db_models import Base, PageModel

DEFAULT_PAGES = [
    {"title": "Home", "slug": "home"},
    {"title": "About", "slug": "about"},
    {"title": "Contact", "slug": "contact"},
]


def init_db(engine: Engine, session_factory: sessionmaker[Session]) -> None:
    """Create tables and seed the core pages if the database is empty."""
    Base.metadata.create_all(engine)

    with session_factory() as session:
        _seed_pages(session)
        session.commit()


def _seed_pages(session: Session) -> None:
    if session.query(PageModel).count():
        return
    now = datetime.utcnow()
    for page in DEFAULT_PAGES:
        session.add(
            PageModel(
                title=page["title"],
                slug=page["slug"],
                body={"sections": []},
                status="published",
                published_at=now,
                created_at=now,
                updated_at=now,
            )
        )
