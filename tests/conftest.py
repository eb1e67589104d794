from __future__ import annotations

import os
import tempfile
from datetime import timedelta
from pathlib import Path

import pytest
from sqlalchemy import create_engine
from sqlalchemy.orm import sessionmaker
from sqlalchemy.pool import StaticPool

os.environ.setdefault("JWT_SIGNING_KEY", "test-signing-key")
os.environ.setdefault("DATABASE_URL", "sqlite://")
os.environ.setdefault("MEDIA_ROOT", str(Path(tempfile.gettempdir()) / "devmart-test-media"))

from devmart.auth.auth_service import AuthService, hash_password  # noqa: E402
from devmart.auth.profiles_repository import ProfilesRepository  # noqa: E402
from devmart.db.db_models import Base  # noqa: E402

TEST_SIGNING_KEY = "test-signing-key"


@pytest.fixture
def session_factory():
    # One shared connection so worker threads (asyncio.to_thread) see the same in-memory DB.
    engine = create_engine(
        "sqlite://",
        future=True,
        connect_args={"check_same_thread": False},
        poolclass=StaticPool,
    )
    Base.metadata.create_all(engine)
    yield sessionmaker(bind=engine, expire_on_commit=False)
    engine.dispose()


@pytest.fixture
def profiles_repo(session_factory) -> ProfilesRepository:
    return ProfilesRepository(session_factory)


@pytest.fixture
def auth_service(profiles_repo) -> AuthService:
    return AuthService(
        profiles=profiles_repo,
        signing_key=TEST_SIGNING_KEY,
        token_ttl=timedelta(hours=1),
    )


@pytest.fixture
def issue_token(profiles_repo, auth_service):
    """Create a profile with ``role`` and return a bearer token for it."""

    def _issue(role: str = "admin", email: str | None = None) -> str:
        address = email or f"{role}@devmart.test"
        if profiles_repo.get_by_email(address) is None:
            profiles_repo.create(email=address, password_hash=hash_password("secret"), role=role)
        token, _ = auth_service.authenticate(address, "secret")
        return token

    return _issue
