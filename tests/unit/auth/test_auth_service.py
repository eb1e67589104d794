import asyncio
from datetime import datetime, timedelta, timezone

import jwt
import pytest

from devmart.auth.auth_backend import JwtAuthBackend
from devmart.auth.auth_service import (
    AuthService,
    InsufficientScopeError,
    InvalidCredentialsError,
    InvalidTokenError,
    LoginThrottledError,
    TokenExpiredError,
    hash_password,
)
from devmart.db.db_models import ProfileModel


@pytest.fixture
def editor(profiles_repo):
    return profiles_repo.create(
        email="Editor@Devmart.sr",
        password_hash=hash_password("secret"),
        role="editor",
    )


def test_authenticate_returns_token_for_valid_credentials(auth_service, editor) -> None:
    token, expires_in = auth_service.authenticate("editor@devmart.sr", "secret")

    assert expires_in == 3600
    payload = jwt.decode(token, "test-signing-key", algorithms=["HS256"])
    assert payload["sub"] == editor.id
    assert payload["role"] == "editor"


def test_authenticate_normalizes_email(auth_service, editor) -> None:
    token, _ = auth_service.authenticate("  EDITOR@devmart.sr ", "secret")

    assert token


def test_authenticate_raises_for_invalid_password(auth_service, editor) -> None:
    with pytest.raises(InvalidCredentialsError):
        auth_service.authenticate("editor@devmart.sr", "wrong")


def test_disabled_profile_cannot_login(auth_service, session_factory, editor) -> None:
    with session_factory() as session:
        model = session.get(ProfileModel, editor.id)
        model.disabled = True
        session.commit()

    with pytest.raises(InvalidCredentialsError):
        auth_service.authenticate("editor@devmart.sr", "secret")


def test_authenticate_blocks_after_too_many_failures(auth_service, editor) -> None:
    for _ in range(auth_service.max_failures):
        with pytest.raises(InvalidCredentialsError):
            auth_service.authenticate("editor@devmart.sr", "wrong")

    with pytest.raises(LoginThrottledError):
        auth_service.authenticate("editor@devmart.sr", "secret")

    # simulate block expiry
    state = auth_service._failed_logins["editor@devmart.sr"]  # type: ignore[attr-defined]
    state.blocked_until = datetime.now(timezone.utc) - timedelta(seconds=1)

    token, _ = auth_service.authenticate("editor@devmart.sr", "secret")
    assert token


def test_validate_token_enforces_roles(auth_service, editor) -> None:
    token, _ = auth_service.authenticate("editor@devmart.sr", "secret")

    assert auth_service.validate_token(token, allowed_roles=("admin", "editor"))["role"] == "editor"
    with pytest.raises(InsufficientScopeError):
        auth_service.validate_token(token, allowed_roles=("admin",))


def test_validate_token_rejects_garbage_and_expired(profiles_repo, editor) -> None:
    service = AuthService(
        profiles=profiles_repo,
        signing_key="test-signing-key",
        token_ttl=timedelta(seconds=-5),
    )
    token, _ = service.authenticate("editor@devmart.sr", "secret")

    with pytest.raises(TokenExpiredError):
        service.validate_token(token)
    with pytest.raises(InvalidTokenError):
        service.validate_token("not-a-jwt")


def test_missing_signing_key_is_rejected(profiles_repo) -> None:
    with pytest.raises(RuntimeError):
        AuthService(profiles=profiles_repo, signing_key="", token_ttl=timedelta(hours=1))


def test_jwt_backend_resolves_user(auth_service, profiles_repo, editor) -> None:
    backend = JwtAuthBackend(service=auth_service, profiles=profiles_repo)
    token, _ = auth_service.authenticate("editor@devmart.sr", "secret")

    user = asyncio.run(backend.get_user(token))
    session = asyncio.run(backend.get_session())

    assert user.id == editor.id
    assert user.email == "editor@devmart.sr"
    assert user.role == "editor"
    assert session == {"profiles": 1}
