"""Profile authentication and JWT issuance."""

from __future__ import annotations

import hashlib
from dataclasses import dataclass, field
from datetime import datetime, timedelta, timezone
from typing import Any, Iterable

import jwt
from jwt import ExpiredSignatureError
from jwt import InvalidTokenError as PyJWTInvalidTokenError
import structlog

from .profiles_repository import ProfilesRepository


logger = structlog.get_logger(__name__)


def _utcnow() -> datetime:
    """Return timezone-aware UTC now."""
    return datetime.now(tz=timezone.utc)


def hash_password(value: str) -> str:
    """Return hex sha256 hash for the provided password."""
    return hashlib.sha256(value.encode("utf-8")).hexdigest()


@dataclass(slots=True)
class FailedLoginState:
    """Tracks consecutive failures and throttle window per email."""

    failures: int = 0
    blocked_until: datetime | None = None


class AuthError(Exception):
    """Base class for auth failures."""


class InvalidCredentialsError(AuthError):
    """Raised when email/password mismatch."""


class LoginThrottledError(AuthError):
    """Raised when user hit throttle limit."""


class InvalidTokenError(AuthError):
    """Raised when token cannot be decoded."""


class TokenExpiredError(AuthError):
    """Raised when token is expired."""


class InsufficientScopeError(AuthError):
    """Raised when the token role is not allowed for the operation."""


@dataclass(slots=True)
class AuthService:
    """Authenticate profiles and issue role-scoped JWT tokens."""

    profiles: ProfilesRepository
    signing_key: str
    token_ttl: timedelta
    max_failures: int = 10
    block_duration: timedelta = timedelta(minutes=15)
    _failed_logins: dict[str, FailedLoginState] = field(default_factory=dict)

    def __post_init__(self) -> None:
        if not self.signing_key:
            raise RuntimeError("JWT_SIGNING_KEY is not configured")

    def authenticate(
        self, email: str, password: str, client_ip: str | None = None
    ) -> tuple[str, int]:
        """Validate credentials and return JWT token + ttl seconds."""
        key = email.strip().lower()
        now = _utcnow()
        state = self._failed_logins.get(key)
        if state and state.blocked_until and now < state.blocked_until:
            logger.warning(
                "auth.login.failure",
                email=key,
                reason="throttled",
                blocked_until=state.blocked_until.isoformat(),
                client_ip=client_ip,
            )
            raise LoginThrottledError("Too many attempts, try later")

        profile = self.profiles.get_by_email(key)
        if profile is None or profile.disabled or profile.password_hash != hash_password(password):
            self._register_failure(key, now)
            logger.warning(
                "auth.login.failure",
                email=key,
                reason="invalid_credentials",
                client_ip=client_ip,
            )
            raise InvalidCredentialsError("Invalid email or password")

        self._reset_failures(key)
        token = self._issue_token(profile.id, now, profile.role)
        expires_in = int(self.token_ttl.total_seconds())
        logger.info(
            "auth.login.success",
            email=key,
            role=profile.role,
            client_ip=client_ip,
            expires_in=expires_in,
        )
        return token, expires_in

    def _register_failure(self, key: str, now: datetime) -> None:
        state = self._failed_logins.get(key)
        if not state:
            state = FailedLoginState()
            self._failed_logins[key] = state
        state.failures += 1
        if state.failures >= self.max_failures:
            state.failures = 0
            state.blocked_until = now + self.block_duration
        else:
            state.blocked_until = None

    def _reset_failures(self, key: str) -> None:
        self._failed_logins.pop(key, None)

    def _issue_token(self, profile_id: str, issued_at: datetime, role: str) -> str:
        payload: dict[str, Any] = {
            "sub": profile_id,
            "role": role,
            "iat": int(issued_at.timestamp()),
            "exp": int((issued_at + self.token_ttl).timestamp()),
        }
        return jwt.encode(payload, self.signing_key, algorithm="HS256")

    def validate_token(
        self, token: str, allowed_roles: Iterable[str] | None = None
    ) -> dict[str, Any]:
        """Decode JWT and ensure its role is one of ``allowed_roles``."""
        try:
            payload: dict[str, Any] = jwt.decode(
                token,
                self.signing_key,
                algorithms=["HS256"],
                options={"require": ["exp", "iat", "sub", "role"]},
            )
        except ExpiredSignatureError as exc:
            raise TokenExpiredError("Token expired") from exc
        except PyJWTInvalidTokenError as exc:
            raise InvalidTokenError("Invalid token") from exc

        if allowed_roles is not None and payload.get("role") not in set(allowed_roles):
            raise InsufficientScopeError("Insufficient role")
        return payload


__all__ = [
    "AuthService",
    "AuthError",
    "InvalidCredentialsError",
    "LoginThrottledError",
    "InvalidTokenError",
    "TokenExpiredError",
    "InsufficientScopeError",
    "hash_password",
]
