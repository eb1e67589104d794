"""Narrow interfaces over the hosted backend subsystems.

The database side is covered by the SQLAlchemy repositories. The remaining
subsystems (auth, object storage, serverless functions) are reached through
the adapters declared here so that concrete backends stay pluggable.
"""

from __future__ import annotations

from abc import ABC, abstractmethod
from dataclasses import dataclass
from typing import Any


@dataclass(slots=True)
class AuthUser:
    """Identity resolved from a bearer token."""

    id: str
    email: str
    role: str


class AuthBackend(ABC):
    """Token validation and session lookups."""

    @abstractmethod
    async def get_session(self) -> dict[str, Any]:
        """Return auth service session metadata (used as a liveness check)."""

    @abstractmethod
    async def get_user(self, token: str) -> AuthUser:
        """Resolve the user owning ``token`` or raise an auth error."""


class StorageBackend(ABC):
    """Bucket-oriented object storage."""

    @abstractmethod
    async def list_buckets(self) -> list[str]:
        """Return names of available buckets."""


class FunctionsBackend(ABC):
    """Serverless function invocation."""

    @abstractmethod
    async def invoke(self, name: str, body: dict[str, Any]) -> dict[str, Any]:
        """Invoke function ``name`` with JSON ``body`` and return its JSON reply."""

    @abstractmethod
    async def ping(self) -> bool:
        """Return True when the functions endpoint answers a lightweight request."""
