"""Auth backend adapter built on the JWT service and the profiles table."""

from __future__ import annotations

import asyncio
from dataclasses import dataclass
from typing import Any

from ..backend.backend_base import AuthBackend, AuthUser
from .auth_service import AuthService, InvalidTokenError
from .profiles_repository import ProfilesRepository


@dataclass(slots=True)
class JwtAuthBackend(AuthBackend):
    service: AuthService
    profiles: ProfilesRepository

    async def get_session(self) -> dict[str, Any]:
        count = await asyncio.to_thread(self.profiles.count)
        return {"profiles": count}

    async def get_user(self, token: str) -> AuthUser:
        payload = self.service.validate_token(token)
        profile = await asyncio.to_thread(self.profiles.get, str(payload["sub"]))
        if profile is None or profile.disabled:
            raise InvalidTokenError("Token subject no longer exists")
        return AuthUser(id=profile.id, email=profile.email, role=profile.role)
