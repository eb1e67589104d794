"""Create or promote the admin profile.

Reads ``ADMIN_EMAIL`` (default ``info@devmart.sr``) and ``ADMIN_PASSWORD``
plus the usual database settings from the environment.
"""

from __future__ import annotations

import os
import sys

from dotenv import load_dotenv

from devmart.auth.auth_service import hash_password
from devmart.auth.profiles_repository import ProfilesRepository
from devmart.config import load_config

DEFAULT_ADMIN_EMAIL = "info@devmart.sr"


def seed_admin(repo: ProfilesRepository, email: str, password: str) -> str:
    """Return ``created``, ``promoted`` or ``unchanged``."""
    existing = repo.get_by_email(email)
    if existing is None:
        repo.create(email=email, password_hash=hash_password(password), role="admin")
        return "created"
    if existing.role != "admin":
        repo.update_role(existing.id, "admin")
        return "promoted"
    return "unchanged"


def main() -> int:
    load_dotenv(".env.local")
    load_dotenv(".env", override=False)

    email = os.getenv("ADMIN_EMAIL") or DEFAULT_ADMIN_EMAIL
    password = os.getenv("ADMIN_PASSWORD")
    if not password:
        print("ADMIN_PASSWORD environment variable is required", file=sys.stderr)
        return 1

    config = load_config()
    outcome = seed_admin(ProfilesRepository(config.session_factory), email, password)
    print(f"Admin profile {email}: {outcome}")
    return 0


if __name__ == "__main__":
    sys.exit(main())
