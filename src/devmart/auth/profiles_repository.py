"""Persistence for user profiles (identity + role)."""

from __future__ import annotations

from collections.abc import Callable
from datetime import datetime

from sqlalchemy import select
from sqlalchemy.orm import Session

from ..db.db_models import ProfileModel
from ..exceptions import NotFoundError, handle_sqlalchemy_errors

ROLES = ("admin", "editor", "viewer")


class ProfilesRepository:
    def __init__(self, session_factory: Callable[[], Session]) -> None:
        self._session_factory = session_factory

    def get(self, profile_id: str) -> ProfileModel | None:
        with self._session_factory() as session:
            return session.get(ProfileModel, profile_id)

    def get_by_email(self, email: str) -> ProfileModel | None:
        with self._session_factory() as session:
            stmt = select(ProfileModel).where(ProfileModel.email == email.strip().lower())
            return session.execute(stmt).scalar_one_or_none()

    def count(self) -> int:
        with self._session_factory() as session:
            return session.query(ProfileModel).count()

    def list_all(self) -> list[ProfileModel]:
        with self._session_factory() as session:
            stmt = select(ProfileModel).order_by(ProfileModel.created_at.desc())
            return list(session.execute(stmt).scalars())

    def create(self, *, email: str, password_hash: str, role: str = "viewer") -> ProfileModel:
        if role not in ROLES:
            raise ValueError(f"Unknown role '{role}'")
        now = datetime.utcnow()
        model = ProfileModel(
            email=email.strip().lower(),
            password_hash=password_hash,
            role=role,
            created_at=now,
            updated_at=now,
        )
        with self._session_factory() as session, handle_sqlalchemy_errors(entity="profile"):
            session.add(model)
            session.commit()
            session.refresh(model)
        return model

    def update_role(self, profile_id: str, role: str) -> ProfileModel:
        if role not in ROLES:
            raise ValueError(f"Unknown role '{role}'")
        with self._session_factory() as session:
            model = session.get(ProfileModel, profile_id)
            if model is None:
                raise NotFoundError(f"profile '{profile_id}' not found")
            model.role = role
            model.updated_at = datetime.utcnow()
            session.commit()
            session.refresh(model)
            return model
