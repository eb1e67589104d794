"""Persistence for proposal templates."""

from __future__ import annotations

from collections.abc import Callable
from datetime import datetime
from typing import Any

from sqlalchemy import select
from sqlalchemy.orm import Session

from ..db.db_models import ProposalTemplateModel
from ..exceptions import ensure_found, handle_sqlalchemy_errors
from .proposals_schemas import ProposalTemplate


class ProposalTemplatesRepository:
    def __init__(self, session_factory: Callable[[], Session]) -> None:
        self._session_factory = session_factory

    def list_all(self) -> list[ProposalTemplate]:
        with self._session_factory() as session:
            stmt = select(ProposalTemplateModel).order_by(ProposalTemplateModel.updated_at.desc())
            return [ProposalTemplate.model_validate(row) for row in session.execute(stmt).scalars()]

    def get(self, template_id: str) -> ProposalTemplate:
        with self._session_factory() as session:
            row = ensure_found(
                session.get(ProposalTemplateModel, template_id),
                entity="proposal_template",
                identifier=template_id,
            )
            return ProposalTemplate.model_validate(row)

    def create(self, values: dict[str, Any]) -> ProposalTemplate:
        now = datetime.utcnow()
        status = values.get("status", "draft")
        row = ProposalTemplateModel(**values, is_active=status == "active", created_at=now, updated_at=now)
        with handle_sqlalchemy_errors(entity="proposal_template"), self._session_factory() as session:
            session.add(row)
            session.commit()
        return ProposalTemplate.model_validate(row)

    def set_status(self, template_id: str, status: str) -> ProposalTemplate:
        with handle_sqlalchemy_errors(entity="proposal_template"), self._session_factory() as session:
            row = ensure_found(
                session.get(ProposalTemplateModel, template_id),
                entity="proposal_template",
                identifier=template_id,
            )
            row.status = status
            row.is_active = status == "active"
            row.updated_at = datetime.utcnow()
            session.commit()
            return ProposalTemplate.model_validate(row)
