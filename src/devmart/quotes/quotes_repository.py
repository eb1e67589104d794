"""Persistence for quotes and their activity log."""

from __future__ import annotations

from collections.abc import Callable
from datetime import datetime
from typing import Any

from sqlalchemy import select
from sqlalchemy.orm import Session, selectinload

from ..db.db_models import QuoteActivityModel, QuoteModel
from ..exceptions import ensure_found, handle_sqlalchemy_errors
from .quotes_schemas import Quote


class QuotesRepository:
    def __init__(self, session_factory: Callable[[], Session]) -> None:
        self._session_factory = session_factory

    def has_recent_from(self, email: str, since: datetime) -> bool:
        with self._session_factory() as session:
            stmt = (
                select(QuoteModel.id)
                .where(QuoteModel.email == email, QuoteModel.created_at >= since)
                .limit(1)
            )
            return session.execute(stmt).first() is not None

    def create(self, values: dict[str, Any], *, activity_notes: str | None = None) -> Quote:
        now = datetime.utcnow()
        quote = QuoteModel(**values, status="pending", priority="normal", created_at=now, updated_at=now)
        with handle_sqlalchemy_errors(entity="quote"), self._session_factory() as session:
            session.add(quote)
            session.flush()
            session.add(
                QuoteActivityModel(
                    quote_id=quote.id,
                    user_id=values.get("user_id"),
                    activity_type="created",
                    new_value="pending",
                    notes=activity_notes,
                    created_at=now,
                )
            )
            session.commit()
        return self.get(quote.id)

    def get(self, quote_id: str) -> Quote:
        with self._session_factory() as session:
            stmt = (
                select(QuoteModel)
                .options(selectinload(QuoteModel.activities))
                .where(QuoteModel.id == quote_id)
            )
            row = ensure_found(session.execute(stmt).scalar_one_or_none(), entity="quote", identifier=quote_id)
            return Quote.model_validate(row)

    def list_all(self, *, status: str | None = None) -> list[Quote]:
        with self._session_factory() as session:
            stmt = select(QuoteModel).options(selectinload(QuoteModel.activities))
            if status:
                stmt = stmt.where(QuoteModel.status == status)
            rows = session.execute(stmt.order_by(QuoteModel.created_at.desc())).scalars()
            return [Quote.model_validate(row) for row in rows]

    def change_status(self, quote_id: str, status: str, *, user_id: str | None, notes: str | None) -> Quote:
        with handle_sqlalchemy_errors(entity="quote"), self._session_factory() as session:
            quote = ensure_found(session.get(QuoteModel, quote_id), entity="quote", identifier=quote_id)
            old_status = quote.status
            now = datetime.utcnow()
            quote.status = status
            quote.updated_at = now
            session.add(
                QuoteActivityModel(
                    quote_id=quote_id,
                    user_id=user_id,
                    activity_type="status_changed",
                    old_value=old_status,
                    new_value=status,
                    notes=notes,
                    created_at=now,
                )
            )
            session.commit()
        return self.get(quote_id)

    def add_note(self, quote_id: str, notes: str, *, user_id: str | None) -> Quote:
        with handle_sqlalchemy_errors(entity="quote"), self._session_factory() as session:
            quote = ensure_found(session.get(QuoteModel, quote_id), entity="quote", identifier=quote_id)
            now = datetime.utcnow()
            quote.admin_notes = f"{quote.admin_notes}\n{notes}" if quote.admin_notes else notes
            quote.updated_at = now
            session.add(
                QuoteActivityModel(
                    quote_id=quote_id,
                    user_id=user_id,
                    activity_type="note_added",
                    notes=notes,
                    created_at=now,
                )
            )
            session.commit()
        return self.get(quote_id)
