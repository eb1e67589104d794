"""Quote intake rules and admin review actions."""

from __future__ import annotations

from collections.abc import Callable
from dataclasses import dataclass
from datetime import datetime, timedelta

import structlog

from ..exceptions import ValidationError
from .quotes_repository import QuotesRepository
from .quotes_schemas import Quote, QuoteCreate

logger = structlog.get_logger(__name__)

DUPLICATE_WINDOW = timedelta(hours=24)


class DuplicateQuoteError(ValidationError):
    """Raised when the same email already submitted a quote within the window."""


@dataclass(slots=True)
class QuoteService:
    repo: QuotesRepository
    clock: Callable[[], datetime] = datetime.utcnow

    def submit(
        self,
        payload: QuoteCreate,
        *,
        user_id: str | None = None,
        ip_address: str | None = None,
        user_agent: str | None = None,
    ) -> Quote:
        email = payload.email.strip().lower()
        if self.repo.has_recent_from(email, self.clock() - DUPLICATE_WINDOW):
            logger.warning("quotes.duplicate", email=email)
            raise DuplicateQuoteError(
                "You have already submitted a quote request recently. "
                "Please check your email or contact us directly."
            )

        values = {
            "user_id": user_id,
            "email": email,
            "name": payload.name.strip(),
            "company": payload.company.strip() if payload.company else None,
            "phone": payload.phone.strip() if payload.phone else None,
            "service_type": payload.service_type,
            "project_scope": payload.project_scope.strip(),
            "budget_range": payload.budget_range,
            "timeline": payload.timeline,
            "additional_requirements": (
                payload.additional_requirements.strip() if payload.additional_requirements else None
            ),
            "ip_address": ip_address,
            "user_agent": user_agent[:500] if user_agent else None,
        }
        quote = self.repo.create(values, activity_notes=f"Quote request submitted from {ip_address or 'unknown'}")
        logger.info("quotes.submitted", quote_id=quote.id, service_type=quote.service_type)
        return quote

    def list_quotes(self, *, status: str | None = None) -> list[Quote]:
        return self.repo.list_all(status=status)

    def get(self, quote_id: str) -> Quote:
        return self.repo.get(quote_id)

    def change_status(self, quote_id: str, status: str, *, user_id: str | None, notes: str | None = None) -> Quote:
        quote = self.repo.change_status(quote_id, status, user_id=user_id, notes=notes)
        logger.info("quotes.status_changed", quote_id=quote_id, status=status, user_id=user_id)
        return quote

    def add_note(self, quote_id: str, notes: str, *, user_id: str | None) -> Quote:
        quote = self.repo.add_note(quote_id, notes, user_id=user_id)
        logger.info("quotes.note_added", quote_id=quote_id, user_id=user_id)
        return quote
