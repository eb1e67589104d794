"""Quote request routes."""

from __future__ import annotations

from fastapi import APIRouter, Depends, HTTPException, Query, Request, status

from ..auth.auth_dependencies import require_editor_user
from ..exceptions import NotFoundError
from .quotes_schemas import Quote, QuoteCreate, QuoteNoteCreate, QuoteStatus, QuoteStatusUpdate
from .quotes_service import DuplicateQuoteError, QuoteService

router = APIRouter(tags=["quotes"])


def get_quote_service(request: Request) -> QuoteService:
    try:
        return request.app.state.quote_service  # type: ignore[attr-defined]
    except AttributeError as exc:  # pragma: no cover - defensive path
        raise RuntimeError("QuoteService is not configured") from exc


def _not_found(exc: Exception) -> HTTPException:
    return HTTPException(
        status_code=status.HTTP_404_NOT_FOUND,
        detail={"status": "error", "failure_reason": "not_found", "message": str(exc)},
    )


@router.post("/api/quotes", status_code=status.HTTP_201_CREATED)
def submit_quote(
    payload: QuoteCreate,
    request: Request,
    service: QuoteService = Depends(get_quote_service),
) -> dict[str, str]:
    try:
        quote = service.submit(
            payload,
            ip_address=request.client.host if request.client else None,
            user_agent=request.headers.get("user-agent"),
        )
    except DuplicateQuoteError as exc:
        raise HTTPException(
            status_code=status.HTTP_429_TOO_MANY_REQUESTS,
            detail={"status": "error", "failure_reason": "duplicate_quote", "message": str(exc)},
        ) from exc
    return {
        "quote_id": quote.id,
        "message": "Quote request submitted successfully. We'll get back to you within 24 hours.",
    }


@router.get("/api/admin/quotes", response_model=list[Quote])
def list_quotes(
    status_filter: QuoteStatus | None = Query(default=None, alias="status"),
    _: dict = Depends(require_editor_user),
    service: QuoteService = Depends(get_quote_service),
) -> list[Quote]:
    return service.list_quotes(status=status_filter)


@router.get("/api/admin/quotes/{quote_id}", response_model=Quote)
def read_quote(
    quote_id: str,
    _: dict = Depends(require_editor_user),
    service: QuoteService = Depends(get_quote_service),
) -> Quote:
    try:
        return service.get(quote_id)
    except NotFoundError as exc:
        raise _not_found(exc) from exc


@router.put("/api/admin/quotes/{quote_id}/status", response_model=Quote)
def change_quote_status(
    quote_id: str,
    payload: QuoteStatusUpdate,
    claims: dict = Depends(require_editor_user),
    service: QuoteService = Depends(get_quote_service),
) -> Quote:
    try:
        return service.change_status(quote_id, payload.status, user_id=claims.get("sub"), notes=payload.notes)
    except NotFoundError as exc:
        raise _not_found(exc) from exc


@router.post("/api/admin/quotes/{quote_id}/notes", response_model=Quote)
def add_quote_note(
    quote_id: str,
    payload: QuoteNoteCreate,
    claims: dict = Depends(require_editor_user),
    service: QuoteService = Depends(get_quote_service),
) -> Quote:
    try:
        return service.add_note(quote_id, payload.notes, user_id=claims.get("sub"))
    except NotFoundError as exc:
        raise _not_found(exc) from exc
