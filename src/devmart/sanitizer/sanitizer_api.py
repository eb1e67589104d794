"""``sanitize-html`` function endpoint."""

from __future__ import annotations

from typing import Any

import structlog
from fastapi import APIRouter, Request, status
from fastapi.responses import JSONResponse

from ..auth.auth_service import AuthError
from ..backend.backend_base import AuthBackend
from .sanitizer_service import SanitizerService

logger = structlog.get_logger(__name__)

router = APIRouter(prefix="/functions/v1", tags=["functions"])

SANITIZE_ROLES = ("admin", "editor")


def _error(status_code: int, message: str) -> JSONResponse:
    return JSONResponse(status_code=status_code, content={"error": message})


@router.post("/sanitize-html")
async def sanitize_html_endpoint(request: Request) -> JSONResponse:
    auth_backend: AuthBackend = request.app.state.auth_backend
    service: SanitizerService = request.app.state.sanitizer_service

    try:
        header = request.headers.get("Authorization")
        if not header:
            return _error(status.HTTP_401_UNAUTHORIZED, "Authorization header required")

        try:
            user = await auth_backend.get_user(header.replace("Bearer ", "", 1).strip())
        except AuthError:
            return _error(status.HTTP_401_UNAUTHORIZED, "Invalid authorization")

        if user.role not in SANITIZE_ROLES:
            return _error(status.HTTP_403_FORBIDDEN, "Insufficient permissions")

        html = _extract_html(await _read_json(request))
        if not html:
            return _error(status.HTTP_400_BAD_REQUEST, "HTML content required")

        result = await service.sanitize(html, user)
    except Exception as exc:
        logger.exception("sanitizer.request_failed")
        return _error(status.HTTP_500_INTERNAL_SERVER_ERROR, str(exc))

    return JSONResponse(
        content={
            "sanitized": result.sanitized,
            "modified": result.modified,
            "message": "HTML was sanitized for security" if result.modified else "HTML is clean",
        }
    )


async def _read_json(request: Request) -> Any:
    try:
        return await request.json()
    except ValueError:
        return None


def _extract_html(payload: Any) -> str | None:
    if not isinstance(payload, dict):
        return None
    html = payload.get("html")
    return html if isinstance(html, str) else None
