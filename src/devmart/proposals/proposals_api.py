"""Admin proposal template routes."""

from __future__ import annotations

from fastapi import APIRouter, Depends, HTTPException, Request, Response, status

from ..auth.auth_dependencies import require_editor_user
from ..exceptions import NotFoundError
from .proposals_schemas import ProposalTemplate, ProposalTemplateCreate
from .proposals_service import ProposalTemplateService

router = APIRouter(prefix="/api/admin/proposal-templates", tags=["proposals"])


def get_template_service(request: Request) -> ProposalTemplateService:
    try:
        return request.app.state.proposal_template_service  # type: ignore[attr-defined]
    except AttributeError as exc:  # pragma: no cover - defensive path
        raise RuntimeError("ProposalTemplateService is not configured") from exc


def _not_found(exc: Exception) -> HTTPException:
    return HTTPException(
        status_code=status.HTTP_404_NOT_FOUND,
        detail={"status": "error", "failure_reason": "not_found", "message": str(exc)},
    )


@router.get("", response_model=list[ProposalTemplate])
def list_templates(
    _: dict = Depends(require_editor_user),
    service: ProposalTemplateService = Depends(get_template_service),
) -> list[ProposalTemplate]:
    return service.list_templates()


@router.post("", response_model=ProposalTemplate, status_code=status.HTTP_201_CREATED)
def create_template(
    payload: ProposalTemplateCreate,
    claims: dict = Depends(require_editor_user),
    service: ProposalTemplateService = Depends(get_template_service),
) -> ProposalTemplate:
    return service.create(payload, user_id=claims.get("sub"))


@router.post("/{template_id}/duplicate", response_model=ProposalTemplate, status_code=status.HTTP_201_CREATED)
def duplicate_template(
    template_id: str,
    claims: dict = Depends(require_editor_user),
    service: ProposalTemplateService = Depends(get_template_service),
) -> ProposalTemplate:
    try:
        return service.duplicate_template(template_id, user_id=claims.get("sub"))
    except NotFoundError as exc:
        raise _not_found(exc) from exc


@router.post("/{template_id}/toggle-archive", response_model=ProposalTemplate)
def toggle_archive(
    template_id: str,
    _: dict = Depends(require_editor_user),
    service: ProposalTemplateService = Depends(get_template_service),
) -> ProposalTemplate:
    try:
        return service.toggle_template_archive(template_id)
    except NotFoundError as exc:
        raise _not_found(exc) from exc


@router.get("/{template_id}/export")
def export_template(
    template_id: str,
    _: dict = Depends(require_editor_user),
    service: ProposalTemplateService = Depends(get_template_service),
) -> Response:
    try:
        filename, content = service.export_template_as_json(template_id)
    except NotFoundError as exc:
        raise _not_found(exc) from exc
    return Response(
        content=content.encode("utf-8"),
        media_type="application/json; charset=utf-8",
        headers={"Content-Disposition": f'attachment; filename="{filename}"'},
    )
