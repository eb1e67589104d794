"""Public content reads and admin content management routes."""

from __future__ import annotations

from fastapi import APIRouter, Depends, HTTPException, Request, Response, status

from ..auth.auth_dependencies import require_admin_user, require_editor_user
from ..exceptions import ExportError, IntegrityConstraintViolation, NotFoundError, ValidationError
from .cms_repository import ProjectImagesRepository
from .cms_schemas import (
    BlogCategory,
    BlogCategoryCreate,
    ContactSubmission,
    ContactSubmissionCreate,
    ContentCreate,
    ContentItem,
    ContentUpdate,
    FAQAdminItem,
    FAQCreate,
    FAQItem,
    FAQUpdate,
    ProjectImage,
    ProjectImageCreate,
    ProjectImageOrder,
)
from .cms_service import BlogCategoryService, ContactService, ContentService, FAQService

router = APIRouter(tags=["content"])


def _error(status_code: int, reason: str, message: str | None = None) -> HTTPException:
    detail = {"status": "error", "failure_reason": reason}
    if message:
        detail["message"] = message
    return HTTPException(status_code=status_code, detail=detail)


def get_content_service(kind: str, request: Request) -> ContentService:
    services: dict[str, ContentService] = request.app.state.content_services  # type: ignore[attr-defined]
    service = services.get(kind)
    if service is None:
        raise _error(status.HTTP_404_NOT_FOUND, "unknown_content_kind")
    return service


def get_project_images_repo(request: Request) -> ProjectImagesRepository:
    try:
        return request.app.state.project_images_repo  # type: ignore[attr-defined]
    except AttributeError as exc:  # pragma: no cover - defensive path
        raise RuntimeError("ProjectImagesRepository is not configured") from exc


def get_contact_service(request: Request) -> ContactService:
    try:
        return request.app.state.contact_service  # type: ignore[attr-defined]
    except AttributeError as exc:  # pragma: no cover - defensive path
        raise RuntimeError("ContactService is not configured") from exc


def get_faq_service(request: Request) -> FAQService:
    try:
        return request.app.state.faq_service  # type: ignore[attr-defined]
    except AttributeError as exc:  # pragma: no cover - defensive path
        raise RuntimeError("FAQService is not configured") from exc


def get_blog_category_service(request: Request) -> BlogCategoryService:
    try:
        return request.app.state.blog_category_service  # type: ignore[attr-defined]
    except AttributeError as exc:  # pragma: no cover - defensive path
        raise RuntimeError("BlogCategoryService is not configured") from exc


def _csv_response(filename: str, content: str) -> Response:
    return Response(
        content=content.encode("utf-8"),
        media_type="text/csv; charset=utf-8",
        headers={"Content-Disposition": f'attachment; filename="{filename}"'},
    )


# Public -------------------------------------------------------------------


@router.get("/api/faqs", response_model=list[FAQItem])
async def list_faqs(service: FAQService = Depends(get_faq_service)) -> list[FAQItem]:
    return await service.list_published()


@router.get("/api/blog/categories", response_model=list[BlogCategory])
def list_blog_categories(service: BlogCategoryService = Depends(get_blog_category_service)) -> list[BlogCategory]:
    return service.list_all()


@router.post("/api/contact", response_model=ContactSubmission, status_code=status.HTTP_201_CREATED)
def submit_contact(
    payload: ContactSubmissionCreate,
    request: Request,
    service: ContactService = Depends(get_contact_service),
) -> ContactSubmission:
    ip = request.client.host if request.client else None
    return service.submit(payload, ip=ip)


@router.get("/api/content/{kind}", response_model=list[ContentItem])
async def list_published_content(
    service: ContentService = Depends(get_content_service),
) -> list[ContentItem]:
    return await service.list_published()


@router.get("/api/content/{kind}/{slug}", response_model=ContentItem)
async def read_published_content(
    slug: str,
    service: ContentService = Depends(get_content_service),
) -> ContentItem:
    try:
        return await service.get_published(slug)
    except NotFoundError as exc:
        raise _error(status.HTTP_404_NOT_FOUND, "not_found") from exc


# Admin --------------------------------------------------------------------


@router.get("/api/admin/contact-submissions", response_model=list[ContactSubmission])
def list_contact_submissions(
    offset: int = 0,
    limit: int = 100,
    _: dict = Depends(require_admin_user),
    service: ContactService = Depends(get_contact_service),
) -> list[ContactSubmission]:
    return service.list_submissions(offset=max(offset, 0), limit=min(max(limit, 1), 500))


@router.get("/api/admin/contact-submissions/export")
async def export_contact_submissions(
    _: dict = Depends(require_admin_user),
    service: ContactService = Depends(get_contact_service),
) -> Response:
    try:
        filename, content = await service.export_csv()
    except ExportError as exc:
        raise _error(status.HTTP_404_NOT_FOUND, "no_data", str(exc)) from exc
    return _csv_response(filename, content)


@router.get("/api/admin/content/{kind}", response_model=list[ContentItem])
def list_content(
    _: dict = Depends(require_editor_user),
    service: ContentService = Depends(get_content_service),
) -> list[ContentItem]:
    return service.list_all()


@router.get("/api/admin/content/{kind}/export")
def export_content(
    _: dict = Depends(require_editor_user),
    service: ContentService = Depends(get_content_service),
) -> Response:
    try:
        filename, content = service.export_csv()
    except ExportError as exc:
        raise _error(status.HTTP_404_NOT_FOUND, "no_data", str(exc)) from exc
    return _csv_response(filename, content)


@router.get("/api/admin/content/{kind}/{item_id}", response_model=ContentItem)
def read_content(
    item_id: str,
    _: dict = Depends(require_editor_user),
    service: ContentService = Depends(get_content_service),
) -> ContentItem:
    try:
        return service.get(item_id)
    except NotFoundError as exc:
        raise _error(status.HTTP_404_NOT_FOUND, "not_found") from exc


@router.post("/api/admin/content/{kind}", response_model=ContentItem, status_code=status.HTTP_201_CREATED)
def create_content(
    payload: ContentCreate,
    _: dict = Depends(require_editor_user),
    service: ContentService = Depends(get_content_service),
) -> ContentItem:
    try:
        return service.create(payload.model_dump(exclude_none=True))
    except ValidationError as exc:
        raise _error(status.HTTP_400_BAD_REQUEST, "invalid_request", str(exc)) from exc
    except IntegrityConstraintViolation as exc:
        raise _error(status.HTTP_409_CONFLICT, "conflict", str(exc)) from exc


@router.put("/api/admin/content/{kind}/{item_id}", response_model=ContentItem)
def update_content(
    item_id: str,
    payload: ContentUpdate,
    _: dict = Depends(require_editor_user),
    service: ContentService = Depends(get_content_service),
) -> ContentItem:
    try:
        return service.update(item_id, payload.model_dump(exclude_unset=True))
    except NotFoundError as exc:
        raise _error(status.HTTP_404_NOT_FOUND, "not_found") from exc
    except ValidationError as exc:
        raise _error(status.HTTP_400_BAD_REQUEST, "invalid_request", str(exc)) from exc
    except IntegrityConstraintViolation as exc:
        raise _error(status.HTTP_409_CONFLICT, "conflict", str(exc)) from exc


@router.delete("/api/admin/content/{kind}/{item_id}", status_code=status.HTTP_204_NO_CONTENT)
def delete_content(
    item_id: str,
    _: dict = Depends(require_admin_user),
    service: ContentService = Depends(get_content_service),
) -> None:
    try:
        service.delete(item_id)
    except NotFoundError as exc:
        raise _error(status.HTTP_404_NOT_FOUND, "not_found") from exc


@router.get("/api/admin/projects/{project_id}/images", response_model=list[ProjectImage])
def list_project_images(
    project_id: str,
    _: dict = Depends(require_editor_user),
    repo: ProjectImagesRepository = Depends(get_project_images_repo),
) -> list[ProjectImage]:
    return repo.list_for_project(project_id)


@router.post(
    "/api/admin/projects/{project_id}/images",
    response_model=ProjectImage,
    status_code=status.HTTP_201_CREATED,
)
def add_project_image(
    project_id: str,
    payload: ProjectImageCreate,
    request: Request,
    _: dict = Depends(require_editor_user),
    repo: ProjectImagesRepository = Depends(get_project_images_repo),
) -> ProjectImage:
    try:
        image = repo.add(project_id, url=payload.url, alt=payload.alt, sort_order=payload.sort_order)
    except NotFoundError as exc:
        raise _error(status.HTTP_404_NOT_FOUND, "not_found") from exc
    _invalidate_projects(request)
    return image


@router.put("/api/admin/project-images/{image_id}/order", response_model=ProjectImage)
def reorder_project_image(
    image_id: str,
    payload: ProjectImageOrder,
    request: Request,
    _: dict = Depends(require_editor_user),
    repo: ProjectImagesRepository = Depends(get_project_images_repo),
) -> ProjectImage:
    try:
        image = repo.update_order(image_id, payload.sort_order)
    except NotFoundError as exc:
        raise _error(status.HTTP_404_NOT_FOUND, "not_found") from exc
    _invalidate_projects(request)
    return image


@router.delete("/api/admin/project-images/{image_id}", status_code=status.HTTP_204_NO_CONTENT)
def delete_project_image(
    image_id: str,
    request: Request,
    _: dict = Depends(require_editor_user),
    repo: ProjectImagesRepository = Depends(get_project_images_repo),
) -> None:
    try:
        repo.delete(image_id)
    except NotFoundError as exc:
        raise _error(status.HTTP_404_NOT_FOUND, "not_found") from exc
    _invalidate_projects(request)


@router.post(
    "/api/admin/blog-categories",
    response_model=BlogCategory,
    status_code=status.HTTP_201_CREATED,
)
def create_blog_category(
    payload: BlogCategoryCreate,
    _: dict = Depends(require_editor_user),
    service: BlogCategoryService = Depends(get_blog_category_service),
) -> BlogCategory:
    try:
        return service.create(payload.name, payload.slug)
    except ValidationError as exc:
        raise _error(status.HTTP_400_BAD_REQUEST, "invalid_request", str(exc)) from exc
    except IntegrityConstraintViolation as exc:
        raise _error(status.HTTP_409_CONFLICT, "conflict", str(exc)) from exc


@router.delete("/api/admin/blog-categories/{category_id}", status_code=status.HTTP_204_NO_CONTENT)
def delete_blog_category(
    category_id: str,
    _: dict = Depends(require_admin_user),
    service: BlogCategoryService = Depends(get_blog_category_service),
) -> None:
    try:
        service.delete(category_id)
    except NotFoundError as exc:
        raise _error(status.HTTP_404_NOT_FOUND, "not_found") from exc


@router.get("/api/admin/faqs", response_model=list[FAQAdminItem])
def list_all_faqs(
    _: dict = Depends(require_editor_user),
    service: FAQService = Depends(get_faq_service),
) -> list[FAQAdminItem]:
    return service.list_all()


@router.post("/api/admin/faqs", response_model=FAQAdminItem, status_code=status.HTTP_201_CREATED)
def create_faq(
    payload: FAQCreate,
    _: dict = Depends(require_editor_user),
    service: FAQService = Depends(get_faq_service),
) -> FAQAdminItem:
    try:
        return service.create(payload.model_dump())
    except ValidationError as exc:
        raise _error(status.HTTP_400_BAD_REQUEST, "invalid_request", str(exc)) from exc
    except IntegrityConstraintViolation as exc:
        raise _error(status.HTTP_409_CONFLICT, "conflict", str(exc)) from exc


@router.put("/api/admin/faqs/{faq_id}", response_model=FAQAdminItem)
def update_faq(
    faq_id: str,
    payload: FAQUpdate,
    _: dict = Depends(require_editor_user),
    service: FAQService = Depends(get_faq_service),
) -> FAQAdminItem:
    try:
        return service.update(faq_id, payload.model_dump(exclude_unset=True))
    except NotFoundError as exc:
        raise _error(status.HTTP_404_NOT_FOUND, "not_found") from exc
    except ValidationError as exc:
        raise _error(status.HTTP_400_BAD_REQUEST, "invalid_request", str(exc)) from exc


@router.delete("/api/admin/faqs/{faq_id}", status_code=status.HTTP_204_NO_CONTENT)
def delete_faq(
    faq_id: str,
    _: dict = Depends(require_admin_user),
    service: FAQService = Depends(get_faq_service),
) -> None:
    try:
        service.delete(faq_id)
    except NotFoundError as exc:
        raise _error(status.HTTP_404_NOT_FOUND, "not_found") from exc


def _invalidate_projects(request: Request) -> None:
    services: dict[str, ContentService] = request.app.state.content_services  # type: ignore[attr-defined]
    services["projects"].query_manager.clear_cache(services["projects"].cache_prefix)
