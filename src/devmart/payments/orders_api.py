"""Admin order review routes."""

from __future__ import annotations

from fastapi import APIRouter, Depends, HTTPException, Query, Request, Response, status

from ..auth.auth_dependencies import require_admin_user
from ..exceptions import ExportError, NotFoundError
from .orders_schemas import Order, OrderProvider, OrderStatus, OrderStatusUpdate
from .orders_service import OrdersService

router = APIRouter(prefix="/api/admin/orders", tags=["payments"])


def get_orders_service(request: Request) -> OrdersService:
    try:
        return request.app.state.orders_service  # type: ignore[attr-defined]
    except AttributeError as exc:  # pragma: no cover - defensive path
        raise RuntimeError("OrdersService is not configured") from exc


def _error(status_code: int, reason: str, message: str | None = None) -> HTTPException:
    detail = {"status": "error", "failure_reason": reason}
    if message:
        detail["message"] = message
    return HTTPException(status_code=status_code, detail=detail)


@router.get("", response_model=list[Order])
def list_orders(
    status_filter: OrderStatus | None = Query(default=None, alias="status"),
    provider: OrderProvider | None = None,
    limit: int = Query(default=100, ge=1, le=500),
    _: dict = Depends(require_admin_user),
    service: OrdersService = Depends(get_orders_service),
) -> list[Order]:
    return service.list_orders(status=status_filter, provider=provider, limit=limit)


@router.get("/export")
def export_orders(
    status_filter: OrderStatus | None = Query(default=None, alias="status"),
    provider: OrderProvider | None = None,
    _: dict = Depends(require_admin_user),
    service: OrdersService = Depends(get_orders_service),
) -> Response:
    try:
        filename, content = service.export_csv(status=status_filter, provider=provider)
    except ExportError as exc:
        raise _error(status.HTTP_404_NOT_FOUND, "no_data", str(exc)) from exc
    return Response(
        content=content.encode("utf-8"),
        media_type="text/csv; charset=utf-8",
        headers={"Content-Disposition": f'attachment; filename="{filename}"'},
    )


@router.get("/{order_id}", response_model=Order)
def read_order(
    order_id: str,
    _: dict = Depends(require_admin_user),
    service: OrdersService = Depends(get_orders_service),
) -> Order:
    try:
        return service.get(order_id)
    except NotFoundError as exc:
        raise _error(status.HTTP_404_NOT_FOUND, "not_found") from exc


@router.put("/{order_id}/status", response_model=Order)
def update_order_status(
    order_id: str,
    payload: OrderStatusUpdate,
    claims: dict = Depends(require_admin_user),
    service: OrdersService = Depends(get_orders_service),
) -> Order:
    try:
        return service.update_status(order_id, payload.status, notes=payload.notes, user_id=claims.get("sub"))
    except NotFoundError as exc:
        raise _error(status.HTTP_404_NOT_FOUND, "not_found") from exc
