"""Admin review of checkout orders."""

from __future__ import annotations

from dataclasses import dataclass

import structlog

from ..cms.cms_export import export_preset
from ..events.events_repository import EventsRepository
from .orders_repository import OrdersRepository
from .orders_schemas import Order

logger = structlog.get_logger(__name__)

# Manual verification outcomes that leave a trace in the event log.
VERIFIED_STATUSES = ("paid", "failed")


@dataclass(slots=True)
class OrdersService:
    repo: OrdersRepository
    events: EventsRepository

    def list_orders(
        self,
        *,
        status: str | None = None,
        provider: str | None = None,
        limit: int = 100,
    ) -> list[Order]:
        return self.repo.list_recent(status=status, provider=provider, limit=limit)

    def get(self, order_id: str) -> Order:
        return self.repo.get(order_id)

    def update_status(
        self,
        order_id: str,
        status: str,
        *,
        notes: str | None = None,
        user_id: str | None = None,
    ) -> Order:
        previous = self.repo.get(order_id)
        order = self.repo.update_status(order_id, status)
        logger.info(
            "payments.order.status_changed",
            order_id=order_id,
            old_status=previous.status,
            new_status=status,
            user_id=user_id,
        )
        if status in VERIFIED_STATUSES:
            self.events.log_event(
                level="info" if status == "paid" else "warn",
                area="payments",
                message=f"Order {status} by manual verification",
                meta={
                    "order_id": order_id,
                    "provider": order.provider,
                    "amount": order.amount,
                    "currency": order.currency,
                    "old_status": previous.status,
                    "admin_notes": notes,
                    "verified_by": user_id,
                    "manual_verification": True,
                },
            )
        return order

    def export_csv(self, *, status: str | None = None, provider: str | None = None) -> tuple[str, str]:
        rows = [
            {
                "id": order.id,
                "provider": order.provider,
                "amount_cents": order.amount,
                "currency": order.currency,
                "status": order.status,
                "created_at": order.created_at,
                "order_id": order.provider_order_id or "",
            }
            for order in self.repo.list_recent(status=status, provider=provider, limit=10_000)
        ]
        return export_preset("orders", rows)
