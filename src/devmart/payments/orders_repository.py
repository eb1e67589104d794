"""Persistence for checkout orders."""

from __future__ import annotations

from collections.abc import Callable
from datetime import datetime
from typing import Any

from sqlalchemy import select
from sqlalchemy.orm import Session

from ..db.db_models import OrderModel
from ..exceptions import ensure_found, handle_sqlalchemy_errors
from .orders_schemas import Order


class OrdersRepository:
    def __init__(self, session_factory: Callable[[], Session]) -> None:
        self._session_factory = session_factory

    def create(
        self,
        *,
        email: str,
        amount: int,
        currency: str,
        provider: str,
        provider_order_id: str | None,
        status: str,
        metadata: dict[str, Any] | None = None,
        user_id: str | None = None,
    ) -> OrderModel:
        now = datetime.utcnow()
        model = OrderModel(
            user_id=user_id,
            email=email,
            amount=amount,
            currency=currency,
            provider=provider,
            provider_order_id=provider_order_id,
            status=status,
            order_metadata=metadata or {},
            created_at=now,
            updated_at=now,
        )
        with handle_sqlalchemy_errors(entity="order"), self._session_factory() as session:
            session.add(model)
            session.commit()
            session.refresh(model)
        return model

    def get_by_provider_order_id(self, provider_order_id: str) -> OrderModel | None:
        with self._session_factory() as session:
            stmt = select(OrderModel).where(OrderModel.provider_order_id == provider_order_id)
            return session.execute(stmt).scalar_one_or_none()

    def get(self, order_id: str) -> Order:
        with self._session_factory() as session:
            row = ensure_found(session.get(OrderModel, order_id), entity="order", identifier=order_id)
            return Order.model_validate(row)

    def list_recent(
        self,
        *,
        status: str | None = None,
        provider: str | None = None,
        limit: int = 100,
    ) -> list[Order]:
        with self._session_factory() as session:
            stmt = select(OrderModel).order_by(OrderModel.created_at.desc()).limit(limit)
            if status:
                stmt = stmt.where(OrderModel.status == status)
            if provider:
                stmt = stmt.where(OrderModel.provider == provider)
            return [Order.model_validate(row) for row in session.execute(stmt).scalars()]

    def update_status(self, order_id: str, status: str) -> Order:
        with handle_sqlalchemy_errors(entity="order"), self._session_factory() as session:
            row = ensure_found(session.get(OrderModel, order_id), entity="order", identifier=order_id)
            row.status = status
            row.updated_at = datetime.utcnow()
            session.commit()
            return Order.model_validate(row)
