"""Order models exposed to the admin payments screens."""

from __future__ import annotations

from datetime import datetime
from typing import Any, Literal

from pydantic import BaseModel, ConfigDict, Field

OrderStatus = Literal["pending", "paid", "failed", "canceled", "awaiting_verification"]
OrderProvider = Literal["stripe", "bank_transfer"]


class Order(BaseModel):
    model_config = ConfigDict(from_attributes=True, populate_by_name=True)

    id: str
    user_id: str | None = None
    email: str
    amount: int
    currency: str
    provider: str
    provider_order_id: str | None = None
    status: OrderStatus
    metadata: dict[str, Any] | None = Field(default=None, validation_alias="order_metadata")
    created_at: datetime
    updated_at: datetime


class OrderStatusUpdate(BaseModel):
    status: OrderStatus
    notes: str | None = Field(default=None, max_length=2000)
