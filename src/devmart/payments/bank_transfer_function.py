"""Local implementation of the ``create-bank-transfer-order`` function."""

from __future__ import annotations

import asyncio
import secrets
import string
import time
from dataclasses import dataclass
from typing import Any

import structlog
from fastapi import APIRouter, Request
from fastapi.responses import JSONResponse
from pydantic import BaseModel, Field

from ..auth.auth_service import AuthError
from ..backend.backend_base import AuthBackend
from ..settings.settings_service import SettingsCache
from .orders_repository import OrdersRepository
from .payments_base import DEFAULT_CURRENCY, DEFAULT_PRODUCT_NAME, BankDetails, PaymentValidationError

logger = structlog.get_logger(__name__)

router = APIRouter(prefix="/functions/v1", tags=["functions"])

_BASE36 = string.digits + string.ascii_uppercase

DEFAULT_INSTRUCTIONS = [
    "Use the reference number provided when making the transfer",
    "Include your email address in the transfer description",
    "Transfer must be completed within 7 days",
    "Upload proof of payment after completing the transfer",
]


def _to_base36(value: int) -> str:
    if value == 0:
        return "0"
    digits = []
    while value:
        value, rem = divmod(value, 36)
        digits.append(_BASE36[rem])
    return "".join(reversed(digits))


def generate_bank_reference(now_ms: int | None = None) -> str:
    """``BT-<base36 epoch ms>-<4 random base36 chars>``, upper case."""
    timestamp = _to_base36(now_ms if now_ms is not None else int(time.time() * 1000))
    suffix = "".join(secrets.choice(_BASE36) for _ in range(4))
    return f"BT-{timestamp}-{suffix}"


class CustomerInfoPayload(BaseModel):
    name: str | None = None
    email: str | None = None
    phone: str | None = None


class BankTransferOrderRequest(BaseModel):
    amount: int | None = None
    currency: str = Field(default=DEFAULT_CURRENCY)
    productName: str = Field(default=DEFAULT_PRODUCT_NAME)
    customerInfo: CustomerInfoPayload | None = None


@dataclass(slots=True)
class BankTransferOrderService:
    orders: OrdersRepository
    settings: SettingsCache

    def create_order(self, request: BankTransferOrderRequest, *, user_id: str | None = None) -> dict[str, Any]:
        if not request.amount or request.amount <= 0:
            raise PaymentValidationError("Valid amount is required")
        customer = request.customerInfo
        if customer is None or not customer.name or not customer.email:
            raise PaymentValidationError("Customer name and email are required")

        reference = generate_bank_reference()
        order = self.orders.create(
            user_id=user_id,
            email=customer.email,
            amount=request.amount,
            currency=request.currency,
            provider="bank_transfer",
            provider_order_id=reference,
            status="awaiting_verification",
            metadata={
                "product_name": request.productName,
                "customer_info": customer.model_dump(exclude_none=True),
                "bank_reference": reference,
                "created_via": "bank_transfer_flow",
            },
        )
        logger.info("payments.bank_transfer.order_created", order_id=order.id, reference=reference)

        bank = self.settings.payment_settings().bank_transfer
        instructions = (
            [line for line in bank.instructions_md.split("\n") if line.strip()]
            if bank.instructions_md
            else list(DEFAULT_INSTRUCTIONS)
        )
        details = BankDetails(
            bank_name=bank.bank_name or "Suriname Commercial Bank",
            account_name=bank.beneficiary_name or "Your Company Name",
            account_number=bank.account_number_masked or "123-456-789",
            swift_code=bank.swift or "SCBKSR22",
            iban=bank.iban or "",
            reference=reference,
            amount=request.amount / 100,
            currency=request.currency.upper(),
            instructions=instructions,
        )
        return {
            "orderId": order.id,
            "bankReference": reference,
            "bankDetails": details.to_payload(),
            "order": {
                "id": order.id,
                "amount": order.amount,
                "currency": order.currency,
                "status": order.status,
                "created_at": order.created_at.isoformat(),
            },
        }


@router.post("/create-bank-transfer-order")
async def create_bank_transfer_order(request: Request) -> JSONResponse:
    service: BankTransferOrderService = request.app.state.bank_transfer_service
    auth_backend: AuthBackend = request.app.state.auth_backend

    try:
        user_id = await _optional_user_id(request, auth_backend)
        payload = BankTransferOrderRequest.model_validate(await request.json())
        body = await asyncio.to_thread(service.create_order, payload, user_id=user_id)
    except Exception as exc:
        logger.error("payments.bank_transfer.failed", error=str(exc))
        return JSONResponse(status_code=500, content={"error": str(exc)})
    return JSONResponse(content=body)


async def _optional_user_id(request: Request, auth_backend: AuthBackend) -> str | None:
    header = request.headers.get("Authorization")
    if not header:
        return None
    try:
        user = await auth_backend.get_user(header.replace("Bearer ", "", 1).strip())
    except AuthError:
        # Guest checkout; the service role key is not a user token.
        return None
    return user.id
