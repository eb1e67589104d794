"""Public checkout route."""

from __future__ import annotations

from typing import Any, Literal

from fastapi import APIRouter, Depends, HTTPException, Request, status
from pydantic import BaseModel, Field

from ..backend.backend_base import FunctionsBackend
from .payments_base import CheckoutParams, CustomerInfo, PaymentProviderError, PaymentValidationError
from .payments_factory import get_payment_provider

router = APIRouter(prefix="/api/payments", tags=["payments"])


class CustomerInfoRequest(BaseModel):
    email: str = Field(min_length=3, max_length=255)
    name: str | None = Field(default=None, max_length=100)
    phone: str | None = Field(default=None, max_length=32)


class CheckoutRequest(BaseModel):
    provider: Literal["stripe", "bank_transfer"]
    amount: int = Field(gt=0)
    currency: str | None = Field(default=None, max_length=8)
    product_name: str | None = Field(default=None, max_length=255)
    customer_info: CustomerInfoRequest | None = None
    success_url: str | None = None
    cancel_url: str | None = None


def get_functions_backend(request: Request) -> FunctionsBackend:
    try:
        return request.app.state.functions_backend  # type: ignore[attr-defined]
    except AttributeError as exc:  # pragma: no cover - defensive path
        raise RuntimeError("FunctionsBackend is not configured") from exc


@router.post("/checkout")
async def create_checkout(
    payload: CheckoutRequest,
    functions: FunctionsBackend = Depends(get_functions_backend),
) -> dict[str, Any]:
    provider = get_payment_provider(payload.provider, functions=functions)
    customer = (
        CustomerInfo(
            email=payload.customer_info.email,
            name=payload.customer_info.name,
            phone=payload.customer_info.phone,
        )
        if payload.customer_info
        else None
    )
    params = CheckoutParams(
        amount=payload.amount,
        currency=payload.currency,
        product_name=payload.product_name,
        customer_info=customer,
        success_url=payload.success_url,
        cancel_url=payload.cancel_url,
    )
    try:
        result = await provider.create_checkout(params)
    except PaymentValidationError as exc:
        raise HTTPException(
            status_code=status.HTTP_400_BAD_REQUEST,
            detail={"status": "error", "failure_reason": "invalid_request", "message": str(exc)},
        ) from exc
    except PaymentProviderError as exc:
        raise HTTPException(
            status_code=status.HTTP_502_BAD_GATEWAY,
            detail={"status": "error", "failure_reason": "provider_error", "message": str(exc)},
        ) from exc

    return {
        "order_id": result.order_id,
        "url": result.url,
        "reference": result.reference,
        "bank_details": result.bank_details.to_payload() if result.bank_details else None,
    }
