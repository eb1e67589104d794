"""Hosted Stripe checkout through the ``create-stripe-checkout`` function."""

from __future__ import annotations

from dataclasses import dataclass

import structlog

from ..backend.backend_base import FunctionsBackend
from ..exceptions import BackendError
from .payments_base import (
    DEFAULT_CURRENCY,
    DEFAULT_PRODUCT_NAME,
    CheckoutParams,
    CheckoutResult,
    PaymentProvider,
    PaymentProviderError,
)

logger = structlog.get_logger(__name__)

FUNCTION_NAME = "create-stripe-checkout"


@dataclass(slots=True)
class StripeProvider(PaymentProvider):
    functions: FunctionsBackend
    name: str = "Stripe"
    kind: str = "stripe"

    async def create_checkout(self, params: CheckoutParams) -> CheckoutResult:
        body = {
            "amount": params.amount,
            "currency": params.currency or DEFAULT_CURRENCY,
            "productName": params.product_name or DEFAULT_PRODUCT_NAME,
            "successUrl": params.success_url,
            "cancelUrl": params.cancel_url,
        }
        try:
            data = await self.functions.invoke(FUNCTION_NAME, body)
        except BackendError as exc:
            logger.error("payments.stripe.checkout_failed", error=str(exc))
            raise PaymentProviderError(str(exc) or "Failed to create Stripe checkout") from exc

        order_id = data.get("orderId") if isinstance(data, dict) else None
        if not order_id:
            raise PaymentProviderError("Stripe checkout response missing orderId")
        logger.info("payments.stripe.checkout_created", order_id=order_id)
        return CheckoutResult(order_id=str(order_id), url=data.get("url"))
