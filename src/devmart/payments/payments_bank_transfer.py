"""Manual bank transfer through the ``create-bank-transfer-order`` function."""

from __future__ import annotations

from dataclasses import dataclass

import structlog

from ..backend.backend_base import FunctionsBackend
from ..exceptions import BackendError
from .payments_base import (
    DEFAULT_CURRENCY,
    DEFAULT_PRODUCT_NAME,
    BankDetails,
    CheckoutParams,
    CheckoutResult,
    PaymentProvider,
    PaymentProviderError,
    PaymentValidationError,
)

logger = structlog.get_logger(__name__)

FUNCTION_NAME = "create-bank-transfer-order"


@dataclass(slots=True)
class BankTransferProvider(PaymentProvider):
    functions: FunctionsBackend
    name: str = "Bank Transfer (Suriname)"
    kind: str = "bank_transfer"

    async def create_checkout(self, params: CheckoutParams) -> CheckoutResult:
        customer = params.customer_info
        if customer is None or not customer.name or not customer.email:
            raise PaymentValidationError("Customer name and email are required for bank transfer")

        body = {
            "amount": params.amount,
            "currency": params.currency or DEFAULT_CURRENCY,
            "productName": params.product_name or DEFAULT_PRODUCT_NAME,
            "customerInfo": customer.to_payload(),
        }
        try:
            data = await self.functions.invoke(FUNCTION_NAME, body)
        except BackendError as exc:
            logger.error("payments.bank_transfer.order_failed", error=str(exc))
            raise PaymentProviderError(str(exc) or "Failed to create bank transfer order") from exc

        order_id = data.get("orderId") if isinstance(data, dict) else None
        if not order_id:
            raise PaymentProviderError("Bank transfer response missing orderId")
        details = data.get("bankDetails")
        return CheckoutResult(
            order_id=str(order_id),
            reference=data.get("bankReference"),
            bank_details=BankDetails.from_payload(details) if isinstance(details, dict) else None,
        )
