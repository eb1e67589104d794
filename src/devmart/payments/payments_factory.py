"""Factory for payment providers."""

from ..backend.backend_base import FunctionsBackend
from .payments_bank_transfer import BankTransferProvider
from .payments_base import PaymentProvider
from .payments_stripe import StripeProvider


def get_payment_provider(kind: str, *, functions: FunctionsBackend) -> PaymentProvider:
    """Instantiate payment provider by kind."""
    lower = kind.lower()
    if lower == "stripe":
        return StripeProvider(functions=functions)
    if lower == "bank_transfer":
        return BankTransferProvider(functions=functions)
    raise ValueError(f"Unsupported payment provider '{kind}'")
