"""Abstract payment provider definition."""

from __future__ import annotations

from abc import ABC, abstractmethod
from dataclasses import dataclass, field
from typing import Any, Literal

from ..exceptions import AppError, ValidationError

ProviderKind = Literal["stripe", "bank_transfer"]

DEFAULT_CURRENCY = "usd"
DEFAULT_PRODUCT_NAME = "Premium Service"


class PaymentValidationError(ValidationError):
    """Raised before any backend call when checkout input is incomplete."""


class PaymentProviderError(AppError):
    """Raised when the backend function behind a provider fails."""


@dataclass(slots=True)
class CustomerInfo:
    email: str
    name: str | None = None
    phone: str | None = None

    def to_payload(self) -> dict[str, Any]:
        payload: dict[str, Any] = {"name": self.name, "email": self.email}
        if self.phone:
            payload["phone"] = self.phone
        return payload


@dataclass(slots=True)
class CheckoutParams:
    """Amounts are in cents."""

    amount: int
    currency: str | None = None
    product_name: str | None = None
    customer_info: CustomerInfo | None = None
    success_url: str | None = None
    cancel_url: str | None = None


@dataclass(slots=True)
class BankDetails:
    bank_name: str
    account_name: str
    account_number: str
    swift_code: str
    reference: str
    amount: float
    currency: str
    instructions: list[str] = field(default_factory=list)
    iban: str = ""

    @classmethod
    def from_payload(cls, data: dict[str, Any]) -> "BankDetails":
        return cls(
            bank_name=data.get("bankName", ""),
            account_name=data.get("accountName", ""),
            account_number=data.get("accountNumber", ""),
            swift_code=data.get("swiftCode", ""),
            reference=data.get("reference", ""),
            amount=float(data.get("amount", 0)),
            currency=data.get("currency", ""),
            instructions=list(data.get("instructions") or []),
            iban=data.get("iban", ""),
        )

    def to_payload(self) -> dict[str, Any]:
        return {
            "bankName": self.bank_name,
            "accountName": self.account_name,
            "accountNumber": self.account_number,
            "swiftCode": self.swift_code,
            "iban": self.iban,
            "reference": self.reference,
            "amount": self.amount,
            "currency": self.currency,
            "instructions": list(self.instructions),
        }


@dataclass(slots=True)
class CheckoutResult:
    order_id: str
    url: str | None = None
    reference: str | None = None
    bank_details: BankDetails | None = None


class PaymentProvider(ABC):
    """Base interface for payment providers."""

    name: str
    kind: ProviderKind

    @abstractmethod
    async def create_checkout(self, params: CheckoutParams) -> CheckoutResult:
        """Start a checkout and return where/how the customer pays."""
