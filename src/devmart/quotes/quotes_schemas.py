"""Quote request payloads."""

from __future__ import annotations

from datetime import datetime
from typing import Literal

from pydantic import BaseModel, ConfigDict, Field

ServiceType = Literal[
    "web_development",
    "mobile_app",
    "ecommerce",
    "custom_software",
    "consulting",
    "maintenance",
    "other",
]
BudgetRange = Literal["under_5k", "5k_15k", "15k_50k", "50k_100k", "over_100k", "discuss"]
Timeline = Literal["asap", "1_month", "2_3_months", "3_6_months", "6_months_plus", "flexible"]

QuoteStatus = Literal["pending", "reviewed", "quoted", "accepted", "rejected"]
QuotePriority = Literal["low", "normal", "high", "urgent"]

EMAIL_PATTERN = r"^[^\s@]+@[^\s@]+\.[^\s@]+$"
PHONE_PATTERN = r"^\+?[\d\s\-()]{7,}$"


class QuoteCreate(BaseModel):
    name: str = Field(min_length=2, max_length=100)
    email: str = Field(max_length=255, pattern=EMAIL_PATTERN)
    company: str | None = Field(default=None, max_length=100)
    phone: str | None = Field(default=None, pattern=PHONE_PATTERN)
    service_type: ServiceType
    project_scope: str = Field(min_length=10, max_length=2000)
    budget_range: BudgetRange
    timeline: Timeline
    additional_requirements: str | None = Field(default=None, max_length=1000)


class QuoteStatusUpdate(BaseModel):
    status: QuoteStatus
    notes: str | None = Field(default=None, max_length=2000)


class QuoteNoteCreate(BaseModel):
    notes: str = Field(min_length=1, max_length=2000)


class QuoteActivity(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    id: str
    quote_id: str
    user_id: str | None = None
    activity_type: str
    old_value: str | None = None
    new_value: str | None = None
    notes: str | None = None
    created_at: datetime


class Quote(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    id: str
    name: str
    email: str
    company: str | None = None
    phone: str | None = None
    service_type: str
    project_scope: str
    budget_range: str
    timeline: str
    additional_requirements: str | None = None
    status: QuoteStatus
    priority: QuotePriority
    admin_notes: str | None = None
    estimated_cost: int | None = None
    created_at: datetime
    updated_at: datetime
    activities: list[QuoteActivity] = Field(default_factory=list)
