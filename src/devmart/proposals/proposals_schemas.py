"""Proposal template payloads."""

from __future__ import annotations

from datetime import datetime
from typing import Literal

from pydantic import BaseModel, ConfigDict, Field, field_validator

TemplateStatus = Literal["active", "draft", "archived"]


class TemplateVariable(BaseModel):
    name: str
    label: str = ""
    type: str = "text"
    default_value: str | None = None
    required: bool = False
    description: str | None = None


class ProposalTemplate(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    id: str
    name: str
    subject: str
    content: str
    variables: list[TemplateVariable] = Field(default_factory=list)
    service_type: str | None = None
    status: TemplateStatus
    is_active: bool
    created_by: str | None = None
    created_at: datetime
    updated_at: datetime

    @field_validator("variables", mode="before")
    @classmethod
    def _none_as_empty(cls, value: object) -> object:
        return value or []


class ProposalTemplateCreate(BaseModel):
    name: str = Field(min_length=1, max_length=255)
    subject: str = Field(default="", max_length=255)
    content: str = ""
    variables: list[TemplateVariable] = Field(default_factory=list)
    service_type: str | None = Field(default=None, max_length=64)
    status: TemplateStatus = "draft"
