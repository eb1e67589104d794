"""Typed views over the ``payments`` and ``proposals`` configuration blobs."""

from __future__ import annotations

from typing import Literal

from pydantic import BaseModel, ConfigDict, Field

ProviderKind = Literal["stripe", "bank_transfer"]


class StripeSettings(BaseModel):
    model_config = ConfigDict(extra="ignore")

    mode: Literal["test", "live"] = "test"
    publishable_key: str | None = None
    webhook_secret: str | None = None
    statement_descriptor: str | None = None


class BankTransferSettings(BaseModel):
    model_config = ConfigDict(extra="ignore")

    enabled: bool = False
    instructions_md: str = ""
    beneficiary_name: str | None = None
    bank_name: str | None = None
    account_number_masked: str | None = None
    iban: str | None = None
    swift: str | None = None


class PaymentSettings(BaseModel):
    model_config = ConfigDict(extra="ignore")

    provider_order: list[ProviderKind] = Field(default_factory=lambda: ["stripe", "bank_transfer"])
    stripe: StripeSettings = Field(default_factory=StripeSettings)
    bank_transfer: BankTransferSettings = Field(default_factory=BankTransferSettings)


class BrandingSettings(BaseModel):
    model_config = ConfigDict(extra="ignore")

    logo_url_light: str | None = None
    logo_url_dark: str | None = None
    primary_color: str | None = "#6366f1"
    footer_note_md: str | None = None


class EmailSettings(BaseModel):
    model_config = ConfigDict(extra="ignore")

    from_name: str = ""
    from_email: str = ""
    reply_to: str | None = None
    bcc_me: bool = False
    signature_html: str | None = None


class TokenSettings(BaseModel):
    model_config = ConfigDict(extra="ignore")

    ttl_hours: int = Field(default=168, ge=1)
    single_use: bool = False


class AttachmentSettings(BaseModel):
    model_config = ConfigDict(extra="ignore")

    enabled: bool = True
    max_mb: int = Field(default=10, ge=1)


class ProposalSettings(BaseModel):
    model_config = ConfigDict(extra="ignore")

    branding: BrandingSettings = Field(default_factory=BrandingSettings)
    email: EmailSettings = Field(default_factory=EmailSettings)
    tokens: TokenSettings = Field(default_factory=TokenSettings)
    attachments: AttachmentSettings = Field(default_factory=AttachmentSettings)


class ContactSettings(BaseModel):
    site_title: str = "Devmart"
    site_description: str = (
        "Digital agency delivering innovative web development and marketing solutions."
    )
    contact_email: str = "info@devmart.sr"
    contact_phone: str = "+555-759-9854"
    contact_address: str = "6801 Hollywood Blvd\nLos Angeles, CA 90028"
    business_hours: str = "Mon - Fri: 9:00 AM - 6:00 PM PST"
    footer_legal_text: str = "© 2025 Devmart - All Rights Reserved."
    facebook_url: str | None = None
    twitter_url: str | None = None
    linkedin_url: str | None = None
    instagram_url: str | None = None


class SEOSettings(BaseModel):
    gsc_verification_code: str | None = None
    seo_title_template: str | None = None
    seo_default_description: str | None = None
    seo_default_og_image: str | None = None


class SiteSettingUpdate(BaseModel):
    value: str = Field(max_length=5000)


def mask_secret_key(key: str | None) -> str | None:
    """Hide all but the first and last four characters of a secret."""
    if not key or len(key) < 8:
        return key
    return key[:4] + "*" * (len(key) - 8) + key[-4:]
