"""Public site settings and admin configuration routes."""

from fastapi import APIRouter, Depends, Request

from ..auth.auth_dependencies import require_admin_user
from .settings_models import (
    ContactSettings,
    PaymentSettings,
    ProposalSettings,
    SEOSettings,
    SiteSettingUpdate,
    mask_secret_key,
)
from .settings_service import SettingsCache
from .site_settings_service import SiteSettingsService

router = APIRouter(tags=["settings"])


def get_settings_cache(request: Request) -> SettingsCache:
    try:
        return request.app.state.settings_cache  # type: ignore[attr-defined]
    except AttributeError as exc:  # pragma: no cover - defensive path
        raise RuntimeError("SettingsCache is not configured") from exc


def get_site_settings_service(request: Request) -> SiteSettingsService:
    try:
        return request.app.state.site_settings_service  # type: ignore[attr-defined]
    except AttributeError as exc:  # pragma: no cover - defensive path
        raise RuntimeError("SiteSettingsService is not configured") from exc


def _masked(settings: PaymentSettings) -> PaymentSettings:
    stripe = settings.stripe.model_copy(
        update={"webhook_secret": mask_secret_key(settings.stripe.webhook_secret)}
    )
    return settings.model_copy(update={"stripe": stripe})


@router.get("/api/settings/contact", response_model=ContactSettings)
def read_contact_settings(
    service: SiteSettingsService = Depends(get_site_settings_service),
) -> ContactSettings:
    return service.contact_settings()


@router.get("/api/settings/seo", response_model=SEOSettings)
def read_seo_settings(
    service: SiteSettingsService = Depends(get_site_settings_service),
) -> SEOSettings:
    return service.seo_settings()


@router.get("/api/admin/settings/payments", response_model=PaymentSettings)
def read_payment_settings(
    _: dict = Depends(require_admin_user),
    cache: SettingsCache = Depends(get_settings_cache),
) -> PaymentSettings:
    return _masked(cache.payment_settings())


@router.put("/api/admin/settings/payments", response_model=PaymentSettings)
def update_payment_settings(
    payload: PaymentSettings,
    _: dict = Depends(require_admin_user),
    cache: SettingsCache = Depends(get_settings_cache),
) -> PaymentSettings:
    cache.update_payment_settings(payload)
    return _masked(cache.payment_settings())


@router.get("/api/admin/settings/proposals", response_model=ProposalSettings)
def read_proposal_settings(
    _: dict = Depends(require_admin_user),
    cache: SettingsCache = Depends(get_settings_cache),
) -> ProposalSettings:
    return cache.proposal_settings()


@router.put("/api/admin/settings/proposals", response_model=ProposalSettings)
def update_proposal_settings(
    payload: ProposalSettings,
    _: dict = Depends(require_admin_user),
    cache: SettingsCache = Depends(get_settings_cache),
) -> ProposalSettings:
    cache.update_proposal_settings(payload)
    return cache.proposal_settings()


@router.put("/api/admin/settings/site/{key}", status_code=204)
def update_site_setting(
    key: str,
    payload: SiteSettingUpdate,
    claims: dict = Depends(require_admin_user),
    service: SiteSettingsService = Depends(get_site_settings_service),
) -> None:
    service.upsert(key, payload.value, updated_by=claims.get("sub"))
