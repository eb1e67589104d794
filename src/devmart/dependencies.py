"""Dependency wiring helpers."""

from datetime import timedelta

from fastapi import FastAPI

from .auth.auth_api import router as auth_router
from .auth.auth_backend import JwtAuthBackend
from .auth.auth_service import AuthService
from .auth.profiles_repository import ProfilesRepository
from .backend.functions_client import HttpFunctionsClient
from .backend.storage_backend import LocalStorageBackend
from .cms.cms_api import router as cms_router
from .cms.cms_repository import (
    CONTENT_MODELS,
    BlogCategoriesRepository,
    ContactSubmissionsRepository,
    ContentRepository,
    FAQRepository,
    ProjectImagesRepository,
)
from .cms.cms_service import BlogCategoryService, ContactService, ContentService, FAQService
from .config import AppConfig
from .events.events_api import router as events_router
from .events.events_repository import EventsRepository
from .health.health_api import router as health_router
from .health.health_monitor import SystemMonitor
from .health.health_service import HealthChecker
from .payments.bank_transfer_function import BankTransferOrderService
from .payments.bank_transfer_function import router as bank_transfer_router
from .payments.orders_api import router as orders_router
from .payments.orders_repository import OrdersRepository
from .payments.orders_service import OrdersService
from .payments.payments_api import router as payments_router
from .performance.performance_api import router as performance_router
from .performance.query_cache import QueryPerformanceManager
from .proposals.proposals_api import router as proposals_router
from .proposals.proposals_repository import ProposalTemplatesRepository
from .proposals.proposals_service import ProposalTemplateService
from .quotes.quotes_api import router as quotes_router
from .quotes.quotes_repository import QuotesRepository
from .quotes.quotes_service import QuoteService
from .sanitizer.sanitizer_api import router as sanitizer_router
from .sanitizer.sanitizer_service import SanitizerService
from .settings.settings_api import router as settings_router
from .settings.settings_repository import AppConfigRepository, SettingsRepository
from .settings.settings_service import SettingsCache
from .settings.site_settings_service import SiteSettingsService


def include_routers(app: FastAPI, config: AppConfig) -> None:
    """Mount module routers and attach services."""
    profiles_repo = ProfilesRepository(config.session_factory)
    events_repo = EventsRepository(config.session_factory)

    auth_service = AuthService(
        profiles=profiles_repo,
        signing_key=config.jwt_signing_key,
        token_ttl=timedelta(hours=config.admin_jwt_ttl_hours),
    )
    auth_backend = JwtAuthBackend(service=auth_service, profiles=profiles_repo)
    storage_backend = LocalStorageBackend(root=config.media_root)
    storage_backend.ensure_buckets()
    functions_backend = HttpFunctionsClient(
        base_url=config.functions_base_url,
        service_role_key=config.service_role_key,
    )

    query_manager = QueryPerformanceManager()
    health_checker = HealthChecker(
        session_factory=config.session_factory,
        auth=auth_backend,
        storage=storage_backend,
        functions=functions_backend,
        check_timeout_seconds=config.health_check_timeout_seconds,
    )

    settings_cache = SettingsCache(
        repo=AppConfigRepository(config.session_factory),
        ttl_seconds=config.settings_cache_ttl_seconds,
    )

    app.state.config = config
    app.state.profiles_repo = profiles_repo
    app.state.events_repo = events_repo
    app.state.auth_service = auth_service
    app.state.auth_backend = auth_backend
    app.state.storage_backend = storage_backend
    app.state.functions_backend = functions_backend
    app.state.query_manager = query_manager
    app.state.system_monitor = SystemMonitor(health_checker)
    app.state.sanitizer_service = SanitizerService(events=events_repo)
    app.state.settings_cache = settings_cache
    app.state.site_settings_service = SiteSettingsService(repo=SettingsRepository(config.session_factory))
    orders_repo = OrdersRepository(config.session_factory)
    app.state.bank_transfer_service = BankTransferOrderService(orders=orders_repo, settings=settings_cache)
    app.state.orders_service = OrdersService(repo=orders_repo, events=events_repo)
    app.state.content_services = {
        kind: ContentService(repo=ContentRepository(config.session_factory, kind), query_manager=query_manager)
        for kind in CONTENT_MODELS
    }
    app.state.project_images_repo = ProjectImagesRepository(config.session_factory)
    app.state.contact_service = ContactService(repo=ContactSubmissionsRepository(config.session_factory))
    app.state.faq_service = FAQService(repo=FAQRepository(config.session_factory), query_manager=query_manager)
    app.state.blog_category_service = BlogCategoryService(
        repo=BlogCategoriesRepository(config.session_factory),
        query_manager=query_manager,
    )
    app.state.quote_service = QuoteService(repo=QuotesRepository(config.session_factory))
    app.state.proposal_template_service = ProposalTemplateService(
        repo=ProposalTemplatesRepository(config.session_factory),
        events=events_repo,
    )

    app.include_router(auth_router)
    app.include_router(health_router)
    app.include_router(performance_router)
    app.include_router(sanitizer_router)
    app.include_router(bank_transfer_router)
    app.include_router(payments_router)
    app.include_router(orders_router)
    app.include_router(settings_router)
    app.include_router(cms_router)
    app.include_router(quotes_router)
    app.include_router(proposals_router)
    app.include_router(events_router)
