"""FastAPI application entry point."""

from __future__ import annotations

import asyncio
from contextlib import asynccontextmanager
from typing import AsyncIterator

from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware

from .config import AppConfig, load_config
from .dependencies import include_routers
from .logging import configure_logging
from .performance.query_cache import run_cache_cleanup

CORS_ALLOW_HEADERS = ["authorization", "x-client-info", "apikey", "content-type"]


@asynccontextmanager
async def lifespan(app: FastAPI) -> AsyncIterator[None]:
    """Start health polling and cache cleanup; stop both on shutdown."""
    config: AppConfig = app.state.config
    shutdown_event = asyncio.Event()
    cleanup_task = asyncio.create_task(
        run_cache_cleanup(
            app.state.query_manager,
            shutdown_event=shutdown_event,
            interval_seconds=config.query_cache_cleanup_seconds,
        )
    )
    app.state.system_monitor.start(config.health_poll_interval_seconds)
    try:
        yield
    finally:
        shutdown_event.set()
        await app.state.system_monitor.stop()
        await cleanup_task


def create_app(config: AppConfig | None = None) -> FastAPI:
    """Build FastAPI instance with configured dependencies."""
    cfg = config or load_config()
    configure_logging(cfg.log_level)
    app = FastAPI(title="Devmart", lifespan=lifespan)
    app.add_middleware(
        CORSMiddleware,
        allow_origins=["*"],
        allow_methods=["*"],
        allow_headers=CORS_ALLOW_HEADERS,
    )
    include_routers(app, cfg)
    return app


app = create_app()
