"""Application configuration builder."""

from __future__ import annotations

from dataclasses import dataclass
from pathlib import Path

from pydantic import Field
from pydantic_settings import BaseSettings, SettingsConfigDict
from sqlalchemy import create_engine
from sqlalchemy.engine import Engine
from sqlalchemy.orm import Session, sessionmaker

from .db.db_init import init_db


class EnvSettings(BaseSettings):
    """Raw environment values (no prefix, matches deployment env names)."""

    model_config = SettingsConfigDict(extra="ignore")

    database_url: str = Field(default="sqlite:///devmart.db")
    media_root: Path = Field(default=Path("media"))
    backend_url: str = Field(default="http://localhost:8000")
    backend_service_role_key: str = Field(default="")
    functions_base_url: str | None = Field(default=None)
    jwt_signing_key: str = Field(default="change-me", min_length=1)
    admin_jwt_ttl_hours: int = Field(default=12, ge=1)
    health_poll_interval_seconds: float = Field(default=300.0, gt=0)
    health_check_timeout_seconds: float = Field(default=10.0, gt=0)
    query_cache_cleanup_seconds: float = Field(default=300.0, gt=0)
    settings_cache_ttl_seconds: float = Field(default=300.0, ge=0)
    log_level: str = Field(default="INFO")


@dataclass(slots=True)
class AppConfig:
    database_url: str
    engine: Engine
    session_factory: sessionmaker[Session]
    media_root: Path
    backend_url: str
    service_role_key: str
    functions_base_url: str
    jwt_signing_key: str
    admin_jwt_ttl_hours: int
    health_poll_interval_seconds: float
    health_check_timeout_seconds: float
    query_cache_cleanup_seconds: float
    settings_cache_ttl_seconds: float
    log_level: str = "INFO"


def load_config(env: EnvSettings | None = None) -> AppConfig:
    """Load configuration from environment (SQLite by default)."""
    settings = env or EnvSettings()

    media_root = settings.media_root
    media_root.mkdir(parents=True, exist_ok=True)

    engine = create_engine(settings.database_url, future=True)
    session_factory: sessionmaker[Session] = sessionmaker(bind=engine, expire_on_commit=False)
    init_db(engine, session_factory)

    backend_url = settings.backend_url.rstrip("/")
    return AppConfig(
        database_url=settings.database_url,
        engine=engine,
        session_factory=session_factory,
        media_root=media_root,
        backend_url=backend_url,
        service_role_key=settings.backend_service_role_key,
        functions_base_url=(settings.functions_base_url or backend_url).rstrip("/"),
        jwt_signing_key=settings.jwt_signing_key,
        admin_jwt_ttl_hours=settings.admin_jwt_ttl_hours,
        health_poll_interval_seconds=settings.health_poll_interval_seconds,
        health_check_timeout_seconds=settings.health_check_timeout_seconds,
        query_cache_cleanup_seconds=settings.query_cache_cleanup_seconds,
        settings_cache_ttl_seconds=settings.settings_cache_ttl_seconds,
        log_level=settings.log_level.upper(),
    )
