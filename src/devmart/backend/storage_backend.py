"""Filesystem implementation of bucket storage."""

from __future__ import annotations

import asyncio
from dataclasses import dataclass, field
from pathlib import Path

import structlog

from .backend_base import StorageBackend

logger = structlog.get_logger(__name__)

DEFAULT_BUCKETS = ("media", "proposal-attachments", "section-images")


@dataclass(slots=True)
class LocalStorageBackend(StorageBackend):
    """Each bucket is a directory under ``root``."""

    root: Path
    default_buckets: tuple[str, ...] = field(default=DEFAULT_BUCKETS)

    def ensure_buckets(self) -> None:
        for name in self.default_buckets:
            (self.root / name).mkdir(parents=True, exist_ok=True)
        logger.info("storage.buckets.ready", root=str(self.root), buckets=list(self.default_buckets))

    async def list_buckets(self) -> list[str]:
        return await asyncio.to_thread(self._scan)

    def _scan(self) -> list[str]:
        if not self.root.exists():
            raise FileNotFoundError(f"Storage root not found: {self.root}")
        return sorted(entry.name for entry in self.root.iterdir() if entry.is_dir())
