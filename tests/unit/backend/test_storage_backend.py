from __future__ import annotations

import asyncio

import pytest

from devmart.backend.storage_backend import DEFAULT_BUCKETS, LocalStorageBackend


def test_ensure_buckets_creates_default_directories(tmp_path) -> None:
    backend = LocalStorageBackend(root=tmp_path / "media")

    backend.ensure_buckets()

    assert asyncio.run(backend.list_buckets()) == sorted(DEFAULT_BUCKETS)


def test_list_buckets_ignores_files(tmp_path) -> None:
    (tmp_path / "extra").mkdir()
    (tmp_path / "notes.txt").write_text("x", encoding="utf-8")

    assert asyncio.run(LocalStorageBackend(root=tmp_path).list_buckets()) == ["extra"]


def test_missing_root_raises(tmp_path) -> None:
    backend = LocalStorageBackend(root=tmp_path / "absent")

    with pytest.raises(FileNotFoundError):
        asyncio.run(backend.list_buckets())
