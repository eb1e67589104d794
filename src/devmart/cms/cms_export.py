"""CSV export helpers for admin tables."""

from __future__ import annotations

import csv
import io
from collections.abc import Awaitable, Callable, Mapping, Sequence
from datetime import date
from pathlib import PurePosixPath
from typing import Any

from ..exceptions import ExportError

BOM = "\ufeff"

CONTACT_SUBMISSION_HEADERS = ["id", "name", "email", "subject", "created_at"]
PROJECT_HEADERS = ["id", "title", "slug", "status", "published_at", "created_at"]
BLOG_POST_HEADERS = ["id", "title", "slug", "status", "tags", "published_at", "created_at"]
SERVICE_HEADERS = ["id", "title", "slug", "status", "published_at", "created_at"]
PAGE_HEADERS = ["id", "title", "slug", "status", "published_at", "created_at"]
ORDER_HEADERS = ["id", "provider", "amount_cents", "currency", "status", "created_at", "order_id"]

EXPORT_PRESETS: dict[str, tuple[str, list[str]]] = {
    "contact_submissions": ("contact_submissions.csv", CONTACT_SUBMISSION_HEADERS),
    "projects": ("projects.csv", PROJECT_HEADERS),
    "blog_posts": ("blog_posts.csv", BLOG_POST_HEADERS),
    "services": ("services.csv", SERVICE_HEADERS),
    "pages": ("pages.csv", PAGE_HEADERS),
    "orders": ("payments.csv", ORDER_HEADERS),
}


def export_to_csv(
    rows: Sequence[Mapping[str, Any]],
    filename: str,
    *,
    include_timestamp: bool = True,
    custom_headers: Sequence[str] | None = None,
    today: date | None = None,
) -> tuple[str, str]:
    """Render ``rows`` as BOM-prefixed CSV and return ``(filename, content)``.

    Headers default to the keys of the first row. Values containing commas,
    quotes or newlines are quoted; ``None`` renders as an empty cell.
    """
    if not rows:
        raise ExportError("No data to export")

    headers = list(custom_headers or rows[0].keys())
    buffer = io.StringIO()
    writer = csv.writer(buffer, quoting=csv.QUOTE_MINIMAL, lineterminator="\n")
    writer.writerow(headers)
    for row in rows:
        writer.writerow([_format_value(row.get(header)) for header in headers])

    content = BOM + buffer.getvalue().rstrip("\n")
    return _timestamped(filename, today or date.today()) if include_timestamp else filename, content


async def export_large_csv(
    fetcher: Callable[[int, int], Awaitable[Sequence[Mapping[str, Any]]]],
    total: int,
    filename: str,
    *,
    chunk_size: int = 1000,
    on_progress: Callable[[float], None] | None = None,
    custom_headers: Sequence[str] | None = None,
) -> tuple[str, str]:
    """Fetch ``total`` rows in ``chunk_size`` pages, then export them at once."""
    rows: list[Mapping[str, Any]] = []
    offset = 0
    while offset < total:
        rows.extend(await fetcher(offset, chunk_size))
        offset += chunk_size
        if on_progress is not None:
            on_progress(min(offset / total * 100, 100.0))
    return export_to_csv(rows, filename, custom_headers=custom_headers)


def export_preset(name: str, rows: Sequence[Mapping[str, Any]]) -> tuple[str, str]:
    try:
        filename, headers = EXPORT_PRESETS[name]
    except KeyError as exc:
        raise ExportError(f"Unknown export '{name}'") from exc
    return export_to_csv(rows, filename, custom_headers=headers)


def _format_value(value: Any) -> str:
    if value is None:
        return ""
    if isinstance(value, (list, tuple)):
        return ",".join(str(item) for item in value)
    if hasattr(value, "isoformat"):
        return value.isoformat()
    return str(value)


def _timestamped(filename: str, today: date) -> str:
    path = PurePosixPath(filename)
    return f"{path.stem}_{today.strftime('%Y%m%d')}{path.suffix}"
