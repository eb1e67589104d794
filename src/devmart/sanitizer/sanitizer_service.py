"""Allow-list HTML sanitizer for rich text stored by the admin CMS.

Identifier placeholders such as ``{{client_name}}`` are swapped for private-use
markers before any pattern runs and restored at the end. Every step that
deletes markup re-emits the markers it swallowed, so placeholders survive
even when the tag around them is stripped. Braces holding anything other
than an identifier get no protection, and marker characters already present
in the input are dropped first.
"""

from __future__ import annotations

import asyncio
import re
from dataclasses import dataclass
from functools import partial

import structlog

from ..backend.backend_base import AuthUser
from ..events.events_repository import EventsRepository

logger = structlog.get_logger(__name__)

ALLOWED_TAGS: dict[str, tuple[str, ...]] = {
    "p": ("class", "style"),
    "h1": ("class", "style"),
    "h2": ("class", "style"),
    "h3": ("class", "style"),
    "h4": ("class", "style"),
    "h5": ("class", "style"),
    "h6": ("class", "style"),
    "strong": ("class",),
    "em": ("class",),
    "u": ("class",),
    "ul": ("class",),
    "ol": ("class",),
    "li": ("class",),
    "a": ("href", "target", "rel", "class"),
    "img": ("src", "alt", "width", "height", "style", "class"),
    "hr": ("class",),
    "blockquote": ("class", "style"),
    "code": ("class",),
    "pre": ("class",),
    "br": (),
    "div": ("class", "style"),
    "span": ("class", "style"),
}

PLACEHOLDER_RE = re.compile(r"\{\{\s*[\w.]+\s*\}\}")
MARKER_OPEN = "\ue000"
MARKER_CLOSE = "\ue001"
MARKER_RE = re.compile(MARKER_OPEN + r"(\d+)" + MARKER_CLOSE)
MARKER_CHARS_RE = re.compile(f"[{MARKER_OPEN}{MARKER_CLOSE}]")

SCRIPT_BLOCK_RE = re.compile(r"<script\b[^<]*(?:(?!</script>)<[^<]*)*</script>", re.IGNORECASE)
IFRAME_TAG_RE = re.compile(r"<iframe\b[^>]*>", re.IGNORECASE)
EVENT_HANDLER_DQ_RE = re.compile(r'\s*on\w+="[^"]*"', re.IGNORECASE)
EVENT_HANDLER_SQ_RE = re.compile(r"\s*on\w+='[^']*'", re.IGNORECASE)
JAVASCRIPT_URL_RE = re.compile(r"javascript:", re.IGNORECASE)
ATTRIBUTE_RE = re.compile(r"""(\w+)=["']([^"']*)["']""")

_TAG_PATTERNS = {tag: re.compile(rf"<{tag}\b([^>]*)>", re.IGNORECASE) for tag in ALLOWED_TAGS}
DISALLOWED_TAG_RE = re.compile(
    rf"<(?!/?(?:{'|'.join(ALLOWED_TAGS)})\b)[^>]+>",
    re.IGNORECASE,
)


@dataclass(slots=True, frozen=True)
class SanitizeResult:
    sanitized: str
    modified: bool


def sanitize_html(html: str | None) -> SanitizeResult:
    """Strip dangerous markup and every tag/attribute outside the allow-list."""
    if not html:
        return SanitizeResult(sanitized="", modified=False)

    text, placeholders = _protect_placeholders(MARKER_CHARS_RE.sub("", html))

    text = SCRIPT_BLOCK_RE.sub(_keep_markers, text)
    text = IFRAME_TAG_RE.sub(_keep_markers, text)
    text = EVENT_HANDLER_DQ_RE.sub(_keep_markers, text)
    text = EVENT_HANDLER_SQ_RE.sub(_keep_markers, text)
    text = JAVASCRIPT_URL_RE.sub("", text)

    for tag, allowed in ALLOWED_TAGS.items():
        text = _TAG_PATTERNS[tag].sub(partial(_rebuild_tag, tag, allowed), text)

    text = DISALLOWED_TAG_RE.sub(_keep_markers, text)

    restored = _restore_placeholders(text, placeholders)
    return SanitizeResult(sanitized=restored.strip(), modified=restored != html)


def _protect_placeholders(html: str) -> tuple[str, list[str]]:
    placeholders: list[str] = []

    def swap(match: re.Match[str]) -> str:
        placeholders.append(match.group(0))
        return f"{MARKER_OPEN}{len(placeholders) - 1}{MARKER_CLOSE}"

    return PLACEHOLDER_RE.sub(swap, html), placeholders


def _restore_placeholders(text: str, placeholders: list[str]) -> str:
    return MARKER_RE.sub(lambda m: placeholders[int(m.group(1))], text)


def _markers_in(fragment: str) -> list[str]:
    return [m.group(0) for m in MARKER_RE.finditer(fragment)]


def _keep_markers(match: re.Match[str]) -> str:
    return "".join(_markers_in(match.group(0)))


def _rebuild_tag(tag: str, allowed: tuple[str, ...], match: re.Match[str]) -> str:
    attrs = match.group(1)
    if not attrs:
        return f"<{tag}>"

    kept: list[str] = []
    for attr in ATTRIBUTE_RE.finditer(attrs):
        name, value = attr.group(1).lower(), attr.group(2)
        if name not in allowed:
            continue
        if name == "href" and "javascript:" in value.lower():
            continue
        kept.append(f'{name}="{value}"')

    rebuilt = f"<{tag} {' '.join(kept)}>" if kept else f"<{tag}>"
    kept_markers = _markers_in(" ".join(kept))
    dropped = [marker for marker in _markers_in(attrs) if marker not in kept_markers]
    return rebuilt + "".join(dropped)


@dataclass(slots=True)
class SanitizerService:
    """Sanitize HTML on behalf of a user and record modifications."""

    events: EventsRepository

    async def sanitize(self, html: str, user: AuthUser) -> SanitizeResult:
        result = sanitize_html(html)
        if result.modified:
            logger.info(
                "sanitizer.modified",
                user_id=user.id,
                original_length=len(html),
                sanitized_length=len(result.sanitized),
            )
            await asyncio.to_thread(
                partial(
                    self.events.log_event,
                    level="info",
                    area="proposals-templates",
                    message="HTML content sanitized",
                    meta={
                        "user_id": user.id,
                        "original_length": len(html),
                        "sanitized_length": len(result.sanitized),
                        "was_modified": result.modified,
                    },
                )
            )
        return result
