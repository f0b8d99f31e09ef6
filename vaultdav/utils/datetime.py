"""Datetime helpers."""

from __future__ import annotations

from datetime import datetime, timezone
from email.utils import parsedate_to_datetime


def utcnow() -> datetime:
    """Timezone-aware current UTC time."""
    return datetime.now(timezone.utc)


def parse_http_date(value: str | None) -> datetime | None:
    """Parse an RFC 1123 date (``getlastmodified``), None if unparseable."""
    if not value:
        return None
    try:
        parsed = parsedate_to_datetime(value)
    except (TypeError, ValueError):
        return None
    if parsed.tzinfo is None:
        parsed = parsed.replace(tzinfo=timezone.utc)
    return parsed


def parse_datetime(value: str | None) -> datetime | None:
    """Parse an RFC 1123 or ISO 8601 timestamp, None if neither matches."""
    parsed = parse_http_date(value)
    if parsed is not None or not value:
        return parsed
    try:
        parsed = datetime.fromisoformat(value)
    except ValueError:
        return None
    if parsed.tzinfo is None:
        parsed = parsed.replace(tzinfo=timezone.utc)
    return parsed
