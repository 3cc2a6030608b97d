"""
TASKFLOW API - Date Helpers

RFC 3339 formatting for Google Tasks due dates and calendar-day
comparison in the configured time zone.
"""

from datetime import date, datetime, time, timezone
from typing import Optional
from zoneinfo import ZoneInfo, ZoneInfoNotFoundError

from app.config import settings


def utcnow() -> datetime:
    return datetime.now(timezone.utc)


def to_rfc3339(value: datetime) -> str:
    """Format as a UTC timestamp the way Google Tasks writes `due`."""
    if value.tzinfo is None:
        value = value.replace(tzinfo=timezone.utc)
    return value.astimezone(timezone.utc).strftime("%Y-%m-%dT%H:%M:%S.000Z")


def parse_timestamp(value: Optional[str]) -> Optional[datetime]:
    if not value:
        return None
    try:
        parsed = datetime.fromisoformat(value.replace("Z", "+00:00"))
    except ValueError:
        return None
    if parsed.tzinfo is None:
        parsed = parsed.replace(tzinfo=timezone.utc)
    return parsed


def local_zone() -> ZoneInfo:
    try:
        return ZoneInfo(settings.TIMEZONE)
    except (ZoneInfoNotFoundError, ValueError):
        return ZoneInfo("UTC")


def local_date(value: datetime) -> date:
    return value.astimezone(local_zone()).date()


def due_date(due: Optional[str]) -> Optional[date]:
    """
    Calendar day a task is due on.

    Google Tasks stores date-only due values as midnight UTC; those keep
    their UTC date. Anything with a time of day is read in the local zone.
    """
    parsed = parse_timestamp(due)
    if parsed is None:
        return None
    utc_value = parsed.astimezone(timezone.utc)
    if utc_value.time() == time(0, 0):
        return utc_value.date()
    return local_date(parsed)
