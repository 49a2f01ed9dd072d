from __future__ import annotations

from datetime import date, datetime, timedelta, timezone
from typing import Optional
from zoneinfo import ZoneInfo, ZoneInfoNotFoundError

from ..core.exceptions import ValidationError


def parse_iso_date(value: str) -> date:
    """Parse YYYY-MM-DD string into date."""
    try:
        return datetime.strptime(value[:10], "%Y-%m-%d").date()
    except (TypeError, ValueError):
        raise ValidationError(f"Invalid date: {value!r}") from None


def parse_iso_datetime(value: Optional[str]) -> Optional[datetime]:
    """Parse an ISO-8601 timestamp. A trailing ``Z`` is accepted as UTC."""
    if value is None or value == "":
        return None
    text = str(value).strip()
    if text.endswith("Z"):
        text = text[:-1] + "+00:00"
    try:
        return datetime.fromisoformat(text)
    except ValueError:
        raise ValidationError(f"Invalid timestamp: {value!r}") from None


def get_zone(name: str) -> ZoneInfo:
    try:
        return ZoneInfo(name)
    except (ZoneInfoNotFoundError, ValueError):
        raise ValidationError(f"Unknown timezone: {name!r}") from None


def to_zone(value: datetime, tz: ZoneInfo) -> datetime:
    """Express ``value`` in ``tz``. Naive timestamps are taken as already local to ``tz``."""
    if value.tzinfo is None:
        return value.replace(tzinfo=tz)
    return value.astimezone(tz)


def at_minutes(day: date, minutes: int, tz: ZoneInfo) -> datetime:
    """Instant ``minutes`` after local midnight of ``day`` (wall clock, so 24:00 is next midnight)."""
    return datetime.combine(day, datetime.min.time(), tzinfo=tz) + timedelta(minutes=minutes)


def now_local(tz: Optional[ZoneInfo] = None) -> datetime:
    """Current time in ``tz``.

    Note: Wrapped so tests can patch/mocked easier.
    """
    return datetime.now(tz)


def resolve_date_filter(name: str, today: date) -> tuple[Optional[date], Optional[date]]:
    """Translate a named date preset into an inclusive (start, end) range.

    Weeks start on Sunday. ``overall`` is unbounded on both ends.
    """
    if name == "today":
        return today, today
    if name == "yesterday":
        yesterday = today - timedelta(days=1)
        return yesterday, yesterday
    if name == "thisWeek":
        # date.weekday(): Monday=0 .. Sunday=6
        since_sunday = (today.weekday() + 1) % 7
        return today - timedelta(days=since_sunday), today
    if name == "thisMonth":
        return today.replace(day=1), today
    if name == "previousMonth":
        month_start = today.replace(day=1)
        prev_end = month_start - timedelta(days=1)
        return prev_end.replace(day=1), prev_end
    if name == "overall":
        return None, None
    raise ValidationError(f"Unknown date filter: {name!r}")


def utc_naive(value: Optional[datetime] = None) -> datetime:
    """Naive UTC timestamp, the form stored for creation times."""
    if value is None:
        return datetime.now(timezone.utc).replace(tzinfo=None)
    if value.tzinfo is None:
        return value
    return value.astimezone(timezone.utc).replace(tzinfo=None)
