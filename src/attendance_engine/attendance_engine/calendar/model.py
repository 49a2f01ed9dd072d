from __future__ import annotations

from calendar import monthrange
from dataclasses import dataclass, field
from datetime import date, datetime, timedelta
from typing import Any, Iterable, Mapping, Optional

from ..common.datetime_utils import parse_iso_date, parse_iso_datetime, utc_naive
from ..common.validators import require_int, require_non_empty
from ..core.enums import CalendarEntryStatus, CalendarEntryType, Recurrence
from ..core.exceptions import RangeError, ValidationError


def js_weekday(day: date) -> int:
    """Weekday index with 0=Sunday .. 6=Saturday."""
    return (day.weekday() + 1) % 7


def _shift_months(day: date, months: int) -> date:
    total = day.year * 12 + (day.month - 1) + months
    year, month = divmod(total, 12)
    month += 1
    return date(year, month, min(day.day, monthrange(year, month)[1]))


@dataclass(frozen=True)
class WeeklyWorkingPattern:
    """Weekdays on which attendance is expected when no calendar entry says otherwise."""

    days: frozenset[int]

    def __post_init__(self):
        object.__setattr__(self, "days", frozenset(self.days))
        if any(isinstance(d, bool) or not isinstance(d, int) or not 0 <= d <= 6 for d in self.days):
            raise ValidationError("Working days must be weekday indices 0 (Sunday) .. 6 (Saturday)")

    @classmethod
    def of(cls, days: Iterable[Any]) -> "WeeklyWorkingPattern":
        return cls(frozenset(require_int(d, "workingDays", minimum=0, maximum=6) for d in days))

    def contains(self, day: date) -> bool:
        return js_weekday(day) in self.days

    def to_list(self) -> list[int]:
        return sorted(self.days)


@dataclass(frozen=True)
class WorkingCalendarEntry:
    """Domain entity: an admin-created calendar entry (holiday, event, special working day, ...).

    ``start_date``/``end_date`` are an inclusive, full-day range. Recurring
    entries repeat that span from ``start_date`` onward.
    """

    title: str
    entry_type: CalendarEntryType
    start_date: date
    end_date: date
    status: CalendarEntryStatus = CalendarEntryStatus.UPCOMING
    created_at: datetime = field(default_factory=utc_naive)
    entry_id: Optional[int] = None
    description: Optional[str] = None
    color: Optional[str] = None
    location: Optional[str] = None
    is_full_day: bool = True
    recurrence: Recurrence = Recurrence.NONE

    def __post_init__(self):
        if self.start_date > self.end_date:
            raise RangeError(
                f"Calendar entry '{self.title}' ends ({self.end_date}) before it starts ({self.start_date})"
            )

    @property
    def is_cancelled(self) -> bool:
        return self.status == CalendarEntryStatus.CANCELLED

    @property
    def span_days(self) -> int:
        return (self.end_date - self.start_date).days

    def occurs_on(self, day: date) -> bool:
        if day < self.start_date:
            return False

        rec = self.recurrence
        if rec == Recurrence.NONE:
            return day <= self.end_date
        if rec == Recurrence.DAILY:
            return True
        if rec == Recurrence.WEEKLY:
            return (day - self.start_date).days % 7 <= self.span_days

        step = 1 if rec == Recurrence.MONTHLY else 12
        months = (day.year - self.start_date.year) * 12 + (day.month - self.start_date.month)
        n = months - months % step
        while n >= 0:
            occurrence = _shift_months(self.start_date, n)
            if occurrence + timedelta(days=self.span_days) < day:
                # occurrences only get earlier from here
                return False
            if occurrence <= day:
                return True
            n -= step
        return False

    def overlaps(self, start: date, end: date) -> bool:
        if self.recurrence == Recurrence.NONE:
            return self.start_date <= end and self.end_date >= start
        if end < self.start_date:
            return False
        day = max(start, self.start_date)
        while day <= end:
            if self.occurs_on(day):
                return True
            day += timedelta(days=1)
        return False

    @classmethod
    def from_dict(cls, data: Mapping[str, Any], *, entry_id: Optional[int] = None, created_at: Optional[datetime] = None) -> "WorkingCalendarEntry":
        try:
            entry_type = CalendarEntryType(data.get("type") or CalendarEntryType.OTHER.value)
            status = CalendarEntryStatus(data.get("status") or CalendarEntryStatus.UPCOMING.value)
            recurrence = Recurrence(data.get("recurrence") or Recurrence.NONE.value)
        except ValueError as e:
            raise ValidationError(str(e)) from None

        start_raw = data.get("startDate")
        end_raw = data.get("endDate") or start_raw
        if not start_raw:
            raise ValidationError("startDate is required")

        return cls(
            entry_id=entry_id,
            title=require_non_empty(data.get("title") or "", "title"),
            entry_type=entry_type,
            start_date=parse_iso_date(str(start_raw)),
            end_date=parse_iso_date(str(end_raw)),
            status=status,
            created_at=utc_naive(created_at or parse_iso_datetime(data.get("createdAt"))),
            description=data.get("description") or None,
            color=data.get("color") or None,
            location=data.get("location") or None,
            is_full_day=bool(data.get("isFullDay", True)),
            recurrence=recurrence,
        )

    def to_dict(self) -> dict:
        return {
            "_id": self.entry_id,
            "title": self.title,
            "description": self.description,
            "type": self.entry_type.value,
            "color": self.color,
            "startDate": self.start_date.isoformat(),
            "endDate": self.end_date.isoformat(),
            "isFullDay": self.is_full_day,
            "status": self.status.value,
            "location": self.location,
            "recurrence": self.recurrence.value,
            "createdAt": self.created_at.isoformat(),
        }
