from __future__ import annotations

import logging
import threading
from datetime import date
from typing import Any, Iterable, Mapping, Optional, Sequence

from ..core.constants import DEFAULT_WORKING_DAYS
from ..core.enums import CalendarEntryType, Role
from ..core.exceptions import AuthorizationError, NotFoundError, ValidationError
from .model import WeeklyWorkingPattern, WorkingCalendarEntry
from .repository import CalendarRepository
from .rules import WorkingCalendar

logger = logging.getLogger(__name__)


class CalendarService:
    """Admin writes on calendar entries and the weekly pattern, plus working-day queries.

    Queries run against an immutable ``WorkingCalendar`` snapshot. Every write
    persists first and then rebuilds and swaps the snapshot under one lock.
    """

    def __init__(self, calendar: CalendarRepository, *, default_working_days: Iterable[int] = DEFAULT_WORKING_DAYS):
        self._calendar = calendar
        self._default_working_days = tuple(default_working_days)
        self._write_lock = threading.Lock()
        self._snapshot = self._build_snapshot()

    def _build_snapshot(self) -> WorkingCalendar:
        days = self._calendar.get_working_days()
        if days is None:
            days = self._default_working_days
        return WorkingCalendar(pattern=WeeklyWorkingPattern.of(days), entries=tuple(self._calendar.list_entries()))

    def _refresh(self) -> None:
        self._snapshot = self._build_snapshot()

    @staticmethod
    def _require_admin(current_role: Role) -> None:
        if current_role != Role.ADMIN:
            raise AuthorizationError("Only admins can change the working calendar")

    def snapshot(self) -> WorkingCalendar:
        return self._snapshot

    def is_working_day(self, day: date) -> bool:
        return self._snapshot.is_working_day(day)

    def entries_on(self, day: date) -> list[WorkingCalendarEntry]:
        return self._snapshot.entries_on(day)

    def working_days_between(self, start: date, end: date) -> list[date]:
        if start > end:
            raise ValidationError("start must not be after end")
        return self._snapshot.working_days_between(start, end)

    def list_entries(
        self,
        *,
        start: Optional[date] = None,
        end: Optional[date] = None,
        entry_type: Optional[CalendarEntryType | str] = None,
    ) -> Sequence[WorkingCalendarEntry]:
        if start and end and start > end:
            raise ValidationError("start must not be after end")
        if entry_type is not None and not isinstance(entry_type, CalendarEntryType):
            try:
                entry_type = CalendarEntryType(entry_type)
            except ValueError:
                raise ValidationError(f"Unknown calendar entry type: {entry_type!r}") from None
        return self._calendar.list_entries(start=start, end=end, entry_type=entry_type)

    def create_entry(self, *, current_role: Role, data: Mapping[str, Any]) -> WorkingCalendarEntry:
        self._require_admin(current_role)

        # RangeError is raised here, before anything is persisted.
        entry = WorkingCalendarEntry.from_dict(data)

        with self._write_lock:
            entry_id = self._calendar.create(entry)
            self._refresh()

        logger.info("Calendar entry %s created: %s %s..%s", entry_id, entry.entry_type.value, entry.start_date, entry.end_date)
        return self._calendar.get(entry_id) or entry

    def update_entry(self, *, current_role: Role, entry_id: int, data: Mapping[str, Any]) -> WorkingCalendarEntry:
        self._require_admin(current_role)

        existing = self._calendar.get(int(entry_id))
        if not existing:
            raise NotFoundError("Calendar entry not found")

        merged = {**existing.to_dict(), **dict(data)}
        entry = WorkingCalendarEntry.from_dict(merged, entry_id=existing.entry_id, created_at=existing.created_at)

        with self._write_lock:
            if not self._calendar.update(entry):
                raise NotFoundError("Calendar entry not found")
            self._refresh()

        logger.info("Calendar entry %s updated", entry_id)
        return entry

    def delete_entry(self, *, current_role: Role, entry_id: int) -> None:
        self._require_admin(current_role)

        with self._write_lock:
            if not self._calendar.delete(int(entry_id)):
                raise NotFoundError("Calendar entry not found")
            self._refresh()

        logger.info("Calendar entry %s deleted", entry_id)

    def get_working_days(self) -> list[int]:
        return self._snapshot.pattern.to_list()

    def update_working_days(self, *, current_role: Role, days: Iterable[Any]) -> list[int]:
        self._require_admin(current_role)

        pattern = WeeklyWorkingPattern.of(days)
        if not pattern.days:
            raise ValidationError("At least one working day is required")

        with self._write_lock:
            self._calendar.save_working_days(pattern.to_list())
            self._refresh()

        logger.info("Weekly working days set to %s", pattern.to_list())
        return pattern.to_list()
