from __future__ import annotations

from datetime import date
from typing import Optional, Protocol, Sequence

from ..core.enums import CalendarEntryType
from .model import WorkingCalendarEntry


class CalendarRepository(Protocol):
    def list_entries(
        self,
        *,
        start: Optional[date] = None,
        end: Optional[date] = None,
        entry_type: Optional[CalendarEntryType] = None,
    ) -> Sequence[WorkingCalendarEntry]:
        """List entries, optionally restricted to those touching [start, end] and one type."""

        raise NotImplementedError

    def get(self, entry_id: int) -> Optional[WorkingCalendarEntry]:
        raise NotImplementedError

    def create(self, entry: WorkingCalendarEntry) -> int:
        """Persist a new entry.

        Returns entry_id.
        """

        raise NotImplementedError

    def update(self, entry: WorkingCalendarEntry) -> bool:
        raise NotImplementedError

    def delete(self, entry_id: int) -> bool:
        raise NotImplementedError

    def get_working_days(self) -> Optional[Sequence[int]]:
        raise NotImplementedError

    def save_working_days(self, days: Sequence[int]) -> None:
        raise NotImplementedError
