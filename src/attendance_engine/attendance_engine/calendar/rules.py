"""Working-day resolution.

Calendar entries override the weekly pattern through a small table of rules
instead of a class hierarchy. Every rule maps an entry type to the working-day
status it forces and a priority used when two overriding entries were created
at the same instant.
"""

from __future__ import annotations

from dataclasses import dataclass
from datetime import date, timedelta
from typing import Iterable, Optional, Sequence

from ..core.enums import CalendarEntryType
from .model import WeeklyWorkingPattern, WorkingCalendarEntry


@dataclass(frozen=True)
class OverrideRule:
    entry_type: CalendarEntryType
    forces_working: bool
    priority: int


OVERRIDE_RULES: tuple[OverrideRule, ...] = (
    OverrideRule(CalendarEntryType.WORKING_DAY, forces_working=True, priority=2),
    OverrideRule(CalendarEntryType.HOLIDAY, forces_working=False, priority=1),
    OverrideRule(CalendarEntryType.OTHER, forces_working=False, priority=1),
)

_RULES_BY_TYPE = {rule.entry_type: rule for rule in OVERRIDE_RULES}


def rule_for(entry: WorkingCalendarEntry) -> Optional[OverrideRule]:
    """Event and Meeting entries have no rule: they are informational only."""
    return _RULES_BY_TYPE.get(entry.entry_type)


@dataclass(frozen=True)
class WorkingCalendar:
    """Immutable snapshot of the weekly pattern plus all calendar entries."""

    pattern: WeeklyWorkingPattern
    entries: tuple[WorkingCalendarEntry, ...] = ()

    def __post_init__(self):
        object.__setattr__(self, "entries", tuple(self.entries))

    def entries_on(self, day: date) -> list[WorkingCalendarEntry]:
        """Non-cancelled entries in effect on ``day``, oldest first."""
        found = [e for e in self.entries if not e.is_cancelled and e.occurs_on(day)]
        found.sort(key=lambda e: e.created_at)
        return found

    def deciding_entry(self, day: date) -> Optional[WorkingCalendarEntry]:
        """The entry whose rule decides ``day``, or None when the weekly pattern applies.

        Most recently created overriding entry wins; on equal creation time
        the higher rule priority (Working Day) wins.
        """
        winner: Optional[WorkingCalendarEntry] = None
        winner_key = None
        for entry in self.entries_on(day):
            rule = rule_for(entry)
            if rule is None:
                continue
            key = (entry.created_at, rule.priority)
            if winner_key is None or key > winner_key:
                winner, winner_key = entry, key
        return winner

    def is_working_day(self, day: date) -> bool:
        entry = self.deciding_entry(day)
        if entry is None:
            return self.pattern.contains(day)
        rule = rule_for(entry)
        return bool(rule and rule.forces_working)

    def working_days_between(self, start: date, end: date) -> list[date]:
        days: list[date] = []
        day = start
        while day <= end:
            if self.is_working_day(day):
                days.append(day)
            day += timedelta(days=1)
        return days


def build_calendar(days: Iterable[int], entries: Sequence[WorkingCalendarEntry] = ()) -> WorkingCalendar:
    return WorkingCalendar(pattern=WeeklyWorkingPattern.of(days), entries=tuple(entries))
