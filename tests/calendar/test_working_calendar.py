from datetime import date, datetime

import pytest

from src.attendance_engine.attendance_engine.calendar.model import WeeklyWorkingPattern, js_weekday
from src.attendance_engine.attendance_engine.calendar.rules import build_calendar
from src.attendance_engine.attendance_engine.core.enums import CalendarEntryStatus, CalendarEntryType, Recurrence
from src.attendance_engine.attendance_engine.core.exceptions import RangeError, ValidationError
from tests.fakes import calendar_entry

WEEKDAYS = (1, 2, 3, 4, 5)
MONDAY = date(2025, 1, 6)
SATURDAY = date(2025, 1, 4)


def test_weekly_pattern_applies_without_entries():
    cal = build_calendar(WEEKDAYS)

    assert cal.is_working_day(MONDAY) is True
    assert cal.is_working_day(SATURDAY) is False


def test_js_weekday_starts_on_sunday():
    assert js_weekday(date(2025, 1, 5)) == 0
    assert js_weekday(SATURDAY) == 6


def test_working_day_entry_overrides_off_day():
    cal = build_calendar(WEEKDAYS, [calendar_entry("Make-up day", CalendarEntryType.WORKING_DAY, SATURDAY)])

    assert cal.is_working_day(SATURDAY) is True


def test_holiday_overrides_working_day():
    cal = build_calendar(WEEKDAYS, [calendar_entry("New Year", CalendarEntryType.HOLIDAY, MONDAY, date(2025, 1, 7))])

    assert cal.is_working_day(MONDAY) is False
    assert cal.is_working_day(date(2025, 1, 7)) is False
    assert cal.is_working_day(date(2025, 1, 8)) is True


def test_other_entry_makes_day_non_working():
    cal = build_calendar(WEEKDAYS, [calendar_entry("Office move", CalendarEntryType.OTHER, MONDAY)])

    assert cal.is_working_day(MONDAY) is False


@pytest.mark.parametrize("entry_type", [CalendarEntryType.EVENT, CalendarEntryType.MEETING])
def test_informational_entries_do_not_override(entry_type):
    cal = build_calendar(WEEKDAYS, [calendar_entry("Town hall", entry_type, MONDAY)])

    assert cal.is_working_day(MONDAY) is True
    assert cal.deciding_entry(MONDAY) is None


def test_cancelled_entries_are_ignored():
    cal = build_calendar(
        WEEKDAYS,
        [calendar_entry("Cancelled holiday", CalendarEntryType.HOLIDAY, MONDAY, status=CalendarEntryStatus.CANCELLED)],
    )

    assert cal.is_working_day(MONDAY) is True
    assert cal.entries_on(MONDAY) == []


def test_most_recent_override_wins():
    holiday = calendar_entry("Holiday", CalendarEntryType.HOLIDAY, MONDAY, created_at=datetime(2025, 1, 1))
    make_up = calendar_entry("Work anyway", CalendarEntryType.WORKING_DAY, MONDAY, created_at=datetime(2025, 1, 2))

    assert build_calendar(WEEKDAYS, [holiday, make_up]).is_working_day(MONDAY) is True

    later_holiday = calendar_entry("Holiday again", CalendarEntryType.HOLIDAY, MONDAY, created_at=datetime(2025, 1, 3))
    assert build_calendar(WEEKDAYS, [holiday, make_up, later_holiday]).is_working_day(MONDAY) is False


def test_working_day_wins_a_tie():
    same = datetime(2025, 1, 1, 12, 0)
    cal = build_calendar(
        WEEKDAYS,
        [
            calendar_entry("Holiday", CalendarEntryType.HOLIDAY, MONDAY, created_at=same),
            calendar_entry("Work", CalendarEntryType.WORKING_DAY, MONDAY, created_at=same),
        ],
    )

    assert cal.is_working_day(MONDAY) is True


def test_entry_ending_before_start_is_rejected():
    with pytest.raises(RangeError):
        calendar_entry("Broken", CalendarEntryType.HOLIDAY, date(2025, 1, 10), date(2025, 1, 9))


def test_pattern_rejects_out_of_range_weekday():
    with pytest.raises(ValidationError):
        WeeklyWorkingPattern.of([1, 7])


def test_weekly_recurrence():
    entry = calendar_entry("Friday off", CalendarEntryType.HOLIDAY, date(2025, 1, 10), recurrence=Recurrence.WEEKLY)
    cal = build_calendar(WEEKDAYS, [entry])

    assert cal.is_working_day(date(2025, 1, 17)) is False
    assert cal.is_working_day(date(2025, 1, 16)) is True
    assert cal.is_working_day(date(2025, 1, 3)) is True


def test_yearly_recurrence_spanning_days():
    entry = calendar_entry(
        "National Day", CalendarEntryType.HOLIDAY, date(2024, 9, 2), date(2024, 9, 3), recurrence=Recurrence.YEARLY
    )

    assert entry.occurs_on(date(2025, 9, 2)) is True
    assert entry.occurs_on(date(2025, 9, 3)) is True
    assert entry.occurs_on(date(2025, 9, 4)) is False


def test_monthly_recurrence_clamps_to_month_end():
    entry = calendar_entry("Closing", CalendarEntryType.OTHER, date(2025, 1, 31), recurrence=Recurrence.MONTHLY)

    assert entry.occurs_on(date(2025, 2, 28)) is True
    assert entry.occurs_on(date(2025, 3, 31)) is True
    assert entry.occurs_on(date(2025, 3, 30)) is False


def test_working_days_between():
    cal = build_calendar(WEEKDAYS, [calendar_entry("Holiday", CalendarEntryType.HOLIDAY, date(2025, 1, 8))])

    days = cal.working_days_between(date(2025, 1, 4), date(2025, 1, 12))

    assert days == [date(2025, 1, 6), date(2025, 1, 7), date(2025, 1, 9), date(2025, 1, 10)]
