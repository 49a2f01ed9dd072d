from datetime import date

import pytest

from src.attendance_engine.attendance_engine.calendar.service import CalendarService
from src.attendance_engine.attendance_engine.core.enums import CalendarEntryStatus, CalendarEntryType, Role
from src.attendance_engine.attendance_engine.core.exceptions import (
    AuthorizationError,
    NotFoundError,
    RangeError,
    ValidationError,
)
from tests.fakes import InMemoryCalendar

SATURDAY = date(2025, 1, 4)


def _holiday(**overrides) -> dict:
    data = {"title": "Holiday", "type": "Holiday", "startDate": "2025-01-06", "endDate": "2025-01-07"}
    data.update(overrides)
    return data


def test_create_entry_updates_working_days():
    svc = CalendarService(InMemoryCalendar())

    entry = svc.create_entry(current_role=Role.ADMIN, data=_holiday())

    assert entry.entry_id == 1
    assert svc.is_working_day(date(2025, 1, 6)) is False


def test_create_entry_with_bad_range_is_not_persisted():
    repo = InMemoryCalendar()
    svc = CalendarService(repo)

    with pytest.raises(RangeError):
        svc.create_entry(current_role=Role.ADMIN, data=_holiday(startDate="2025-01-08", endDate="2025-01-07"))

    assert repo.list_entries() == []


def test_staff_cannot_write_calendar():
    svc = CalendarService(InMemoryCalendar())

    with pytest.raises(AuthorizationError):
        svc.create_entry(current_role=Role.STAFF, data=_holiday())
    with pytest.raises(AuthorizationError):
        svc.update_working_days(current_role=Role.STAFF, days=[1, 2])


def test_cancelling_entry_restores_pattern():
    svc = CalendarService(InMemoryCalendar())
    entry = svc.create_entry(current_role=Role.ADMIN, data=_holiday())

    updated = svc.update_entry(
        current_role=Role.ADMIN,
        entry_id=entry.entry_id,
        data={"status": CalendarEntryStatus.CANCELLED.value},
    )

    assert updated.title == "Holiday"
    assert updated.created_at == entry.created_at
    assert svc.is_working_day(date(2025, 1, 6)) is True


def test_delete_entry():
    svc = CalendarService(InMemoryCalendar())
    entry = svc.create_entry(current_role=Role.ADMIN, data=_holiday())

    svc.delete_entry(current_role=Role.ADMIN, entry_id=entry.entry_id)

    assert svc.is_working_day(date(2025, 1, 6)) is True
    with pytest.raises(NotFoundError):
        svc.delete_entry(current_role=Role.ADMIN, entry_id=entry.entry_id)


def test_update_missing_entry():
    svc = CalendarService(InMemoryCalendar())

    with pytest.raises(NotFoundError):
        svc.update_entry(current_role=Role.ADMIN, entry_id=42, data={"title": "x"})


def test_update_working_days():
    repo = InMemoryCalendar()
    svc = CalendarService(repo)
    assert svc.is_working_day(SATURDAY) is False

    saved = svc.update_working_days(current_role=Role.ADMIN, days=[6, 1, 2, 3, 4, 5])

    assert saved == [1, 2, 3, 4, 5, 6]
    assert repo.get_working_days() == [1, 2, 3, 4, 5, 6]
    assert svc.is_working_day(SATURDAY) is True


def test_empty_working_days_rejected():
    svc = CalendarService(InMemoryCalendar())

    with pytest.raises(ValidationError):
        svc.update_working_days(current_role=Role.ADMIN, days=[])
    assert svc.get_working_days() == [1, 2, 3, 4, 5]


def test_stored_pattern_beats_defaults():
    svc = CalendarService(InMemoryCalendar(working_days=[0, 6]), default_working_days=(1, 2, 3, 4, 5))

    assert svc.is_working_day(SATURDAY) is True
    assert svc.is_working_day(date(2025, 1, 6)) is False


def test_list_entries_by_type_and_range():
    svc = CalendarService(InMemoryCalendar())
    svc.create_entry(current_role=Role.ADMIN, data=_holiday())
    svc.create_entry(
        current_role=Role.ADMIN,
        data={"title": "Retro", "type": CalendarEntryType.MEETING.value, "startDate": "2025-02-03"},
    )

    assert [e.title for e in svc.list_entries(entry_type="Meeting")] == ["Retro"]
    assert [e.title for e in svc.list_entries(start=date(2025, 1, 1), end=date(2025, 1, 31))] == ["Holiday"]
    with pytest.raises(ValidationError):
        svc.list_entries(entry_type="Party")


def test_working_days_between_counts_overrides():
    svc = CalendarService(InMemoryCalendar())
    svc.create_entry(current_role=Role.ADMIN, data=_holiday())
    svc.create_entry(
        current_role=Role.ADMIN,
        data={"title": "Make-up", "type": CalendarEntryType.WORKING_DAY.value, "startDate": "2025-01-04"},
    )

    days = svc.working_days_between(date(2025, 1, 4), date(2025, 1, 10))

    assert days == [SATURDAY, date(2025, 1, 8), date(2025, 1, 9), date(2025, 1, 10)]
    with pytest.raises(ValidationError):
        svc.working_days_between(date(2025, 1, 10), date(2025, 1, 4))
