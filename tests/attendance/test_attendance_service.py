from datetime import date, datetime, timezone

import pytest

from src.attendance_engine.attendance_engine.attendance.model import AttendanceEvent
from src.attendance_engine.attendance_engine.core.enums import AttendanceStatus, CalendarEntryType, Role, ShiftName
from src.attendance_engine.attendance_engine.core.exceptions import (
    AuthorizationError,
    DuplicateCheckInError,
    IPNotAllowedError,
    MissingCheckInForCheckOutError,
    NotFoundError,
    OffDayCheckInError,
    ValidationError,
)
from tests.fakes import make_record, settings_payload

MONDAY = date(2025, 1, 6)
SATURDAY = date(2025, 1, 4)


def _at(hour: int, minute: int = 0, day: date = MONDAY) -> datetime:
    return datetime(day.year, day.month, day.day, hour, minute, tzinfo=timezone.utc)


def _event(hour: int, minute: int = 0, *, day: date = MONDAY, shift=ShiftName.MORNING, ip=None) -> AttendanceEvent:
    return AttendanceEvent(user_id=1, user_name="An", timestamp=_at(hour, minute, day), shift=shift, client_ip=ip)


def test_checkin_stores_checked_in_with_tentative_status(container, attendance_repo):
    record = container.attendance_service.check_in(_event(9, 20))

    stored = attendance_repo.get(record.attendance_id)
    assert stored.status == AttendanceStatus.CHECKED_IN
    assert stored.tentative_status == AttendanceStatus.LATE
    assert stored.work_date == MONDAY


def test_checkout_stores_final_status(container, attendance_repo):
    container.attendance_service.check_in(_event(9, 5))
    record = container.attendance_service.check_out(_event(15, 30, shift=None))

    assert record.status == AttendanceStatus.EARLY_LEAVE
    assert attendance_repo.get(record.attendance_id).status == AttendanceStatus.EARLY_LEAVE


def test_late_checkin_then_full_shift_stays_late(container):
    container.attendance_service.check_in(_event(9, 20))
    record = container.attendance_service.check_out(_event(17, 0))

    assert record.status == AttendanceStatus.LATE


def test_off_day_checkin_is_rejected_without_mutation(container, attendance_repo):
    with pytest.raises(OffDayCheckInError) as exc:
        container.attendance_service.check_in(_event(9, 0, day=SATURDAY))

    assert exc.value.work_date == SATURDAY
    assert attendance_repo.all() == []


def test_holiday_blocks_checkin(container, attendance_repo):
    container.calendar_service.create_entry(
        current_role=Role.ADMIN,
        data={"title": "Tet", "type": CalendarEntryType.HOLIDAY.value, "startDate": "2025-01-06"},
    )

    with pytest.raises(OffDayCheckInError):
        container.attendance_service.check_in(_event(9, 0))
    assert attendance_repo.all() == []


def test_checkout_succeeds_after_day_becomes_holiday(container, attendance_repo):
    record = container.attendance_service.check_in(_event(9, 0))
    container.calendar_service.create_entry(
        current_role=Role.ADMIN,
        data={"title": "Storm closure", "type": CalendarEntryType.HOLIDAY.value, "startDate": "2025-01-06"},
    )

    closed = container.attendance_service.check_out(_event(17, 0, shift=None))

    assert closed.status == AttendanceStatus.PRESENT
    assert attendance_repo.get(record.attendance_id).check_out_time == _at(17, 0)

    corrected = container.attendance_service.admin_update_record(
        current_role=Role.ADMIN,
        attendance_id=record.attendance_id,
        check_in_time=_at(9, 0),
        check_out_time=_at(16, 0),
        now=_at(20, 0),
    )
    assert corrected.status == AttendanceStatus.EARLY_LEAVE


def test_checkout_uses_tentative_status_stored_at_checkin(container):
    container.attendance_service.check_in(_event(9, 20))
    relaxed = settings_payload()
    relaxed["shifts"]["Morning"]["lateThresholdMinutes"] = 30
    container.settings_store.update(current_role=Role.ADMIN, settings=relaxed)

    record = container.attendance_service.check_out(_event(17, 0))

    assert record.status == AttendanceStatus.LATE
    assert record.tentative_status == AttendanceStatus.LATE


def test_duplicate_checkin_raises(container):
    container.attendance_service.check_in(_event(9, 0))

    with pytest.raises(DuplicateCheckInError) as exc:
        container.attendance_service.check_in(_event(9, 30))
    assert exc.value.check_in == _at(9, 0)


def test_same_day_second_shift_is_allowed(container, attendance_repo):
    container.attendance_service.check_in(_event(9, 0))
    container.attendance_service.check_in(_event(14, 0, shift=ShiftName.EVENING))

    assert len(attendance_repo.all()) == 2


def test_checkout_without_checkin_raises(container):
    with pytest.raises(MissingCheckInForCheckOutError):
        container.attendance_service.check_out(_event(17, 0))


def test_checkin_requires_shift(container):
    with pytest.raises(ValidationError):
        container.attendance_service.check_in(_event(9, 0, shift=None))


def test_ip_allow_list(container, attendance_repo):
    container.settings_store.update(current_role=Role.ADMIN, settings=settings_payload(allowedIPs=["10.0.0.5"]))

    with pytest.raises(IPNotAllowedError):
        container.attendance_service.check_in(_event(9, 0, ip="10.0.0.9"))
    assert attendance_repo.all() == []

    container.attendance_service.check_in(_event(9, 0, ip="10.0.0.5"))
    assert len(attendance_repo.all()) == 1


def test_resolve_status_is_idempotent(container):
    record = make_record(
        1,
        check_in=_at(9, 0),
        check_out=None,
        status=AttendanceStatus.CHECKED_IN,
        tentative=AttendanceStatus.PRESENT,
    )
    svc = container.attendance_service

    first = svc.resolve(record, now=_at(19, 0))
    second = svc.resolve(record, now=_at(19, 0))

    assert first == second
    assert first.status == AttendanceStatus.CHECKED_IN
    assert first.abnormal is True


def test_resolve_closed_record_returns_stored_status(container):
    record = make_record(1, check_in=_at(9, 0), check_out=_at(17, 0), status=AttendanceStatus.PRESENT)

    assert container.attendance_service.resolve_status(record, now=_at(20, 0)) == AttendanceStatus.PRESENT


def test_admin_update_reclassifies(container, attendance_repo):
    record = container.attendance_service.check_in(_event(9, 0))

    updated = container.attendance_service.admin_update_record(
        current_role=Role.ADMIN,
        attendance_id=record.attendance_id,
        check_in_time=_at(9, 30),
        check_out_time=_at(17, 0),
        note="badge reader fault",
        now=_at(20, 0),
    )

    assert updated.status == AttendanceStatus.LATE
    assert attendance_repo.get(record.attendance_id).note == "badge reader fault"


def test_admin_cannot_clear_checkin_before_day_ends(container, attendance_repo):
    record = container.attendance_service.check_in(_event(9, 0))

    with pytest.raises(ValidationError):
        container.attendance_service.admin_update_record(
            current_role=Role.ADMIN,
            attendance_id=record.attendance_id,
            check_in_time=None,
            check_out_time=None,
            now=_at(12, 0),
        )
    assert attendance_repo.get(record.attendance_id).check_in_time == _at(9, 0)

    updated = container.attendance_service.admin_update_record(
        current_role=Role.ADMIN,
        attendance_id=record.attendance_id,
        check_in_time=None,
        check_out_time=None,
        now=_at(8, 0, day=date(2025, 1, 7)),
    )
    assert updated.status == AttendanceStatus.ABSENT
    assert updated.tentative_status is None


def test_admin_update_requires_admin(container):
    record = container.attendance_service.check_in(_event(9, 0))

    with pytest.raises(AuthorizationError):
        container.attendance_service.admin_update_record(
            current_role=Role.STAFF,
            attendance_id=record.attendance_id,
            check_in_time=_at(9, 0),
            check_out_time=_at(17, 0),
        )


def test_delete_record(container, attendance_repo):
    record = container.attendance_service.check_in(_event(9, 0))

    container.attendance_service.delete_record(current_role=Role.ADMIN, attendance_id=record.attendance_id)

    assert attendance_repo.all() == []
    with pytest.raises(NotFoundError):
        container.attendance_service.delete_record(current_role=Role.ADMIN, attendance_id=record.attendance_id)


def test_day_board_marks_missing_users_absent_after_the_day(container, attendance_repo):
    attendance_repo.add(make_record(1, user_id=1, user_name="An", check_in=_at(9, 0), check_out=_at(17, 0)))
    roster = [(1, "An"), (2, "Binh")]

    rows = container.attendance_service.day_board(MONDAY, roster, now=_at(8, 0, day=date(2025, 1, 7)))

    assert [(r.user_name, r.status) for r in rows] == [
        ("An", AttendanceStatus.PRESENT),
        ("Binh", AttendanceStatus.ABSENT),
    ]


def test_day_board_has_no_status_on_non_working_day(container):
    rows = container.attendance_service.day_board(SATURDAY, [(2, "Binh")], now=_at(8, 0, day=MONDAY))

    assert rows[0].status is None
