from datetime import date, datetime, timezone

from src.attendance_engine.attendance_engine.attendance.factory import AttendanceStrategyFactory
from src.attendance_engine.attendance_engine.attendance.strategies.absent_strategy import AbsentStrategy
from src.attendance_engine.attendance_engine.attendance.strategies.early_strategy import EarlyLeaveStrategy
from src.attendance_engine.attendance_engine.attendance.strategies.late_strategy import LateStrategy
from src.attendance_engine.attendance_engine.attendance.strategies.normal_strategy import NormalStrategy
from src.attendance_engine.attendance_engine.attendance.window import ShiftWindow
from src.attendance_engine.attendance_engine.core.enums import AttendanceStatus, ShiftName
from src.attendance_engine.attendance_engine.shifts.model import GlobalAttendanceSettings, ShiftConfig

MORNING = ShiftConfig(shift_name=ShiftName.MORNING, start_hour=9, end_hour=17)
DAY = date(2025, 1, 6)


def _at(hour: int, minute: int = 0) -> datetime:
    return datetime(2025, 1, 6, hour, minute, tzinfo=timezone.utc)


def _window() -> ShiftWindow:
    return ShiftWindow.build(MORNING, GlobalAttendanceSettings(), DAY)


def test_factory_checkin_on_time_within_grace():
    factory = AttendanceStrategyFactory()
    strategy = factory.for_checkin(check_in=_at(9, 15), window=_window())

    assert isinstance(strategy, NormalStrategy)


def test_factory_checkin_late_after_grace():
    factory = AttendanceStrategyFactory()
    strategy = factory.for_checkin(check_in=_at(9, 16), window=_window())

    assert isinstance(strategy, LateStrategy)
    decision = strategy.decide_checkin(check_in=_at(9, 16), window=_window())
    assert decision.status == AttendanceStatus.LATE
    assert "16 min" in decision.note


def test_factory_checkout_minimum_hours_checked_first():
    factory = AttendanceStrategyFactory()
    strategy = factory.for_checkout(
        check_in=_at(9, 0),
        check_out=_at(13, 0),
        window=_window(),
        tentative=AttendanceStatus.PRESENT,
    )

    assert isinstance(strategy, AbsentStrategy)


def test_factory_checkout_early_leave_beats_late():
    factory = AttendanceStrategyFactory()
    strategy = factory.for_checkout(
        check_in=_at(9, 20),
        check_out=_at(16, 29),
        window=_window(),
        tentative=AttendanceStatus.LATE,
    )

    assert isinstance(strategy, EarlyLeaveStrategy)


def test_factory_checkout_keeps_late():
    factory = AttendanceStrategyFactory()
    strategy = factory.for_checkout(
        check_in=_at(9, 20),
        check_out=_at(17, 0),
        window=_window(),
        tentative=AttendanceStatus.LATE,
    )

    assert isinstance(strategy, LateStrategy)
