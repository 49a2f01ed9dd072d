from __future__ import annotations

from datetime import datetime

from ...core.enums import AttendanceStatus
from ..window import ShiftWindow, elapsed_hours
from .base import AttendanceStrategy, StatusDecision


class AbsentStrategy(AttendanceStrategy):
    """Attendance shorter than the shift's minimum hours does not count as presence."""

    def decide_checkin(self, *, check_in: datetime, window: ShiftWindow) -> StatusDecision:
        return StatusDecision(status=AttendanceStatus.ABSENT)

    def decide_checkout(self, *, check_in: datetime, check_out: datetime, window: ShiftWindow, tentative: AttendanceStatus) -> StatusDecision:
        worked = elapsed_hours(check_in, check_out)
        return StatusDecision(
            status=AttendanceStatus.ABSENT,
            note=f"worked {worked:.2f}h, below minimum {window.min_hours_for_present}h",
        )
