from __future__ import annotations

from datetime import datetime

from ...core.enums import AttendanceStatus
from ..window import ShiftWindow
from .base import AttendanceStrategy, StatusDecision


class EarlyLeaveStrategy(AttendanceStrategy):
    """Check-out before the early-leave cutoff, whatever the check-in was."""

    def decide_checkin(self, *, check_in: datetime, window: ShiftWindow) -> StatusDecision:
        return StatusDecision(status=AttendanceStatus.PRESENT)

    def decide_checkout(self, *, check_in: datetime, check_out: datetime, window: ShiftWindow, tentative: AttendanceStatus) -> StatusDecision:
        minutes = int((window.end - check_out).total_seconds() // 60)
        return StatusDecision(status=AttendanceStatus.EARLY_LEAVE, note=f"left {minutes} min before shift end")
