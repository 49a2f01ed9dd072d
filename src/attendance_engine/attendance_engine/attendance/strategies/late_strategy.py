from __future__ import annotations

from datetime import datetime

from ...core.enums import AttendanceStatus
from ..window import ShiftWindow
from .base import AttendanceStrategy, StatusDecision


class LateStrategy(AttendanceStrategy):
    """Check-in after the grace period. Lateness survives a full-length check-out."""

    def decide_checkin(self, *, check_in: datetime, window: ShiftWindow) -> StatusDecision:
        minutes = int((check_in - window.start).total_seconds() // 60)
        return StatusDecision(status=AttendanceStatus.LATE, note=f"{minutes} min after shift start")

    def decide_checkout(self, *, check_in: datetime, check_out: datetime, window: ShiftWindow, tentative: AttendanceStatus) -> StatusDecision:
        return StatusDecision(status=AttendanceStatus.LATE)
