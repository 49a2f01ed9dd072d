from __future__ import annotations

from datetime import datetime

from ...core.enums import AttendanceStatus
from ..window import ShiftWindow
from .base import AttendanceStrategy, StatusDecision


class NormalStrategy(AttendanceStrategy):
    """On-time check-in, full-length check-out."""

    def decide_checkin(self, *, check_in: datetime, window: ShiftWindow) -> StatusDecision:
        return StatusDecision(status=AttendanceStatus.PRESENT)

    def decide_checkout(self, *, check_in: datetime, check_out: datetime, window: ShiftWindow, tentative: AttendanceStatus) -> StatusDecision:
        return StatusDecision(status=AttendanceStatus.PRESENT)
