from __future__ import annotations

from dataclasses import dataclass
from datetime import datetime

from ..core.enums import AttendanceStatus
from .strategies.absent_strategy import AbsentStrategy
from .strategies.base import AttendanceStrategy
from .strategies.early_strategy import EarlyLeaveStrategy
from .strategies.late_strategy import LateStrategy
from .strategies.normal_strategy import NormalStrategy
from .window import ShiftWindow, elapsed_hours


@dataclass
class AttendanceStrategyFactory:
    """Factory Pattern: choose appropriate strategy based on rules.

    ``check_in`` is expected already clamped to the earliest allowed instant.
    """

    def for_checkin(self, *, check_in: datetime, window: ShiftWindow) -> AttendanceStrategy:
        if check_in <= window.grace_end:
            return NormalStrategy()
        return LateStrategy()

    def for_checkout(
        self,
        *,
        check_in: datetime,
        check_out: datetime,
        window: ShiftWindow,
        tentative: AttendanceStatus,
    ) -> AttendanceStrategy:
        # minimum hours is a floor checked before anything else
        if elapsed_hours(check_in, check_out) < window.min_hours_for_present:
            return AbsentStrategy()
        if check_out < window.early_leave_cutoff:
            return EarlyLeaveStrategy()
        if tentative == AttendanceStatus.LATE:
            return LateStrategy()
        return NormalStrategy()
