"""Attendance status classification.

Pure functions of (shift config, global settings, working-day flag,
timestamps, now). Nothing here reads storage or mutates state, so the
classifier is safe to call from any number of request threads as long as
each call is handed one settings snapshot.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from datetime import date, datetime
from typing import Optional

from ..common.datetime_utils import to_zone
from ..core.enums import AttendanceStatus
from ..core.exceptions import MissingCheckInForCheckOutError, OffDayCheckInError
from ..shifts.model import GlobalAttendanceSettings, ShiftConfig
from .factory import AttendanceStrategyFactory
from .strategies.base import StatusDecision
from .window import ShiftWindow


@dataclass
class AttendanceClassifier:
    factory: AttendanceStrategyFactory = field(default_factory=AttendanceStrategyFactory)

    def work_date_of(self, timestamp: datetime, settings: GlobalAttendanceSettings) -> date:
        return to_zone(timestamp, settings.zone).date()

    def window(self, shift: ShiftConfig, settings: GlobalAttendanceSettings, work_date: date) -> ShiftWindow:
        return ShiftWindow.build(shift, settings, work_date)

    def _arrival(
        self, shift: ShiftConfig, settings: GlobalAttendanceSettings, check_in: datetime
    ) -> StatusDecision:
        local_in = to_zone(check_in, settings.zone)
        window = self.window(shift, settings, local_in.date())
        effective_in = window.clamp_check_in(local_in)
        strategy = self.factory.for_checkin(check_in=effective_in, window=window)
        return strategy.decide_checkin(check_in=effective_in, window=window)

    def decide_checkin(
        self,
        shift: ShiftConfig,
        settings: GlobalAttendanceSettings,
        is_working_day: bool,
        check_in: datetime,
        *,
        user_id: Optional[int] = None,
    ) -> StatusDecision:
        """Tentative status at check-in: Present within the grace period, else Late.

        Only a new check-in is refused on a non-working day; a record that
        already exists is closed and corrected whatever the calendar says now.
        """
        if not is_working_day:
            local_in = to_zone(check_in, settings.zone)
            raise OffDayCheckInError(user_id=user_id, work_date=local_in.date(), check_in=check_in)
        return self._arrival(shift, settings, check_in)

    def decide_checkout(
        self,
        shift: ShiftConfig,
        settings: GlobalAttendanceSettings,
        check_in: datetime,
        check_out: datetime,
        *,
        tentative: Optional[AttendanceStatus] = None,
    ) -> StatusDecision:
        """Final status; ``tentative`` is the status stored at check-in, recomputed when absent."""
        if tentative is None:
            tentative = self._arrival(shift, settings, check_in).status

        tz = settings.zone
        local_in = to_zone(check_in, tz)
        local_out = to_zone(check_out, tz)
        window = self.window(shift, settings, local_in.date())
        effective_in = window.clamp_check_in(local_in)

        strategy = self.factory.for_checkout(
            check_in=effective_in,
            check_out=local_out,
            window=window,
            tentative=tentative,
        )
        return strategy.decide_checkout(
            check_in=effective_in,
            check_out=local_out,
            window=window,
            tentative=tentative,
        )

    def tentative_status(
        self,
        shift: ShiftConfig,
        settings: GlobalAttendanceSettings,
        check_in: datetime,
    ) -> AttendanceStatus:
        return self._arrival(shift, settings, check_in).status

    def classify(
        self,
        shift: ShiftConfig,
        settings: GlobalAttendanceSettings,
        is_working_day: bool,
        check_in: Optional[datetime],
        check_out: Optional[datetime],
        now: datetime,
        *,
        work_date: Optional[date] = None,
    ) -> Optional[AttendanceStatus]:
        """Status of one shift on one date.

        Returns None when no status is generated yet: a non-working day
        without check-in, or a working day that has not fully elapsed.
        ``work_date`` is required only when there is no check-in.
        """
        if check_in is None:
            if check_out is not None:
                raise MissingCheckInForCheckOutError(work_date=work_date, check_out=check_out)
            if work_date is None:
                raise ValueError("work_date is required when there is no check-in")
            if not is_working_day:
                return None
            if to_zone(now, settings.zone).date() > work_date:
                return AttendanceStatus.ABSENT
            return None

        if check_out is None:
            return AttendanceStatus.CHECKED_IN

        return self.decide_checkout(shift, settings, check_in, check_out).status

    def is_abnormal(
        self,
        shift: ShiftConfig,
        settings: GlobalAttendanceSettings,
        check_in: Optional[datetime],
        check_out: Optional[datetime],
        now: datetime,
    ) -> bool:
        """Checked in, never checked out, and past shift end plus the no-checkout grace."""
        if check_in is None or check_out is not None:
            return False
        tz = settings.zone
        window = self.window(shift, settings, to_zone(check_in, tz).date())
        return to_zone(now, tz) > window.no_checkout_deadline
