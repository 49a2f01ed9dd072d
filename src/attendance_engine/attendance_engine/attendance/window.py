from __future__ import annotations

from dataclasses import dataclass
from datetime import date, datetime, timedelta, timezone
from zoneinfo import ZoneInfo

from ..shifts.model import GlobalAttendanceSettings, ShiftConfig


@dataclass(frozen=True)
class ShiftWindow:
    """Absolute instants of one shift on one date, in the settings timezone."""

    work_date: date
    tz: ZoneInfo
    start: datetime
    end: datetime
    earliest_check_in: datetime
    grace_end: datetime
    early_leave_cutoff: datetime
    no_checkout_deadline: datetime
    min_hours_for_present: int

    @classmethod
    def build(cls, shift: ShiftConfig, settings: GlobalAttendanceSettings, work_date: date) -> "ShiftWindow":
        tz = settings.zone
        start = shift.starts_at(work_date, tz)
        end = shift.ends_at(work_date, tz)
        return cls(
            work_date=work_date,
            tz=tz,
            start=start,
            end=end,
            earliest_check_in=start - timedelta(minutes=settings.allow_early_check_in),
            grace_end=start + timedelta(minutes=shift.late_threshold_minutes),
            early_leave_cutoff=end - timedelta(minutes=shift.early_leave_threshold_minutes),
            no_checkout_deadline=end + timedelta(minutes=shift.no_checkout_late_minutes),
            min_hours_for_present=shift.min_hours_for_present,
        )

    def clamp_check_in(self, check_in: datetime) -> datetime:
        """Arrivals earlier than the allowance count as arriving at the earliest allowed instant."""
        return max(check_in, self.earliest_check_in)


def elapsed_hours(start: datetime, end: datetime) -> float:
    # compare in UTC so wall-clock jumps (DST) don't distort the duration
    delta = end.astimezone(timezone.utc) - start.astimezone(timezone.utc)
    return delta.total_seconds() / 3600
