from __future__ import annotations

from dataclasses import dataclass
from datetime import date, datetime
from typing import Optional

from ..core.enums import AttendanceStatus, ShiftName


@dataclass(frozen=True)
class AttendanceRecord:
    """Domain entity: one user's attendance for one shift on one date."""

    attendance_id: int
    user_id: int
    user_name: str
    work_date: date
    shift: ShiftName
    check_in_time: Optional[datetime]
    check_out_time: Optional[datetime]
    status: AttendanceStatus
    tentative_status: Optional[AttendanceStatus] = None
    note: Optional[str] = None

    @property
    def is_open(self) -> bool:
        return self.check_in_time is not None and self.check_out_time is None

    def to_dict(self) -> dict:
        return {
            "_id": self.attendance_id,
            "user": {"_id": self.user_id, "name": self.user_name},
            "date": self.work_date.isoformat(),
            "shift": self.shift.value,
            "checkInTime": self.check_in_time.isoformat() if self.check_in_time else None,
            "checkOutTime": self.check_out_time.isoformat() if self.check_out_time else None,
            "status": self.status.value,
            "note": self.note,
        }


@dataclass(frozen=True)
class AttendanceEvent:
    """A raw check-in or check-out delivered by the event source (kiosk, device, ...)."""

    user_id: int
    timestamp: datetime
    shift: Optional[ShiftName] = None
    user_name: str = ""
    client_ip: Optional[str] = None


@dataclass(frozen=True)
class ResolvedStatus:
    """Read-time view of a record.

    ``abnormal`` marks a record still checked in past the no-checkout grace
    period. It is derived from ``now`` and never stored.
    """

    status: Optional[AttendanceStatus]
    tentative: Optional[AttendanceStatus] = None
    abnormal: bool = False
