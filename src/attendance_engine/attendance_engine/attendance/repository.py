from __future__ import annotations

from datetime import date, datetime
from typing import Optional, Protocol, Sequence

from ..core.enums import AttendanceStatus, ShiftName
from .model import AttendanceRecord


class AttendanceRepository(Protocol):
    def get(self, attendance_id: int) -> Optional[AttendanceRecord]:
        raise NotImplementedError

    def get_for_user_and_date(self, user_id: int, work_date: date, shift: ShiftName) -> Optional[AttendanceRecord]:
        raise NotImplementedError

    def get_open_for_user(self, user_id: int, work_date: date) -> Optional[AttendanceRecord]:
        """The user's record on ``work_date`` that has a check-in but no check-out."""

        raise NotImplementedError

    def create_checkin(
        self,
        *,
        user_id: int,
        user_name: str,
        work_date: date,
        shift: ShiftName,
        check_in_time: datetime,
        status: AttendanceStatus,
        tentative_status: Optional[AttendanceStatus],
        note: Optional[str] = None,
    ) -> int:
        raise NotImplementedError

    def update_checkout(
        self,
        *,
        attendance_id: int,
        check_out_time: datetime,
        status: AttendanceStatus,
        note: Optional[str] = None,
    ) -> bool:
        raise NotImplementedError

    def admin_update_record(
        self,
        *,
        attendance_id: int,
        check_in_time: Optional[datetime],
        check_out_time: Optional[datetime],
        status: AttendanceStatus,
        tentative_status: Optional[AttendanceStatus],
        note: Optional[str] = None,
    ) -> bool:
        """Admin-only correction of a stored record."""

        raise NotImplementedError

    def delete(self, attendance_id: int) -> bool:
        raise NotImplementedError

    def list_range(
        self,
        *,
        start_date: Optional[date] = None,
        end_date: Optional[date] = None,
        shift: Optional[ShiftName] = None,
    ) -> Sequence[AttendanceRecord]:
        """All records with work_date in [start_date, end_date]; open bounds when None."""

        raise NotImplementedError

    def list_for_user_name(self, name: str, limit: int) -> Sequence[AttendanceRecord]:
        raise NotImplementedError

    def list_users(self) -> Sequence[tuple[int, str]]:
        """Distinct (user_id, user_name) pairs that appear in attendance records."""

        raise NotImplementedError
