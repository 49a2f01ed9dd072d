from __future__ import annotations

import logging
from dataclasses import dataclass
from datetime import date, datetime
from typing import Optional, Protocol, Sequence

from ..common.datetime_utils import now_local, to_zone
from ..core.constants import DEFAULT_HISTORY_LIMIT
from ..core.enums import AttendanceStatus, Role, ShiftName
from ..core.exceptions import (
    AuthorizationError,
    DuplicateCheckInError,
    IPNotAllowedError,
    MissingCheckInForCheckOutError,
    NotFoundError,
    OffDayCheckInError,
    ValidationError,
)
from ..shifts.store import SettingsStore
from .classifier import AttendanceClassifier
from .model import AttendanceEvent, AttendanceRecord, ResolvedStatus
from .repository import AttendanceRepository

logger = logging.getLogger(__name__)


class WorkingDayResolver(Protocol):
    def is_working_day(self, day: date) -> bool:
        raise NotImplementedError


@dataclass(frozen=True)
class DayStatusRow:
    """One roster user's standing on one date (day board)."""

    user_id: int
    user_name: str
    work_date: date
    status: Optional[AttendanceStatus]
    record: Optional[AttendanceRecord] = None
    abnormal: bool = False

    def to_dict(self) -> dict:
        rec = self.record
        return {
            "user": {"_id": self.user_id, "name": self.user_name},
            "date": self.work_date.isoformat(),
            "status": self.status.value if self.status else None,
            "shift": rec.shift.value if rec else None,
            "checkInTime": rec.check_in_time.isoformat() if rec and rec.check_in_time else None,
            "checkOutTime": rec.check_out_time.isoformat() if rec and rec.check_out_time else None,
            "abnormal": self.abnormal,
        }


class AttendanceService:
    """Ingests check-in/check-out events and answers status queries.

    Statuses are decided once, at ingestion (or admin correction), and stored.
    Read-time views only add what depends on ``now``: the abnormal flag for
    open records and Absent for users who never checked in.
    """

    def __init__(
        self,
        attendance: AttendanceRepository,
        settings: SettingsStore,
        calendar: WorkingDayResolver,
        *,
        classifier: AttendanceClassifier | None = None,
    ):
        self._attendance = attendance
        self._settings = settings
        self._calendar = calendar
        self._classifier = classifier or AttendanceClassifier()

    def check_in(self, event: AttendanceEvent) -> AttendanceRecord:
        if event.shift is None:
            raise ValidationError("shift is required for check-in")

        snapshot = self._settings.snapshot()
        shift = snapshot.shift(event.shift)
        gs = snapshot.global_settings

        local_in = to_zone(event.timestamp, gs.zone)
        work_date = local_in.date()

        if not gs.is_ip_allowed(event.client_ip):
            logger.warning("Check-in from %s rejected for user %s", event.client_ip, event.user_id)
            raise IPNotAllowedError(user_id=event.user_id, work_date=work_date, check_in=local_in)

        existing = self._attendance.get_for_user_and_date(event.user_id, work_date, shift.shift_name)
        if existing:
            raise DuplicateCheckInError(
                user_id=event.user_id,
                work_date=work_date,
                check_in=existing.check_in_time,
                check_out=existing.check_out_time,
            )

        is_working_day = self._calendar.is_working_day(work_date)
        try:
            decision = self._classifier.decide_checkin(shift, gs, is_working_day, local_in, user_id=event.user_id)
        except OffDayCheckInError:
            logger.warning("Off-day check-in rejected: user %s on %s", event.user_id, work_date)
            raise

        attendance_id = self._attendance.create_checkin(
            user_id=event.user_id,
            user_name=event.user_name,
            work_date=work_date,
            shift=shift.shift_name,
            check_in_time=local_in,
            status=AttendanceStatus.CHECKED_IN,
            tentative_status=decision.status,
            note=decision.note,
        )
        logger.info("User %s checked in (%s, %s)", event.user_id, shift.shift_name.value, decision.status.value)

        return AttendanceRecord(
            attendance_id=attendance_id,
            user_id=event.user_id,
            user_name=event.user_name,
            work_date=work_date,
            shift=shift.shift_name,
            check_in_time=local_in,
            check_out_time=None,
            status=AttendanceStatus.CHECKED_IN,
            tentative_status=decision.status,
            note=decision.note,
        )

    def check_out(self, event: AttendanceEvent) -> AttendanceRecord:
        snapshot = self._settings.snapshot()
        gs = snapshot.global_settings

        local_out = to_zone(event.timestamp, gs.zone)
        work_date = local_out.date()

        if event.shift is not None:
            record = self._attendance.get_for_user_and_date(event.user_id, work_date, ShiftName(event.shift))
            if record and not record.is_open:
                record = None
        else:
            record = self._attendance.get_open_for_user(event.user_id, work_date)

        if not record:
            logger.warning("Check-out without open check-in: user %s on %s", event.user_id, work_date)
            raise MissingCheckInForCheckOutError(user_id=event.user_id, work_date=work_date, check_out=local_out)

        if local_out < record.check_in_time:
            raise ValidationError("Check-out precedes check-in")

        shift = snapshot.shift(record.shift)
        decision = self._classifier.decide_checkout(
            shift,
            gs,
            record.check_in_time,
            local_out,
            tentative=record.tentative_status,
        )

        note = decision.note or record.note
        if not self._attendance.update_checkout(
            attendance_id=record.attendance_id,
            check_out_time=local_out,
            status=decision.status,
            note=note,
        ):
            raise NotFoundError("Attendance record not found")
        logger.info("User %s checked out: %s", event.user_id, decision.status.value)

        return AttendanceRecord(
            attendance_id=record.attendance_id,
            user_id=record.user_id,
            user_name=record.user_name,
            work_date=record.work_date,
            shift=record.shift,
            check_in_time=record.check_in_time,
            check_out_time=local_out,
            status=decision.status,
            tentative_status=record.tentative_status,
            note=note,
        )

    def resolve(self, record: AttendanceRecord, *, now: datetime | None = None) -> ResolvedStatus:
        snapshot = self._settings.snapshot()
        gs = snapshot.global_settings
        now = now or now_local(gs.zone)

        if record.is_open:
            shift = snapshot.shift(record.shift)
            abnormal = self._classifier.is_abnormal(shift, gs, record.check_in_time, None, now)
            return ResolvedStatus(
                status=AttendanceStatus.CHECKED_IN,
                tentative=record.tentative_status,
                abnormal=abnormal,
            )
        return ResolvedStatus(status=record.status, tentative=record.tentative_status)

    def resolve_status(self, record: AttendanceRecord, *, now: datetime | None = None) -> Optional[AttendanceStatus]:
        return self.resolve(record, now=now).status

    def admin_update_record(
        self,
        *,
        current_role: Role,
        attendance_id: int,
        check_in_time: Optional[datetime],
        check_out_time: Optional[datetime],
        note: Optional[str] = None,
        now: datetime | None = None,
    ) -> AttendanceRecord:
        """Replace a record's timestamps and reclassify it with the current settings."""
        if current_role != Role.ADMIN:
            raise AuthorizationError("Only admins can correct attendance records")

        record = self._attendance.get(int(attendance_id))
        if not record:
            raise NotFoundError("Attendance record not found")

        snapshot = self._settings.snapshot()
        shift = snapshot.shift(record.shift)
        gs = snapshot.global_settings
        tz = gs.zone
        now = now or now_local(tz)

        local_in = to_zone(check_in_time, tz) if check_in_time else None
        local_out = to_zone(check_out_time, tz) if check_out_time else None

        if local_in and local_in.date() != record.work_date:
            raise ValidationError("Check-in must fall on the record's date")
        if local_in and local_out and local_out < local_in:
            raise ValidationError("Check-out precedes check-in")

        is_working_day = self._calendar.is_working_day(record.work_date)
        status = self._classifier.classify(
            shift, gs, is_working_day, local_in, local_out, now, work_date=record.work_date
        )
        if status is None:
            if not is_working_day:
                raise ValidationError("No attendance is expected on a non-working day; delete the record instead")
            raise ValidationError("Check-in cannot be removed before the working day has ended")

        tentative = self._classifier.tentative_status(shift, gs, local_in) if local_in else None

        if not self._attendance.admin_update_record(
            attendance_id=record.attendance_id,
            check_in_time=local_in,
            check_out_time=local_out,
            status=status,
            tentative_status=tentative,
            note=note,
        ):
            raise NotFoundError("Attendance record not found")
        logger.info("Attendance record %s corrected: %s", attendance_id, status.value)

        return AttendanceRecord(
            attendance_id=record.attendance_id,
            user_id=record.user_id,
            user_name=record.user_name,
            work_date=record.work_date,
            shift=record.shift,
            check_in_time=local_in,
            check_out_time=local_out,
            status=status,
            tentative_status=tentative,
            note=note,
        )

    def delete_record(self, *, current_role: Role, attendance_id: int) -> None:
        if current_role != Role.ADMIN:
            raise AuthorizationError("Only admins can delete attendance records")
        if not self._attendance.delete(int(attendance_id)):
            raise NotFoundError("Attendance record not found")
        logger.info("Attendance record %s deleted", attendance_id)

    def history_by_name(self, name: str, *, limit: int = DEFAULT_HISTORY_LIMIT) -> Sequence[AttendanceRecord]:
        if not name or not name.strip():
            raise ValidationError("name is required")
        return self._attendance.list_for_user_name(name.strip(), int(limit))

    def day_board(
        self,
        work_date: date,
        roster: Sequence[tuple[int, str]],
        *,
        now: datetime | None = None,
    ) -> list[DayStatusRow]:
        """Status of every roster user on ``work_date``.

        Users without a record are Absent once a working day has elapsed and
        have no status otherwise.
        """
        snapshot = self._settings.snapshot()
        gs = snapshot.global_settings
        now = now or now_local(gs.zone)
        is_working_day = self._calendar.is_working_day(work_date)

        by_user: dict[int, list[AttendanceRecord]] = {}
        for r in self._attendance.list_range(start_date=work_date, end_date=work_date):
            by_user.setdefault(r.user_id, []).append(r)

        # shift only matters for timing; without a check-in any config will do
        any_shift = snapshot.shift(ShiftName.MORNING)

        rows: list[DayStatusRow] = []
        for user_id, user_name in roster:
            records = by_user.get(user_id)
            if not records:
                status = self._classifier.classify(
                    any_shift, gs, is_working_day, None, None, now, work_date=work_date
                )
                rows.append(DayStatusRow(user_id=user_id, user_name=user_name, work_date=work_date, status=status))
                continue
            for r in records:
                resolved = self.resolve(r, now=now)
                rows.append(
                    DayStatusRow(
                        user_id=user_id,
                        user_name=user_name,
                        work_date=work_date,
                        status=resolved.status,
                        record=r,
                        abnormal=resolved.abnormal,
                    )
                )

        rows.sort(key=lambda row: (row.user_name.casefold(), row.user_id))
        return rows
