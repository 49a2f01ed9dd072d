from __future__ import annotations

from datetime import date, datetime, timezone
from typing import Optional, Sequence

from ..common.datetime_utils import utc_naive
from ..core.enums import AttendanceStatus, ShiftName
from ..database.connection import DatabaseConnection
from ..database.mysql_base import changed, db_cursor, fetchall, fetchone
from .model import AttendanceRecord
from .repository import AttendanceRepository

_COLUMNS = """
    attendance_id, user_id, user_name, work_date, shift, check_in_time, check_out_time,
    status, tentative_status, note
"""


def _stored(value: Optional[datetime]) -> Optional[datetime]:
    # DATETIME columns hold naive UTC
    return utc_naive(value) if value is not None else None


def _loaded(value: Optional[datetime]) -> Optional[datetime]:
    return value.replace(tzinfo=timezone.utc) if value is not None else None


def _to_record(r: dict) -> AttendanceRecord:
    tentative = r.get("tentative_status")
    return AttendanceRecord(
        attendance_id=int(r["attendance_id"]),
        user_id=int(r["user_id"]),
        user_name=r.get("user_name") or "",
        work_date=r["work_date"],
        shift=ShiftName(r["shift"]),
        check_in_time=_loaded(r.get("check_in_time")),
        check_out_time=_loaded(r.get("check_out_time")),
        status=AttendanceStatus(r["status"]),
        tentative_status=AttendanceStatus(tentative) if tentative else None,
        note=r.get("note"),
    )


class MySQLAttendanceRepository(AttendanceRepository):
    def __init__(self, conn_factory: DatabaseConnection):
        self._conn_factory = conn_factory

    def get(self, attendance_id: int) -> Optional[AttendanceRecord]:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(f"SELECT {_COLUMNS} FROM attendance_records WHERE attendance_id=%s", (int(attendance_id),))
            r = fetchone(cur)
            return _to_record(r) if r else None

    def get_for_user_and_date(self, user_id: int, work_date: date, shift: ShiftName) -> Optional[AttendanceRecord]:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                f"""
                SELECT {_COLUMNS}
                FROM attendance_records
                WHERE user_id=%s AND work_date=%s AND shift=%s
                """,
                (int(user_id), work_date, shift.value),
            )
            r = fetchone(cur)
            return _to_record(r) if r else None

    def get_open_for_user(self, user_id: int, work_date: date) -> Optional[AttendanceRecord]:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                f"""
                SELECT {_COLUMNS}
                FROM attendance_records
                WHERE user_id=%s AND work_date=%s
                  AND check_in_time IS NOT NULL AND check_out_time IS NULL
                ORDER BY check_in_time DESC
                LIMIT 1
                """,
                (int(user_id), work_date),
            )
            r = fetchone(cur)
            return _to_record(r) if r else None

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
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                """
                INSERT INTO attendance_records(
                    user_id, user_name, work_date, shift, check_in_time, status, tentative_status, note
                )
                VALUES(%s,%s,%s,%s,%s,%s,%s,%s)
                """,
                (
                    int(user_id),
                    user_name,
                    work_date,
                    shift.value,
                    _stored(check_in_time),
                    status.value,
                    tentative_status.value if tentative_status else None,
                    note,
                ),
            )
            return int(cur.lastrowid)

    def update_checkout(
        self,
        *,
        attendance_id: int,
        check_out_time: datetime,
        status: AttendanceStatus,
        note: Optional[str] = None,
    ) -> bool:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                """
                UPDATE attendance_records
                SET check_out_time=%s, status=%s, note=%s
                WHERE attendance_id=%s
                """,
                (_stored(check_out_time), status.value, note, int(attendance_id)),
            )
            return changed(cur)

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
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                """
                UPDATE attendance_records
                SET check_in_time=%s, check_out_time=%s, status=%s, tentative_status=%s, note=%s
                WHERE attendance_id=%s
                """,
                (
                    _stored(check_in_time),
                    _stored(check_out_time),
                    status.value,
                    tentative_status.value if tentative_status else None,
                    note,
                    int(attendance_id),
                ),
            )
            return changed(cur)

    def delete(self, attendance_id: int) -> bool:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute("DELETE FROM attendance_records WHERE attendance_id=%s", (int(attendance_id),))
            return changed(cur)

    def list_range(
        self,
        *,
        start_date: Optional[date] = None,
        end_date: Optional[date] = None,
        shift: Optional[ShiftName] = None,
    ) -> Sequence[AttendanceRecord]:
        clauses: list[str] = []
        params: list[object] = []
        if start_date is not None:
            clauses.append("work_date >= %s")
            params.append(start_date)
        if end_date is not None:
            clauses.append("work_date <= %s")
            params.append(end_date)
        if shift is not None:
            clauses.append("shift=%s")
            params.append(shift.value)

        where = f"WHERE {' AND '.join(clauses)}" if clauses else ""

        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                f"""
                SELECT {_COLUMNS}
                FROM attendance_records
                {where}
                ORDER BY work_date DESC, user_name ASC, attendance_id ASC
                """,
                tuple(params),
            )
            return [_to_record(r) for r in fetchall(cur)]

    def list_for_user_name(self, name: str, limit: int) -> Sequence[AttendanceRecord]:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                f"""
                SELECT {_COLUMNS}
                FROM attendance_records
                WHERE user_name=%s
                ORDER BY work_date DESC, attendance_id DESC
                LIMIT %s
                """,
                (name, int(limit)),
            )
            return [_to_record(r) for r in fetchall(cur)]

    def list_users(self) -> Sequence[tuple[int, str]]:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                """
                SELECT user_id, MAX(user_name) AS user_name
                FROM attendance_records
                GROUP BY user_id
                ORDER BY user_name
                """
            )
            return [(int(r["user_id"]), r.get("user_name") or "") for r in fetchall(cur)]
