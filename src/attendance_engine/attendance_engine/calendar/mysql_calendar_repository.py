from __future__ import annotations

from datetime import date
from typing import Optional, Sequence

from ..core.enums import CalendarEntryStatus, CalendarEntryType, Recurrence
from ..database.connection import DatabaseConnection
from ..database.mysql_base import changed, db_cursor, fetchall, fetchone
from .model import WorkingCalendarEntry
from .repository import CalendarRepository

_COLUMNS = """
    entry_id, title, description, entry_type, color, start_date, end_date,
    is_full_day, status, location, recurrence, created_at
"""


def _to_entry(r: dict) -> WorkingCalendarEntry:
    return WorkingCalendarEntry(
        entry_id=int(r["entry_id"]),
        title=r["title"],
        description=r.get("description"),
        entry_type=CalendarEntryType(r["entry_type"]),
        color=r.get("color"),
        start_date=r["start_date"],
        end_date=r["end_date"],
        is_full_day=bool(r.get("is_full_day", 1)),
        status=CalendarEntryStatus(r["status"]),
        location=r.get("location"),
        recurrence=Recurrence(r.get("recurrence") or Recurrence.NONE.value),
        created_at=r["created_at"],
    )


class MySQLCalendarRepository(CalendarRepository):
    def __init__(self, conn_factory: DatabaseConnection):
        self._conn_factory = conn_factory

    def list_entries(
        self,
        *,
        start: Optional[date] = None,
        end: Optional[date] = None,
        entry_type: Optional[CalendarEntryType] = None,
    ) -> Sequence[WorkingCalendarEntry]:
        clauses: list[str] = []
        params: list[object] = []
        if entry_type is not None:
            clauses.append("entry_type=%s")
            params.append(entry_type.value)
        if start is not None:
            # recurring entries can touch the window from any earlier start
            clauses.append("(end_date >= %s OR recurrence <> 'None')")
            params.append(start)
        if end is not None:
            clauses.append("start_date <= %s")
            params.append(end)

        where = f"WHERE {' AND '.join(clauses)}" if clauses else ""

        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                f"""
                SELECT {_COLUMNS}
                FROM calendar_entries
                {where}
                ORDER BY start_date, entry_id
                """,
                tuple(params),
            )
            entries = [_to_entry(r) for r in fetchall(cur)]

        if start is not None and end is not None:
            entries = [e for e in entries if e.overlaps(start, end)]
        return entries

    def get(self, entry_id: int) -> Optional[WorkingCalendarEntry]:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(f"SELECT {_COLUMNS} FROM calendar_entries WHERE entry_id=%s", (int(entry_id),))
            r = fetchone(cur)
            return _to_entry(r) if r else None

    def create(self, entry: WorkingCalendarEntry) -> int:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                """
                INSERT INTO calendar_entries(
                    title, description, entry_type, color, start_date, end_date,
                    is_full_day, status, location, recurrence, created_at
                )
                VALUES(%s,%s,%s,%s,%s,%s,%s,%s,%s,%s,%s)
                """,
                (
                    entry.title,
                    entry.description,
                    entry.entry_type.value,
                    entry.color,
                    entry.start_date,
                    entry.end_date,
                    int(entry.is_full_day),
                    entry.status.value,
                    entry.location,
                    entry.recurrence.value,
                    entry.created_at,
                ),
            )
            return int(cur.lastrowid)

    def update(self, entry: WorkingCalendarEntry) -> bool:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                """
                UPDATE calendar_entries
                SET title=%s, description=%s, entry_type=%s, color=%s, start_date=%s, end_date=%s,
                    is_full_day=%s, status=%s, location=%s, recurrence=%s
                WHERE entry_id=%s
                """,
                (
                    entry.title,
                    entry.description,
                    entry.entry_type.value,
                    entry.color,
                    entry.start_date,
                    entry.end_date,
                    int(entry.is_full_day),
                    entry.status.value,
                    entry.location,
                    entry.recurrence.value,
                    int(entry.entry_id),
                ),
            )
            return changed(cur)

    def delete(self, entry_id: int) -> bool:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute("DELETE FROM calendar_entries WHERE entry_id=%s", (int(entry_id),))
            return changed(cur)

    def get_working_days(self) -> Optional[Sequence[int]]:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute("SELECT weekday FROM calendar_working_days ORDER BY weekday")
            rows = fetchall(cur)
            if not rows:
                return None
            return [int(r["weekday"]) for r in rows]

    def save_working_days(self, days: Sequence[int]) -> None:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute("DELETE FROM calendar_working_days")
            for d in days:
                cur.execute("INSERT INTO calendar_working_days(weekday) VALUES(%s)", (int(d),))
