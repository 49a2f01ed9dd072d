from __future__ import annotations

import math
from dataclasses import dataclass
from datetime import date, datetime
from typing import Iterable, Optional, Sequence, TypeVar
from zoneinfo import ZoneInfo

from ..core.constants import DEFAULT_PAGE_SIZE, MAX_PAGE_SIZE
from ..core.enums import AttendanceStatus, ShiftName
from ..core.exceptions import ValidationError
from .model import AttendanceRecord
from .repository import AttendanceRepository

T = TypeVar("T")


@dataclass(frozen=True)
class HistoryQuery:
    start_date: Optional[date] = None
    end_date: Optional[date] = None
    status: Optional[AttendanceStatus] = None
    shift: Optional[ShiftName] = None
    search: Optional[str] = None
    page: int = 1
    page_size: int = DEFAULT_PAGE_SIZE

    def validate(self) -> None:
        if self.start_date and self.end_date and self.start_date > self.end_date:
            raise ValidationError("startDate must not be after endDate")
        if self.page < 1:
            raise ValidationError("page must be >= 1")
        if not 1 <= self.page_size <= MAX_PAGE_SIZE:
            raise ValidationError(f"limit must be between 1 and {MAX_PAGE_SIZE}")

    def matches(self, record: AttendanceRecord) -> bool:
        if self.start_date and record.work_date < self.start_date:
            return False
        if self.end_date and record.work_date > self.end_date:
            return False
        if self.status and record.status != self.status:
            return False
        if self.shift and record.shift != self.shift:
            return False
        if self.search and self.search.strip().casefold() not in record.user_name.casefold():
            return False
        return True


@dataclass(frozen=True)
class AttendanceStats:
    total: int = 0
    present: int = 0
    late: int = 0
    absent: int = 0
    early_leave: int = 0
    checked_in: int = 0

    def to_dict(self) -> dict:
        return {
            "total": self.total,
            "present": self.present,
            "late": self.late,
            "absent": self.absent,
            "earlyLeave": self.early_leave,
            "checkedIn": self.checked_in,
        }


@dataclass(frozen=True)
class HistoryPage:
    records: list[AttendanceRecord]
    stats: AttendanceStats
    page: int
    page_size: int
    total_pages: int = 0

    @property
    def total(self) -> int:
        return self.stats.total

    def to_dict(self) -> dict:
        return {
            "data": [r.to_dict() for r in self.records],
            "pagination": {
                "page": self.page,
                "limit": self.page_size,
                "total": self.total,
                "totalPages": self.total_pages,
            },
            "stats": self.stats.to_dict(),
        }


def tally(records: Iterable[AttendanceRecord]) -> AttendanceStats:
    counts = {status: 0 for status in AttendanceStatus}
    total = 0
    for r in records:
        total += 1
        counts[r.status] += 1
    return AttendanceStats(
        total=total,
        present=counts[AttendanceStatus.PRESENT],
        late=counts[AttendanceStatus.LATE],
        absent=counts[AttendanceStatus.ABSENT],
        early_leave=counts[AttendanceStatus.EARLY_LEAVE],
        checked_in=counts[AttendanceStatus.CHECKED_IN],
    )


def paginate(items: Sequence[T], page: int, page_size: int) -> tuple[list[T], int]:
    """Slice one 1-indexed page. A page past the end is empty, never an error."""
    total_pages = math.ceil(len(items) / page_size) if items else 0
    offset = (page - 1) * page_size
    return list(items[offset : offset + page_size]), total_pages


def sort_key(record: AttendanceRecord):
    # most recent date first, then user name
    return (-record.work_date.toordinal(), record.user_name.casefold())


class AttendanceAggregator:
    """Filtered, paginated attendance history with summary counts.

    Counts are taken over every record that matches the filters, before the
    page is cut, so page and page size never change them.
    """

    def __init__(self, attendance: AttendanceRepository):
        self._attendance = attendance

    def _matching(self, q: HistoryQuery) -> list[AttendanceRecord]:
        rows = self._attendance.list_range(start_date=q.start_date, end_date=q.end_date, shift=q.shift)
        return sorted((r for r in rows if q.matches(r)), key=sort_key)

    def query(self, q: HistoryQuery) -> HistoryPage:
        q.validate()
        matched = self._matching(q)

        stats = tally(matched)
        page_rows, total_pages = paginate(matched, q.page, q.page_size)
        return HistoryPage(
            records=page_rows,
            stats=stats,
            page=q.page,
            page_size=q.page_size,
            total_pages=total_pages,
        )

    def export_rows(self, q: HistoryQuery, *, tz: Optional[ZoneInfo] = None) -> list[dict]:
        """Every matching record, flattened for CSV export (pagination ignored)."""
        q.validate()

        def hhmm(value: Optional[datetime]) -> str:
            if value is None:
                return "-"
            return (value.astimezone(tz) if tz else value).strftime("%H:%M")

        return [
            {
                "work_date": r.work_date.isoformat(),
                "user_id": r.user_id,
                "user_name": r.user_name,
                "shift": r.shift.value,
                "check_in": hhmm(r.check_in_time),
                "check_out": hhmm(r.check_out_time),
                "status": r.status.value,
                "note": r.note or "",
            }
            for r in self._matching(q)
        ]
