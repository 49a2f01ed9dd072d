from __future__ import annotations

from enum import Enum


class Role(str, Enum):
    """Actor role supplied by the identity/session collaborator."""

    ADMIN = "admin"
    STAFF = "staff"
    # attendance terminal; may submit the time an event was recorded
    KIOSK = "kiosk"


class ShiftName(str, Enum):
    MORNING = "Morning"
    EVENING = "Evening"


class AttendanceStatus(str, Enum):
    """Attendance status values as stored and reported."""

    PRESENT = "Present"
    LATE = "Late"
    EARLY_LEAVE = "Early Leave"
    ABSENT = "Absent"
    CHECKED_IN = "Checked In"


class CalendarEntryType(str, Enum):
    HOLIDAY = "Holiday"
    EVENT = "Event"
    MEETING = "Meeting"
    WORKING_DAY = "Working Day"
    OTHER = "Other"


class CalendarEntryStatus(str, Enum):
    UPCOMING = "Upcoming"
    COMPLETED = "Completed"
    CANCELLED = "Cancelled"


class Recurrence(str, Enum):
    NONE = "None"
    DAILY = "Daily"
    WEEKLY = "Weekly"
    MONTHLY = "Monthly"
    YEARLY = "Yearly"
