from __future__ import annotations

from datetime import date, datetime
from typing import Optional


class DomainError(Exception):
    """Base exception for business rule violations."""


class ValidationError(DomainError):
    """Raised when input data is invalid or violates domain rules."""


class NotFoundError(ValidationError):
    """Raised when a referenced record does not exist."""


class RangeError(ValidationError):
    """Raised when a calendar entry ends before it starts."""


class AuthorizationError(DomainError):
    """Raised when the actor lacks permission for an administrative write."""


class ConfigurationError(DomainError):
    """Raised when shift or attendance settings are missing or malformed.

    Fatal at startup. On update the new settings are rejected and the
    previous configuration stays in effect.
    """


class AttendanceEventError(DomainError):
    """A check-in/check-out event that cannot be applied.

    Carries the identity of the event so an operator can correct it.
    """

    default_message = "Attendance event rejected"

    def __init__(
        self,
        message: Optional[str] = None,
        *,
        user_id: Optional[int] = None,
        work_date: Optional[date] = None,
        check_in: Optional[datetime] = None,
        check_out: Optional[datetime] = None,
    ):
        self.user_id = user_id
        self.work_date = work_date
        self.check_in = check_in
        self.check_out = check_out
        super().__init__(message or self.default_message)

    def context(self) -> dict:
        return {
            "user_id": self.user_id,
            "work_date": self.work_date.isoformat() if self.work_date else None,
            "check_in": self.check_in.isoformat() if self.check_in else None,
            "check_out": self.check_out.isoformat() if self.check_out else None,
        }

    def __str__(self) -> str:
        base = super().__str__()
        if self.user_id is None and self.work_date is None:
            return base
        return f"{base} (user_id={self.user_id}, work_date={self.work_date})"


class OffDayCheckInError(AttendanceEventError):
    default_message = "Check-in attempted on a non-working day"


class DuplicateCheckInError(AttendanceEventError):
    default_message = "User has already checked in for this shift"


class MissingCheckInForCheckOutError(AttendanceEventError):
    default_message = "Check-out without a matching check-in"


class IPNotAllowedError(AttendanceEventError):
    default_message = "Check-in from an address outside the allow-list"
