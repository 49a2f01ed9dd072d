from __future__ import annotations

from dataclasses import dataclass, field
from datetime import date, datetime
from types import MappingProxyType
from typing import Any, Mapping
from zoneinfo import ZoneInfo

from ..common.datetime_utils import at_minutes, get_zone
from ..common.validators import require_int, require_non_empty
from ..core.enums import ShiftName
from ..core.exceptions import ConfigurationError, ValidationError


@dataclass(frozen=True)
class ShiftConfig:
    """Domain entity: one named daily shift window and its thresholds.

    The window is ``[start_hour, end_hour)`` on a single calendar day.
    """

    shift_name: ShiftName
    start_hour: int
    end_hour: int
    late_threshold_minutes: int = 15
    early_leave_threshold_minutes: int = 30
    no_checkout_late_minutes: int = 60
    min_hours_for_present: int = 6

    def __post_init__(self):
        if not 0 <= self.start_hour < self.end_hour <= 24:
            raise ConfigurationError(
                f"{self.shift_name.value} shift must satisfy 0 <= startHour < endHour <= 24 "
                f"(got {self.start_hour}..{self.end_hour})"
            )
        for name in (
            "late_threshold_minutes",
            "early_leave_threshold_minutes",
            "no_checkout_late_minutes",
            "min_hours_for_present",
        ):
            value = getattr(self, name)
            if isinstance(value, bool) or not isinstance(value, int) or value < 0:
                raise ConfigurationError(f"{self.shift_name.value}.{name} must be a non-negative integer")

    def starts_at(self, day: date, tz: ZoneInfo) -> datetime:
        return at_minutes(day, self.start_hour * 60, tz)

    def ends_at(self, day: date, tz: ZoneInfo) -> datetime:
        return at_minutes(day, self.end_hour * 60, tz)

    @classmethod
    def from_dict(cls, shift_name: ShiftName, data: Mapping[str, Any]) -> "ShiftConfig":
        prefix = shift_name.value
        try:
            return cls(
                shift_name=shift_name,
                start_hour=require_int(data.get("startHour"), f"{prefix}.startHour", minimum=0, maximum=23),
                end_hour=require_int(data.get("endHour"), f"{prefix}.endHour", minimum=1, maximum=24),
                late_threshold_minutes=require_int(
                    data.get("lateThresholdMinutes", 15), f"{prefix}.lateThresholdMinutes", minimum=0
                ),
                early_leave_threshold_minutes=require_int(
                    data.get("earlyLeaveThresholdMinutes", 30), f"{prefix}.earlyLeaveThresholdMinutes", minimum=0
                ),
                no_checkout_late_minutes=require_int(
                    data.get("noCheckoutLateMinutes", 60), f"{prefix}.noCheckoutLateMinutes", minimum=0
                ),
                min_hours_for_present=require_int(
                    data.get("minHoursForPresent", 6), f"{prefix}.minHoursForPresent", minimum=0
                ),
            )
        except ValidationError as e:
            raise ConfigurationError(str(e)) from e

    def to_dict(self) -> dict:
        return {
            "startHour": self.start_hour,
            "endHour": self.end_hour,
            "lateThresholdMinutes": self.late_threshold_minutes,
            "earlyLeaveThresholdMinutes": self.early_leave_threshold_minutes,
            "noCheckoutLateMinutes": self.no_checkout_late_minutes,
            "minHoursForPresent": self.min_hours_for_present,
        }


@dataclass(frozen=True)
class GlobalAttendanceSettings:
    allow_early_check_in: int = 0
    timezone: str = "UTC"
    allowed_ips: tuple[str, ...] = ()

    def __post_init__(self):
        if isinstance(self.allow_early_check_in, bool) or not isinstance(self.allow_early_check_in, int):
            raise ConfigurationError("allowEarlyCheckIn must be an integer")
        if self.allow_early_check_in < 0:
            raise ConfigurationError("allowEarlyCheckIn must be non-negative")
        try:
            get_zone(self.timezone)
        except ValidationError as e:
            raise ConfigurationError(str(e)) from e

    @property
    def zone(self) -> ZoneInfo:
        return get_zone(self.timezone)

    def is_ip_allowed(self, ip: str | None) -> bool:
        if not self.allowed_ips:
            return True
        return ip is not None and ip.strip() in self.allowed_ips


@dataclass(frozen=True)
class AttendanceSettings:
    """The whole admin-owned settings object. Replaced as a unit, never patched."""

    shifts: Mapping[ShiftName, ShiftConfig]
    global_settings: GlobalAttendanceSettings = field(default_factory=GlobalAttendanceSettings)

    def __post_init__(self):
        object.__setattr__(self, "shifts", MappingProxyType(dict(self.shifts)))
        missing = [s.value for s in ShiftName if s not in self.shifts]
        if missing:
            raise ConfigurationError(f"Missing shift configuration: {', '.join(missing)}")
        for name, config in self.shifts.items():
            if config.shift_name != name:
                raise ConfigurationError(f"Shift {name.value} is keyed under the wrong name")

    def shift(self, name: ShiftName | str) -> ShiftConfig:
        try:
            key = ShiftName(name)
        except ValueError:
            raise ValidationError(f"Unknown shift: {name!r}") from None
        return self.shifts[key]

    @classmethod
    def from_dict(cls, data: Mapping[str, Any]) -> "AttendanceSettings":
        if not isinstance(data, Mapping):
            raise ConfigurationError("Attendance settings must be an object")

        raw_shifts = data.get("shifts")
        if not isinstance(raw_shifts, Mapping):
            raise ConfigurationError("Attendance settings require a 'shifts' object")

        shifts: dict[ShiftName, ShiftConfig] = {}
        for name in ShiftName:
            raw = raw_shifts.get(name.value)
            if not isinstance(raw, Mapping):
                raise ConfigurationError(f"Missing shift configuration: {name.value}")
            shifts[name] = ShiftConfig.from_dict(name, raw)

        allowed_ips = data.get("allowedIPs") or []
        if isinstance(allowed_ips, str) or not all(isinstance(ip, str) for ip in allowed_ips):
            raise ConfigurationError("allowedIPs must be a list of strings")

        try:
            allow_early = require_int(data.get("allowEarlyCheckIn", 0), "allowEarlyCheckIn", minimum=0)
            timezone = require_non_empty(data.get("timezone") or "UTC", "timezone")
        except ValidationError as e:
            raise ConfigurationError(str(e)) from e

        return cls(
            shifts=shifts,
            global_settings=GlobalAttendanceSettings(
                allow_early_check_in=allow_early,
                timezone=timezone,
                allowed_ips=tuple(ip.strip() for ip in allowed_ips if ip.strip()),
            ),
        )

    def to_dict(self) -> dict:
        return {
            "shifts": {name.value: self.shifts[name].to_dict() for name in ShiftName},
            "allowEarlyCheckIn": self.global_settings.allow_early_check_in,
            "timezone": self.global_settings.timezone,
            "allowedIPs": list(self.global_settings.allowed_ips),
        }
