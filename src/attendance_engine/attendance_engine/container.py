from __future__ import annotations

from dataclasses import dataclass
from typing import Any, Iterable, Mapping, Optional

from .attendance.aggregator import AttendanceAggregator
from .attendance.classifier import AttendanceClassifier
from .attendance.factory import AttendanceStrategyFactory
from .attendance.mysql_attendance_repository import MySQLAttendanceRepository
from .attendance.repository import AttendanceRepository
from .attendance.service import AttendanceService
from .calendar.mysql_calendar_repository import MySQLCalendarRepository
from .calendar.repository import CalendarRepository
from .calendar.service import CalendarService
from .core.constants import DEFAULT_WORKING_DAYS
from .database.connection import DBConfig, DatabaseConnection
from .shifts.mysql_settings_repository import MySQLSettingsRepository
from .shifts.repository import SettingsRepository
from .shifts.store import SettingsStore


@dataclass(frozen=True)
class Container:
    attendance_repo: AttendanceRepository
    calendar_repo: CalendarRepository
    settings_repo: Optional[SettingsRepository]

    settings_store: SettingsStore
    calendar_service: CalendarService
    attendance_service: AttendanceService
    aggregator: AttendanceAggregator

    conn: Optional[DatabaseConnection] = None


def assemble(
    *,
    attendance_repo: AttendanceRepository,
    calendar_repo: CalendarRepository,
    settings_repo: Optional[SettingsRepository],
    default_settings: Optional[Mapping[str, Any]] = None,
    default_working_days: Iterable[int] = DEFAULT_WORKING_DAYS,
    conn: Optional[DatabaseConnection] = None,
) -> Container:
    """Wire services over the given repositories.

    Raises ConfigurationError when no usable attendance settings exist.
    """
    settings_store = SettingsStore.load(settings_repo, defaults=default_settings)
    calendar_service = CalendarService(calendar_repo, default_working_days=default_working_days)
    attendance_service = AttendanceService(
        attendance_repo,
        settings_store,
        calendar_service,
        classifier=AttendanceClassifier(factory=AttendanceStrategyFactory()),
    )

    return Container(
        attendance_repo=attendance_repo,
        calendar_repo=calendar_repo,
        settings_repo=settings_repo,
        settings_store=settings_store,
        calendar_service=calendar_service,
        attendance_service=attendance_service,
        aggregator=AttendanceAggregator(attendance_repo),
        conn=conn,
    )


def build_container(
    *,
    db_config: dict,
    default_settings: Optional[Mapping[str, Any]] = None,
    default_working_days: Iterable[int] = DEFAULT_WORKING_DAYS,
) -> Container:
    conn = DatabaseConnection.get_instance(DBConfig.from_mapping(db_config))

    return assemble(
        attendance_repo=MySQLAttendanceRepository(conn),
        calendar_repo=MySQLCalendarRepository(conn),
        settings_repo=MySQLSettingsRepository(conn),
        default_settings=default_settings,
        default_working_days=default_working_days,
        conn=conn,
    )
