from __future__ import annotations

import pytest

from src.attendance_engine.attendance_engine.container import Container, assemble
from src.attendance_engine.attendance_engine.shifts.model import AttendanceSettings
from tests.fakes import InMemoryAttendance, InMemoryCalendar, InMemorySettings, settings_payload


@pytest.fixture
def attendance_repo() -> InMemoryAttendance:
    return InMemoryAttendance()


@pytest.fixture
def calendar_repo() -> InMemoryCalendar:
    return InMemoryCalendar()


@pytest.fixture
def settings_repo() -> InMemorySettings:
    return InMemorySettings(AttendanceSettings.from_dict(settings_payload()))


@pytest.fixture
def container(attendance_repo, calendar_repo, settings_repo) -> Container:
    return assemble(
        attendance_repo=attendance_repo,
        calendar_repo=calendar_repo,
        settings_repo=settings_repo,
    )
