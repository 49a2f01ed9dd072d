from datetime import date, datetime, timezone

import pytest

from src.attendance_engine.attendance_engine.common.datetime_utils import (
    parse_iso_datetime,
    resolve_date_filter,
    utc_naive,
)
from src.attendance_engine.attendance_engine.core.exceptions import ValidationError

WEDNESDAY = date(2025, 3, 12)


@pytest.mark.parametrize(
    "name, expected",
    [
        ("today", (WEDNESDAY, WEDNESDAY)),
        ("yesterday", (date(2025, 3, 11), date(2025, 3, 11))),
        ("thisWeek", (date(2025, 3, 9), WEDNESDAY)),
        ("thisMonth", (date(2025, 3, 1), WEDNESDAY)),
        ("previousMonth", (date(2025, 2, 1), date(2025, 2, 28))),
        ("overall", (None, None)),
    ],
)
def test_date_presets(name, expected):
    assert resolve_date_filter(name, WEDNESDAY) == expected


def test_unknown_preset():
    with pytest.raises(ValidationError):
        resolve_date_filter("lastDecade", WEDNESDAY)


def test_parse_trailing_z_as_utc():
    assert parse_iso_datetime("2025-01-06T09:00:00Z") == datetime(2025, 1, 6, 9, tzinfo=timezone.utc)
    assert parse_iso_datetime("") is None
    with pytest.raises(ValidationError):
        parse_iso_datetime("yesterday-ish")


def test_utc_naive_converts_aware_values():
    aware = datetime(2025, 1, 6, 16, 0, tzinfo=timezone.utc)

    assert utc_naive(aware) == datetime(2025, 1, 6, 16, 0)
    assert utc_naive(aware).tzinfo is None
