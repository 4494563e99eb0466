# backend/tests/test_datetimes.py
from datetime import datetime

import pytest

from birdsurvey.services.mapping.datetimes import format_short_date, format_short_time, parse_date_time

EXPECTED = datetime(2020, 5, 1, 14, 30)


@pytest.mark.parametrize(
    "date, time",
    [
        ("2020-05-01T00:00:00", "2020-05-01T14:30:00"),
        ("5/1/2020", "2:30 PM"),
        ("5/1/2020", "14:30"),
        ("2020-05-01", "14:30:00"),
        ("2020-05-01T05:00:00.000Z", "2:30 PM"),
        ("5/1/2020", "1970-01-01T14:30:00.000Z"),
        ("5/1/2020", "2:30 pm"),
        ("05/01/2020", "02:30:00 PM"),
    ],
)
def test_parse_date_time_combines_date_and_time_forms(date, time):
    assert parse_date_time(date, time) == EXPECTED


@pytest.mark.parametrize(
    "date, time",
    [
        ("not-a-date", ""),
        ("5/1/2020", ""),
        ("", "2:30 PM"),
        (None, None),
        ("5/1/2020", "25:99"),
        ("13/45/2020", "2:30 PM"),
    ],
)
def test_parse_date_time_returns_none_when_unparseable(date, time):
    assert parse_date_time(date, time) is None


def test_parse_date_time_keeps_seconds_and_fraction():
    parsed = parse_date_time("2020-05-01", "2020-05-01T14:30:15.1234567")
    assert parsed == datetime(2020, 5, 1, 14, 30, 15, 123456)


@pytest.mark.parametrize(
    "value",
    [
        datetime(2020, 5, 1, 14, 30),
        datetime(2019, 12, 31, 0, 0),
        datetime(2021, 1, 9, 12, 5),
        datetime(2022, 7, 4, 23, 59, 41),
    ],
)
def test_short_format_round_trip(value):
    parsed = parse_date_time(format_short_date(value), format_short_time(value))
    assert parsed == value.replace(second=0, microsecond=0)


def test_short_formats():
    assert format_short_date(datetime(2020, 5, 1)) == "5/1/2020"
    assert format_short_time(datetime(2020, 5, 1, 0, 7)) == "12:07 AM"
    assert format_short_time(datetime(2020, 5, 1, 12, 0)) == "12:00 PM"
    assert format_short_time(datetime(2020, 5, 1, 14, 30)) == "2:30 PM"
    assert format_short_date(None) == ""
    assert format_short_time(None) == ""
