from datetime import date, datetime
from zoneinfo import ZoneInfo

import pytest

from utils.time_utils import calendar_days_until, days_until, months_ago, parse_timestamp, shift_month
from conftest import NOW

KOLKATA = ZoneInfo("Asia/Kolkata")


@pytest.mark.parametrize("year,month,offset,expected", [
    (2026, 10, -5, (2026, 5)),
    (2026, 2, -3, (2025, 11)),
    (2026, 12, 1, (2027, 1)),
    (2026, 1, 0, (2026, 1)),
])
def test_shift_month(year, month, offset, expected):
    assert shift_month(year, month, offset) == expected


def test_months_ago_clamps_to_month_end():
    end_of_may = datetime(2026, 5, 31, 9, 0, tzinfo=KOLKATA)
    assert months_ago(end_of_may, 3) == datetime(2026, 2, 28, 9, 0, tzinfo=KOLKATA)
    assert months_ago(NOW, 3) == datetime(2026, 7, 19, 10, 30, tzinfo=KOLKATA)


def test_parse_timestamp():
    assert parse_timestamp("2026-10-02", KOLKATA) == datetime(2026, 10, 2, tzinfo=KOLKATA)
    assert parse_timestamp(date(2026, 10, 2), KOLKATA) == datetime(2026, 10, 2, tzinfo=KOLKATA)
    # 20:00 UTC on the 31st is already November in Kolkata
    assert parse_timestamp("2026-10-31T20:00:00+00:00", KOLKATA).month == 11
    assert parse_timestamp("not a date", KOLKATA) is None
    assert parse_timestamp("", KOLKATA) is None
    assert parse_timestamp(12345, KOLKATA) is None


def test_days_until():
    assert days_until("2026-10-21", NOW) == 2
    assert days_until(date(2026, 10, 19), NOW) == 0
    assert days_until("2026-10-18", NOW) == -1
    assert days_until("2026-10-19T15:30:00+05:30", NOW) == 1
    assert days_until("2026-10-19T08:30:00+05:30", NOW) == 0
    assert days_until("garbage", NOW) is None


def test_calendar_days_until_ignores_time_of_day():
    just_after_midnight = NOW.replace(hour=0, minute=30)
    assert calendar_days_until("2026-10-18T23:30:00+05:30", just_after_midnight) == -1
    assert days_until("2026-10-18T23:30:00+05:30", just_after_midnight) == 0
    assert calendar_days_until("2026-10-26T22:00:00+05:30", NOW) == 7
    assert calendar_days_until("2026-10-21", NOW) == 2
    assert calendar_days_until("garbage", NOW) is None
