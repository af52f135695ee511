"""
utils/time_utils.py

Purpose: Time and expiry helpers

- Clock abstraction (canonical timezone, injectable for tests)
- OTP expiry checks
- Calendar-month arithmetic and timestamp parsing
"""

import math
from datetime import date, datetime, timedelta
from typing import Any, Optional, Tuple
from zoneinfo import ZoneInfo


class Clock:
    """
    Wall clock pinned to the deployment's canonical timezone.
    Services ask the clock for "now" instead of calling datetime directly.
    """

    def __init__(self, tz_name: str = "UTC"):
        self.tz = ZoneInfo(tz_name)

    def now(self) -> datetime:
        return datetime.now(self.tz)

    def today(self) -> date:
        return self.now().date()


def calculate_otp_expiry(issued_at: datetime, validity_minutes: int = 5) -> datetime:
    """
    Calculates OTP expiry timestamp.
    """
    return issued_at + timedelta(minutes=validity_minutes)


def is_otp_expired(expires_at: datetime, now: datetime) -> bool:
    """
    Checks if an OTP has expired. The expiry instant itself is still valid.
    """
    return now > expires_at


def parse_timestamp(value: Any, tz) -> Optional[datetime]:
    """
    Parses a stored date/timestamp into an aware datetime in ``tz``.

    Accepts datetime, date and ISO-8601 strings. Naive values are taken to be
    in the canonical timezone. Returns None for anything unparseable.
    """
    if value is None or value == "":
        return None

    if isinstance(value, datetime):
        parsed = value
    elif isinstance(value, date):
        parsed = datetime(value.year, value.month, value.day)
    elif isinstance(value, str):
        try:
            parsed = datetime.fromisoformat(value.strip())
        except ValueError:
            return None
    else:
        return None

    if parsed.tzinfo is None:
        return parsed.replace(tzinfo=tz)
    return parsed.astimezone(tz)


def has_time_component(value: Any) -> bool:
    """True when a stored value carries a time of day, not just a calendar date."""
    if isinstance(value, datetime):
        return True
    if isinstance(value, str):
        return "T" in value or " " in value.strip()
    return False


def calendar_days_until(value: Any, now: datetime) -> Optional[int]:
    """
    Calendar days between ``now``'s date and the stored date, ignoring any
    time of day. Yesterday at 23:30 is -1 even a minute after midnight.
    """
    target = parse_timestamp(value, now.tzinfo)
    if target is None:
        return None
    return (target.date() - now.date()).days


def days_until(value: Any, now: datetime) -> Optional[int]:
    """
    Whole days from ``now`` until a stored date.

    Calendar dates compare day-to-day. Values with a time of day have the
    partial day rounded up, so "later today" is 1 and "earlier today" is 0.
    """
    target = parse_timestamp(value, now.tzinfo)
    if target is None:
        return None

    if not has_time_component(value):
        return (target.date() - now.date()).days

    seconds = (target - now).total_seconds()
    return math.ceil(seconds / 86400)


def shift_month(year: int, month: int, offset: int) -> Tuple[int, int]:
    """
    Moves a (year, month) pair by ``offset`` calendar months.
    """
    index = year * 12 + (month - 1) + offset
    return index // 12, index % 12 + 1


def months_ago(now: datetime, months: int) -> datetime:
    """
    Same wall time ``months`` calendar months earlier, clamped to month end.
    """
    year, month = shift_month(now.year, now.month, -months)
    for day in (now.day, 30, 29, 28):
        try:
            return now.replace(year=year, month=month, day=day)
        except ValueError:
            continue
    return now.replace(year=year, month=month, day=28)
