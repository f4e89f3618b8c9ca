"""
utils/dates.py
--------------
Calendar arithmetic shared by the calendar engine, the services and the
handlers. Month stepping goes through dateutil's relativedelta, which clamps
to the last day of shorter months (Jan 31 + 1 month -> Feb 28/29).
"""

import re
from datetime import date, timedelta

from dateutil.relativedelta import relativedelta

_ISO_DATE_RE = re.compile(r"(\d{4}-\d{2}-\d{2})(T.*)?")


def parse_iso_date(value) -> date:
    """
    Parse a stored ``YYYY-MM-DD`` value into a date.

    Accepts date objects unchanged and tolerates a trailing time part
    (``2024-03-15T00:00:00``), which older records carry.

    Raises:
        ValueError: If the value is empty or not a valid calendar date.
    """
    if isinstance(value, date):
        return value
    if not value or not isinstance(value, str):
        raise ValueError(f"Not a date: {value!r}")
    match = _ISO_DATE_RE.fullmatch(value.strip())
    if not match:
        raise ValueError(f"Not a date: {value!r}")
    return date.fromisoformat(match.group(1))


def first_of_month(day: date) -> date:
    return day.replace(day=1)


def last_of_month(day: date) -> date:
    return day + relativedelta(day=31)


def month_bounds(day: date) -> tuple[date, date]:
    """Return the first and last calendar day of the month containing `day`."""
    return first_of_month(day), last_of_month(day)


def add_months(day: date, months: int) -> date:
    """Shift by whole calendar months, clamping the day-of-month."""
    return day + relativedelta(months=months)


def week_start(day: date) -> date:
    """Sunday on or before `day` (calendar weeks start on Sunday)."""
    return day - timedelta(days=(day.weekday() + 1) % 7)


def week_end(day: date) -> date:
    """Saturday on or after `day`."""
    return week_start(day) + timedelta(days=6)
