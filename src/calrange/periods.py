"""Calendar primitives: parsing, period boundaries and calendar arithmetic.

Boundaries follow two roles: start-of-period bounds sit at 00:00:00.000 and
end-of-period bounds at 23:59:59.999 (millisecond precision). Weeks start on
Monday. Month, quarter and year shifts are calendar-field shifts via
``dateutil.relativedelta``, so day-of-month is clamped (Mar 31 - 1 month is
Feb 28/29) instead of counting fixed numbers of days.

None of these helpers read the wall clock.
"""

from __future__ import annotations

import math
from datetime import date, datetime, time, timedelta, timezone

from dateutil.relativedelta import relativedelta

from calrange.exceptions import InvalidDateError

END_OF_DAY = time(23, 59, 59, 999000)

_ONE_DAY = timedelta(days=1)


def to_datetime(value: str | date | datetime | None) -> datetime:
    """Parse a date-like value into a datetime.

    :param value: ISO format string, ``date`` or ``datetime``.
    :returns: The parsed datetime (dates become midnight).
    :raises InvalidDateError: If the value is missing or cannot be parsed.
    """
    if isinstance(value, datetime):
        return value
    if isinstance(value, date):
        return datetime.combine(value, time.min)
    if isinstance(value, float) and math.isnan(value):
        raise InvalidDateError("Invalid date: NaN")
    if not isinstance(value, str):
        raise InvalidDateError(f"Invalid date: {value!r}")

    text = value.strip()
    try:
        return datetime.fromisoformat(text.replace("Z", "+00:00"))
    except ValueError:
        pass

    try:
        return datetime.strptime(text, "%Y-%m-%d")
    except ValueError as e:
        raise InvalidDateError(f"Invalid date: {value!r}") from e


def align_timezone(value: datetime, reference: datetime) -> datetime:
    """Give ``value`` the same timezone awareness as ``reference``.

    Plain (naive) datetimes are read as UTC when they meet an aware one, so
    mixed inputs stay comparable instead of raising ``TypeError``.

    :param value: Datetime to align.
    :param reference: Datetime whose awareness is matched.
    :returns: ``value``, made aware (UTC) or naive (UTC wall time) as needed.
    """
    if (value.tzinfo is None) == (reference.tzinfo is None):
        return value
    if value.tzinfo is None:
        return value.replace(tzinfo=timezone.utc)
    return value.astimezone(timezone.utc).replace(tzinfo=None)


# ---------------------------------------------------------------------------
# Period boundaries
# ---------------------------------------------------------------------------


def start_of_day(value: datetime) -> datetime:
    return value.replace(hour=0, minute=0, second=0, microsecond=0)


def end_of_day(value: datetime) -> datetime:
    return datetime.combine(value.date(), END_OF_DAY, tzinfo=value.tzinfo)


def start_of_week(value: datetime) -> datetime:
    """Monday 00:00 of the week containing ``value``."""
    return start_of_day(value - timedelta(days=value.weekday()))


def end_of_week(value: datetime) -> datetime:
    """Sunday 23:59:59.999 of the week containing ``value``."""
    return end_of_day(start_of_week(value) + timedelta(days=6))


def start_of_month(value: datetime) -> datetime:
    return start_of_day(value.replace(day=1))


def end_of_month(value: datetime) -> datetime:
    return end_of_day(value + relativedelta(day=31))


def quarter_of(value: datetime) -> int:
    """Calendar quarter (1-4) containing ``value``."""
    return (value.month - 1) // 3 + 1


def start_of_quarter(value: datetime) -> datetime:
    first_month = 3 * (quarter_of(value) - 1) + 1
    return start_of_day(value.replace(month=first_month, day=1))


def end_of_quarter(value: datetime) -> datetime:
    return end_of_month(start_of_quarter(value) + relativedelta(months=2))


def start_of_year(value: datetime) -> datetime:
    return start_of_day(value.replace(month=1, day=1))


def end_of_year(value: datetime) -> datetime:
    return end_of_day(value.replace(month=12, day=31))


# ---------------------------------------------------------------------------
# Calendar arithmetic
# ---------------------------------------------------------------------------


def shift_days(value: datetime, days: int) -> datetime:
    return value + timedelta(days=days)


def shift_months(value: datetime, months: int) -> datetime:
    """Shift by calendar months, clamping the day to the target month."""
    return value + relativedelta(months=months)


def shift_quarters(value: datetime, quarters: int) -> datetime:
    return value + relativedelta(months=3 * quarters)


def shift_years(value: datetime, years: int) -> datetime:
    """Shift by calendar years; Feb 29 maps to Feb 28 in non-leap years."""
    return value + relativedelta(years=years)


def days_between(later: datetime, earlier: datetime) -> int:
    """Number of whole days from ``earlier`` to ``later``.

    Partial days are truncated toward zero, so 2024-01-01 00:00 to
    2024-01-07 23:59:59.999 is 6 days and the result is negative when
    ``later`` precedes ``earlier``.
    """
    delta = later - earlier
    whole = abs(delta) // _ONE_DAY
    return -whole if delta < timedelta(0) else whole


def months_between(later: datetime, earlier: datetime) -> int:
    """Difference in calendar months, ignoring the day of month."""
    return (later.year - earlier.year) * 12 + later.month - earlier.month


__all__ = [
    "END_OF_DAY",
    "to_datetime",
    "align_timezone",
    "start_of_day",
    "end_of_day",
    "start_of_week",
    "end_of_week",
    "start_of_month",
    "end_of_month",
    "quarter_of",
    "start_of_quarter",
    "end_of_quarter",
    "start_of_year",
    "end_of_year",
    "shift_days",
    "shift_months",
    "shift_quarters",
    "shift_years",
    "days_between",
    "months_between",
]
