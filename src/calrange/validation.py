"""Range validation and picker bounds.

Validation failures are returned as data so a UI can show them inline; only
the parsing helpers raise.
"""

from __future__ import annotations

from datetime import date, datetime
from typing import Any

from calrange.exceptions import InvalidDateError
from calrange.periods import (align_timezone, days_between, end_of_day,
                              shift_days, start_of_day, to_datetime)
from calrange.types import DateRange, ValidationResult

DEFAULT_MAX_SPAN_DAYS = 730

INVALID_DATE = "Invalid date"
START_AFTER_END = "Start date must be before end date"
START_IN_FUTURE = "Start date cannot be in the future"


def range_too_long(max_span_days: int) -> str:
    return f"Date range cannot exceed {max_span_days} days"


def validate_range(
    start: Any,
    end: Any,
    max_span_days: int = DEFAULT_MAX_SPAN_DAYS,
    reference_instant: str | date | datetime | None = None,
) -> ValidationResult:
    """Check a candidate range against the domain rules.

    Rules are checked in order and the first failure is reported: both bounds
    must parse, start must not be after end, the span in whole days must not
    exceed ``max_span_days``, and start must not be after the reference
    instant. Bounds and reference instant of mixed timezone awareness are
    compared with plain values read as UTC.

    :param start: Start bound (string, date or datetime).
    :param end: End bound (string, date or datetime).
    :param max_span_days: Maximum allowed span, in days.
    :param reference_instant: The "now" to check against; defaults to the
        current moment.
    :returns: Validation result with a rule-specific error message.
    :raises InvalidDateError: If ``reference_instant`` cannot be parsed.
    """
    try:
        start_dt = to_datetime(start)
        end_dt = align_timezone(to_datetime(end), start_dt)
    except InvalidDateError:
        return ValidationResult(valid=False, error=INVALID_DATE)

    if start_dt > end_dt:
        return ValidationResult(valid=False, error=START_AFTER_END)

    if days_between(end_dt, start_dt) > max_span_days:
        return ValidationResult(valid=False, error=range_too_long(max_span_days))

    if reference_instant is None:
        now = datetime.now(start_dt.tzinfo)
    else:
        now = align_timezone(to_datetime(reference_instant), start_dt)
    if start_dt > now:
        return ValidationResult(valid=False, error=START_IN_FUTURE)

    return ValidationResult(valid=True, error=None)


def validate_date_range(
    date_range: DateRange,
    max_span_days: int = DEFAULT_MAX_SPAN_DAYS,
    reference_instant: str | date | datetime | None = None,
) -> ValidationResult:
    """:func:`validate_range` for an already-built range."""
    return validate_range(
        date_range.start, date_range.end, max_span_days, reference_instant
    )


def allowed_bounds(
    max_span_days: int = DEFAULT_MAX_SPAN_DAYS,
    reference_instant: str | date | datetime | None = None,
) -> DateRange:
    """Earliest and latest days a date picker should offer.

    :param max_span_days: Lookback limit, in days.
    :param reference_instant: The "now" to resolve against.
    :returns: Range from start of (now - max_span_days) to end of today.
    """
    now = datetime.now() if reference_instant is None else to_datetime(reference_instant)
    return DateRange(
        start=start_of_day(shift_days(now, -max_span_days)),
        end=end_of_day(now),
    )


def is_date_selectable(
    value: str | date | datetime,
    max_span_days: int = DEFAULT_MAX_SPAN_DAYS,
    reference_instant: str | date | datetime | None = None,
) -> bool:
    """Whether a picker should enable ``value``.

    :raises InvalidDateError: If ``value`` cannot be parsed.
    """
    bounds = allowed_bounds(max_span_days, reference_instant)
    day = align_timezone(to_datetime(value), bounds.start)
    return bounds.start <= day <= bounds.end


__all__ = [
    "DEFAULT_MAX_SPAN_DAYS",
    "INVALID_DATE",
    "START_AFTER_END",
    "START_IN_FUTURE",
    "range_too_long",
    "validate_range",
    "validate_date_range",
    "allowed_bounds",
    "is_date_selectable",
]
