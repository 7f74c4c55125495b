"""Display formatting for dates, ranges and bucket labels.

A single fixed English display format is used throughout; there is no locale
negotiation.
"""

from __future__ import annotations

from datetime import datetime

from calrange.periods import quarter_of
from calrange.types import DateRange

DISPLAY_FORMAT = "%b %d, %Y"

RANGE_SEPARATOR = " – "


def format_display_date(value: datetime) -> str:
    """Format a date as e.g. ``"Mar 04, 2025"``."""
    return value.strftime(DISPLAY_FORMAT)


def format_range_display(date_range: DateRange) -> str:
    """Format a range as ``"<start> – <end>"``.

    When both bounds fall on the same calendar day only that day is shown.

    :param date_range: Range to format.
    :returns: Display string.
    """
    start = format_display_date(date_range.start)
    end = format_display_date(date_range.end)
    if start == end:
        return start
    return f"{start}{RANGE_SEPARATOR}{end}"


# ---------------------------------------------------------------------------
# Bucket labels
# ---------------------------------------------------------------------------


def day_labels(anchor: datetime) -> tuple[str, str]:
    return anchor.strftime("%b %d"), format_display_date(anchor)


def week_labels(anchor: datetime) -> tuple[str, str]:
    week = anchor.isocalendar()[1]
    return f"W{week:02d}", f"Week of {format_display_date(anchor)}"


def month_labels(anchor: datetime) -> tuple[str, str]:
    return anchor.strftime("%b %y"), anchor.strftime("%B %Y")


def quarter_labels(anchor: datetime) -> tuple[str, str]:
    quarter = quarter_of(anchor)
    return f"Q{quarter} {anchor:%y}", f"Q{quarter} {anchor:%Y}"


def year_labels(anchor: datetime) -> tuple[str, str]:
    year = anchor.strftime("%Y")
    return year, year


__all__ = [
    "DISPLAY_FORMAT",
    "RANGE_SEPARATOR",
    "format_display_date",
    "format_range_display",
    "day_labels",
    "week_labels",
    "month_labels",
    "quarter_labels",
    "year_labels",
]
