"""Named preset date ranges.

Each preset is a pure function of a reference instant. Presets are persisted
by name only and re-resolved on load, so "Last 7 Days" always reflects the day
it is opened on.

Rules (weeks start on Monday)::

    today            start of today .. end of today
    yesterday        start of yesterday .. end of yesterday
    last_N_days      start of (today - (N-1)) .. end of today
    this_* / last_*  the current / previous calendar week, month, quarter, year
    past_month       the last completed calendar month
    past_quarter     the last completed calendar quarter
    past_half_year   the last completed calendar half year

Unknown preset names fall back to ``last_30_days``.
"""

from __future__ import annotations

import logging
from datetime import date, datetime
from typing import Callable

from calrange.periods import (end_of_day, end_of_month, end_of_quarter,
                              end_of_week, end_of_year, shift_days,
                              shift_months, shift_quarters, shift_years,
                              start_of_day, start_of_month, start_of_quarter,
                              start_of_week, start_of_year, to_datetime)
from calrange.types import DateRange, Preset

logger = logging.getLogger(__name__)

CUSTOM = "custom"

CUSTOM_LABEL = "Custom Range"

DEFAULT_PRESET = Preset.LAST_30_DAYS

PRESET_LABELS: dict[str, str] = {
    Preset.TODAY.value: "Today",
    Preset.YESTERDAY.value: "Yesterday",
    Preset.LAST_7_DAYS.value: "Last 7 Days",
    Preset.LAST_14_DAYS.value: "Last 14 Days",
    Preset.LAST_30_DAYS.value: "Last 30 Days",
    Preset.THIS_WEEK.value: "This Week",
    Preset.LAST_WEEK.value: "Last Week",
    Preset.THIS_MONTH.value: "This Month",
    Preset.LAST_MONTH.value: "Last Month",
    Preset.THIS_QUARTER.value: "This Quarter",
    Preset.LAST_QUARTER.value: "Last Quarter",
    Preset.THIS_YEAR.value: "This Year",
    Preset.LAST_YEAR.value: "Last Year",
    Preset.PAST_MONTH.value: "Past Month",
    Preset.PAST_QUARTER.value: "Past Quarter",
    Preset.PAST_HALF_YEAR.value: "Past Half Year",
    CUSTOM: CUSTOM_LABEL,
}


def _last_n_days(n: int) -> Callable[[datetime], tuple[datetime, datetime]]:
    def bounds(now: datetime) -> tuple[datetime, datetime]:
        return start_of_day(shift_days(now, -(n - 1))), end_of_day(now)

    return bounds


def _previous_month(now: datetime) -> tuple[datetime, datetime]:
    month = shift_months(now, -1)
    return start_of_month(month), end_of_month(month)


def _previous_quarter(now: datetime) -> tuple[datetime, datetime]:
    quarter = shift_quarters(now, -1)
    return start_of_quarter(quarter), end_of_quarter(quarter)


def _past_half_year(now: datetime) -> tuple[datetime, datetime]:
    if now.month >= 7:
        first_half = start_of_year(now)
        return first_half, end_of_day(first_half.replace(month=6, day=30))
    previous_year = shift_years(now, -1)
    second_half = start_of_day(previous_year.replace(month=7, day=1))
    return second_half, end_of_year(previous_year)


_RULES: dict[Preset, Callable[[datetime], tuple[datetime, datetime]]] = {
    Preset.TODAY: lambda now: (start_of_day(now), end_of_day(now)),
    Preset.YESTERDAY: lambda now: (
        start_of_day(shift_days(now, -1)),
        end_of_day(shift_days(now, -1)),
    ),
    Preset.LAST_7_DAYS: _last_n_days(7),
    Preset.LAST_14_DAYS: _last_n_days(14),
    Preset.LAST_30_DAYS: _last_n_days(30),
    Preset.THIS_WEEK: lambda now: (start_of_week(now), end_of_week(now)),
    Preset.LAST_WEEK: lambda now: (
        start_of_week(shift_days(now, -7)),
        end_of_week(shift_days(now, -7)),
    ),
    Preset.THIS_MONTH: lambda now: (start_of_month(now), end_of_month(now)),
    Preset.LAST_MONTH: _previous_month,
    Preset.THIS_QUARTER: lambda now: (start_of_quarter(now), end_of_quarter(now)),
    Preset.LAST_QUARTER: _previous_quarter,
    Preset.THIS_YEAR: lambda now: (start_of_year(now), end_of_year(now)),
    Preset.LAST_YEAR: lambda now: (
        start_of_year(shift_years(now, -1)),
        end_of_year(shift_years(now, -1)),
    ),
    Preset.PAST_MONTH: _previous_month,
    Preset.PAST_QUARTER: _previous_quarter,
    Preset.PAST_HALF_YEAR: _past_half_year,
}


def parse_preset(preset_name: str | Preset) -> Preset | None:
    """Look up a preset by name, case-insensitively.

    :param preset_name: Preset name or enum member.
    :returns: The matching preset, or None when the name is unknown.
    """
    if isinstance(preset_name, Preset):
        return preset_name
    if not isinstance(preset_name, str):
        return None
    try:
        return Preset(preset_name.strip().lower())
    except ValueError:
        return None


def preset_label(preset_name: str | Preset) -> str:
    """Human-readable label for a preset; unknown names are returned as-is."""
    if isinstance(preset_name, Preset):
        preset_name = preset_name.value
    return PRESET_LABELS.get(str(preset_name).strip().lower(), preset_name)


def resolve_preset(
    preset_name: str | Preset,
    reference_instant: str | date | datetime | None = None,
) -> DateRange:
    """Resolve a named preset into a concrete range.

    :param preset_name: Preset identifier. Unknown names fall back to
        ``last_30_days`` rather than failing.
    :param reference_instant: The "now" to resolve against; defaults to the
        current moment.
    :returns: Range carrying the preset's display label.
    :raises InvalidDateError: If ``reference_instant`` cannot be parsed.
    """
    now = datetime.now() if reference_instant is None else to_datetime(reference_instant)

    preset = parse_preset(preset_name)
    if preset is None:
        logger.warning(
            "Unknown preset %r, falling back to %s", preset_name, DEFAULT_PRESET.value
        )
        preset = DEFAULT_PRESET

    start, end = _RULES[preset](now)
    return DateRange(start=start, end=end, label=PRESET_LABELS[preset.value])


def resolve_custom_range(
    start: str | date | datetime,
    end: str | date | datetime,
) -> DateRange:
    """Build a custom range normalized to whole days.

    :param start: First day of the range.
    :param end: Last day of the range (inclusive).
    :returns: Range from start of ``start`` to end of ``end``.
    :raises InvalidDateError: If either bound cannot be parsed.
    """
    return DateRange(
        start=start_of_day(to_datetime(start)),
        end=end_of_day(to_datetime(end)),
        label=CUSTOM_LABEL,
    )


def available_presets() -> list[tuple[str, str]]:
    """All preset names with their labels, in catalogue order."""
    return [(preset.value, PRESET_LABELS[preset.value]) for preset in Preset]


__all__ = [
    "CUSTOM",
    "CUSTOM_LABEL",
    "DEFAULT_PRESET",
    "PRESET_LABELS",
    "parse_preset",
    "preset_label",
    "resolve_preset",
    "resolve_custom_range",
    "available_presets",
]
