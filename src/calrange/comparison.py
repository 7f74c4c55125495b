"""Comparison ranges for period-over-period trend deltas."""

from __future__ import annotations

from calrange.exceptions import ConfigError
from calrange.periods import days_between, shift_days, shift_years
from calrange.types import ComparisonType, DateRange

COMPARISON_LABELS = {
    ComparisonType.PREVIOUS_PERIOD: "Previous Period",
    ComparisonType.YEAR_OVER_YEAR: "Same Period Last Year",
}


def parse_comparison_type(comparison_type: str | ComparisonType) -> ComparisonType:
    """Look up a comparison rule by name.

    :raises ConfigError: If the name is not a known comparison type.
    """
    if isinstance(comparison_type, ComparisonType):
        return comparison_type
    try:
        return ComparisonType(str(comparison_type).strip().lower())
    except ValueError as e:
        raise ConfigError(
            f"Invalid comparison type '{comparison_type}'. "
            f"Valid options: {[c.value for c in ComparisonType]}"
        ) from e


def resolve_comparison_range(
    primary: DateRange,
    comparison_type: str | ComparisonType,
) -> DateRange | None:
    """Derive the comparison range for ``primary``.

    ``previous_period`` shifts both bounds back by the primary span plus one
    day, giving the immediately preceding window of equal length.
    ``year_over_year`` shifts both bounds back one calendar year, so
    2024-02-29 maps to 2023-02-28.

    :param primary: Range being compared.
    :param comparison_type: Comparison rule.
    :returns: The comparison range, or None for ``none``.
    :raises ConfigError: If the comparison type is unknown.
    """
    rule = parse_comparison_type(comparison_type)

    if rule is ComparisonType.PREVIOUS_PERIOD:
        offset = days_between(primary.end, primary.start) + 1
        return DateRange(
            start=shift_days(primary.start, -offset),
            end=shift_days(primary.end, -offset),
            label=COMPARISON_LABELS[rule],
        )

    if rule is ComparisonType.YEAR_OVER_YEAR:
        return DateRange(
            start=shift_years(primary.start, -1),
            end=shift_years(primary.end, -1),
            label=COMPARISON_LABELS[rule],
        )

    return None


__all__ = [
    "COMPARISON_LABELS",
    "parse_comparison_type",
    "resolve_comparison_range",
]
