"""Bucket generation: subdividing a range into labelled sub-periods.

:func:`generate_buckets` returns a :class:`BucketSequence`, a lazy iterable
that can be walked any number of times. Each walk starts at the period
containing ``range.start`` and advances one unit at a time up to and including
the period containing ``range.end``, so anchors are strictly ascending with no
duplicates or gaps.
"""

from __future__ import annotations

from datetime import datetime
from typing import Callable, Iterator

from calrange.exceptions import GranularityError
from calrange.formatting import (day_labels, month_labels, quarter_labels,
                                 week_labels, year_labels)
from calrange.periods import (align_timezone, days_between, months_between,
                              shift_days, shift_months, shift_quarters,
                              shift_years, start_of_day, start_of_month,
                              start_of_quarter, start_of_week, start_of_year)
from calrange.types import Bucket, DateRange, Granularity

_Align = Callable[[datetime], datetime]
_Step = Callable[[datetime], datetime]
_Labels = Callable[[datetime], tuple[str, str]]

_WALKS: dict[Granularity, tuple[_Align, _Step, _Labels]] = {
    Granularity.DAILY: (start_of_day, lambda d: shift_days(d, 1), day_labels),
    Granularity.WEEKLY: (start_of_week, lambda d: shift_days(d, 7), week_labels),
    Granularity.MONTHLY: (start_of_month, lambda d: shift_months(d, 1), month_labels),
    Granularity.QUARTERLY: (
        start_of_quarter,
        lambda d: shift_quarters(d, 1),
        quarter_labels,
    ),
    Granularity.YEARLY: (start_of_year, lambda d: shift_years(d, 1), year_labels),
}


def parse_granularity(granularity: str | Granularity) -> Granularity:
    """Look up a granularity by name.

    :raises GranularityError: If the name is not a supported granularity.
    """
    if isinstance(granularity, Granularity):
        return granularity
    try:
        return Granularity(str(granularity).strip().lower())
    except ValueError as e:
        raise GranularityError(
            f"Invalid granularity '{granularity}'. "
            f"Valid options: {[g.value for g in Granularity]}"
        ) from e


class BucketSequence:
    """Restartable, finite sequence of buckets for a range and granularity.

    :param date_range: Range to subdivide.
    :param granularity: Bucket size.
    """

    def __init__(self, date_range: DateRange, granularity: Granularity) -> None:
        self.date_range = date_range
        self.granularity = granularity

    def _bounds(self) -> tuple[datetime, datetime]:
        start = self.date_range.start
        return start, align_timezone(self.date_range.end, start)

    def __iter__(self) -> Iterator[Bucket]:
        start, end = self._bounds()
        if start > end:
            return

        align, step, labels = _WALKS[self.granularity]
        current = align(start)
        last = align(end)
        while current <= last:
            short_label, full_label = labels(current)
            yield Bucket(
                anchor_date=current,
                short_label=short_label,
                full_label=full_label,
            )
            current = align(step(current))

    def __len__(self) -> int:
        start, end = self._bounds()
        if start > end:
            return 0

        align = _WALKS[self.granularity][0]
        first, last = align(start), align(end)
        if self.granularity is Granularity.DAILY:
            return days_between(last, first) + 1
        if self.granularity is Granularity.WEEKLY:
            return days_between(last, first) // 7 + 1
        if self.granularity is Granularity.MONTHLY:
            return months_between(last, first) + 1
        if self.granularity is Granularity.QUARTERLY:
            return months_between(last, first) // 3 + 1
        return last.year - first.year + 1

    def __bool__(self) -> bool:
        start, end = self._bounds()
        return start <= end

    def __repr__(self) -> str:
        return (
            f"BucketSequence(start={self.date_range.start.isoformat()}, "
            f"end={self.date_range.end.isoformat()}, "
            f"granularity={self.granularity.value})"
        )

    def to_list(self) -> list[Bucket]:
        return list(self)


def generate_buckets(
    date_range: DateRange,
    granularity: str | Granularity,
) -> BucketSequence:
    """Subdivide ``date_range`` into labelled buckets.

    An inverted range (start after end) yields an empty sequence rather than
    an error; callers should render it as "no data".

    :param date_range: Range to subdivide.
    :param granularity: Bucket size.
    :returns: Lazy, restartable bucket sequence.
    :raises GranularityError: If the granularity is unknown.
    """
    return BucketSequence(date_range, parse_granularity(granularity))


__all__ = [
    "BucketSequence",
    "parse_granularity",
    "generate_buckets",
]
