"""Tests for bucket generation."""

from datetime import datetime, timezone

import pytest

from calrange.buckets import BucketSequence, generate_buckets, parse_granularity
from calrange.exceptions import GranularityError
from calrange.presets import resolve_custom_range
from calrange.types import DateRange, Granularity


def _anchors(date_range: DateRange, granularity: str) -> list[datetime]:
    return [b.anchor_date for b in generate_buckets(date_range, granularity)]


class TestGenerateBuckets:
    """Tests for bucket anchors and labels."""

    def test_weekly_aligns_to_mondays(self) -> None:
        date_range = resolve_custom_range("2024-01-01", "2024-01-20")
        buckets = generate_buckets(date_range, "weekly").to_list()

        assert [b.anchor_date for b in buckets] == [
            datetime(2024, 1, 1),
            datetime(2024, 1, 8),
            datetime(2024, 1, 15),
        ]
        assert [b.short_label for b in buckets] == ["W01", "W02", "W03"]
        assert buckets[2].full_label == "Week of Jan 15, 2024"

    def test_weekly_midweek_start_includes_partial_week(self) -> None:
        date_range = resolve_custom_range("2024-01-03", "2024-01-09")
        assert _anchors(date_range, "weekly") == [
            datetime(2024, 1, 1),
            datetime(2024, 1, 8),
        ]

    def test_quarterly(self) -> None:
        date_range = resolve_custom_range("2024-02-01", "2024-08-15")
        buckets = generate_buckets(date_range, Granularity.QUARTERLY).to_list()

        assert [b.anchor_date for b in buckets] == [
            datetime(2024, 1, 1),
            datetime(2024, 4, 1),
            datetime(2024, 7, 1),
        ]
        assert [b.short_label for b in buckets] == ["Q1 24", "Q2 24", "Q3 24"]
        assert buckets[0].full_label == "Q1 2024"

    def test_quarterly_across_years(self) -> None:
        date_range = resolve_custom_range("2023-11-15", "2024-02-01")
        buckets = generate_buckets(date_range, "quarterly").to_list()
        assert [b.short_label for b in buckets] == ["Q4 23", "Q1 24"]

    def test_daily_includes_leap_day(self) -> None:
        date_range = resolve_custom_range("2024-02-27", "2024-03-02")
        buckets = generate_buckets(date_range, "daily").to_list()

        assert len(buckets) == 5
        assert buckets[2].anchor_date == datetime(2024, 2, 29)
        assert buckets[2].short_label == "Feb 29"
        assert buckets[2].full_label == "Feb 29, 2024"

    def test_monthly(self) -> None:
        date_range = resolve_custom_range("2023-11-15", "2024-02-10")
        buckets = generate_buckets(date_range, "monthly").to_list()

        assert [b.anchor_date for b in buckets] == [
            datetime(2023, 11, 1),
            datetime(2023, 12, 1),
            datetime(2024, 1, 1),
            datetime(2024, 2, 1),
        ]
        assert buckets[0].short_label == "Nov 23"
        assert buckets[0].full_label == "November 2023"

    def test_yearly(self) -> None:
        date_range = resolve_custom_range("2022-06-01", "2024-01-01")
        buckets = generate_buckets(date_range, "yearly").to_list()
        assert [b.short_label for b in buckets] == ["2022", "2023", "2024"]

    def test_single_day(self) -> None:
        date_range = resolve_custom_range("2024-06-15", "2024-06-15")
        assert _anchors(date_range, "daily") == [datetime(2024, 6, 15)]

    def test_time_components_are_aligned(self) -> None:
        date_range = DateRange(
            start=datetime(2024, 1, 1, 15), end=datetime(2024, 1, 2, 1)
        )
        assert _anchors(date_range, "daily") == [
            datetime(2024, 1, 1),
            datetime(2024, 1, 2),
        ]

    def test_mixed_timezone_bounds(self) -> None:
        date_range = DateRange(
            start=datetime(2024, 1, 1, tzinfo=timezone.utc), end=datetime(2024, 1, 3)
        )
        buckets = generate_buckets(date_range, "daily")

        assert len(buckets) == 3
        assert [b.short_label for b in buckets] == ["Jan 01", "Jan 02", "Jan 03"]

    def test_inverted_range_is_empty(self) -> None:
        date_range = resolve_custom_range("2024-05-10", "2024-05-01")
        buckets = generate_buckets(date_range, "daily")

        assert buckets.to_list() == []
        assert len(buckets) == 0
        assert not buckets


class TestBucketSequence:
    """Tests for sequence behaviour."""

    RANGE = resolve_custom_range("2023-05-17", "2025-02-03")

    def test_returns_bucket_sequence(self) -> None:
        assert isinstance(generate_buckets(self.RANGE, "weekly"), BucketSequence)

    def test_is_restartable(self) -> None:
        buckets = generate_buckets(self.RANGE, "weekly")
        assert list(buckets) == list(buckets)

    def test_is_lazy_iterator(self) -> None:
        first = next(iter(generate_buckets(self.RANGE, "daily")))
        assert first.anchor_date == datetime(2023, 5, 17)

    @pytest.mark.parametrize("granularity", list(Granularity))
    def test_len_matches_iteration(self, granularity: Granularity) -> None:
        buckets = generate_buckets(self.RANGE, granularity)
        assert len(buckets) == len(list(buckets))

    @pytest.mark.parametrize("granularity", list(Granularity))
    def test_anchors_strictly_ascending(self, granularity: Granularity) -> None:
        anchors = [b.anchor_date for b in generate_buckets(self.RANGE, granularity)]
        assert all(a < b for a, b in zip(anchors, anchors[1:]))

    @pytest.mark.parametrize("granularity", list(Granularity))
    def test_first_and_last_cover_range(self, granularity: Granularity) -> None:
        anchors = [b.anchor_date for b in generate_buckets(self.RANGE, granularity)]
        assert anchors[0] <= self.RANGE.start
        assert anchors[-1] <= self.RANGE.end

    def test_repr_names_granularity(self) -> None:
        assert "weekly" in repr(generate_buckets(self.RANGE, "weekly"))


class TestParseGranularity:
    """Tests for granularity lookup."""

    def test_case_insensitive(self) -> None:
        assert parse_granularity("WEEKLY") is Granularity.WEEKLY

    def test_unknown_raises(self) -> None:
        date_range = resolve_custom_range("2024-01-01", "2024-01-02")
        with pytest.raises(GranularityError, match="Invalid granularity"):
            generate_buckets(date_range, "hourly")

    def test_unknown_is_value_error(self) -> None:
        with pytest.raises(ValueError):
            parse_granularity("fortnightly")
