"""Tests for mock metric generation."""

from datetime import datetime

import pytest

from calrange.buckets import generate_buckets
from calrange.comparison import resolve_comparison_range
from calrange.data import (MockMetricsGenerator, compare_kpis, growth_trend,
                           last_updated, percent_change)
from calrange.presets import resolve_custom_range, resolve_preset
from calrange.sources import DEFAULT_CAPABILITIES
from calrange.types import MetricSample

NOW = datetime(2025, 3, 10, 14, 30)


@pytest.fixture
def generator() -> MockMetricsGenerator:
    return MockMetricsGenerator(seed=42)


@pytest.fixture
def week():
    return resolve_preset("last_7_days", NOW)


class TestSamples:
    """Tests for per-bucket samples."""

    def test_one_sample_per_bucket(self, generator: MockMetricsGenerator, week) -> None:
        buckets = generate_buckets(week, "daily")
        samples = generator.adoption(buckets)

        assert len(samples) == 7
        assert [s.anchor_date for s in samples] == [b.anchor_date for b in buckets]
        assert samples[0].label == "Mar 04"

    def test_values_are_plausible(self, generator: MockMetricsGenerator, week) -> None:
        samples = generator.adoption(generate_buckets(week, "daily"))
        assert all(800 <= s.values["active_users"] <= 1000 for s in samples)

    def test_usage_and_value_fields(self, generator: MockMetricsGenerator, week) -> None:
        buckets = generate_buckets(week, "daily")
        usage = generator.usage(buckets, "trupeer")[0].values
        value = generator.value(buckets, "trupeer")[0].values

        assert set(usage) == {
            "total_interactions",
            "sessions",
            "avg_session_duration",
            "engagement_score",
        }
        assert 60 <= usage["engagement_score"] <= 90
        assert set(value) == {"estimated_value", "time_saved", "cost_savings"}

    def test_glean_has_no_credits(self, generator: MockMetricsGenerator, week) -> None:
        samples = generator.credits(generate_buckets(week, "weekly"), "glean")
        assert all(s.values["credits_used"] == 0 for s in samples)
        assert all(s.values["credits_cost"] == 0 for s in samples)

    def test_same_seed_same_samples(self, week) -> None:
        buckets = generate_buckets(week, "daily")
        first = MockMetricsGenerator(seed=7).usage(buckets)
        second = MockMetricsGenerator(seed=7).usage(buckets)
        assert first == second


class TestKpiSummary:
    """Tests for KPI aggregation."""

    def test_deterministic(self, week) -> None:
        first = MockMetricsGenerator(seed=42).kpi_summary(week, "daily")
        second = MockMetricsGenerator(seed=42).kpi_summary(week, "daily")
        assert first == second

    def test_keys(self, generator: MockMetricsGenerator, week) -> None:
        summary = generator.kpi_summary(week, "weekly", "chatgpt")
        assert set(summary.adoption) == {
            "total_active_users",
            "avg_active_users",
            "peak_users",
            "adoption_rate",
        }
        assert set(summary.credits) == {
            "total_credits",
            "total_cost",
            "avg_credit_per_user",
        }

    def test_peak_is_at_least_average(self, generator: MockMetricsGenerator, week) -> None:
        summary = generator.kpi_summary(week)
        assert summary.adoption["peak_users"] >= summary.adoption["avg_active_users"]

    def test_empty_range_gives_zeros(self, generator: MockMetricsGenerator) -> None:
        inverted = resolve_custom_range("2024-05-10", "2024-05-01")
        summary = generator.kpi_summary(inverted)

        assert summary.adoption["peak_users"] == 0.0
        assert summary.usage["total_interactions"] == 0.0
        assert summary.value["total_value"] == 0.0
        assert summary.credits["avg_credit_per_user"] == 0.0

    def test_comparison_against_previous_period(
        self, generator: MockMetricsGenerator, week
    ) -> None:
        comparison = resolve_comparison_range(week, "previous_period")
        current = generator.kpi_summary(week)
        previous = generator.kpi_summary(comparison)
        changes = compare_kpis(current, previous)

        assert set(changes.adoption) == set(current.adoption)
        assert changes.adoption["peak_users"] == percent_change(
            current.adoption["peak_users"], previous.adoption["peak_users"]
        )

    def test_tool_breakdown_excludes_aggregate(
        self, generator: MockMetricsGenerator, week
    ) -> None:
        breakdown = generator.tool_breakdown(week, "monthly")
        assert set(breakdown) == set(DEFAULT_CAPABILITIES) - {"all_tools"}


class TestHelpers:
    """Tests for change and refresh helpers."""

    def test_percent_change(self) -> None:
        assert percent_change(110, 100) == 10.0
        assert percent_change(50, 200) == -75.0
        assert percent_change(1, 3) == -66.7
        assert percent_change(90, 0) == 0.0

    def test_compare_identical_summaries(self, generator: MockMetricsGenerator, week) -> None:
        summary = generator.kpi_summary(week)
        changes = compare_kpis(summary, summary)
        assert all(v == 0.0 for v in changes.value.values())

    def test_last_updated(self) -> None:
        assert last_updated(datetime(2025, 3, 10, 9)) == datetime(2025, 3, 10, 2)
        assert last_updated(datetime(2025, 3, 10, 1, 30)) == datetime(2025, 3, 9, 2)
        assert last_updated("2025-03-10T02:00:00") == datetime(2025, 3, 10, 2)


def _series(values: list[float], metric: str = "active_users") -> list[MetricSample]:
    return [
        MetricSample(
            anchor_date=datetime(2025, 1, i + 1),
            label=f"Jan {i + 1:02d}",
            full_label=f"Jan {i + 1:02d}, 2025",
            values={metric: value},
        )
        for i, value in enumerate(values)
    ]


class TestGrowthTrend:
    """Tests for first-week versus last-week growth."""

    def test_first_and_last_week_averages(self) -> None:
        samples = _series([100.0] * 7 + [110.0] * 7)
        assert growth_trend(samples, "active_users") == 10.0

    def test_middle_samples_are_ignored(self) -> None:
        samples = _series([100.0] * 7 + [500.0] * 3 + [90.0] * 7)
        assert growth_trend(samples, "active_users") == -10.0

    def test_short_series_uses_every_sample(self) -> None:
        assert growth_trend(_series([100.0, 150.0, 200.0]), "active_users") == 0.0

    def test_fewer_than_two_samples(self) -> None:
        assert growth_trend(_series([100.0]), "active_users") == 0.0
        assert growth_trend([], "active_users") == 0.0

    def test_zero_starting_average(self) -> None:
        samples = _series([0.0] * 7 + [50.0] * 7)
        assert growth_trend(samples, "active_users") == 0.0

    def test_missing_metric_counts_as_zero(self) -> None:
        assert growth_trend(_series([100.0] * 14), "sessions") == 0.0

    def test_generated_samples(self, generator: MockMetricsGenerator) -> None:
        month = resolve_preset("last_30_days", NOW)
        samples = generator.adoption(generate_buckets(month, "daily"))
        first = sum(s.values["active_users"] for s in samples[:7]) / 7
        last = sum(s.values["active_users"] for s in samples[-7:]) / 7
        assert growth_trend(samples, "active_users") == percent_change(last, first)


class TestTopSources:
    """Tests for ranking data sources by a KPI."""

    def test_ranked_highest_first(self, generator: MockMetricsGenerator, week) -> None:
        top = generator.top_sources(week, "weekly", "total_value", limit=3)

        assert len(top) == 3
        assert [value for _, value in top] == sorted(
            (value for _, value in top), reverse=True
        )

    def test_matches_breakdown(self, generator: MockMetricsGenerator, week) -> None:
        breakdown = generator.tool_breakdown(week, "monthly")
        top = generator.top_sources(week, "monthly", "peak_users", limit=10)

        assert len(top) == len(breakdown)
        assert top[0][1] == max(s.adoption["peak_users"] for s in breakdown.values())
        assert all(breakdown[source].adoption["peak_users"] == value for source, value in top)

    def test_default_limit(self, generator: MockMetricsGenerator, week) -> None:
        assert len(generator.top_sources(week)) == 5

    def test_unknown_metric(self, generator: MockMetricsGenerator, week) -> None:
        with pytest.raises(KeyError, match="Unknown KPI"):
            generator.top_sources(week, metric="happiness")
