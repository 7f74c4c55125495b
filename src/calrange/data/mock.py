"""Mock metrics generated per bucket.

Stands in for a real metrics backend: one sample per bucket for four metric
families (adoption, usage, value, credits), with a per-source base level, a
gentle upward trend and random variance. Samples come from a seeded
``numpy.random.Generator`` whose stream is keyed by seed, metric family, data
source and first bucket, so the same inputs always produce the same samples
while a comparison range gets different draws from the primary one.
"""

from __future__ import annotations

import logging
import zlib
from datetime import date, datetime, timedelta

import numpy as np

from calrange.buckets import BucketSequence, generate_buckets
from calrange.periods import start_of_day, to_datetime
from calrange.sources.capabilities import ALL_TOOLS, DEFAULT_CAPABILITIES
from calrange.types import DateRange, Granularity, KPISummary, MetricSample

logger = logging.getLogger(__name__)

# Base levels per data source; sources not listed use the "default" entry.
BASE_ACTIVE_USERS = {
    ALL_TOOLS: 850, "chatgpt": 320, "trupeer": 150, "vercel": 200,
    "v0": 180, "glean": 250, "zoom_ai": 140, "gemini": 90, "default": 100,
}
BASE_INTERACTIONS = {
    ALL_TOOLS: 5200, "chatgpt": 2100, "trupeer": 800, "vercel": 1100,
    "v0": 950, "glean": 1500, "zoom_ai": 650, "gemini": 420, "default": 500,
}
BASE_VALUE = {
    ALL_TOOLS: 125000, "chatgpt": 45000, "trupeer": 22000, "vercel": 35000,
    "v0": 28000, "glean": 38000, "zoom_ai": 18000, "gemini": 12000, "default": 10000,
}
# Glean has no credit system.
BASE_CREDITS = {
    ALL_TOOLS: 85000, "chatgpt": 28000, "trupeer": 15000, "vercel": 22000,
    "v0": 18000, "glean": 0, "zoom_ai": 12000, "gemini": 8000, "default": 5000,
}

COST_PER_CREDIT = 0.002

# Users counted as the adoption-rate denominator.
LICENSED_USERS = 1000

NIGHTLY_REFRESH_HOUR = 2

_FAMILIES = ("adoption", "usage", "value", "credits")

# Buckets averaged at each end of a series by growth_trend.
GROWTH_WINDOW = 7


def _base(table: dict[str, int], source: str) -> int:
    return table.get(source, table["default"])


def percent_change(current: float, previous: float) -> float:
    """Change from ``previous`` to ``current`` in percent, one decimal.

    Returns 0 when ``previous`` is 0.
    """
    if previous == 0:
        return 0.0
    return round((current - previous) / previous * 100, 1)


class MockMetricsGenerator:
    """Generate deterministic mock metric samples for bucket sequences.

    :param seed: Random seed for reproducibility, or None for random.
    """

    def __init__(self, seed: int | None = None) -> None:
        self.seed = seed

    def _rng(self, family: str, source: str, buckets: BucketSequence) -> np.random.Generator:
        first = start_of_day(buckets.date_range.start).date().toordinal()
        key = (
            _FAMILIES.index(family),
            zlib.crc32(source.encode()),
            first,
            zlib.crc32(buckets.granularity.value.encode()),
        )
        return np.random.default_rng(np.random.SeedSequence(self.seed, spawn_key=key))

    def adoption(self, buckets: BucketSequence, source: str = ALL_TOOLS) -> list[MetricSample]:
        """Active users, new users and adoption rate per bucket."""
        items = list(buckets)
        idx = np.arange(len(items))
        rng = self._rng("adoption", source, buckets)
        level = (
            _base(BASE_ACTIVE_USERS, source)
            + np.sin(idx * 0.5) * 30
            + rng.random(len(items)) * 40
            + idx * 2
        )
        new_users = level * 0.08 + rng.random(len(items)) * 10
        return [
            MetricSample(
                anchor_date=bucket.anchor_date,
                label=bucket.short_label,
                full_label=bucket.full_label,
                values={
                    "active_users": float(round(level[i])),
                    "new_users": float(round(new_users[i])),
                    "adoption_rate": round(level[i] / 10) / 100,
                },
            )
            for i, bucket in enumerate(items)
        ]

    def usage(self, buckets: BucketSequence, source: str = ALL_TOOLS) -> list[MetricSample]:
        """Interactions, sessions, session duration and engagement per bucket."""
        items = list(buckets)
        idx = np.arange(len(items))
        rng = self._rng("usage", source, buckets)
        level = (
            _base(BASE_INTERACTIONS, source)
            + np.sin(idx * 0.3) * 200
            + rng.random(len(items)) * 150
            + idx * 15
        )
        duration = 180 + rng.random(len(items)) * 120
        engagement = 60 + rng.random(len(items)) * 30
        return [
            MetricSample(
                anchor_date=bucket.anchor_date,
                label=bucket.short_label,
                full_label=bucket.full_label,
                values={
                    "total_interactions": float(round(level[i])),
                    "sessions": float(round(level[i] * 0.3)),
                    "avg_session_duration": float(round(duration[i])),
                    "engagement_score": round(float(engagement[i]), 1),
                },
            )
            for i, bucket in enumerate(items)
        ]

    def value(self, buckets: BucketSequence, source: str = ALL_TOOLS) -> list[MetricSample]:
        """Estimated value, hours saved and cost savings per bucket."""
        items = list(buckets)
        idx = np.arange(len(items))
        rng = self._rng("value", source, buckets)
        level = _base(BASE_VALUE, source) + rng.random(len(items)) * 5000 + idx * 800
        return [
            MetricSample(
                anchor_date=bucket.anchor_date,
                label=bucket.short_label,
                full_label=bucket.full_label,
                values={
                    "estimated_value": float(round(level[i])),
                    "time_saved": float(round(level[i] / 50)),
                    "cost_savings": float(round(level[i] * 0.8)),
                },
            )
            for i, bucket in enumerate(items)
        ]

    def credits(self, buckets: BucketSequence, source: str = ALL_TOOLS) -> list[MetricSample]:
        """Credits consumed and their cost per bucket."""
        items = list(buckets)
        base = _base(BASE_CREDITS, source)
        if base == 0:
            used = np.zeros(len(items))
        else:
            idx = np.arange(len(items))
            rng = self._rng("credits", source, buckets)
            used = np.round(base + rng.random(len(items)) * 3000 + idx * 400)
        return [
            MetricSample(
                anchor_date=bucket.anchor_date,
                label=bucket.short_label,
                full_label=bucket.full_label,
                values={
                    "credits_used": float(used[i]),
                    "credits_cost": round(float(used[i]) * COST_PER_CREDIT, 2),
                },
            )
            for i, bucket in enumerate(items)
        ]

    def kpi_summary(
        self,
        date_range: DateRange,
        granularity: str | Granularity = Granularity.DAILY,
        source: str = ALL_TOOLS,
    ) -> KPISummary:
        """Aggregate the four metric families over a range.

        An empty range (start after end) yields all-zero KPIs.

        :param date_range: Range to summarize.
        :param granularity: Bucket size for the underlying samples.
        :param source: Data source id.
        :returns: Aggregated KPIs.
        """
        buckets = generate_buckets(date_range, granularity)
        count = len(buckets)
        logger.debug(
            "Generating %d %s samples for %s", count, buckets.granularity.value, source
        )

        def column(samples: list[MetricSample], name: str) -> np.ndarray:
            return np.array([s.values[name] for s in samples], dtype=float)

        active = column(self.adoption(buckets, source), "active_users")
        usage = self.usage(buckets, source)
        value = self.value(buckets, source)
        credits = self.credits(buckets, source)

        peak_users = float(active.max()) if count else 0.0
        total_value = float(column(value, "estimated_value").sum())
        total_sessions = float(column(usage, "sessions").sum())
        total_credits = float(column(credits, "credits_used").sum())

        return KPISummary(
            adoption={
                "total_active_users": peak_users,
                "avg_active_users": float(round(active.mean())) if count else 0.0,
                "peak_users": peak_users,
                "adoption_rate": round(peak_users / LICENSED_USERS * 100, 1),
            },
            usage={
                "total_interactions": float(column(usage, "total_interactions").sum()),
                "total_sessions": total_sessions,
                "avg_sessions_per_bucket": float(round(total_sessions / count)) if count else 0.0,
                "avg_engagement": (
                    round(float(column(usage, "engagement_score").mean()), 1) if count else 0.0
                ),
            },
            value={
                "total_value": total_value,
                "total_time_saved": float(column(value, "time_saved").sum()),
                "avg_value_per_user": float(round(total_value / peak_users)) if peak_users else 0.0,
                "cost_savings": float(round(total_value * 0.8)),
            },
            credits={
                "total_credits": total_credits,
                "total_cost": round(float(column(credits, "credits_cost").sum()), 2),
                "avg_credit_per_user": (
                    float(round(total_credits / peak_users)) if peak_users else 0.0
                ),
            },
        )

    def tool_breakdown(
        self,
        date_range: DateRange,
        granularity: str | Granularity = Granularity.DAILY,
    ) -> dict[str, KPISummary]:
        """KPI summary for every individual data source."""
        return {
            source: self.kpi_summary(date_range, granularity, source)
            for source in DEFAULT_CAPABILITIES
            if source != ALL_TOOLS
        }

    def top_sources(
        self,
        date_range: DateRange,
        granularity: str | Granularity = Granularity.DAILY,
        metric: str = "peak_users",
        limit: int = 5,
    ) -> list[tuple[str, float]]:
        """Rank individual data sources by a KPI, highest first.

        :param date_range: Range to summarize.
        :param granularity: Bucket size for the underlying samples.
        :param metric: KPI name from any family, e.g. ``"total_value"``.
        :param limit: Maximum number of sources returned.
        :returns: ``(source, value)`` pairs; ties keep catalogue order.
        :raises KeyError: If ``metric`` is not a KPI name.
        """
        ranked = [
            (source, _kpi(summary, metric))
            for source, summary in self.tool_breakdown(date_range, granularity).items()
        ]
        ranked.sort(key=lambda item: item[1], reverse=True)
        return ranked[:max(limit, 0)]


def _kpi(summary: KPISummary, metric: str) -> float:
    for family in _FAMILIES:
        values = getattr(summary, family)
        if metric in values:
            return values[metric]
    raise KeyError(f"Unknown KPI '{metric}'")


def growth_trend(samples: list[MetricSample], metric: str) -> float:
    """Percent change from the first to the last week of a series.

    Compares the mean of ``metric`` over the first ``GROWTH_WINDOW`` samples
    with the mean over the last ``GROWTH_WINDOW``; shorter series use every
    sample for both. Samples without the metric count as 0.

    :returns: Change rounded to one decimal, or 0 for fewer than two samples
        or a zero starting mean.
    """
    if len(samples) < 2:
        return 0.0

    series = np.array([s.values.get(metric, 0.0) for s in samples], dtype=float)
    first = float(series[:GROWTH_WINDOW].mean())
    last = float(series[-GROWTH_WINDOW:].mean())
    return percent_change(last, first)


def compare_kpis(current: KPISummary, previous: KPISummary) -> KPISummary:
    """Percent change of every KPI present in both summaries."""

    def changes(cur: dict[str, float], prev: dict[str, float]) -> dict[str, float]:
        return {name: percent_change(cur[name], prev[name]) for name in cur if name in prev}

    return KPISummary(
        adoption=changes(current.adoption, previous.adoption),
        usage=changes(current.usage, previous.usage),
        value=changes(current.value, previous.value),
        credits=changes(current.credits, previous.credits),
    )


def last_updated(reference_instant: str | date | datetime | None = None) -> datetime:
    """Time of the most recent nightly refresh (02:00) at or before now."""
    now = datetime.now() if reference_instant is None else to_datetime(reference_instant)
    refresh = start_of_day(now).replace(hour=NIGHTLY_REFRESH_HOUR)
    if now < refresh:
        return refresh - timedelta(days=1)
    return refresh


__all__ = [
    "BASE_ACTIVE_USERS",
    "BASE_INTERACTIONS",
    "BASE_VALUE",
    "BASE_CREDITS",
    "MockMetricsGenerator",
    "percent_change",
    "compare_kpis",
    "growth_trend",
    "last_updated",
]
