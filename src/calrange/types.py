"""Core type definitions for the calendar range resolver.

All data models use Pydantic BaseModel for automatic validation, JSON
serialization, and better error messages. Every model here is a value object:
constructed fresh on each resolution call and never mutated.
"""

from __future__ import annotations

from datetime import datetime
from enum import Enum

from pydantic import BaseModel, ConfigDict, Field

# ---------------------------------------------------------------------------
# Base Configuration
# ---------------------------------------------------------------------------


class FrozenModel(BaseModel):
    """Base model with frozen (immutable) configuration."""

    model_config = ConfigDict(frozen=True)


# ---------------------------------------------------------------------------
# Enumerations
# ---------------------------------------------------------------------------


class Granularity(str, Enum):
    """Bucket size used to subdivide a date range."""

    DAILY = "daily"
    WEEKLY = "weekly"
    MONTHLY = "monthly"
    QUARTERLY = "quarterly"
    YEARLY = "yearly"


class ComparisonType(str, Enum):
    """Rule used to derive a comparison range from a primary range."""

    NONE = "none"
    PREVIOUS_PERIOD = "previous_period"
    YEAR_OVER_YEAR = "year_over_year"


class Preset(str, Enum):
    """Named rules mapping a reference instant to a concrete date range."""

    TODAY = "today"
    YESTERDAY = "yesterday"
    LAST_7_DAYS = "last_7_days"
    LAST_14_DAYS = "last_14_days"
    LAST_30_DAYS = "last_30_days"
    THIS_WEEK = "this_week"
    LAST_WEEK = "last_week"
    THIS_MONTH = "this_month"
    LAST_MONTH = "last_month"
    THIS_QUARTER = "this_quarter"
    LAST_QUARTER = "last_quarter"
    THIS_YEAR = "this_year"
    LAST_YEAR = "last_year"
    PAST_MONTH = "past_month"
    PAST_QUARTER = "past_quarter"
    PAST_HALF_YEAR = "past_half_year"


# ---------------------------------------------------------------------------
# Date/Time Types
# ---------------------------------------------------------------------------


class DateRange(FrozenModel):
    """Inclusive start, inclusive end range of calendar instants.

    ``start <= end`` is expected but not enforced here; use
    :func:`calrange.validation.validate_range` to check a range before use.
    An inverted range simply produces no buckets.

    :param start: Start of the range, normally at start of day.
    :param end: End of the range, normally at end of day.
    :param label: Optional human-readable label (e.g. "Last 7 Days").
    """

    start: datetime
    end: datetime
    label: str | None = None


class Bucket(FrozenModel):
    """One labelled sub-period of a range, used as a chart x-axis tick.

    :param anchor_date: First instant of the sub-period.
    :param short_label: Compact label (e.g. "Jan 05", "W02", "Q1 24").
    :param full_label: Long label (e.g. "Jan 05, 2024", "Q1 2024").
    """

    anchor_date: datetime
    short_label: str
    full_label: str


class ValidationResult(FrozenModel):
    """Outcome of validating a candidate date range.

    :param valid: Whether every validation rule passed.
    :param error: Message naming the first failed rule, or None when valid.
    """

    valid: bool
    error: str | None = None


# ---------------------------------------------------------------------------
# Data Source Types
# ---------------------------------------------------------------------------


class DataSourceCapability(FrozenModel):
    """Capability descriptor for a metrics data source.

    :param name: Display name of the source.
    :param supported_granularities: Granularities the source can aggregate to.
    :param max_historical_days: Maximum lookback the source can serve.
    :param data_method: How data is collected (e.g. "api", "scraping").
    :param freshness: Human-readable update cadence.
    :param limitations: Optional note shown to users about restrictions.
    """

    name: str
    supported_granularities: list[Granularity] = Field(default_factory=list)
    max_historical_days: int = 730
    data_method: str = "api"
    freshness: str = "Daily"
    limitations: str | None = None


# ---------------------------------------------------------------------------
# Metrics Types
# ---------------------------------------------------------------------------


class MetricSample(FrozenModel):
    """A single generated sample for one bucket.

    :param anchor_date: Anchor date of the bucket this sample belongs to.
    :param label: Short bucket label.
    :param full_label: Full bucket label.
    :param values: Metric name to value.
    """

    anchor_date: datetime
    label: str
    full_label: str
    values: dict[str, float] = Field(default_factory=dict)


class KPISummary(FrozenModel):
    """Aggregated KPIs for a range, grouped by metric family.

    :param adoption: Active-user figures.
    :param usage: Interaction and session figures.
    :param value: Estimated value and time saved.
    :param credits: Credit consumption and cost.
    """

    adoption: dict[str, float] = Field(default_factory=dict)
    usage: dict[str, float] = Field(default_factory=dict)
    value: dict[str, float] = Field(default_factory=dict)
    credits: dict[str, float] = Field(default_factory=dict)


# ---------------------------------------------------------------------------
# Configuration Types
# ---------------------------------------------------------------------------


class DashboardConfig(FrozenModel):
    """Persisted dashboard selection.

    Only the preset *name* is stored, never its resolved bounds, so that a
    relative preset such as "last_7_days" reflects the current day whenever the
    configuration is reopened.

    :param preset: Preset name, or "custom" to use the explicit bounds.
    :param custom_start: Start of a custom range (preset "custom" only).
    :param custom_end: End of a custom range (preset "custom" only).
    :param granularity: Bucket granularity.
    :param comparison: Comparison rule for trend deltas.
    :param data_source: Capability catalogue key of the data source.
    :param max_span_days: Maximum range length, None to use the source lookback.
    :param reference_instant: Pinned "now", None to use the wall clock.
    :param random_seed: Seed for mock metrics, None for random.
    :param log_level: Logging level.
    """

    preset: str = Preset.LAST_30_DAYS.value
    custom_start: datetime | None = None
    custom_end: datetime | None = None
    granularity: Granularity = Granularity.DAILY
    comparison: ComparisonType = ComparisonType.NONE
    data_source: str = "all_tools"
    max_span_days: int | None = None
    reference_instant: datetime | None = None
    random_seed: int | None = None
    log_level: str = "INFO"


class DashboardResolution(FrozenModel):
    """Everything a dashboard needs after resolving a configuration.

    :param config: Configuration that was resolved.
    :param reference_instant: Instant the presets were resolved against.
    :param date_range: Primary range.
    :param comparison_range: Comparison range, or None.
    :param validation: Validation outcome for the primary range.
    :param buckets: Buckets of the primary range.
    """

    config: DashboardConfig
    reference_instant: datetime
    date_range: DateRange
    comparison_range: DateRange | None = None
    validation: ValidationResult
    buckets: list[Bucket] = Field(default_factory=list)


# ---------------------------------------------------------------------------
# Exports
# ---------------------------------------------------------------------------

__all__ = [
    # Base models
    "FrozenModel",
    # Enumerations
    "Granularity",
    "ComparisonType",
    "Preset",
    # Date/Time
    "DateRange",
    "Bucket",
    "ValidationResult",
    # Data sources
    "DataSourceCapability",
    # Metrics
    "MetricSample",
    "KPISummary",
    # Configuration
    "DashboardConfig",
    "DashboardResolution",
]
