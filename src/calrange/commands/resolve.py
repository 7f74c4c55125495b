"""Configuration and execution for dashboard range resolution.

Example config file (dashboard.yaml):

    preset: "last_7_days"            # Or "custom" with custom_range below
    custom_range:
      start: "2024-01-01"
      end: "2024-03-31"
    granularity: "weekly"
    comparison: "previous_period"    # none | previous_period | year_over_year
    data_source: "all_tools"
    max_span_days: 365               # Optional, defaults to the source lookback
    reference_instant: "2025-03-10"  # Optional, pins "now"
    random_seed: 42                  # Optional
    logging:
      level: "INFO"

Only the preset name is stored; it is re-resolved against the reference
instant every time the configuration is loaded.
"""

from __future__ import annotations

import logging
from datetime import date, datetime
from pathlib import Path
from typing import Any

import yaml

from calrange.buckets import generate_buckets, parse_granularity
from calrange.comparison import parse_comparison_type, resolve_comparison_range
from calrange.exceptions import ConfigError, GranularityError, InvalidDateError
from calrange.periods import to_datetime
from calrange.presets import CUSTOM, parse_preset, resolve_custom_range, resolve_preset
from calrange.sources.capabilities import (ALL_TOOLS, DEFAULT_CAPABILITIES,
                                           Catalogue, granularity_tooltip,
                                           is_granularity_supported,
                                           max_historical_days)
from calrange.types import (ComparisonType, DashboardConfig,
                            DashboardResolution, Granularity)
from calrange.validation import validate_date_range

logger = logging.getLogger(__name__)

VALID_LOG_LEVELS = frozenset(["DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL"])


def _parse_datetime(value: str | date | datetime, field: str) -> datetime:
    """Parse a configuration date value.

    :param value: ISO format string, date or datetime.
    :param field: Field name used in the error message.
    :returns: Parsed datetime.
    :raises ConfigError: If parsing fails.
    """
    try:
        return to_datetime(value)
    except InvalidDateError as e:
        raise ConfigError(f"Invalid datetime format for '{field}': {value}") from e


def _parse_positive_int(value: Any, field: str) -> int:
    if isinstance(value, bool) or not isinstance(value, int) or value <= 0:
        raise ConfigError(f"'{field}' must be a positive integer")
    return value


def load_dashboard_config(
    config_path: str | Path,
    catalogue: Catalogue | None = None,
) -> DashboardConfig:
    """Parse and validate a dashboard configuration file.

    :param config_path: Path to YAML configuration file.
    :param catalogue: Capability catalogue used to check the data source.
    :returns: Validated DashboardConfig object.
    :raises ConfigError: If file cannot be read or config is invalid.
    """
    config_path = Path(config_path)
    catalogue = DEFAULT_CAPABILITIES if catalogue is None else catalogue

    # Read and parse YAML
    try:
        with open(config_path) as f:
            raw_config = yaml.safe_load(f)
    except FileNotFoundError as e:
        raise ConfigError(f"Configuration file not found: {config_path}") from e
    except yaml.YAMLError as e:
        raise ConfigError(f"Invalid YAML in configuration file: {e}") from e

    if not isinstance(raw_config, dict):
        raise ConfigError("Configuration must be a YAML mapping")

    if "preset" not in raw_config:
        raise ConfigError("Missing required field: preset")

    # Parse preset; unknown names are kept and fall back when resolved
    preset = raw_config["preset"]
    if not isinstance(preset, str) or not preset.strip():
        raise ConfigError("'preset' must be a non-empty string")
    preset = preset.strip().lower()

    custom_start: datetime | None = None
    custom_end: datetime | None = None
    if preset == CUSTOM:
        raw_custom = raw_config.get("custom_range")
        if not isinstance(raw_custom, dict):
            raise ConfigError("'custom_range' must be a mapping with 'start' and 'end'")
        if "start" not in raw_custom or "end" not in raw_custom:
            raise ConfigError("'custom_range' must contain 'start' and 'end'")
        custom_start = _parse_datetime(raw_custom["start"], "custom_range.start")
        custom_end = _parse_datetime(raw_custom["end"], "custom_range.end")
    elif parse_preset(preset) is None:
        logger.warning("Configured preset %r is unknown and will fall back", preset)

    # Parse granularity
    try:
        granularity = parse_granularity(raw_config.get("granularity", Granularity.DAILY))
    except GranularityError as e:
        raise ConfigError(str(e)) from e

    # Parse comparison
    comparison = parse_comparison_type(raw_config.get("comparison", ComparisonType.NONE))

    # Parse data_source
    data_source = raw_config.get("data_source", ALL_TOOLS)
    if data_source not in catalogue:
        raise ConfigError(
            f"Invalid data_source '{data_source}'. "
            f"Valid options: {sorted(catalogue)}"
        )
    if not is_granularity_supported(data_source, granularity, catalogue):
        raise ConfigError(granularity_tooltip(data_source, granularity, catalogue))

    # Parse optional fields
    max_span_days: int | None = None
    if raw_config.get("max_span_days") is not None:
        max_span_days = _parse_positive_int(raw_config["max_span_days"], "max_span_days")

    reference_instant: datetime | None = None
    if raw_config.get("reference_instant") is not None:
        reference_instant = _parse_datetime(
            raw_config["reference_instant"], "reference_instant"
        )

    random_seed: int | None = raw_config.get("random_seed")
    if random_seed is not None and (
        isinstance(random_seed, bool) or not isinstance(random_seed, int)
    ):
        raise ConfigError("'random_seed' must be an integer")

    # Parse logging (optional)
    raw_logging = raw_config.get("logging", {})
    if not isinstance(raw_logging, dict):
        raise ConfigError("'logging' must be a mapping")
    log_level = str(raw_logging.get("level", "INFO")).upper()
    if log_level not in VALID_LOG_LEVELS:
        raise ConfigError(
            f"Invalid logging level '{log_level}'. "
            f"Valid options: {sorted(VALID_LOG_LEVELS)}"
        )

    logger.debug("Loaded dashboard configuration from %s", config_path)
    return DashboardConfig(
        preset=preset,
        custom_start=custom_start,
        custom_end=custom_end,
        granularity=granularity,
        comparison=comparison,
        data_source=data_source,
        max_span_days=max_span_days,
        reference_instant=reference_instant,
        random_seed=random_seed,
        log_level=log_level,
    )


def resolve_dashboard(
    config: DashboardConfig,
    reference_instant: str | date | datetime | None = None,
    catalogue: Catalogue | None = None,
) -> DashboardResolution:
    """Resolve a dashboard configuration into concrete ranges and buckets.

    The reference instant is, in order of precedence, the argument, the
    configuration's pinned instant, or the current moment. Buckets are only
    generated for a range that passes validation.

    :param config: Dashboard configuration.
    :param reference_instant: Optional override of "now".
    :param catalogue: Capability catalogue used for the lookback limit.
    :returns: Resolved ranges, validation outcome and buckets.
    :raises InvalidDateError: If ``reference_instant`` cannot be parsed.
    """
    if reference_instant is not None:
        now = to_datetime(reference_instant)
    elif config.reference_instant is not None:
        now = config.reference_instant
    else:
        now = datetime.now()

    if config.preset == CUSTOM and config.custom_start and config.custom_end:
        date_range = resolve_custom_range(config.custom_start, config.custom_end)
    else:
        date_range = resolve_preset(config.preset, now)

    max_span_days = config.max_span_days or max_historical_days(config.data_source, catalogue)
    validation = validate_date_range(date_range, max_span_days, now)
    if not validation.valid:
        logger.info("Range %s..%s rejected: %s", date_range.start, date_range.end, validation.error)

    buckets = generate_buckets(date_range, config.granularity).to_list() if validation.valid else []

    return DashboardResolution(
        config=config,
        reference_instant=now,
        date_range=date_range,
        comparison_range=resolve_comparison_range(date_range, config.comparison),
        validation=validation,
        buckets=buckets,
    )
