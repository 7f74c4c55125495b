"""Data-source capability catalogue.

Describes which granularities and how much history each metrics source can
serve. The range resolver itself never consults this catalogue; dashboards use
it to pick a default granularity, grey out unsupported ones and choose the
``max_span_days`` passed to validation.

Example catalogue file (sources.yaml):

    sources:
      chatgpt:
        name: "ChatGPT"
        supported_granularities: ["weekly", "monthly"]
        max_historical_days: 365
        data_method: "scraping"
        freshness: "Weekly"
        limitations: "Only weekly and monthly aggregations available."
"""

from __future__ import annotations

import logging
from pathlib import Path
from typing import Mapping

import yaml
from pydantic import ValidationError

from calrange.exceptions import ConfigError, DataSourceError
from calrange.types import DataSourceCapability, Granularity

logger = logging.getLogger(__name__)

ALL_TOOLS = "all_tools"

DEFAULT_MAX_HISTORICAL_DAYS = 730

_ALL_GRANULARITIES = list(Granularity)
_WEEKLY_MONTHLY = [Granularity.WEEKLY, Granularity.MONTHLY]

DEFAULT_CAPABILITIES: dict[str, DataSourceCapability] = {
    ALL_TOOLS: DataSourceCapability(
        name="All Tools",
        supported_granularities=_ALL_GRANULARITIES,
        max_historical_days=730,
        data_method="aggregated",
        freshness="Daily (nightly)",
    ),
    "chatgpt": DataSourceCapability(
        name="ChatGPT",
        supported_granularities=_WEEKLY_MONTHLY,
        max_historical_days=365,
        data_method="scraping",
        freshness="Weekly",
        limitations=(
            "Data collected via web scraping. "
            "Only weekly and monthly aggregations available."
        ),
    ),
    "trupeer": DataSourceCapability(
        name="Trupeer",
        supported_granularities=_ALL_GRANULARITIES,
        max_historical_days=730,
    ),
    "vercel": DataSourceCapability(
        name="Vercel",
        supported_granularities=_ALL_GRANULARITIES,
        max_historical_days=730,
    ),
    "v0": DataSourceCapability(
        name="V0",
        supported_granularities=_ALL_GRANULARITIES,
        max_historical_days=730,
    ),
    "glean": DataSourceCapability(
        name="Glean",
        supported_granularities=_WEEKLY_MONTHLY,
        max_historical_days=365,
        freshness="Weekly",
        limitations=(
            "Limited to weekly and monthly aggregations. "
            "Custom date ranges supported but aggregated weekly."
        ),
    ),
    "zoom_ai": DataSourceCapability(
        name="Zoom AI Companion",
        supported_granularities=_WEEKLY_MONTHLY,
        max_historical_days=365,
        data_method="csv/scraping",
        freshness="Weekly",
        limitations="Data from CSV exports and scraping. Weekly and monthly views only.",
    ),
    "gemini": DataSourceCapability(
        name="Gemini",
        supported_granularities=[Granularity.MONTHLY],
        max_historical_days=180,
        data_method="limited",
        freshness="Monthly",
        limitations=(
            "Limited data availability. Monthly aggregation only. "
            "Historical data limited to 6 months."
        ),
    ),
}

Catalogue = Mapping[str, DataSourceCapability]


def _lookup(source: str, catalogue: Catalogue | None) -> DataSourceCapability | None:
    return (DEFAULT_CAPABILITIES if catalogue is None else catalogue).get(source)


def get_capability(
    source: str,
    catalogue: Catalogue | None = None,
) -> DataSourceCapability:
    """Look up the capability descriptor of a source.

    :raises DataSourceError: If the source is not in the catalogue.
    """
    catalogue = DEFAULT_CAPABILITIES if catalogue is None else catalogue
    try:
        return catalogue[source]
    except KeyError as e:
        raise DataSourceError(
            f"Unrecognized data source: '{source}'. "
            f"Supported sources: {', '.join(sorted(catalogue))}"
        ) from e


def is_granularity_supported(
    source: str,
    granularity: str | Granularity,
    catalogue: Catalogue | None = None,
) -> bool:
    capability = _lookup(source, catalogue)
    if capability is None:
        return False
    try:
        wanted = Granularity(granularity)
    except ValueError:
        return False
    return wanted in capability.supported_granularities


def available_granularities(
    source: str,
    catalogue: Catalogue | None = None,
) -> list[Granularity]:
    capability = _lookup(source, catalogue)
    return list(capability.supported_granularities) if capability else []


def granularity_tooltip(
    source: str,
    granularity: str | Granularity,
    catalogue: Catalogue | None = None,
) -> str | None:
    """Explain why a granularity is disabled for a source.

    :returns: None when the granularity is supported, otherwise a message such
        as ``"ChatGPT only supports: Weekly, Monthly"``.
    """
    if is_granularity_supported(source, granularity, catalogue):
        return None

    capability = _lookup(source, catalogue)
    if capability is None:
        return "Data source not available"

    supported = ", ".join(g.value.capitalize() for g in capability.supported_granularities)
    return f"{capability.name} only supports: {supported}"


def max_historical_days(source: str, catalogue: Catalogue | None = None) -> int:
    capability = _lookup(source, catalogue)
    return capability.max_historical_days if capability else DEFAULT_MAX_HISTORICAL_DAYS


def data_freshness(source: str, catalogue: Catalogue | None = None) -> str:
    capability = _lookup(source, catalogue)
    return capability.freshness if capability else "Unknown"


def source_limitations(source: str, catalogue: Catalogue | None = None) -> str | None:
    capability = _lookup(source, catalogue)
    return capability.limitations if capability else None


def default_granularity(source: str, catalogue: Catalogue | None = None) -> Granularity:
    """Daily when the source supports it, otherwise its first granularity."""
    capability = _lookup(source, catalogue)
    if capability is None or not capability.supported_granularities:
        return Granularity.DAILY
    if Granularity.DAILY in capability.supported_granularities:
        return Granularity.DAILY
    return capability.supported_granularities[0]


def load_capabilities(
    config_path: str | Path,
    include_defaults: bool = True,
) -> dict[str, DataSourceCapability]:
    """Parse and validate a capability catalogue file.

    :param config_path: Path to YAML catalogue file.
    :param include_defaults: Start from the built-in catalogue and let the
        file add or replace entries.
    :returns: Catalogue keyed by source id.
    :raises ConfigError: If file cannot be read or the catalogue is invalid.
    """
    config_path = Path(config_path)

    try:
        with open(config_path) as f:
            raw_config = yaml.safe_load(f)
    except FileNotFoundError as e:
        raise ConfigError(f"Capability file not found: {config_path}") from e
    except yaml.YAMLError as e:
        raise ConfigError(f"Invalid YAML in capability file: {e}") from e

    if not isinstance(raw_config, dict):
        raise ConfigError("Capability file must be a YAML mapping")

    raw_sources = raw_config.get("sources")
    if not isinstance(raw_sources, dict) or len(raw_sources) == 0:
        raise ConfigError("'sources' must be a non-empty mapping")

    catalogue = dict(DEFAULT_CAPABILITIES) if include_defaults else {}
    for source_id, raw_capability in raw_sources.items():
        if not isinstance(raw_capability, dict):
            raise ConfigError(f"Source '{source_id}' must be a mapping")
        if "name" not in raw_capability:
            raise ConfigError(f"Source '{source_id}' is missing required field: name")
        try:
            catalogue[str(source_id)] = DataSourceCapability(**raw_capability)
        except ValidationError as e:
            raise ConfigError(f"Invalid capability for source '{source_id}': {e}") from e

    logger.info("Loaded %d data source capabilities from %s", len(raw_sources), config_path)
    return catalogue


__all__ = [
    "ALL_TOOLS",
    "DEFAULT_MAX_HISTORICAL_DAYS",
    "DEFAULT_CAPABILITIES",
    "get_capability",
    "is_granularity_supported",
    "available_granularities",
    "granularity_tooltip",
    "max_historical_days",
    "data_freshness",
    "source_limitations",
    "default_granularity",
    "load_capabilities",
]
