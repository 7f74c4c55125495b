"""Data-source capability descriptors."""

from calrange.sources.capabilities import (ALL_TOOLS, DEFAULT_CAPABILITIES,
                                           available_granularities,
                                           data_freshness, default_granularity,
                                           get_capability, granularity_tooltip,
                                           is_granularity_supported,
                                           load_capabilities,
                                           max_historical_days,
                                           source_limitations)

__all__ = [
    "ALL_TOOLS",
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
