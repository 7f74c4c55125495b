"""Mock metrics generation over bucket sequences."""

from calrange.data.mock import (MockMetricsGenerator, compare_kpis,
                                growth_trend, last_updated, percent_change)

__all__ = [
    "MockMetricsGenerator",
    "compare_kpis",
    "growth_trend",
    "last_updated",
    "percent_change",
]
