"""Calendar range exception hierarchy.

All calrange-specific exceptions derive from :class:`CalRangeError` so callers
can catch every resolver-related error uniformly. Range validation failures are
not exceptions: they are returned as :class:`~calrange.types.ValidationResult`.
"""

from __future__ import annotations


class CalRangeError(Exception):
    """Base class for calendar range exceptions.

    Derived exceptions should extend this class so that callers can catch all
    calrange errors uniformly.
    """


class InvalidDateError(CalRangeError, ValueError):
    """Raised when a supplied value cannot be parsed into a calendar instant."""


class GranularityError(CalRangeError, ValueError):
    """Raised when a granularity name is not one of the supported values."""


class ConfigError(CalRangeError):
    """Raised when configuration files or parameters are invalid."""


class DataSourceError(CalRangeError):
    """Raised when a data source is unknown or its descriptor is unusable."""


__all__ = [
    "CalRangeError",
    "InvalidDateError",
    "GranularityError",
    "ConfigError",
    "DataSourceError",
]
