"""Calendar range resolver package root."""

from calrange.buckets import BucketSequence, generate_buckets
from calrange.comparison import resolve_comparison_range
from calrange.exceptions import (CalRangeError, ConfigError, DataSourceError,
                                 GranularityError, InvalidDateError)
from calrange.formatting import format_range_display
from calrange.presets import preset_label, resolve_custom_range, resolve_preset
from calrange.types import (Bucket, ComparisonType, DateRange, Granularity,
                            Preset, ValidationResult)
from calrange.validation import validate_range

__all__ = [
    "resolve_preset",
    "resolve_custom_range",
    "preset_label",
    "resolve_comparison_range",
    "generate_buckets",
    "BucketSequence",
    "validate_range",
    "format_range_display",
    "Bucket",
    "ComparisonType",
    "DateRange",
    "Granularity",
    "Preset",
    "ValidationResult",
    "CalRangeError",
    "ConfigError",
    "DataSourceError",
    "GranularityError",
    "InvalidDateError",
]
