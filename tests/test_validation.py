"""Tests for range validation and picker bounds."""

from datetime import date, datetime, timezone

import pytest

from calrange.exceptions import InvalidDateError
from calrange.presets import resolve_preset
from calrange.validation import (INVALID_DATE, START_AFTER_END,
                                 START_IN_FUTURE, allowed_bounds,
                                 is_date_selectable, range_too_long,
                                 validate_date_range, validate_range)

NOW = "2026-06-01"


class TestValidateRange:
    """Tests for the validation rules."""

    def test_valid_range(self) -> None:
        result = validate_range("2024-01-01", "2024-01-02", 730, NOW)
        assert result.valid is True
        assert result.error is None

    def test_span_exceeds_limit(self) -> None:
        result = validate_range("2024-01-01", "2026-01-01", 730, NOW)
        assert result.valid is False
        assert result.error == "Date range cannot exceed 730 days"

    def test_span_at_limit_is_valid(self) -> None:
        assert validate_range("2024-01-01", "2025-12-31", 730, NOW).valid

    def test_custom_limit_message(self) -> None:
        result = validate_range("2025-01-01", "2025-12-31", 180, NOW)
        assert result.error == range_too_long(180) == "Date range cannot exceed 180 days"

    def test_start_in_future(self) -> None:
        result = validate_range("2025-07-01", "2025-08-01", 730, "2025-06-01")
        assert result.valid is False
        assert result.error == START_IN_FUTURE == "Start date cannot be in the future"

    def test_start_after_end(self) -> None:
        result = validate_range("2024-05-10", "2024-05-01", 730, NOW)
        assert result.error == START_AFTER_END == "Start date must be before end date"

    @pytest.mark.parametrize("bad", ["garbage", None, float("nan"), "2024-02-30"])
    def test_invalid_date(self, bad) -> None:
        result = validate_range(bad, "2024-01-02", 730, NOW)
        assert result.valid is False
        assert result.error == INVALID_DATE == "Invalid date"

    def test_first_failing_rule_is_reported(self) -> None:
        """An inverted range in the future reports the ordering rule."""
        result = validate_range("2030-05-10", "2030-05-01", 730, NOW)
        assert result.error == START_AFTER_END

    def test_accepts_date_objects(self) -> None:
        assert validate_range(date(2024, 1, 1), date(2024, 1, 31), 730, NOW).valid

    def test_timezone_aware_bounds_without_reference(self) -> None:
        assert validate_range("2020-01-01T00:00:00Z", "2020-01-02T00:00:00Z").valid

    def test_invalid_reference_instant_raises(self) -> None:
        with pytest.raises(InvalidDateError):
            validate_range("2024-01-01", "2024-01-02", 730, "someday")

    def test_validate_date_range(self) -> None:
        date_range = resolve_preset("last_30_days", datetime(2025, 3, 10))
        assert validate_date_range(date_range, 730, datetime(2025, 3, 10)).valid
        assert not validate_date_range(date_range, 20, datetime(2025, 3, 10)).valid


class TestPickerBounds:
    """Tests for allowed picker bounds."""

    REF = datetime(2025, 3, 10, 12)

    def test_allowed_bounds(self) -> None:
        bounds = allowed_bounds(365, self.REF)
        assert bounds.start == datetime(2024, 3, 10)
        assert bounds.end == datetime(2025, 3, 10, 23, 59, 59, 999000)

    def test_is_date_selectable(self) -> None:
        assert is_date_selectable("2024-03-10", 365, self.REF)
        assert is_date_selectable("2025-03-10", 365, self.REF)
        assert not is_date_selectable("2024-03-09", 365, self.REF)
        assert not is_date_selectable("2025-03-11", 365, self.REF)


class TestMixedTimezones:
    """Plain values are read as UTC when they meet timezone-aware ones."""

    def test_plain_bounds_with_aware_reference(self) -> None:
        result = validate_range("2024-01-01", "2024-01-02", 730, "2025-06-01T00:00:00Z")
        assert result.valid is True

    def test_future_start_with_aware_reference(self) -> None:
        result = validate_range("2025-07-01", "2025-08-01", 730, "2025-06-01T00:00:00Z")
        assert result.error == START_IN_FUTURE

    def test_aware_start_with_plain_end(self) -> None:
        assert validate_range("2024-01-01T00:00:00Z", "2024-01-10", 730, "2025-01-01").valid

    def test_mixed_bounds_span_rule(self) -> None:
        result = validate_range("2024-01-01T00:00:00+00:00", "2026-01-01", 730, "2026-06-01")
        assert result.error == range_too_long(730)

    def test_offset_start_against_plain_reference(self) -> None:
        """01:00+02:00 is 23:00 UTC, before a plain 23:30 reference."""
        result = validate_range(
            "2025-06-01T01:00:00+02:00", "2025-06-02", 730, "2025-05-31T23:30:00"
        )
        assert result.valid is True

    def test_aware_date_selectable_against_plain_bounds(self) -> None:
        ref = datetime(2025, 3, 10, 12)
        assert is_date_selectable("2025-03-10T08:00:00Z", 365, ref)
        assert is_date_selectable(datetime(2024, 3, 10, 6, tzinfo=timezone.utc), 365, ref)
