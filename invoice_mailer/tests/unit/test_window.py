"""Unit tests for billing window derivation."""

import pytest
from datetime import datetime, timezone

from invoice_mailer.core.models import InvalidWindowError
from invoice_mailer.core.window import (
    month_window,
    parse_year_month,
    previous_month_window,
    scheduled_window,
    trailing_month_window,
)

JAN_1_2025_UTC = 1735689600
FEB_1_2025_UTC = 1738368000


class TestMonthWindow:
    """Tests for explicit calendar-month windows."""

    def test_january_bounds_inclusive(self):
        window = month_window(2025, 1)

        assert window.start == JAN_1_2025_UTC
        assert window.end == FEB_1_2025_UTC - 1
        assert window.period == "January-2025"
        assert window.description == "January 2025"
        assert (window.year, window.month) == (2025, 1)

    def test_leap_february(self):
        window = month_window(2024, 2)
        assert window.end == 1709251200 - 1  # 2024-03-01T00:00:00Z
        assert window.period == "February-2024"

    def test_timezone_shifts_bounds(self):
        window = month_window(2025, 1, "Europe/Madrid")
        assert window.start == JAN_1_2025_UTC - 3600

    def test_month_out_of_range(self):
        with pytest.raises(InvalidWindowError):
            month_window(2025, 13)


class TestParseYearMonth:
    """Tests for trigger input validation."""

    def test_accepts_strings_and_ints(self):
        assert parse_year_month("2025", "3") == (2025, 3)
        assert parse_year_month(2025, 12) == (2025, 12)

    @pytest.mark.parametrize("year,month", [(None, 1), (2025, None), ("", "1"), (2025, "")])
    def test_missing_values(self, year, month):
        with pytest.raises(InvalidWindowError, match="Please provide both year and month."):
            parse_year_month(year, month)

    @pytest.mark.parametrize("year,month", [("abc", 1), (2025, "x"), (2025, 0), (2025, 13), ("2025", "-1")])
    def test_invalid_values(self, year, month):
        with pytest.raises(InvalidWindowError, match="Invalid year or month."):
            parse_year_month(year, month)


class TestScheduledPolicies:
    """Tests for the parameterless window policies."""

    def test_previous_month_mid_month(self):
        window = previous_month_window(datetime(2025, 2, 15, 9, 0, tzinfo=timezone.utc))
        assert window.start == JAN_1_2025_UTC
        assert window.period == "January-2025"

    def test_previous_month_crosses_year(self):
        window = previous_month_window(datetime(2025, 1, 1, 0, 5))
        assert window.period == "December-2024"
        assert window.end == JAN_1_2025_UTC - 1

    def test_trailing_month(self):
        window = trailing_month_window(datetime(2025, 2, 28, 12, 0))
        assert window.period == "2025-01-28_to_2025-02-27"
        assert window.description == "2025-01-28 to 2025-02-27"
        assert window.year is None

    def test_trailing_month_clamps_day(self):
        window = trailing_month_window(datetime(2025, 3, 31))
        assert window.period == "2025-02-28_to_2025-03-30"

    def test_trailing_month_january(self):
        window = trailing_month_window(datetime(2025, 1, 15))
        assert window.period == "2024-12-15_to_2025-01-14"

    def test_scheduled_window_default_is_previous_month(self):
        window = scheduled_window(now=datetime(2025, 2, 3))
        assert window.period == "January-2025"

    def test_scheduled_window_trailing(self):
        window = scheduled_window("trailing_month", now=datetime(2025, 2, 3))
        assert window.period == "2025-01-03_to_2025-02-02"

    def test_unknown_policy(self):
        with pytest.raises(ValueError, match="Unknown window policy"):
            scheduled_window("last_30_days")
