"""
Unit Tests - Time Bucketing
"""
from datetime import date, datetime, timedelta, timezone
from zoneinfo import ZoneInfo

import pytest

from merchant_dashboard.analytics import MalformedTimestamp
from merchant_dashboard.analytics.windows import (
    align_to,
    calendar_day,
    comparison_windows,
    parse_timestamp,
    trailing_days,
)


class TestParseTimestamp:
    """Tests for parse_timestamp"""

    def test_datetime_passthrough(self, now):
        assert parse_timestamp(now) is now

    def test_iso_string_with_z(self):
        result = parse_timestamp("2026-10-17T08:00:00Z")

        assert result == datetime(2026, 10, 17, 8, 0, tzinfo=timezone.utc)

    def test_iso_string_with_offset(self):
        result = parse_timestamp("2026-10-17T08:00:00+02:00")

        assert result == datetime(2026, 10, 17, 6, 0, tzinfo=timezone.utc)

    def test_date_only(self):
        """Day precision is enough"""
        assert parse_timestamp(date(2026, 10, 17)) == datetime(2026, 10, 17)
        assert parse_timestamp("2026-10-17") == datetime(2026, 10, 17)

    @pytest.mark.parametrize("value", ["", "   ", "17/10/2026", "not a date", None, 1760000000, "Z"])
    def test_rejects_malformed(self, value):
        with pytest.raises(MalformedTimestamp):
            parse_timestamp(value, transaction_id="txn_1")


class TestAlignment:
    """Tests for align_to and calendar_day"""

    def test_aware_to_aware(self):
        tokyo = ZoneInfo("Asia/Tokyo")
        now = datetime(2026, 10, 17, 12, 0, tzinfo=tokyo)
        ts = datetime(2026, 10, 16, 20, 0, tzinfo=timezone.utc)

        assert align_to(ts, now).tzinfo is tokyo
        assert calendar_day(ts, now) == date(2026, 10, 17)

    def test_naive_takes_now_zone(self, now):
        ts = datetime(2026, 10, 17, 1, 0)

        assert align_to(ts, now) == datetime(2026, 10, 17, 1, 0, tzinfo=timezone.utc)

    def test_aware_with_naive_now(self):
        now = datetime(2026, 10, 17, 12, 0)
        ts = datetime(2026, 10, 17, 1, 0, tzinfo=ZoneInfo("America/Los_Angeles"))

        assert align_to(ts, now) == datetime(2026, 10, 17, 8, 0)

    def test_calendar_day_string(self, now):
        assert calendar_day("2026-10-16T23:59:59Z", now) == date(2026, 10, 16)


class TestTrailingDays:
    """Tests for trailing_days"""

    def test_oldest_first_ending_today(self, now):
        days = trailing_days(now, 3)

        assert days == [date(2026, 10, 15), date(2026, 10, 16), date(2026, 10, 17)]

    def test_single_day(self, now):
        assert trailing_days(now, 1) == [now.date()]

    def test_rejects_zero(self, now):
        with pytest.raises(ValueError):
            trailing_days(now, 0)


class TestComparisonWindows:
    """Tests for comparison_windows"""

    def test_windows_are_contiguous(self, now):
        current, previous = comparison_windows(now)

        assert current.end == now
        assert current.start == now - timedelta(days=7)
        assert previous.end == current.start
        assert previous.start == now - timedelta(days=14)

    def test_boundary_in_exactly_one_window(self, now):
        current, previous = comparison_windows(now)
        boundary = now - timedelta(days=7)

        assert current.contains(boundary)
        assert not previous.contains(boundary)

    def test_now_is_in_current(self, now):
        current, _ = comparison_windows(now)

        assert current.contains(now)
        assert not current.contains(now + timedelta(microseconds=1))

    def test_custom_period(self, now):
        current, previous = comparison_windows(now, period_days=30)

        assert previous.start == now - timedelta(days=60)

    def test_rejects_zero_period(self, now):
        with pytest.raises(ValueError):
            comparison_windows(now, period_days=0)
