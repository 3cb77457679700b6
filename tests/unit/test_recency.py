"""Unit tests for publish-time parsing and relative ages."""

from datetime import datetime, timedelta, timezone

import pytest

from newsdash.recency import EPOCH_MIN, format_age, parse_timestamp, recency_key

NOW = datetime(2026, 3, 1, 12, 0, 0, tzinfo=timezone.utc)


class TestParseTimestamp:
    """Tests for parse_timestamp."""

    def test_rfc2822(self):
        assert parse_timestamp("Sun, 01 Mar 2026 11:30:00 GMT") == datetime(2026, 3, 1, 11, 30, tzinfo=timezone.utc)

    def test_rfc2822_with_offset(self):
        parsed = parse_timestamp("Sun, 01 Mar 2026 06:30:00 -0500")
        assert parsed == datetime(2026, 3, 1, 11, 30, tzinfo=timezone.utc)

    def test_iso8601_zulu(self):
        assert parse_timestamp("2026-03-01T11:30:00Z") == datetime(2026, 3, 1, 11, 30, tzinfo=timezone.utc)

    def test_naive_treated_as_utc(self):
        assert parse_timestamp("2026-03-01T11:30:00").tzinfo == timezone.utc

    def test_epoch_milliseconds(self):
        assert parse_timestamp(1772366400000) == NOW

    @pytest.mark.parametrize("value", [None, "", "   ", "yesterday", "2026-13-45"])
    def test_unparseable(self, value):
        assert parse_timestamp(value) is None

    def test_recency_key_missing_is_minimum(self):
        assert recency_key(None) == EPOCH_MIN
        assert recency_key(NOW) > recency_key(None)

    def test_recency_key_naive_treated_as_utc(self):
        """Naive datetimes sort alongside aware ones instead of raising."""
        naive = datetime(2026, 3, 1, 13, 0, 0)
        keys = sorted([recency_key(NOW), recency_key(naive), recency_key(None)], reverse=True)
        assert keys == [naive.replace(tzinfo=timezone.utc), NOW, EPOCH_MIN]


class TestFormatAge:
    """Tests for format_age."""

    def test_just_now(self):
        assert format_age(NOW - timedelta(seconds=90), NOW) == "just now"

    def test_minutes(self):
        assert format_age(NOW - timedelta(minutes=45), NOW) == "45 minutes ago"

    def test_two_minutes(self):
        assert format_age(NOW - timedelta(minutes=2), NOW) == "2 minutes ago"

    def test_an_hour(self):
        assert format_age(NOW - timedelta(minutes=61), NOW) == "an hour ago"

    def test_hours_rounded(self):
        assert format_age(NOW - timedelta(minutes=150), NOW) == "3 hours ago"
        assert format_age(NOW - timedelta(minutes=140), NOW) == "2 hours ago"

    def test_missing_publish_time(self):
        """No publish time means no age, not "just now"."""
        assert format_age(None, NOW) == ""
