"""Unit tests for schedule clock-time helpers."""

from datetime import UTC, date, datetime, timedelta, timezone

import pytest

from storefront_banners.domain.time_utils import (
    combine_date_time,
    ensure_utc,
    is_valid_time,
    minutes_to_time,
    time_to_minutes,
)


class TestIsValidTime:
    @pytest.mark.parametrize("value", ["00:00", "09:30", "9:30", "23:59"])
    def test_accepts_clock_times(self, value):
        assert is_valid_time(value)

    @pytest.mark.parametrize("value", ["24:00", "12:60", "1230", "ab:cd", "", "12:5"])
    def test_rejects_malformed_times(self, value):
        assert not is_valid_time(value)


class TestTimeToMinutes:
    def test_converts_to_minutes_since_midnight(self):
        assert time_to_minutes("00:00") == 0
        assert time_to_minutes("10:15") == 615
        assert time_to_minutes("23:59") == 1439

    def test_raises_for_invalid_time(self):
        with pytest.raises(ValueError):
            time_to_minutes("25:00")

    def test_round_trips_with_minutes_to_time(self):
        assert minutes_to_time(time_to_minutes("07:05")) == "07:05"


class TestCombineDateTime:
    def test_builds_utc_timestamp(self):
        result = combine_date_time(date(2026, 3, 14), "15:09")
        assert result == datetime(2026, 3, 14, 15, 9, tzinfo=UTC)


class TestEnsureUtc:
    def test_naive_is_treated_as_utc(self):
        assert ensure_utc(datetime(2026, 1, 1, 12, 0)).tzinfo == UTC

    def test_aware_is_converted(self):
        plus_two = timezone(timedelta(hours=2))
        result = ensure_utc(datetime(2026, 1, 1, 12, 0, tzinfo=plus_two))
        assert result == datetime(2026, 1, 1, 10, 0, tzinfo=UTC)
