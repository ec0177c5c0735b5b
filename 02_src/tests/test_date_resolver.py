"""Tests for DateRangeResolver."""

from datetime import date, time

import pytest

from birdbot.dates import PRESETS, host_default_zone, parse_date
from birdbot.errors import RangeLimitError, UserInputError
from conftest import FIXED_NOW, make_observation


class TestResolveTimezone:
    """Tests for region -> zone resolution."""

    def test_country_code(self, resolver):
        """Test that a country code maps to its zone."""
        assert resolver.resolve_timezone("SG") == "Asia/Singapore"

    def test_subnational_code_exact(self, resolver):
        """Test that a listed subnational code wins over its country."""
        assert resolver.resolve_timezone("US-CA") == "America/Los_Angeles"

    def test_subnational_falls_back_to_country(self, resolver):
        """Test that an unlisted subdivision uses the country prefix."""
        assert resolver.resolve_timezone("SG-01") == "Asia/Singapore"

    def test_unknown_region_uses_default(self, resolver):
        """Test that unresolvable input falls back to the host zone."""
        assert resolver.resolve_timezone("ZZ") == "UTC"
        assert resolver.resolve_timezone(None) == "UTC"
        assert resolver.resolve_timezone("L1234567") == "UTC"

    def test_host_default_zone_from_env(self, monkeypatch):
        """Test that a valid TZ environment value is used."""
        monkeypatch.setenv("TZ", "Asia/Tokyo")
        assert host_default_zone() == "Asia/Tokyo"

    def test_host_default_zone_ignores_invalid_env(self, monkeypatch):
        """Test that an invalid TZ value falls back to UTC."""
        monkeypatch.setenv("TZ", "Not/AZone")
        assert host_default_zone() == "UTC"


class TestGetPreset:
    """Tests for named presets."""

    @pytest.mark.parametrize(
        "name,lookback",
        [
            ("today", 1),
            ("yesterday", 2),
            ("last_3_days", 3),
            ("last_week", 7),
            ("last_14_days", 14),
            ("last_month", 30),
        ],
    )
    def test_lookback_table(self, resolver, name, lookback):
        """Test lookback days and ordering for every preset."""
        date_filter = resolver.get_preset(name, "SG")
        assert date_filter.lookback_days == lookback
        assert date_filter.start <= date_filter.end

    def test_all_presets_covered(self):
        """Test that the preset table has exactly the supported names."""
        assert set(PRESETS) == {
            "today",
            "yesterday",
            "last_3_days",
            "last_week",
            "last_14_days",
            "last_month",
        }

    def test_today_uses_local_time(self, resolver):
        """Test that today starts at local midnight and ends now."""
        date_filter = resolver.get_preset("today", "SG")
        assert date_filter.start.date() == date(2026, 2, 15)
        assert date_filter.start.time() == time(0, 0)
        assert date_filter.end.hour == 12
        assert date_filter.end == FIXED_NOW

    def test_yesterday_ends_at_end_of_day(self, resolver):
        """Test that yesterday covers the whole previous local day."""
        date_filter = resolver.get_preset("yesterday", "SG")
        assert date_filter.start.date() == date(2026, 2, 14)
        assert date_filter.end.date() == date(2026, 2, 14)
        assert date_filter.end.time() == time(23, 59, 59, 999000)
        assert date_filter.label.startswith("Yesterday (14/02/2026")

    def test_last_week_start(self, resolver):
        """Test that last_week starts six days before today."""
        date_filter = resolver.get_preset("last_week", "SG")
        assert date_filter.start.date() == date(2026, 2, 9)

    def test_unknown_preset_falls_back(self, resolver):
        """Test that an unknown preset behaves like last_14_days."""
        unknown = resolver.get_preset("fortnight", "SG")
        default = resolver.get_preset("last_14_days", "SG")
        assert unknown == default

    def test_label_contains_zone_abbreviation(self, resolver):
        """Test that the label names the local time and zone."""
        date_filter = resolver.get_preset("today", "ZZ")
        assert date_filter.label == "Today (until 04:00 UTC)"


class TestParseCustomRange:
    """Tests for free-text dates."""

    def test_formats_are_equivalent(self, resolver):
        """Test that all accepted date formats give the same window."""
        slash = resolver.parse_custom_range("14/02/2026", "SG")
        iso = resolver.parse_custom_range("2026-02-14", "SG")
        dash = resolver.parse_custom_range("14-02-2026", "SG")
        assert slash == iso == dash
        assert slash.start.date() == date(2026, 2, 14)
        assert slash.end.time() == time(23, 59, 59, 999000)
        assert slash.label == "14/02/2026"

    def test_reversed_range_is_swapped(self, resolver):
        """Test that B to A becomes A to B."""
        date_filter = resolver.parse_custom_range("14/02/2026 to 10/02/2026", "SG")
        assert date_filter.start.date() == date(2026, 2, 10)
        assert date_filter.end.date() == date(2026, 2, 14)
        assert date_filter.label.startswith("10/02/2026 to 14/02/2026")

    def test_separator_is_case_insensitive(self, resolver):
        """Test that ' TO ' separates a range too."""
        date_filter = resolver.parse_custom_range("10/02/2026 TO 12/02/2026", "SG")
        assert date_filter.end.date() == date(2026, 2, 12)

    def test_lookback_counts_from_start(self, resolver):
        """Test lookback days are measured from today back to the start date."""
        date_filter = resolver.parse_custom_range("10/02/2026", "SG")
        assert date_filter.lookback_days == 6

    def test_too_old_is_range_limit_error(self, resolver):
        """Test that a date beyond 30 days raises RangeLimitError."""
        with pytest.raises(RangeLimitError) as exc_info:
            resolver.parse_custom_range("01/01/2026", "SG")
        assert exc_info.value.earliest == date(2026, 1, 16)
        assert exc_info.value.latest == date(2026, 2, 15)
        assert isinstance(exc_info.value, UserInputError)

    @pytest.mark.parametrize(
        "text",
        ["hello", "31/02/2026", "2026/02/14", "14/02/2026 to someday", "", "1 to 2 to 3"],
    )
    def test_unparseable_returns_none(self, resolver, text):
        """Test that bad input yields None, not an exception."""
        assert resolver.parse_custom_range(text, "SG") is None

    def test_parse_date_rejects_impossible(self):
        """Test that impossible calendar dates are rejected."""
        assert parse_date("29/02/2026") is None
        assert parse_date("29/02/2024") == date(2024, 2, 29)


class TestFilterObservations:
    """Tests for filtering observations into a window."""

    def test_keeps_only_inside_window(self, resolver):
        """Test that observations outside the window are dropped."""
        date_filter = resolver.get_preset("last_week", "SG")
        inside = make_observation(1, "2026-02-14 08:30")
        before = make_observation(2, "2026-02-01 08:30")
        undated = make_observation(3, None)
        kept = resolver.filter_observations([inside, before, undated], date_filter)
        assert kept == [inside]

    def test_date_without_time(self, resolver):
        """Test that an observation date without a time counts as midnight."""
        date_filter = resolver.parse_custom_range("14/02/2026", "SG")
        obs = make_observation(1, "2026-02-14")
        assert resolver.filter_observations([obs], date_filter) == [obs]

