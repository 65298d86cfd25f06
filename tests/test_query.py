#!/usr/bin/env python3
# SPDX-License-Identifier: MIT
"""Tests for query range validation and defaults."""

from datetime import date, timezone
from zoneinfo import ZoneInfo, ZoneInfoNotFoundError

import pytest

from insights.errors import QueryError
from insights.query import default_range, parse_date_range, resolve_timezone


class TestResolveTimezone:
    """Tests for resolve_timezone."""

    def test_known_zone(self):
        try:
            ZoneInfo("Australia/Sydney")
        except ZoneInfoNotFoundError:
            pytest.skip("no tz database available")
        assert str(resolve_timezone("Australia/Sydney")) == "Australia/Sydney"

    @pytest.mark.parametrize("name", ["", "Not/AZone", "../etc/passwd"])
    def test_unknown_zone_falls_back_to_utc(self, name):
        assert resolve_timezone(name) is timezone.utc


class TestDefaults:
    """Missing bounds default to the last 30 days."""

    def test_default_range(self):
        assert default_range("UTC", today=date(2026, 3, 15)) == ("2026-02-13", "2026-03-15")

    def test_default_range_crosses_year(self):
        assert default_range("UTC", today=date(2026, 1, 10)) == ("2025-12-11", "2026-01-10")

    def test_missing_params_use_defaults(self):
        assert parse_date_range({}, "UTC", today=date(2026, 3, 15)) == ("2026-02-13", "2026-03-15")

    def test_empty_params_use_defaults(self):
        params = {"from": "", "to": ""}
        assert parse_date_range(params, "UTC", today=date(2026, 3, 15)) == ("2026-02-13", "2026-03-15")

    def test_only_from_given(self):
        params = {"from": "2026-03-01"}
        assert parse_date_range(params, "UTC", today=date(2026, 3, 15)) == ("2026-03-01", "2026-03-15")

    def test_today_uses_configured_zone(self):
        date_from, date_to = parse_date_range({}, "Pacific/Kiritimati")
        assert date_from < date_to


class TestValidation:
    """Bad ranges are rejected before aggregation."""

    def test_explicit_range_passes_through(self):
        params = {"from": "2026-02-01", "to": "2026-02-28"}
        assert parse_date_range(params, "UTC") == ("2026-02-01", "2026-02-28")

    def test_same_day_range(self):
        params = {"from": "2026-02-12", "to": "2026-02-12"}
        assert parse_date_range(params, "UTC") == ("2026-02-12", "2026-02-12")

    def test_invalid_from(self):
        with pytest.raises(QueryError, match='invalid from date "2026/02/01"'):
            parse_date_range({"from": "2026/02/01", "to": "2026-02-28"}, "UTC")

    def test_invalid_to(self):
        with pytest.raises(QueryError, match="invalid to date"):
            parse_date_range({"from": "2026-02-01", "to": "tomorrow"}, "UTC")

    def test_from_after_to(self):
        with pytest.raises(QueryError, match=r"from \(2026-03-01\) must not be after to \(2026-02-01\)"):
            parse_date_range({"from": "2026-03-01", "to": "2026-02-01"}, "UTC")
