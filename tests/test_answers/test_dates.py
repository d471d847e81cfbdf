"""Tests for ISO-8601 date checks."""

from datetime import date, datetime, timedelta

import pytest

from tddbuilder.answers.dates import check_iso_date, is_iso_date


class TestCheckIsoDate:
    def test_date_only(self):
        check = check_iso_date("2026-03-15")
        assert check.is_valid is True
        assert check.error is None
        assert check.parsed == date(2026, 3, 15)

    def test_surrounding_whitespace(self):
        assert check_iso_date(" 2026-03-15 ").is_valid is True

    def test_datetime_with_zulu(self):
        parsed = check_iso_date("2026-03-15T10:30:00Z").parsed
        assert isinstance(parsed, datetime)
        assert parsed.utcoffset() == timedelta(0)

    def test_datetime_with_fraction_and_offset(self):
        parsed = check_iso_date("2026-03-15T10:30:00.125+02:00").parsed
        assert parsed.utcoffset() == timedelta(hours=2)
        assert parsed.microsecond == 125000

    @pytest.mark.parametrize("text", ["", "   ", None, 20260315])
    def test_empty_or_not_a_string(self, text):
        assert check_iso_date(text).error == "Date must be a non-empty string"

    @pytest.mark.parametrize("text", ["2026-3-5", "15/03/2026", "2026-03-15T10:30", "2026-03-15 10:30:00", "tomorrow"])
    def test_format(self, text):
        assert check_iso_date(text).error == "Date must use ISO-8601 format (YYYY-MM-DD)"

    @pytest.mark.parametrize("text", ["1899-12-31", "2101-01-01"])
    def test_year_range(self, text):
        assert check_iso_date(text).error == "Year must be between 1900 and 2100"

    @pytest.mark.parametrize("text", ["1900-01-01", "2100-12-31"])
    def test_year_range_inclusive(self, text):
        assert is_iso_date(text) is True

    @pytest.mark.parametrize("text", ["2026-02-30", "2026-13-01", "2025-02-29T00:00:00Z"])
    def test_impossible_calendar_date(self, text):
        assert check_iso_date(text).error == "Date is not a real calendar date"

    def test_leap_day(self):
        assert is_iso_date("2024-02-29") is True
