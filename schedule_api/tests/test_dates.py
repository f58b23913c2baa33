"""Tests for candidate date values and the date helpers."""

from datetime import date, time

import pytest

from schedule_api.scheduling.dates import (
    DateValue,
    bulk_dates,
    format_date_value,
    parse_date_value,
    parse_day,
    parse_time,
    time_options,
)


class TestParseDateValue:
    """Tests for parse_date_value."""

    def test_valid(self):
        value = parse_date_value("2025-04-15 15:00-17:00")
        assert value == DateValue(day=date(2025, 4, 15), start=time(15, 0), end=time(17, 0))
        assert value.format() == "2025-04-15 15:00-17:00"

    def test_surrounding_whitespace(self):
        assert parse_date_value("  2025-04-15 09:30-10:00\n").format() == "2025-04-15 09:30-10:00"

    @pytest.mark.parametrize(
        "raw",
        [
            "",
            "2025-04-15",
            "2025-04-15 15:00",
            "2025/04/15 15:00-17:00",
            "2025-4-15 15:00-17:00",
            "2025-04-15 24:00-25:00",
            "2025-04-15 15:60-17:00",
            "2025-13-01 15:00-17:00",
            "2025-02-29 15:00-17:00",
        ],
    )
    def test_invalid(self, raw):
        with pytest.raises(ValueError):
            parse_date_value(raw)

    def test_leap_day(self):
        assert parse_date_value("2024-02-29 10:00-11:00").day == date(2024, 2, 29)

    @pytest.mark.parametrize("raw", ["2025-04-15 17:00-15:00", "2025-04-15 15:00-15:00"])
    def test_end_must_follow_start(self, raw):
        with pytest.raises(ValueError, match="end time must be after start time"):
            parse_date_value(raw)


class TestParseParts:
    """Tests for parse_day and parse_time."""

    def test_day(self):
        assert parse_day("2025-12-31") == date(2025, 12, 31)
        with pytest.raises(ValueError):
            parse_day("31-12-2025")

    def test_time(self):
        assert parse_time("00:00") == time(0, 0)
        assert parse_time("23:59") == time(23, 59)
        with pytest.raises(ValueError):
            parse_time("7:00")

    def test_format(self):
        assert format_date_value(date(2025, 1, 2), time(9, 5), time(10, 0)) == "2025-01-02 09:05-10:00"


class TestBulkDates:
    """Tests for generating consecutive daily date values."""

    def test_crosses_month_boundary(self):
        dates = bulk_dates(date(2025, 1, 30), 3, time(19, 0), time(21, 0))
        assert dates == [
            "2025-01-30 19:00-21:00",
            "2025-01-31 19:00-21:00",
            "2025-02-01 19:00-21:00",
        ]

    def test_single_day(self):
        assert bulk_dates(date(2025, 4, 1), 1, time(8, 0), time(9, 0)) == ["2025-04-01 08:00-09:00"]

    @pytest.mark.parametrize("days", [0, 32, -1])
    def test_day_bounds(self, days):
        with pytest.raises(ValueError):
            bulk_dates(date(2025, 4, 1), days, time(8, 0), time(9, 0))

    def test_every_value_parses(self):
        for value in bulk_dates(date(2025, 12, 20), 31, time(18, 30), time(20, 0)):
            assert parse_date_value(value).format() == value


class TestTimeOptions:
    """Tests for the time picker options."""

    def test_default_step(self):
        options = time_options()
        assert len(options) == 48
        assert options[0] == "00:00"
        assert options[-1] == "23:30"

    def test_hourly(self):
        assert time_options(60)[:3] == ["00:00", "01:00", "02:00"]

    @pytest.mark.parametrize("step", [0, -15, 7])
    def test_invalid_step(self, step):
        with pytest.raises(ValueError):
            time_options(step)
