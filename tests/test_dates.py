from datetime import date, datetime

import pytest

from ebb_forecast.dates import add_days, dates_between, days_between, format_date, parse_day


class TestParseDay:
    def test_parses_iso_string(self) -> None:
        assert parse_day("2024-02-29") == date(2024, 2, 29)

    def test_passes_dates_through(self) -> None:
        assert parse_day(date(2024, 1, 1)) == date(2024, 1, 1)

    def test_drops_time_of_day(self) -> None:
        assert parse_day(datetime(2024, 1, 1, 23, 30)) == date(2024, 1, 1)

    @pytest.mark.parametrize("value", ["2023-02-29", "01/02/2024", "", "2024-1-1x"])
    def test_rejects_malformed(self, value: str) -> None:
        with pytest.raises(ValueError):
            parse_day(value)


class TestArithmetic:
    def test_add_days_over_leap_day(self) -> None:
        assert add_days("2024-02-28", 1) == "2024-02-29"
        assert add_days("2023-02-28", 1) == "2023-03-01"

    def test_add_days_over_year_end(self) -> None:
        assert add_days("2024-12-30", 3) == "2025-01-02"

    def test_add_negative_days(self) -> None:
        assert add_days("2024-03-01", -1) == "2024-02-29"

    def test_days_between(self) -> None:
        assert days_between("2024-01-01", "2024-03-01") == 60
        assert days_between("2024-03-01", "2024-01-01") == -60

    def test_days_between_across_dst_change(self) -> None:
        # US and EU clocks change in March; whole days are unaffected
        assert days_between("2024-03-09", "2024-03-11") == 2
        assert days_between("2024-03-30", "2024-04-01") == 2

    def test_dates_between_is_inclusive_and_order_insensitive(self) -> None:
        expected = ["2024-01-30", "2024-01-31", "2024-02-01"]
        assert dates_between("2024-01-30", "2024-02-01") == expected
        assert dates_between("2024-02-01", "2024-01-30") == expected

    def test_dates_between_same_day(self) -> None:
        assert dates_between("2024-05-05", "2024-05-05") == ["2024-05-05"]

    def test_format_date_pads(self) -> None:
        assert format_date(2024, 1, 5) == "2024-01-05"
