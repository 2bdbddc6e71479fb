from datetime import date

from app.month_grid import (
    add_months,
    build_month,
    generate_months,
    month_window,
    months_before,
    window_range,
)


class TestMonthWindow:
    def test_add_months_wraps_years(self) -> None:
        assert add_months(2024, 12, 1) == (2025, 1)
        assert add_months(2024, 1, -1) == (2023, 12)
        assert add_months(2024, 6, -18) == (2022, 12)

    def test_generate_months(self) -> None:
        assert generate_months(2024, 11, 3) == [(2024, 11), (2024, 12), (2025, 1)]

    def test_months_before(self) -> None:
        assert months_before(2024, 2, 3) == [(2023, 11), (2023, 12), (2024, 1)]

    def test_default_window(self) -> None:
        months = month_window(date(2024, 3, 15), past=6, future=6)
        assert len(months) == 13
        assert months[0] == (2023, 9)
        assert months[6] == (2024, 3)
        assert months[-1] == (2024, 9)

    def test_shifted_window(self) -> None:
        months = month_window(date(2024, 3, 15), past=6, future=6, shift=1, batch=6)
        assert months[6] == (2024, 9)
        assert months[0] == (2024, 3)

    def test_window_range(self) -> None:
        assert window_range([(2023, 9), (2024, 2)]) == ("2023-09-01", "2024-02-29")


class TestBuildMonth:
    def test_sunday_first_layout(self) -> None:
        # 2024-02-01 is a Thursday
        month = build_month(2024, 2, {}, set(), today=date(2000, 1, 1))
        first_week = month["weeks"][0]
        assert first_week[:4] == [None, None, None, None]
        assert first_week[4]["date"] == "2024-02-01"
        assert len(month["weeks"]) == 5
        assert all(len(week) == 7 for week in month["weeks"])
        assert month["title"] == "February 2024"

    def test_month_starting_on_sunday(self) -> None:
        month = build_month(2024, 9, {}, set(), today=date(2000, 1, 1))
        assert month["weeks"][0][0]["date"] == "2024-09-01"

    def test_markers(self) -> None:
        logs = {
            "2024-02-10": [{"date": "2024-02-10", "type": "period", "value": "heavy"}],
            "2024-02-11": [
                {"date": "2024-02-11", "type": "cramps", "value": "light"},
                {"date": "2024-02-11", "type": "sex", "value": "protected"},
            ],
        }
        predicted = {"2024-02-10", "2024-02-11"}
        month = build_month(2024, 2, logs, predicted, today=date(2024, 2, 11))
        cells = {c["date"]: c for week in month["weeks"] for c in week if c}

        assert cells["2024-02-10"]["has_period"]
        # a logged period wins over a prediction
        assert not cells["2024-02-10"]["is_predicted"]
        assert cells["2024-02-11"]["is_predicted"]
        assert cells["2024-02-11"]["has_cramps"] and cells["2024-02-11"]["has_sex"]
        assert cells["2024-02-11"]["is_today"]
        assert not cells["2024-02-12"]["is_today"]
