from app import create_app
from app.db import upsert_log
from tests.utils.logs import period_history


def seed(app, logs) -> None:
    with app.app_context():
        for log in logs:
            upsert_log(log["date"], log["type"], log["value"])


class TestConfig:
    def test_test_config_overrides(self, app, tmp_path) -> None:
        assert app.config["DATABASE"] == str(tmp_path / "ebb.db")
        assert app.config["PAST_MONTHS"] == 6
        assert app.testing

    def test_prefixed_env(self, monkeypatch, tmp_path) -> None:
        monkeypatch.setenv("EBB_PAST_MONTHS", "12")
        app = create_app({"DATABASE": str(tmp_path / "env.db")})
        assert app.config["PAST_MONTHS"] == 12

    def test_https_redirect(self, tmp_path) -> None:
        app = create_app({"DATABASE": str(tmp_path / "r.db")}, redirect_to_https=True)
        response = app.test_client().get("/settings")
        assert response.status_code == 301
        assert response.headers["Location"] == "https://localhost/settings"


class TestCalendarPage:
    def test_empty_calendar(self, client) -> None:
        response = client.get("/")
        assert response.status_code == 200
        assert b"<caption>" in response.data
        assert b"Next period" not in response.data

    def test_prediction_summary(self, app, client) -> None:
        seed(app, period_history("2024-01-01", [28] * 6))
        response = client.get("/")
        assert b"Next period" in response.data
        assert b"Mon, Jul 15, 2024" in response.data
        assert b"high confidence" in response.data
        assert b"Very consistent" in response.data

    def test_hint_when_history_is_short(self, app, client) -> None:
        seed(app, period_history("2024-01-01", [28]))
        assert b"Log at least three periods" in client.get("/").data

    def test_shift(self, client) -> None:
        assert client.get("/?shift=-2").status_code == 200


class TestDaySheet:
    def test_toggle(self, client) -> None:
        response = client.post("/day/2024-01-05", data={"type": "period", "value": "heavy"})
        assert response.status_code == 302

        logs = client.get("/api/logs?start=2024-01-01&end=2024-01-31").get_json()
        assert logs == {"2024-01-05": [{"date": "2024-01-05", "type": "period", "value": "heavy"}]}

        client.post("/day/2024-01-05", data={"type": "period", "value": "heavy"})
        assert client.get("/api/logs?start=2024-01-01&end=2024-01-31").get_json() == {}

    def test_shows_day(self, client) -> None:
        response = client.get("/day/2024-01-30")
        assert response.status_code == 200
        assert b"Tue, Jan 30, 2024" in response.data
        assert b"Cramps" in response.data

    def test_invalid_value(self, client) -> None:
        response = client.post("/day/2024-01-05", data={"type": "cramps", "value": "extreme"})
        assert response.status_code == 400
        assert b"Invalid cramps value" in response.data

    def test_invalid_day(self, client) -> None:
        assert client.get("/day/2024-02-30").status_code == 404


class TestRangeEdit:
    def test_marks_range_with_default_flow(self, client) -> None:
        client.post("/settings", data={"default_flow": "light"})
        response = client.post("/range", data={"anchor": "2024-03-01", "end": "2024-03-03"})
        assert response.status_code == 302

        logs = client.get("/api/logs?start=2024-03-01&end=2024-03-31").get_json()
        assert sorted(logs) == ["2024-03-01", "2024-03-02", "2024-03-03"]
        assert {entries[0]["value"] for entries in logs.values()} == {"light"}

    def test_single_day_opens_day_sheet(self, client) -> None:
        response = client.post("/range", data={"anchor": "2024-03-01", "end": "2024-03-01"})
        assert response.status_code == 302
        assert response.headers["Location"].endswith("/day/2024-03-01")

    def test_bad_range(self, client) -> None:
        response = client.post("/range", data={"anchor": "", "end": "2024-03-01"})
        assert response.status_code == 302
        assert "error=" in response.headers["Location"]


class TestSettings:
    def test_update(self, client) -> None:
        assert client.post("/settings", data={"default_flow": "heavy"}).status_code == 302
        page = client.get("/settings").data
        assert b'class="selected">Heavy<' in page

    def test_rejects_unknown(self, client) -> None:
        assert client.post("/settings", data={"default_flow": "none"}).status_code == 400


class TestApi:
    def test_insufficient_data(self, client) -> None:
        assert client.get("/api/predictions").get_json() == {
            "prediction": None,
            "reason": "insufficient_data",
        }

    def test_predictions(self, app, client) -> None:
        seed(app, period_history("2024-01-01", [24, 32, 28]))
        data = client.get("/api/predictions").get_json()

        assert data["stdDev"] == 4.0
        assert len(data["cycles"]) == 4
        assert [p["confidence"] for p in data["predictions"]] == ["medium"] + ["low"] * 5

    def test_logs_bad_dates(self, client) -> None:
        response = client.get("/api/logs?start=nope&end=2024-01-01")
        assert response.status_code == 400
        assert "error" in response.get_json()
