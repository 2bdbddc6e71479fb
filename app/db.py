import sqlite3
from datetime import datetime
from pathlib import Path
from typing import Dict, List, Optional

from flask import Flask, current_app, g


SCHEMA = """
CREATE TABLE IF NOT EXISTS logs (
    id INTEGER PRIMARY KEY AUTOINCREMENT,
    date TEXT NOT NULL,
    type TEXT NOT NULL,
    value TEXT,
    created_at TEXT NOT NULL,
    UNIQUE (date, type)
);

CREATE TABLE IF NOT EXISTS settings (
    key TEXT PRIMARY KEY,
    value TEXT NOT NULL
);
"""

PREDICTION_TYPES = ("period", "cramps")


def get_db() -> sqlite3.Connection:
    if "db" not in g:
        g.db = sqlite3.connect(current_app.config["DATABASE"])
        g.db.row_factory = sqlite3.Row
    return g.db


def close_db(error=None) -> None:
    db = g.pop("db", None)
    if db is not None:
        db.close()


def init_db(app: Flask) -> None:
    db_path = Path(app.config["DATABASE"])
    db_path.parent.mkdir(parents=True, exist_ok=True)

    @app.teardown_appcontext
    def teardown_db(error=None):
        close_db(error)

    with app.app_context():
        db = get_db()
        db.executescript(SCHEMA)
        db.commit()


def _row_to_log(row: sqlite3.Row) -> Dict[str, Optional[str]]:
    return {"date": row["date"], "type": row["type"], "value": row["value"]}


def upsert_log(date: str, log_type: str, value: Optional[str]) -> None:
    db = get_db()
    db.execute(
        "INSERT INTO logs (date, type, value, created_at) VALUES (?, ?, ?, ?) "
        "ON CONFLICT (date, type) DO UPDATE SET value = excluded.value",
        (date, log_type, value, datetime.utcnow().isoformat()),
    )
    db.commit()


def delete_log(date: str, log_type: str) -> None:
    db = get_db()
    db.execute("DELETE FROM logs WHERE date = ? AND type = ?", (date, log_type))
    db.commit()


def fetch_logs(start_date: str, end_date: str) -> Dict[str, List[Dict[str, Optional[str]]]]:
    """Logs between two days (inclusive), grouped by day."""
    db = get_db()
    rows = db.execute(
        "SELECT date, type, value FROM logs WHERE date >= ? AND date <= ? ORDER BY date, type",
        (start_date, end_date),
    ).fetchall()

    grouped: Dict[str, List[Dict[str, Optional[str]]]] = {}
    for row in rows:
        grouped.setdefault(row["date"], []).append(_row_to_log(row))
    return grouped


def fetch_day_logs(date: str) -> List[Dict[str, Optional[str]]]:
    return fetch_logs(date, date).get(date, [])


def fetch_all_period_logs() -> List[Dict[str, Optional[str]]]:
    """Every log the predictor reads, across all time."""
    db = get_db()
    placeholders = ", ".join("?" for _ in PREDICTION_TYPES)
    rows = db.execute(
        f"SELECT date, type, value FROM logs WHERE type IN ({placeholders}) ORDER BY date",
        PREDICTION_TYPES,
    ).fetchall()
    return [_row_to_log(row) for row in rows]


def count_period_days() -> int:
    db = get_db()
    row = db.execute("SELECT COUNT(*) AS count FROM logs WHERE type = 'period'").fetchone()
    return int(row["count"])


def get_setting(key: str, default: Optional[str] = None) -> Optional[str]:
    db = get_db()
    row = db.execute("SELECT value FROM settings WHERE key = ?", (key,)).fetchone()
    return row["value"] if row is not None else default


def set_setting(key: str, value: str) -> None:
    db = get_db()
    db.execute(
        "INSERT INTO settings (key, value) VALUES (?, ?) "
        "ON CONFLICT (key) DO UPDATE SET value = excluded.value",
        (key, value),
    )
    db.commit()
