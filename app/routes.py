from datetime import date, datetime
from typing import Optional, Dict, Any, List

import numpy as np
from flask import Blueprint, current_app, jsonify, render_template, request, redirect, url_for

from ebb_forecast.predictor import Cycle, CyclePredictor, PredictionResult, prediction_date_set

from app.db import count_period_days, fetch_all_period_logs, fetch_day_logs, fetch_logs
from app.logs import (
    FLOW_OPTIONS,
    LOG_TYPES,
    apply_range,
    get_default_flow,
    normalize_date,
    set_default_flow,
    toggle_log,
)
from app.month_grid import WEEKDAYS, build_month, month_window, window_range


main_bp = Blueprint("main", __name__)

_PREDICTOR: Optional[CyclePredictor] = None


def _get_predictor() -> CyclePredictor:
    global _PREDICTOR
    if _PREDICTOR is None:
        _PREDICTOR = CyclePredictor(verbose=False)
    return _PREDICTOR


def _format_date(date_str: str) -> str:
    """Format YYYY-MM-DD to a human-readable string like 'Mon, Jan 15, 2024'."""
    dt = datetime.strptime(date_str, "%Y-%m-%d")
    return f"{dt:%a, %b} {dt.day}, {dt.year}"


def _calculate_cycle_stats(cycles: List[Cycle]) -> Optional[Dict[str, Any]]:
    """Calculate personalized cycle insights from recent cycles."""
    cycle_lengths = [c.cycle_length for c in cycles if c.cycle_length is not None]
    if not cycle_lengths:
        return None

    period_durations = [c.duration for c in cycles]

    avg_cycle = np.mean(cycle_lengths)
    std_cycle = np.std(cycle_lengths)
    min_cycle = int(np.min(cycle_lengths))
    max_cycle = int(np.max(cycle_lengths))

    avg_period = np.mean(period_durations)
    min_period = int(np.min(period_durations))
    max_period = int(np.max(period_durations))

    if std_cycle < 2:
        consistency = "Very consistent"
    elif std_cycle < 4:
        consistency = "Fairly consistent"
    else:
        consistency = f"Varies by ±{int(std_cycle)} days"

    # Recent trend: last 4 vs previous 4
    if len(cycle_lengths) >= 8:
        recent_avg = np.mean(cycle_lengths[-4:])
        older_avg = np.mean(cycle_lengths[-8:-4])
        diff = recent_avg - older_avg

        if abs(diff) < 1:
            trend = "Stable pattern"
        elif diff > 1:
            trend = f"Cycles getting longer (+{diff:.1f} days)"
        else:
            trend = f"Cycles getting shorter ({diff:.1f} days)"
    else:
        trend = "Not enough data for trend (Need 8+ cycles)"

    return {
        "typical_cycle": f"{min_cycle}-{max_cycle} days",
        "typical_period": f"{min_period}-{max_period} days",
        "consistency": consistency,
        "trend": trend,
        "avg_cycle": f"{avg_cycle:.1f} days",
        "avg_period": f"{avg_period:.1f} days",
    }


def _current_prediction() -> Optional[PredictionResult]:
    return _get_predictor().predict(fetch_all_period_logs())


@main_bp.route("/", methods=["GET"])
def index():
    error: Optional[str] = request.args.get("error")
    shift = request.args.get("shift", default=0, type=int)
    config = current_app.config

    months = month_window(
        date.today(),
        past=config["PAST_MONTHS"],
        future=config["FUTURE_MONTHS"],
        shift=shift,
        batch=config["LOAD_BATCH"],
    )
    start, end = window_range(months)
    logs = fetch_logs(start, end)

    result = _current_prediction()
    predicted = prediction_date_set(result.predictions) if result else set()

    prediction: Optional[Dict[str, Any]] = None
    stats: Optional[Dict[str, Any]] = None
    if result is not None:
        first = result.predictions[0]
        prediction = {
            "next_start": _format_date(first.start_date),
            "next_end": _format_date(first.end_date),
            "confidence": first.confidence.value,
            "avg_cycle_length": result.avg_cycle_length,
            "std_dev": result.std_dev,
            "upcoming": [
                {
                    "start": _format_date(p.start_date),
                    "end": _format_date(p.end_date),
                    "confidence": p.confidence.value,
                }
                for p in result.predictions
            ],
        }
        stats = _calculate_cycle_stats(result.cycles[-13:])
    elif error is None and count_period_days() > 0:
        error = "Log at least three periods to see predictions."

    return render_template(
        "index.html",
        months=[build_month(y, m, logs, predicted) for y, m in months],
        weekdays=WEEKDAYS,
        prediction=prediction,
        stats=stats,
        error=error,
        shift=shift,
        default_flow=get_default_flow(),
    )


@main_bp.route("/day/<day>", methods=["GET", "POST"])
def day_sheet(day: str):
    error: Optional[str] = None

    try:
        day = normalize_date(day)
    except ValueError as exc:
        return render_template("day.html", day=None, error=str(exc)), 404

    if request.method == "POST":
        log_type = request.form.get("type", "").strip()
        value = request.form.get("value", "").strip()
        try:
            toggle_log(day, log_type, value)
            return redirect(url_for("main.day_sheet", day=day))
        except ValueError as exc:
            current_app.logger.warning("Rejected log for %s: %s", day, exc)
            error = str(exc)

    current = {log["type"]: log["value"] for log in fetch_day_logs(day)}
    status = 400 if error else 200
    return render_template(
        "day.html",
        day=day,
        label=_format_date(day),
        log_types=LOG_TYPES,
        current=current,
        error=error,
    ), status


@main_bp.route("/range", methods=["POST"])
def range_edit():
    anchor = request.form.get("anchor", "").strip()
    end = request.form.get("end", "").strip()

    try:
        mode, _ = apply_range(anchor, end)
    except ValueError as exc:
        current_app.logger.warning("Rejected range %r..%r: %s", anchor, end, exc)
        return redirect(url_for("main.index", error=str(exc)))

    if mode is None:
        # a one-day range opens that day instead
        return redirect(url_for("main.day_sheet", day=normalize_date(anchor)))
    return redirect(url_for("main.index"))


@main_bp.route("/settings", methods=["GET", "POST"])
def settings():
    error: Optional[str] = None

    if request.method == "POST":
        try:
            set_default_flow(request.form.get("default_flow", "").strip())
            return redirect(url_for("main.settings"))
        except ValueError as exc:
            current_app.logger.warning("Rejected setting: %s", exc)
            error = str(exc)

    return render_template(
        "settings.html",
        flow_options=FLOW_OPTIONS,
        default_flow=get_default_flow(),
        error=error,
    ), (400 if error else 200)


@main_bp.route("/api/predictions", methods=["GET"])
def api_predictions():
    result = _current_prediction()
    if result is None:
        return jsonify({"prediction": None, "reason": "insufficient_data"})
    return jsonify(result.to_dict())


@main_bp.route("/api/logs", methods=["GET"])
def api_logs():
    try:
        start = normalize_date(request.args.get("start", ""))
        end = normalize_date(request.args.get("end", ""))
    except ValueError as exc:
        return jsonify({"error": str(exc)}), 400

    return jsonify(fetch_logs(start, end))
