"""
Replay a log history through the predictor and measure how far off it was.
"""

from __future__ import annotations

from typing import Dict, List

import numpy as np
import pandas as pd

from ebb_forecast.config import DEFAULT_CONFIG, PredictorConfig
from ebb_forecast.dates import days_between
from ebb_forecast.predictor import LogInput, compute_predictions, extract_periods, normalize_logs

COLUMNS = [
    "period_index",
    "predicted_start",
    "actual_start",
    "error_days",
    "predicted_cycle_length",
    "actual_cycle_length",
    "confidence",
    "in_window",
]


def backtest(logs: LogInput, config: PredictorConfig = DEFAULT_CONFIG) -> pd.DataFrame:
    """
    Predict each logged period using only the logs dated before it.

    Args:
        logs: Full event log (same shapes accepted by compute_predictions)
        config: Predictor configuration

    Returns:
        pd.DataFrame: One row per replayed period, columns as in COLUMNS.
                      error_days is positive when the prediction was late.
    """
    entries = normalize_logs(logs)
    periods = extract_periods(entries, config)

    rows: List[Dict[str, object]] = []
    for k in range(config.min_completed_cycles + 1, len(periods)):
        cutoff = periods[k].start
        history = [e for e in entries if e.date < cutoff]
        result = compute_predictions(history, config)
        if result is None:
            continue

        first = result.predictions[0]
        previous_start = periods[k - 1].start
        rows.append(
            {
                "period_index": k,
                "predicted_start": first.start_date,
                "actual_start": cutoff,
                "error_days": days_between(cutoff, first.start_date),
                "predicted_cycle_length": days_between(previous_start, first.start_date),
                "actual_cycle_length": days_between(previous_start, cutoff),
                "confidence": first.confidence.value,
                "in_window": first.start_date <= cutoff <= first.end_date,
            }
        )

    return pd.DataFrame(rows, columns=COLUMNS)


def summarize(frame: pd.DataFrame) -> Dict[str, float]:
    """Aggregate error metrics for a backtest frame."""
    if frame.empty:
        return {"n": 0, "MAE": float("nan"), "RMSE": float("nan"), "hit_rate": float("nan")}

    errors = frame["error_days"].to_numpy(dtype=float)
    return {
        "n": int(len(frame)),
        "MAE": float(np.mean(np.abs(errors))),
        "RMSE": float(np.sqrt(np.mean(errors ** 2))),
        "hit_rate": float(frame["in_window"].mean()),
    }
