"""
Cycle forecasting for Ebb.
Shared by the CLI scripts and the web app.
"""

from ebb_forecast.config import DEFAULT_CONFIG, PredictorConfig
from ebb_forecast.predictor import (
    Confidence,
    Cycle,
    CyclePredictor,
    LogEntry,
    Period,
    Prediction,
    PredictionResult,
    compute_predictions,
    extract_cycles,
    prediction_date_set,
)

__all__ = [
    "DEFAULT_CONFIG",
    "PredictorConfig",
    "Confidence",
    "Cycle",
    "CyclePredictor",
    "LogEntry",
    "Period",
    "Prediction",
    "PredictionResult",
    "compute_predictions",
    "extract_cycles",
    "prediction_date_set",
]
