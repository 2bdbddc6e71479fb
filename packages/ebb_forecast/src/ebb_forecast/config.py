"""
Tuning parameters for the cycle predictor.
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import Tuple


@dataclass(frozen=True)
class PredictorConfig:
    """
    Read-only knobs used by the prediction engine.

    weights: Weight per completed cycle, most recent first.
    prediction_count: Number of future windows to project.
    default_spread: Spread (days) reported when fewer than two lengths exist.
    max_gap_days: Largest gap between logged flow days inside one period.
    min_completed_cycles: Completed cycles needed before predicting at all.
    cramp_lead_days: Days between the latest cramp and the period it signals.
    """

    weights: Tuple[float, ...] = (0.30, 0.25, 0.20, 0.12, 0.08, 0.05)
    prediction_count: int = 6
    default_spread: float = 3.0
    max_gap_days: int = 2
    min_completed_cycles: int = 2
    cramp_lead_days: int = 2
    high_min_cycles: int = 6
    high_max_spread: float = 3.0
    medium_min_cycles: int = 3
    medium_max_spread: float = 5.0

    def __post_init__(self) -> None:
        if not self.weights or any(w <= 0 for w in self.weights):
            raise ValueError("weights must be a non-empty sequence of positive numbers.")
        if self.prediction_count < 1:
            raise ValueError("prediction_count must be at least 1.")
        if self.min_completed_cycles < 1:
            raise ValueError("min_completed_cycles must be at least 1.")
        # Accept lists from callers but keep the frozen instance hashable.
        object.__setattr__(self, "weights", tuple(float(w) for w in self.weights))


DEFAULT_CONFIG = PredictorConfig()
