"""
Period prediction for Ebb.

Turns a flat log of calendar events into cycle history, a spread estimate and
a forward sequence of predicted period windows. Everything here is a pure
function of its input; nothing is cached between calls.
"""

from __future__ import annotations

import math
from dataclasses import dataclass
from enum import Enum
from pathlib import Path
from typing import Any, Dict, Iterable, List, Mapping, Optional, Sequence, Set, Union

import numpy as np
import pandas as pd

from ebb_forecast.config import DEFAULT_CONFIG, PredictorConfig
from ebb_forecast.dates import add_days, dates_between, days_between, parse_day

PERIOD = "period"
CRAMPS = "cramps"


class Confidence(Enum):
    HIGH = "high"
    MEDIUM = "medium"
    LOW = "low"


@dataclass(frozen=True)
class LogEntry:
    date: str
    type: str
    value: Optional[str] = None


@dataclass(frozen=True)
class Period:
    start: str
    end: str


@dataclass(frozen=True)
class Cycle:
    start_date: str
    duration: int
    cycle_length: Optional[int] = None

    @property
    def is_completed(self) -> bool:
        return self.cycle_length is not None

    def to_dict(self) -> Dict[str, Any]:
        return {
            "startDate": self.start_date,
            "duration": self.duration,
            "cycleLength": self.cycle_length,
        }


@dataclass(frozen=True)
class Prediction:
    start_date: str
    end_date: str
    confidence: Confidence

    def to_dict(self) -> Dict[str, Any]:
        return {
            "startDate": self.start_date,
            "endDate": self.end_date,
            "confidence": self.confidence.value,
        }


@dataclass(frozen=True)
class PredictionResult:
    cycles: List[Cycle]
    predictions: List[Prediction]
    avg_cycle_length: float
    std_dev: float

    def to_dict(self) -> Dict[str, Any]:
        return {
            "cycles": [c.to_dict() for c in self.cycles],
            "predictions": [p.to_dict() for p in self.predictions],
            "avgCycleLength": self.avg_cycle_length,
            "stdDev": self.std_dev,
        }


LogInput = Union[Iterable[Union[LogEntry, Mapping[str, Any]]], pd.DataFrame]


def round_half_up(value: float, ndigits: int = 0) -> float:
    """Round to ``ndigits`` places with halves going up (28.5 -> 29)."""
    scale = 10 ** ndigits
    return math.floor(value * scale + 0.5) / scale


def _whole_days(value: float) -> int:
    return int(round_half_up(value))


def normalize_logs(logs: LogInput) -> List[LogEntry]:
    """Coerce store rows, dicts or a DataFrame into ``LogEntry`` objects."""
    if isinstance(logs, pd.DataFrame):
        records = logs.to_dict(orient="records")
    else:
        records = logs

    entries: List[LogEntry] = []
    for record in records:
        if isinstance(record, LogEntry):
            entries.append(record)
            continue
        value = record.get("value")
        if value is not None and not isinstance(value, str):
            # NaN from CSV cells
            value = None if pd.isna(value) else str(value)
        entries.append(LogEntry(date=str(record["date"]), type=str(record["type"]), value=value))
    return entries


def extract_periods(logs: LogInput, config: PredictorConfig = DEFAULT_CONFIG) -> List[Period]:
    """Group logged flow days into periods, splitting on gaps wider than max_gap_days."""
    period_dates = sorted(e.date for e in normalize_logs(logs) if e.type == PERIOD)
    if not period_dates:
        return []

    periods: List[Period] = []
    start = prev = period_dates[0]
    for current in period_dates[1:]:
        if days_between(prev, current) > config.max_gap_days:
            periods.append(Period(start=start, end=prev))
            start = current
        prev = current
    periods.append(Period(start=start, end=prev))
    return periods


def extract_cycles(logs: LogInput, config: PredictorConfig = DEFAULT_CONFIG) -> List[Cycle]:
    """One cycle per period; the last one has no cycle length yet."""
    periods = extract_periods(logs, config)
    cycles: List[Cycle] = []
    for i, period in enumerate(periods):
        cycle_length = (
            days_between(period.start, periods[i + 1].start) if i < len(periods) - 1 else None
        )
        cycles.append(
            Cycle(
                start_date=period.start,
                duration=days_between(period.start, period.end) + 1,
                cycle_length=cycle_length,
            )
        )
    return cycles


def weighted_average(lengths: Sequence[float], weights: Sequence[float]) -> float:
    """
    Weighted mean of the most recent lengths.

    ``lengths`` is oldest-first; ``weights[0]`` applies to the newest length.
    Only as many weights as there are lengths are used, renormalised to sum to 1.
    """
    n = min(len(lengths), len(weights))
    recent = np.asarray(lengths[::-1][:n], dtype=float)
    return float(np.average(recent, weights=np.asarray(weights[:n], dtype=float)))


def sample_std(lengths: Sequence[float], default: float) -> float:
    if len(lengths) < 2:
        return default
    return float(np.std(np.asarray(lengths, dtype=float), ddof=1))


def classify_confidence(
    completed: int, spread: float, config: PredictorConfig = DEFAULT_CONFIG
) -> Confidence:
    if completed >= config.high_min_cycles and spread <= config.high_max_spread:
        return Confidence.HIGH
    if completed >= config.medium_min_cycles and spread <= config.medium_max_spread:
        return Confidence.MEDIUM
    return Confidence.LOW


def _next_start(
    entries: List[LogEntry], last_cycle: Cycle, cycle_days: int, config: PredictorConfig
) -> str:
    """Project the next start, pulled earlier by cramps logged since the last period."""
    next_start = parse_day(add_days(last_cycle.start_date, cycle_days))

    last_period_end = parse_day(add_days(last_cycle.start_date, last_cycle.duration - 1))
    cramp_dates = [
        parse_day(e.date) for e in entries if e.type == CRAMPS and parse_day(e.date) > last_period_end
    ]
    if cramp_dates:
        cramp_start = parse_day(add_days(max(cramp_dates), config.cramp_lead_days))
        if cramp_start < next_start:
            next_start = cramp_start

    return next_start.isoformat()


def compute_predictions(
    logs: LogInput, config: PredictorConfig = DEFAULT_CONFIG
) -> Optional[PredictionResult]:
    """
    Predict upcoming periods from the event log.

    Args:
        logs: Records with 'date', 'type' and 'value' keys (or LogEntry objects),
              in any order. Kinds other than 'period' and 'cramps' are ignored.
        config: Tuning parameters.

    Returns:
        PredictionResult, or None when there are fewer than
        ``config.min_completed_cycles`` completed cycles.
    """
    entries = normalize_logs(logs)
    cycles = extract_cycles(entries, config)
    lengths = [c.cycle_length for c in cycles if c.is_completed]

    if len(lengths) < config.min_completed_cycles:
        return None

    avg = weighted_average(lengths, config.weights)
    spread = sample_std(lengths, config.default_spread)
    first_confidence = classify_confidence(len(lengths), spread, config)
    avg_duration = _whole_days(np.mean([c.duration for c in cycles]))
    cycle_days = _whole_days(avg)

    cursor = _next_start(entries, cycles[-1], cycle_days, config)
    predictions: List[Prediction] = []
    for i in range(config.prediction_count):
        predictions.append(
            Prediction(
                start_date=cursor,
                end_date=add_days(cursor, avg_duration - 1),
                confidence=first_confidence if i == 0 else Confidence.LOW,
            )
        )
        cursor = add_days(cursor, cycle_days)

    return PredictionResult(
        cycles=cycles,
        predictions=predictions,
        avg_cycle_length=round_half_up(avg, 1),
        std_dev=round_half_up(spread, 1),
    )


def prediction_date_set(predictions: Iterable[Prediction]) -> Set[str]:
    """All days covered by the predicted windows, endpoints included."""
    dates: Set[str] = set()
    for prediction in predictions:
        if prediction.end_date < prediction.start_date:
            continue
        dates.update(dates_between(prediction.start_date, prediction.end_date))
    return dates


class CyclePredictor:
    """
    Bundles a configuration with the prediction functions.
    """

    def __init__(self, config: Optional[PredictorConfig] = None, verbose: bool = False) -> None:
        self.config = config or DEFAULT_CONFIG
        self.verbose = verbose

    def extract_cycles(self, logs: LogInput) -> List[Cycle]:
        return extract_cycles(logs, self.config)

    def predict(self, logs: LogInput) -> Optional[PredictionResult]:
        result = compute_predictions(logs, self.config)

        if self.verbose:
            if result is None:
                print("Not enough completed cycles to predict.")
            else:
                first = result.predictions[0]
                print(
                    f"✓ {len(result.cycles)} cycles, average {result.avg_cycle_length} days "
                    f"(±{result.std_dev}); next period {first.start_date} "
                    f"[{first.confidence.value}]"
                )

        return result

    def predict_from_csv(self, csv_path: Union[str, Path]) -> Optional[PredictionResult]:
        """
        Convenience method to predict from a CSV export.

        Args:
            csv_path: Path to CSV with date, type and value columns

        Returns:
            PredictionResult or None
        """
        df = pd.read_csv(csv_path, dtype={"date": str, "type": str, "value": str})
        return self.predict(df)
