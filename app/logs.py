"""
What can be logged on a day, and the edits the calendar makes to the log.
"""

from typing import Dict, List, Optional, Tuple

from flask import current_app

from ebb_forecast.dates import dates_between, format_day, parse_day

from app.db import delete_log, fetch_day_logs, fetch_logs, get_setting, set_setting, upsert_log


FLOW_OPTIONS: List[Tuple[str, str]] = [
    ("extra light", "Extra light"),
    ("light", "Light"),
    ("medium", "Medium"),
    ("heavy", "Heavy"),
    ("extra heavy", "Extra heavy"),
]

# type -> (label, [(value, short label), ...])
LOG_TYPES: Dict[str, Tuple[str, List[Tuple[str, str]]]] = {
    "period": (
        "Period flow",
        [("extra light", "XL"), ("light", "L"), ("medium", "M"), ("heavy", "H"), ("extra heavy", "XH")],
    ),
    "cramps": ("Cramps", [("light", "L"), ("medium", "M"), ("heavy", "H")]),
    "sex": ("Sex", [("protected", "Protected"), ("unprotected", "Unprotected")]),
}

DEFAULT_FLOW_KEY = "default_flow"


def normalize_date(value: str) -> str:
    """Validate a YYYY-MM-DD string; raises ValueError."""
    return format_day(parse_day(value))


def validate_log(date: str, log_type: str, value: str) -> str:
    date = normalize_date(date)
    if log_type not in LOG_TYPES:
        raise ValueError(f"Unknown log type: {log_type!r}.")
    allowed = [option for option, _ in LOG_TYPES[log_type][1]]
    if value not in allowed:
        raise ValueError(f"Invalid {log_type} value {value!r}; expected one of {', '.join(allowed)}.")
    return date


def get_default_flow() -> str:
    return get_setting(DEFAULT_FLOW_KEY) or current_app.config["DEFAULT_FLOW"]


def set_default_flow(value: str) -> None:
    if value not in dict(FLOW_OPTIONS):
        raise ValueError(f"Unknown flow {value!r}.")
    set_setting(DEFAULT_FLOW_KEY, value)


def toggle_log(date: str, log_type: str, value: str) -> Optional[str]:
    """
    Select ``value`` for ``log_type`` on ``date``.

    Selecting the value that is already logged clears it.

    Returns:
        The value now stored, or None if the log was removed.
    """
    date = validate_log(date, log_type, value)
    current = next((log["value"] for log in fetch_day_logs(date) if log["type"] == log_type), None)

    if current == value:
        delete_log(date, log_type)
        return None

    upsert_log(date, log_type, value)
    return value


def apply_range(anchor: str, end: str, flow: Optional[str] = None) -> Tuple[Optional[str], List[str]]:
    """
    Mark or clear period days across the range anchor..end.

    The anchor decides the mode: if it already has a period log the range is
    cleared, otherwise days without a period log get one with ``flow``.
    A single-day range is not a range edit.

    Returns:
        (mode, changed dates). mode is "add", "remove" or None.
    """
    anchor = normalize_date(anchor)
    end = normalize_date(end)
    days = dates_between(anchor, end)
    if len(days) == 1:
        return None, []

    flow = flow or get_default_flow()
    if flow not in dict(FLOW_OPTIONS):
        raise ValueError(f"Unknown flow {flow!r}.")

    existing = fetch_logs(days[0], days[-1])

    def has_period(day: str) -> bool:
        return any(log["type"] == "period" for log in existing.get(day, []))

    mode = "remove" if has_period(anchor) else "add"
    changed: List[str] = []
    for day in days:
        if mode == "remove" and has_period(day):
            delete_log(day, "period")
            changed.append(day)
        elif mode == "add" and not has_period(day):
            upsert_log(day, "period", flow)
            changed.append(day)

    current_app.logger.info("Range %s %s..%s changed %d days", mode, days[0], days[-1], len(changed))
    return mode, changed
