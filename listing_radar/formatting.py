"""
Display helpers for timestamps, statuses, scores and cron expressions.
"""

import math
from datetime import datetime, timezone
from typing import Optional

from croniter import croniter

SUCCESS_STATUSES = {"completed", "success"}
FAILED_STATUSES = {"failed", "error"}

_WEEKDAYS = {
    "0": "Sunday", "1": "Monday", "2": "Tuesday", "3": "Wednesday",
    "4": "Thursday", "5": "Friday", "6": "Saturday", "7": "Sunday",
}


def parse_timestamp(ts: Optional[str]) -> Optional[datetime]:
    """Parse an ISO-8601 timestamp, accepting a trailing 'Z'. Naive values are taken as UTC."""
    if not ts:
        return None
    try:
        parsed = datetime.fromisoformat(ts.strip().replace("Z", "+00:00"))
    except ValueError:
        return None
    if parsed.tzinfo is None:
        parsed = parsed.replace(tzinfo=timezone.utc)
    return parsed


def format_timestamp(ts: Optional[str]) -> str:
    """
    Format a timestamp for display.

    Args:
        ts: ISO-8601 timestamp string

    Returns:
        Local-time string, '--' when empty, or the input unchanged if unparseable
    """
    if not ts:
        return "--"
    parsed = parse_timestamp(ts)
    if parsed is None:
        return ts
    return parsed.astimezone().strftime("%Y-%m-%d %H:%M:%S")


def time_ago(ts: Optional[str], now: Optional[datetime] = None) -> str:
    """
    Describe how long ago a timestamp was, e.g. '5m ago'.

    Args:
        ts: ISO-8601 timestamp string
        now: Reference time (defaults to the current UTC time)

    Returns:
        'just now', 'Nm ago', 'Nh ago' or 'Nd ago'; '--' when empty
    """
    if not ts:
        return "--"
    parsed = parse_timestamp(ts)
    if parsed is None:
        return ts
    now = now or datetime.now(timezone.utc)
    mins = int((now - parsed).total_seconds() // 60)
    if mins < 1:
        return "just now"
    if mins < 60:
        return f"{mins}m ago"
    hours = mins // 60
    if hours < 24:
        return f"{hours}h ago"
    return f"{hours // 24}d ago"


def relevance_percent(score: Optional[float]) -> int:
    if score is None or not math.isfinite(score):
        return 0
    return round(score * 100)


def status_kind(status: Optional[str]) -> str:
    """Classify a free-text scan status as 'success', 'failed' or 'pending'."""
    value = (status or "").strip().lower()
    if value in SUCCESS_STATUSES:
        return "success"
    if value in FAILED_STATUSES:
        return "failed"
    return "pending"


def _clock(minute: str, hour: str) -> str:
    return f"{int(hour):02d}:{int(minute):02d}"


def describe_cron(expression: Optional[str]) -> str:
    """
    Render a five-field cron expression in plain English.

    Common shapes get a sentence; anything else valid comes back as the
    raw expression. Invalid expressions are returned unchanged.
    """
    if not expression:
        return "--"
    expression = expression.strip()
    if not croniter.is_valid(expression):
        return expression

    fields = expression.split()
    if len(fields) != 5:
        return expression
    minute, hour, dom, month, dow = fields

    if (minute, hour, dom, month, dow) == ("*", "*", "*", "*", "*"):
        return "Every minute"
    if minute.startswith("*/") and (hour, dom, month, dow) == ("*", "*", "*", "*"):
        return f"Every {minute[2:]} minutes"
    if minute.isdigit() and (hour, dom, month, dow) == ("*", "*", "*", "*"):
        return "Every hour" if minute == "0" else f"Every hour at minute {minute}"
    if minute.isdigit() and hour.startswith("*/") and (dom, month, dow) == ("*", "*", "*"):
        return f"Every {hour[2:]} hours"
    if minute.isdigit() and hour.isdigit() and (dom, month) == ("*", "*"):
        if dow == "*":
            return f"Daily at {_clock(minute, hour)}"
        if dow in _WEEKDAYS:
            return f"Every {_WEEKDAYS[dow]} at {_clock(minute, hour)}"
        if dow == "1-5":
            return f"Weekdays at {_clock(minute, hour)}"
    return expression


def next_cron_run(expression: Optional[str], base: Optional[datetime] = None) -> Optional[datetime]:
    """Next fire time for a cron expression, or None if it is not valid."""
    if not expression or not croniter.is_valid(expression):
        return None
    base = base or datetime.now(timezone.utc)
    return croniter(expression, base).get_next(datetime)
