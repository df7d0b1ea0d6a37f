"""Time window helpers for usage queries."""
from __future__ import annotations
import math
from datetime import datetime, timedelta, timezone
from typing import Any

from agent_usage_mcp.errors import InvalidArgumentError

DEFAULT_HOURS = 24


def format_date(value: datetime) -> str:
    """Format a datetime as UTC ``YYYY-MM-DDTHH:MM:SS`` (no sub-seconds, no zone)."""
    return value.astimezone(timezone.utc).strftime("%Y-%m-%dT%H:%M:%S")


def get_time_window(hours: float, now: datetime | None = None) -> tuple[str, str]:
    """Return ``(start_time, end_time)`` covering the last ``hours`` hours."""
    end = now or datetime.now(timezone.utc)
    start = end - timedelta(hours=hours)
    return format_date(start), format_date(end)


def validate_hours(hours: Any) -> float | int:
    """Coerce a look-back window to a positive finite number of hours.

    ``None`` means the argument was omitted and yields the 24 hour default.

    Raises:
        InvalidArgumentError: If the value is not a positive finite number,
            or reaches back past the earliest representable date
    """
    if hours is None:
        return DEFAULT_HOURS

    parsed: float | None = None
    if isinstance(hours, bool):
        parsed = None
    elif isinstance(hours, (int, float)):
        try:
            parsed = float(hours)
        except OverflowError:
            parsed = None
    elif isinstance(hours, str):
        try:
            parsed = float(hours.strip())
        except ValueError:
            parsed = None

    if parsed is None or not math.isfinite(parsed) or parsed <= 0 or not _window_fits(parsed):
        raise InvalidArgumentError(
            f"Invalid hours value: {hours}. Must be a positive number."
        )
    return int(parsed) if parsed.is_integer() else parsed


def _window_fits(hours: float) -> bool:
    # The window start must be a representable datetime
    try:
        datetime.now(timezone.utc) - timedelta(hours=hours)
    except OverflowError:
        return False
    return True
