"""Display and input helpers for durations."""

import re

_LEADING_INT = re.compile(r"^\s*([+-]?\d+)")


def format_time(seconds):
    """Seconds -> HH:MM:SS (hours widen past 99, negatives show as zero)."""
    seconds = max(0, int(seconds))
    mins, secs = divmod(seconds, 60)
    hours, mins = divmod(mins, 60)
    return f"{hours:02d}:{mins:02d}:{secs:02d}"


def split_duration(seconds):
    """Seconds -> (hours, minutes, seconds) for the edit form."""
    seconds = max(0, int(seconds))
    return seconds // 3600, (seconds % 3600) // 60, seconds % 60


def to_whole_number(value):
    """
    Coerce an hour/minute/second edit field to an int >= 0.

    Reads the leading integer of strings ("12abc" -> 12, "1.5" -> 1),
    anything non-numeric becomes 0 and negatives are clamped to 0.
    """
    if isinstance(value, bool):
        return 0
    if isinstance(value, int):
        return max(0, value)
    if isinstance(value, float):
        if value != value or value in (float("inf"), float("-inf")):
            return 0
        return max(0, int(value))
    if value is None:
        return 0
    match = _LEADING_INT.match(str(value))
    if not match:
        return 0
    return max(0, int(match.group(1)))
