"""
Helper functions for formatting data into human-readable strings.
"""

from typing import Any


def format_duration(seconds: Any) -> str:
    """
    Formats a duration in seconds into a track-style string (e.g., '3:05' or
    '1:02:07'). Unknown durations render as '-', values that are not a number
    of seconds are shown as given.
    """
    if seconds is None:
        return "-"
    try:
        s = int(float(seconds))
    except (TypeError, ValueError, OverflowError):
        return str(seconds)
    hours, remainder = divmod(s, 3600)
    minutes, secs = divmod(remainder, 60)
    if hours > 0:
        return f"{hours}:{minutes:02}:{secs:02}"
    return f"{minutes}:{secs:02}"


def format_flag(value: Any) -> str:
    """Renders an optional boolean as a check, a cross or a dash."""
    if value is None:
        return "-"
    return "✓" if value else "✗"


def format_text(value: Any) -> str:
    """Renders an optional free-form value, falling back to a dash."""
    if value is None or value == "":
        return "-"
    return str(value)
