"""
Human-readable labels for periods and countdowns.
"""

from datetime import datetime


def format_slot_label(start_text: str, end_text: str) -> str:
    """Single value when both ends match, otherwise "start - end"."""
    return start_text if start_text == end_text else f"{start_text} - {end_text}"


def format_period_label(start: datetime, end: datetime) -> str:
    """
    Label for a period, e.g. "Jan 01 - Jan 31, 2024".

    The year is only printed once, on the end date.
    """
    return format_slot_label(start.strftime("%b %d"), end.strftime("%b %d, %Y"))


def format_time_remaining(milliseconds: int) -> str:
    """
    Countdown text.

    Examples:
        >>> format_time_remaining(0)
        'Expired'
        >>> format_time_remaining(90_061_000)
        '1d 1h 1m'
        >>> format_time_remaining(3_723_000)
        '1h 2m 3s'
    """
    if milliseconds <= 0:
        return "Expired"

    seconds = int(milliseconds // 1000)
    minutes = seconds // 60
    hours = minutes // 60
    days = hours // 24

    if days > 0:
        return f"{days}d {hours % 24}h {minutes % 60}m"
    if hours > 0:
        return f"{hours}h {minutes % 60}m {seconds % 60}s"
    if minutes > 0:
        return f"{minutes}m {seconds % 60}s"
    return f"{seconds}s"
