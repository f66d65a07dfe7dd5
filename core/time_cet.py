"""
TIME_CET.PY - Single Source of Truth for Civil Timezone Handling

RULES:
1. Server clock is UTC
2. All period arithmetic happens on the Europe/Berlin civil calendar
3. Core functions:
   - now_cet(): UTC -> CET conversion (the ONLY place the clock is read)
   - to_cet(): normalise any instant to CET
   - parse_instant(): ISO string -> CET-aware datetime
   - to_utc(): instant arithmetic happens on UTC values
4. Uses zoneinfo ONLY - no pytz

NAIVE VALUES:
    A datetime or ISO string without an offset is civil time in CET
    (e.g. "2024-01-15T12:30:00" means 12:30 on the Berlin wall clock).

Usage:
    from core.time_cet import now_cet, parse_instant, to_utc

    current = now_cet()
    submitted = parse_instant("2024-01-15T12:30:00")
"""

from datetime import datetime, timedelta, timezone
from typing import Dict, Any, Optional, Union
from zoneinfo import ZoneInfo
import logging

from env_config import Config

logger = logging.getLogger(__name__)

# Europe/Berlin unless overridden for the whole deployment
CET = ZoneInfo(Config.TIMEZONE)

# Smallest step between two distinct period boundaries
PERIOD_RESOLUTION = timedelta(milliseconds=1)


def now_cet() -> datetime:
    """
    Get current datetime in the civil timezone.

    Engine functions never call this; request handlers read the clock once
    and pass the instant down.
    """
    return datetime.now(timezone.utc).astimezone(CET)


def to_cet(instant: datetime, tz: ZoneInfo = CET) -> datetime:
    """
    Normalise an instant to the civil timezone.

    Naive datetimes are taken as wall-clock time in `tz`.
    """
    if instant.tzinfo is None:
        return instant.replace(tzinfo=tz)
    return instant.astimezone(tz)


def to_utc(instant: datetime, tz: ZoneInfo = CET) -> datetime:
    """Convert to UTC so subtraction and comparison are true instant arithmetic."""
    return to_cet(instant, tz).astimezone(timezone.utc)


def parse_instant(value: Union[str, datetime], tz: ZoneInfo = CET) -> datetime:
    """
    Parse an ISO-8601 string (or pass through a datetime) into a tz-aware datetime.

    Args:
        value: ISO datetime string ("Z" suffix accepted) or datetime
        tz: civil zone used for values without an offset

    Returns:
        datetime in `tz`

    Raises:
        ValueError: if the string is empty, not ISO-8601, or outside the
            range datetime can represent in `tz` and UTC

    Example:
        >>> parse_instant("2024-01-15T11:30:00Z")
        datetime(2024, 1, 15, 12, 30, tzinfo=ZoneInfo('Europe/Berlin'))
    """
    if isinstance(value, datetime):
        return _normalise(value, value, tz)

    if not value or not str(value).strip():
        raise ValueError("Empty instant")

    text = str(value).strip()
    if text.endswith("Z"):
        text = text[:-1] + "+00:00"

    try:
        parsed = datetime.fromisoformat(text)
    except ValueError as e:
        logger.warning(f"Failed to parse instant '{value}': {e}")
        raise ValueError(f"Invalid ISO-8601 instant: {value!r}") from e

    return _normalise(parsed, value, tz)


def _normalise(instant: datetime, original: Any, tz: ZoneInfo) -> datetime:
    # Instants within hours of year 1 or 9999 overflow on the CET/UTC shift
    try:
        local = to_cet(instant, tz)
        local.astimezone(timezone.utc)
    except OverflowError as e:
        logger.warning(f"Instant out of range '{original}': {e}")
        raise ValueError(f"Invalid ISO-8601 instant: {original!r} is out of range") from e
    return local


def format_as_of_cet(instant: Optional[datetime] = None) -> str:
    """ISO timestamp in CET, used for 'as of' fields in responses."""
    instant = instant or now_cet()
    return to_cet(instant).isoformat()


def get_cet_debug_info(now: Optional[datetime] = None) -> Dict[str, Any]:
    """
    Debug information about the civil clock.

    Returns:
        Dict for the /debug/time endpoint
    """
    now = to_cet(now) if now is not None else now_cet()
    offset = now.utcoffset() or timedelta(0)

    return {
        "now_utc_iso": now.astimezone(timezone.utc).isoformat(),
        "now_cet_iso": now.isoformat(),
        "cet_date": now.date().isoformat(),
        "utc_offset_hours": offset.total_seconds() / 3600,
        "is_dst": bool(now.dst()),
        "timezone": str(CET),
    }


__all__ = [
    'CET',
    'PERIOD_RESOLUTION',
    'now_cet',
    'to_cet',
    'to_utc',
    'parse_instant',
    'format_as_of_cet',
    'get_cet_debug_info',
]
