"""
PERIODS.PY - Period boundaries and scoring position

CANONICAL PERIOD WINDOWS (HARD RULE, Europe/Berlin civil calendar):
    short:  Monday 00:00:00.000 -> Sunday 23:59:59.999
    medium: 1st 00:00:00.000    -> last day of month 23:59:59.999
    long:   quarter start (Jan/Apr/Jul/Oct 1st) 00:00:00.000
            -> last day of the quarter 23:59:59.999
    Interval: [start, end] - both ends inclusive, end + 1ms is the next start

Boundaries are built from civil dates, never by adding fixed offsets to an
instant, so a week is always 7 civil days even when DST makes it 167 or 169
hours long. Instant comparisons and the half-period midpoint use UTC values.

Every function takes the reference instant as an argument. Nothing here reads
the clock.

Usage:
    from core.periods import current_period, is_first_half, is_current_period

    period = current_period("medium", submitted_at)
    first = is_first_half(period, submitted_at)
"""

from calendar import monthrange
from dataclasses import dataclass
from datetime import date, datetime, time, timedelta
from typing import Dict, Any, Optional, Tuple, Union
from zoneinfo import ZoneInfo
import logging

from core.duration_class import DurationClass
from core.period_labels import format_period_label, format_time_remaining
from core.scoring_contract import points_for, penalty_for
from core.time_cet import CET, PERIOD_RESOLUTION, to_cet, to_utc

logger = logging.getLogger(__name__)

# Only the active period is selectable
CURRENT_PERIOD_ID = 1

DAY_START = time(0, 0, 0)
DAY_END = time(23, 59, 59, 999000)


@dataclass(frozen=True)
class Period:
    """One concrete period of a duration class."""
    duration_class: DurationClass
    start: datetime
    end: datetime
    label: str
    period_id: int = CURRENT_PERIOD_ID

    def contains(self, instant: datetime) -> bool:
        """start <= instant <= end, compared as instants."""
        tz = self.start.tzinfo
        return to_utc(self.start, tz) <= to_utc(instant, tz) <= to_utc(self.end, tz)

    @property
    def duration(self) -> timedelta:
        """Elapsed (instant) length from start to end."""
        tz = self.start.tzinfo
        return to_utc(self.end, tz) - to_utc(self.start, tz)

    def to_dict(self) -> Dict[str, Any]:
        return {
            "duration": self.duration_class.value,
            "period_id": self.period_id,
            "start": self.start.isoformat(timespec="milliseconds"),
            "end": self.end.isoformat(timespec="milliseconds"),
            "label": self.label,
        }


@dataclass(frozen=True)
class ActivePeriod:
    """The active period seen from one instant, with what a prediction would earn."""
    period: Period
    is_first_half: bool
    points: int
    penalty: int
    time_remaining_ms: int

    @property
    def time_remaining_label(self) -> str:
        return format_time_remaining(self.time_remaining_ms)

    def to_dict(self) -> Dict[str, Any]:
        result = self.period.to_dict()
        result.update({
            "is_first_half": self.is_first_half,
            "points": self.points,
            "penalty": self.penalty,
            "time_remaining_ms": self.time_remaining_ms,
            "time_remaining": self.time_remaining_label,
        })
        return result


@dataclass(frozen=True)
class PeriodSelection:
    """Outcome of validating a client-supplied period id."""
    is_valid: bool
    period: Period
    reason: Optional[str] = None

    def to_dict(self) -> Dict[str, Any]:
        result: Dict[str, Any] = {"is_valid": self.is_valid, "period": self.period.to_dict()}
        if self.reason is not None:
            result["reason"] = self.reason
        return result


# =============================================================================
# BOUNDARIES
# =============================================================================

def _last_day_of_month(year: int, month: int) -> date:
    return date(year, month, monthrange(year, month)[1])


def period_dates(duration_class: Union[str, DurationClass], day: date) -> Tuple[date, date]:
    """
    First and last civil day of the period containing `day`.

    Raises:
        InvalidDurationClass: unknown duration class
    """
    duration_class = DurationClass.parse(duration_class)

    if duration_class == DurationClass.SHORT:
        first = day - timedelta(days=day.weekday())  # Monday = 0
        return first, first + timedelta(days=6)

    if duration_class == DurationClass.MEDIUM:
        return day.replace(day=1), _last_day_of_month(day.year, day.month)

    # long: calendar quarter
    first_month = 3 * ((day.month - 1) // 3) + 1
    return date(day.year, first_month, 1), _last_day_of_month(day.year, first_month + 2)


def current_period(
    duration_class: Union[str, DurationClass],
    reference_instant: datetime,
    tz: ZoneInfo = CET,
) -> Period:
    """
    Period of `duration_class` containing `reference_instant`.

    Args:
        duration_class: short / medium / long
        reference_instant: any instant; naive values are civil time in `tz`
        tz: civil zone whose calendar defines the boundaries

    Returns:
        Period with start <= reference_instant <= end, bounds in `tz`

    Raises:
        InvalidDurationClass: unknown duration class

    Example:
        >>> p = current_period("medium", datetime(2024, 1, 15, 12, 30, tzinfo=CET))
        >>> p.start, p.end
        (2024-01-01 00:00:00+01:00, 2024-01-31 23:59:59.999000+01:00)
    """
    duration_class = DurationClass.parse(duration_class)
    local = to_cet(reference_instant, tz)

    first_day, last_day = period_dates(duration_class, local.date())
    start = datetime.combine(first_day, DAY_START, tzinfo=tz)
    end = datetime.combine(last_day, DAY_END, tzinfo=tz)

    period = Period(
        duration_class=duration_class,
        start=start,
        end=end,
        label=format_period_label(start, end),
    )
    logger.debug(f"{duration_class.value} period for {local.isoformat()}: {period.label}")
    return period


def next_period(period: Period, tz: ZoneInfo = CET) -> Period:
    """The period that starts one resolution step after `period.end`."""
    return current_period(period.duration_class, to_utc(period.end, tz) + PERIOD_RESOLUTION, tz)


# =============================================================================
# POSITION IN PERIOD
# =============================================================================

def is_first_half(period: Period, reference_instant: datetime) -> bool:
    """
    True when `reference_instant` is at or before the temporal midpoint.

    elapsed <= (end - start) / 2, measured on UTC instants. The exact
    midpoint counts as first half.
    """
    tz = period.start.tzinfo
    elapsed = to_utc(reference_instant, tz) - to_utc(period.start, tz)
    return elapsed <= period.duration / 2


def time_remaining_ms(period: Period, now: datetime) -> int:
    """Milliseconds from `now` until period end, never negative."""
    remaining = to_utc(period.end, period.start.tzinfo) - to_utc(now, period.start.tzinfo)
    return max(0, remaining // PERIOD_RESOLUTION)


# =============================================================================
# VALIDITY
# =============================================================================

def _is_active_id(candidate_period_id) -> bool:
    # bool is an int subclass; True must not pass as period 1
    return not isinstance(candidate_period_id, bool) and candidate_period_id == CURRENT_PERIOD_ID


def is_current_period(
    duration_class: Union[str, DurationClass],
    candidate_period_id: int,
    reference_instant: datetime,
    now: Optional[datetime] = None,
    tz: ZoneInfo = CET,
) -> bool:
    """
    Whether a client-supplied period id still names the active period.

    Valid iff the id is CURRENT_PERIOD_ID and `reference_instant` lies within
    the period recomputed around `now`. Without `now` the period is
    recomputed around `reference_instant` itself.

    Raises:
        InvalidDurationClass: unknown duration class
    """
    duration_class = DurationClass.parse(duration_class)
    if not _is_active_id(candidate_period_id):
        return False

    anchor = reference_instant if now is None else now
    return current_period(duration_class, anchor, tz).contains(reference_instant)


def validate_period_selection(
    duration_class: Union[str, DurationClass],
    candidate_period_id: int,
    now: datetime,
    reference_instant: Optional[datetime] = None,
    tz: ZoneInfo = CET,
) -> PeriodSelection:
    """
    is_current_period with a reason attached, for request handlers.

    Args:
        duration_class: short / medium / long
        candidate_period_id: id the client selected
        now: current instant
        reference_instant: instant the selection was made at (defaults to now)
        tz: civil zone
    """
    duration_class = DurationClass.parse(duration_class)
    reference_instant = now if reference_instant is None else reference_instant
    period = current_period(duration_class, now, tz)

    if not _is_active_id(candidate_period_id):
        return PeriodSelection(
            is_valid=False,
            period=period,
            reason=(
                f"Invalid period id {candidate_period_id} for duration {duration_class.value}. "
                f"Only the active period ({CURRENT_PERIOD_ID}) can be selected."
            ),
        )

    if not is_current_period(duration_class, candidate_period_id, reference_instant, now, tz):
        return PeriodSelection(
            is_valid=False,
            period=period,
            reason="Period has closed. Only the active period can be selected.",
        )

    return PeriodSelection(is_valid=True, period=period)


# =============================================================================
# SNAPSHOTS
# =============================================================================

def active_period(
    duration_class: Union[str, DurationClass],
    now: datetime,
    tz: ZoneInfo = CET,
) -> ActivePeriod:
    """Active period at `now` with the points a correct prediction made now would earn."""
    duration_class = DurationClass.parse(duration_class)
    period = current_period(duration_class, now, tz)
    first = is_first_half(period, now)

    return ActivePeriod(
        period=period,
        is_first_half=first,
        points=points_for(duration_class, first),
        penalty=penalty_for(duration_class),
        time_remaining_ms=time_remaining_ms(period, now),
    )


def active_periods(now: datetime, tz: ZoneInfo = CET) -> Dict[DurationClass, ActivePeriod]:
    """active_period for every duration class, all evaluated at the same instant."""
    return {d: active_period(d, now, tz) for d in DurationClass}


__all__ = [
    "CURRENT_PERIOD_ID",
    "Period",
    "ActivePeriod",
    "PeriodSelection",
    "period_dates",
    "current_period",
    "next_period",
    "is_first_half",
    "time_remaining_ms",
    "is_current_period",
    "validate_period_selection",
    "active_period",
    "active_periods",
]
