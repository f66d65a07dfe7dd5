"""
SYSTEM INVARIANTS - Single Source of Truth

This module defines the invariants the period engine MUST satisfy.
Any violation should fail tests and is reported as degraded health at boot.

These checks are used by:
1. main.py startup (check_engine_contract)
2. Tests (invariant validation)
"""

from datetime import datetime
from typing import Dict, List, Tuple
import logging
import os

from core.duration_class import DurationClass
from core.periods import DAY_END, DAY_START, Period, current_period, next_period
from core.scoring_contract import SCORE_RULES, ScoreRule
from core.time_cet import CET, PERIOD_RESOLUTION, to_utc

logger = logging.getLogger(__name__)

# =============================================================================
# PERIOD SHAPE
# =============================================================================

# Civil length of each period, in days, as (min, max)
PERIOD_CIVIL_DAYS = {
    DurationClass.SHORT: (7, 7),
    DurationClass.MEDIUM: (28, 31),
    DurationClass.LONG: (90, 92),
}

# Duration classes from shortest to longest cadence
DURATION_ORDER = [DurationClass.SHORT, DurationClass.MEDIUM, DurationClass.LONG]


# =============================================================================
# VALIDATION FUNCTIONS
# =============================================================================

def validate_score_rules(rules: Dict[DurationClass, ScoreRule] = None) -> Tuple[bool, str]:
    """
    Validate the points table.

    Rules:
    1. Every duration class has a rule
    2. first_half_points > second_half_points > 0 > penalty_on_incorrect
    3. Longer classes pay strictly more first-half points than shorter ones

    Returns:
        (is_valid: bool, error_message: str)
    """
    rules = SCORE_RULES if rules is None else rules

    for duration_class in DURATION_ORDER:
        if duration_class not in rules:
            return False, f"INVARIANT VIOLATION: no score rule for {duration_class.value}"

        rule = rules[duration_class]
        if not rule.first_half_points > rule.second_half_points > 0 > rule.penalty_on_incorrect:
            return False, (
                f"INVARIANT VIOLATION: {duration_class.value} rule {rule.to_dict()} "
                f"must satisfy first > second > 0 > penalty"
            )

    for shorter, longer in zip(DURATION_ORDER, DURATION_ORDER[1:]):
        if rules[longer].first_half_points <= rules[shorter].first_half_points:
            return False, (
                f"INVARIANT VIOLATION: {longer.value} first-half points "
                f"{rules[longer].first_half_points} <= {shorter.value} "
                f"{rules[shorter].first_half_points}"
            )

    return True, ""


def validate_period_bounds(period: Period) -> Tuple[bool, str]:
    """
    Validate one period's boundaries.

    Rules:
    1. start is 00:00:00.000 and end is 23:59:59.999 civil time
    2. start < end
    3. civil length in days matches the duration class
    4. short starts on a Monday, medium/long on the 1st, long in Jan/Apr/Jul/Oct

    Returns:
        (is_valid: bool, error_message: str)
    """
    if period.start.time() != DAY_START:
        return False, f"INVARIANT VIOLATION: start {period.start.isoformat()} is not midnight"

    if period.end.time() != DAY_END:
        return False, f"INVARIANT VIOLATION: end {period.end.isoformat()} is not 23:59:59.999"

    if not period.start < period.end:
        return False, f"INVARIANT VIOLATION: start {period.start} not before end {period.end}"

    civil_days = (period.end.date() - period.start.date()).days + 1
    low, high = PERIOD_CIVIL_DAYS[period.duration_class]
    if not low <= civil_days <= high:
        return False, (
            f"INVARIANT VIOLATION: {period.duration_class.value} period spans {civil_days} "
            f"civil days (expected {low}-{high})"
        )

    if period.duration_class == DurationClass.SHORT and period.start.weekday() != 0:
        return False, f"INVARIANT VIOLATION: week starts on {period.start.strftime('%A')}"

    if period.duration_class != DurationClass.SHORT and period.start.day != 1:
        return False, f"INVARIANT VIOLATION: {period.duration_class.value} period starts on day {period.start.day}"

    if period.duration_class == DurationClass.LONG and period.start.month not in (1, 4, 7, 10):
        return False, f"INVARIANT VIOLATION: quarter starts in month {period.start.month}"

    return True, ""


def validate_tiling(period: Period, following: Period) -> Tuple[bool, str]:
    """
    Validate that `following` starts exactly one resolution step after `period`.

    Returns:
        (is_valid: bool, error_message: str)
    """
    gap = to_utc(following.start) - to_utc(period.end)
    if gap != PERIOD_RESOLUTION:
        return False, (
            f"INVARIANT VIOLATION: {period.label} -> {following.label} "
            f"gap is {gap} (expected {PERIOD_RESOLUTION})"
        )
    return True, ""


def check_engine_contract(anchor: datetime, periods_ahead: int = 4) -> List[str]:
    """
    Run every invariant from `anchor` forward.

    Checks the score table, then walks `periods_ahead` consecutive periods of
    each class validating bounds and tiling.

    Returns:
        list of violation messages (empty when the contract holds)
    """
    errors = []

    ok, message = validate_score_rules()
    if not ok:
        errors.append(message)

    for duration_class in DURATION_ORDER:
        period = current_period(duration_class, anchor, CET)
        for _ in range(periods_ahead):
            ok, message = validate_period_bounds(period)
            if not ok:
                errors.append(message)

            following = next_period(period, CET)
            ok, message = validate_tiling(period, following)
            if not ok:
                errors.append(message)
            period = following

    return errors


# =============================================================================
# RUNTIME GUARD HELPER
# =============================================================================

def enforce_invariant(is_valid: bool, error_message: str):
    """
    Enforce an invariant - log error and optionally raise exception.

    In production: Log ERROR and mark health degraded
    In tests: Raise AssertionError to fail the test
    """
    if not is_valid:
        logger.error(error_message)

        if os.getenv("PYTEST_CURRENT_TEST"):
            raise AssertionError(error_message)

        set_health_degraded(error_message)


# =============================================================================
# HEALTH STATUS
# =============================================================================

_health_degraded = False
_health_errors = []


def set_health_degraded(reason: str):
    """Mark system health as degraded"""
    global _health_degraded
    _health_degraded = True
    _health_errors.append(reason)
    logger.error(f"HEALTH DEGRADED: {reason}")


def get_health_status() -> Tuple[bool, List[str]]:
    """Get current health status"""
    return _health_degraded, list(_health_errors)


def reset_health_status():
    """Reset health status (for testing)"""
    global _health_degraded, _health_errors
    _health_degraded = False
    _health_errors = []
