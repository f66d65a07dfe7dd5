"""
Core module - Period engine and single source of truth for scoring
"""

from .duration_class import (
    DurationClass,
    InvalidDurationClass,
    DURATION_CADENCE,
)

# Import time_cet (SINGLE SOURCE OF TRUTH for the civil timezone)
from .time_cet import (
    CET,
    PERIOD_RESOLUTION,
    now_cet,
    to_cet,
    parse_instant,
)

from .scoring_contract import (
    ScoreRule,
    Direction,
    SCORE_RULES,
    score_rule_for,
    points_for,
    penalty_for,
    is_prediction_correct,
    score_prediction,
)

from .periods import (
    CURRENT_PERIOD_ID,
    Period,
    ActivePeriod,
    PeriodSelection,
    current_period,
    next_period,
    is_first_half,
    time_remaining_ms,
    is_current_period,
    validate_period_selection,
    active_period,
    active_periods,
)

from .period_labels import (
    format_slot_label,
    format_period_label,
    format_time_remaining,
)

__all__ = [
    # Duration classes
    'DurationClass',
    'InvalidDurationClass',
    'DURATION_CADENCE',

    # Time handling (SINGLE SOURCE OF TRUTH)
    'CET',
    'PERIOD_RESOLUTION',
    'now_cet',
    'to_cet',
    'parse_instant',

    # Scoring
    'ScoreRule',
    'Direction',
    'SCORE_RULES',
    'score_rule_for',
    'points_for',
    'penalty_for',
    'is_prediction_correct',
    'score_prediction',

    # Periods
    'CURRENT_PERIOD_ID',
    'Period',
    'ActivePeriod',
    'PeriodSelection',
    'current_period',
    'next_period',
    'is_first_half',
    'time_remaining_ms',
    'is_current_period',
    'validate_period_selection',
    'active_period',
    'active_periods',

    # Labels
    'format_slot_label',
    'format_period_label',
    'format_time_remaining',
]
