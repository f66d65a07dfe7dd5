"""
Scoring Contract - Single Source of Truth
All point values MUST come from SCORE_RULES (no duplicated literals).

A correct prediction earns the first-half or second-half points of its
duration class depending on when it was submitted; an incorrect one costs the
fixed penalty of the class regardless of timing.
"""

from dataclasses import dataclass, asdict
from datetime import datetime
from enum import Enum
from typing import Dict, Union
from zoneinfo import ZoneInfo
import logging

from core.duration_class import DurationClass
from core.time_cet import CET

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class ScoreRule:
    """Points for one duration class."""
    first_half_points: int
    second_half_points: int
    penalty_on_incorrect: int

    def to_dict(self) -> Dict[str, int]:
        return asdict(self)


class Direction(str, Enum):
    UP = "up"
    DOWN = "down"


# Initial phase values. Longer classes pay more for early participation.
SCORE_RULES: Dict[DurationClass, ScoreRule] = {
    DurationClass.SHORT: ScoreRule(first_half_points=10, second_half_points=3, penalty_on_incorrect=-2),   # 1 week
    DurationClass.MEDIUM: ScoreRule(first_half_points=15, second_half_points=5, penalty_on_incorrect=-4),  # 1 month
    DurationClass.LONG: ScoreRule(first_half_points=20, second_half_points=7, penalty_on_incorrect=-6),    # 3 months
}


def score_rule_for(duration_class: Union[str, DurationClass]) -> ScoreRule:
    """Look up the ScoreRule of a duration class."""
    return SCORE_RULES[DurationClass.parse(duration_class)]


def points_for(duration_class: Union[str, DurationClass], is_first_half: bool) -> int:
    """Points for a correct prediction in the given half of the period."""
    rule = score_rule_for(duration_class)
    return rule.first_half_points if is_first_half else rule.second_half_points


def penalty_for(duration_class: Union[str, DurationClass]) -> int:
    """Fixed penalty (<= 0) for an incorrect prediction, independent of timing."""
    return score_rule_for(duration_class).penalty_on_incorrect


def is_prediction_correct(
    direction: Union[str, Direction],
    price_start: float,
    price_end: float,
) -> bool:
    """
    Up wins on a strictly higher close, down on a strictly lower one.
    An unchanged price is a miss for both.
    """
    direction = Direction(direction)
    if direction == Direction.UP:
        return price_end > price_start
    return price_end < price_start


def score_prediction(
    duration_class: Union[str, DurationClass],
    direction: Union[str, Direction],
    price_start: float,
    price_end: float,
    submitted_at: datetime,
    tz: ZoneInfo = CET,
) -> int:
    """
    Point value for a resolved prediction.

    Args:
        duration_class: cadence the prediction was made for
        direction: "up" or "down"
        price_start: asset price at period start
        price_end: asset price at period end
        submitted_at: when the prediction was submitted
        tz: civil zone for period boundaries

    Returns:
        first/second-half points when correct, the class penalty otherwise
    """
    # Local import: periods depends on this module for the active snapshot
    from core.periods import current_period, is_first_half

    duration_class = DurationClass.parse(duration_class)

    if not is_prediction_correct(direction, price_start, price_end):
        points = penalty_for(duration_class)
    else:
        period = current_period(duration_class, submitted_at, tz)
        points = points_for(duration_class, is_first_half(period, submitted_at))

    logger.debug(
        f"Scored {duration_class.value} {Direction(direction).value} prediction "
        f"{price_start} -> {price_end}: {points}"
    )
    return points


# Canonical contract object for validation
SCORING_CONTRACT = {
    "score_rules": {d.value: rule.to_dict() for d, rule in SCORE_RULES.items()},
    "first_half_tie_break": "inclusive",
    "penalty_depends_on_timing": False,
}


__all__ = [
    "ScoreRule",
    "Direction",
    "SCORE_RULES",
    "SCORING_CONTRACT",
    "score_rule_for",
    "points_for",
    "penalty_for",
    "is_prediction_correct",
    "score_prediction",
]
