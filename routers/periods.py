"""
PERIODS.PY - Prediction Period Router

Exposes the period engine to clients. The clock is read once per request
(now_cet) and passed to every engine call.

Endpoints:
    GET  /periods                                   - Active period of every duration class
    GET  /periods/{duration}/active                 - Active period, points and countdown
    GET  /periods/{duration}/rule                   - Points table row for a duration class
    POST /periods/{duration}/{period_id}/validate   - Is this period id still selectable?
    POST /periods/{duration}/score                  - Points for a resolved prediction
    GET  /debug/time                                - Civil clock info (DEBUG_ENDPOINTS only)
"""

import logging
from typing import Optional

from fastapi import APIRouter
from fastapi.responses import JSONResponse

from core.duration_class import DURATION_CADENCE, DurationClass, InvalidDurationClass
from core.error_responses import ErrorCode, make_error
from core.periods import (
    active_period,
    active_periods,
    current_period,
    is_first_half,
    validate_period_selection,
)
from core.scoring_contract import is_prediction_correct, score_prediction, score_rule_for
from core.structured_logging import get_request_id, log_info, log_warning
from core.time_cet import format_as_of_cet, get_cet_debug_info, now_cet, parse_instant
from env_config import Config
from models.api_models import (
    ActivePeriodsResponse,
    ActivePeriodResponse,
    PeriodSelectionResponse,
    ScorePredictionRequest,
    ScorePredictionResponse,
    ScoreRuleResponse,
    ValidatePeriodRequest,
)

logger = logging.getLogger(__name__)

router = APIRouter(tags=["periods"])


def _invalid_duration(e: InvalidDurationClass) -> JSONResponse:
    log_warning(logger, "Rejected duration class", duration=e.value)
    return JSONResponse(
        status_code=400,
        content=make_error(
            code=ErrorCode.INVALID_DURATION_CLASS,
            message=str(e),
            field="duration",
            request_id=get_request_id(),
        ),
    )


def _invalid_date(message: str, field: str) -> JSONResponse:
    return JSONResponse(
        status_code=400,
        content=make_error(
            code=ErrorCode.INVALID_DATE,
            message=message,
            field=field,
            request_id=get_request_id(),
        ),
    )


@router.get("/periods", response_model=ActivePeriodsResponse)
async def get_active_periods():
    """Active period of every duration class, evaluated at one instant."""
    now = now_cet()
    snapshots = active_periods(now)

    return {
        "as_of": format_as_of_cet(now),
        "periods": {d.value: snapshot.to_dict() for d, snapshot in snapshots.items()},
    }


@router.get("/periods/{duration}/active", response_model=ActivePeriodResponse)
async def get_active_period(duration: str, at: Optional[str] = None):
    """
    Active period for a duration class.

    `at` (ISO-8601) evaluates the period at another instant; values without
    an offset are civil time in the service timezone.
    """
    try:
        duration_class = DurationClass.parse(duration)
    except InvalidDurationClass as e:
        return _invalid_duration(e)

    if at is None:
        instant = now_cet()
    else:
        try:
            instant = parse_instant(at)
        except ValueError as e:
            return _invalid_date(str(e), "at")

    try:
        snapshot = active_period(duration_class, instant)
    except OverflowError:
        return _invalid_date(f"Period around {at!r} is out of range", "at")

    return snapshot.to_dict()


@router.get("/periods/{duration}/rule", response_model=ScoreRuleResponse)
async def get_score_rule(duration: str):
    """Points table row for a duration class."""
    try:
        duration_class = DurationClass.parse(duration)
    except InvalidDurationClass as e:
        return _invalid_duration(e)

    rule = score_rule_for(duration_class)
    return {
        "duration": duration_class.value,
        "cadence": DURATION_CADENCE[duration_class],
        **rule.to_dict(),
    }


@router.post("/periods/{duration}/{period_id}/validate", response_model=PeriodSelectionResponse)
async def validate_period(duration: str, period_id: int, request: Optional[ValidatePeriodRequest] = None):
    """
    Check whether a client-selected period id is still the active period.

    Invalid selections are a normal answer (200 with is_valid=false), not an error.
    """
    try:
        duration_class = DurationClass.parse(duration)
    except InvalidDurationClass as e:
        return _invalid_duration(e)

    reference_instant = request.reference_instant if request is not None else None
    selection = validate_period_selection(
        duration_class,
        period_id,
        now=now_cet(),
        reference_instant=reference_instant,
    )

    log_info(
        logger,
        "Period selection validated",
        duration=duration_class.value,
        period_id=period_id,
        is_valid=selection.is_valid,
    )
    return selection.to_dict()


@router.post("/periods/{duration}/score", response_model=ScorePredictionResponse)
async def score_resolved_prediction(duration: str, request: ScorePredictionRequest):
    """Points a resolved prediction earns under the scoring rule of its duration class."""
    try:
        duration_class = DurationClass.parse(duration)
    except InvalidDurationClass as e:
        return _invalid_duration(e)

    try:
        period = current_period(duration_class, request.submitted_at)
        first_half = is_first_half(period, request.submitted_at)
        points = score_prediction(
            duration_class,
            request.direction,
            request.price_start,
            request.price_end,
            request.submitted_at,
        )
    except OverflowError:
        return _invalid_date("Submission instant is out of range", "submitted_at")

    return {
        "duration": duration_class.value,
        "direction": request.direction,
        "correct": is_prediction_correct(request.direction, request.price_start, request.price_end),
        "is_first_half": first_half,
        "points": points,
        "period": period.to_dict(),
    }


@router.get("/debug/time")
async def debug_time():
    """Civil clock info. Hidden unless DEBUG_ENDPOINTS is on."""
    if not Config.DEBUG_ENDPOINTS:
        return JSONResponse(
            status_code=404,
            content=make_error(
                code=ErrorCode.NOT_FOUND,
                message="Not Found",
                request_id=get_request_id(),
            ),
        )
    return get_cet_debug_info()
