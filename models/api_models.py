"""
Pydantic models for API request/response validation.
Provides type safety, automatic validation, and OpenAPI documentation.
"""

from pydantic import BaseModel, ConfigDict, Field, field_validator
from typing import Optional, Dict
from datetime import datetime

from core.scoring_contract import Direction
from core.time_cet import format_as_of_cet, parse_instant


# ============================================================================
# BASE RESPONSE MODEL
# ============================================================================

class APIResponse(BaseModel):
    """Standardized API response wrapper."""
    model_config = ConfigDict(extra="allow")

    status: str = "ok"
    timestamp: str = Field(default_factory=format_as_of_cet)


# ============================================================================
# PERIOD MODELS
# ============================================================================

class PeriodResponse(BaseModel):
    """One period of a duration class."""
    duration: str = Field(..., description="Duration class (short, medium, long)")
    period_id: int = Field(..., description="Always 1: only the active period is selectable")
    start: str = Field(..., description="Inclusive start, ISO-8601 with offset")
    end: str = Field(..., description="Inclusive end, ISO-8601 with offset")
    label: str = Field(..., description="e.g. 'Jan 01 - Jan 31, 2024'")


class ActivePeriodResponse(PeriodResponse):
    """Active period plus what a correct prediction submitted now would earn."""
    is_first_half: bool
    points: int = Field(..., gt=0, description="Points for a correct prediction submitted now")
    penalty: int = Field(..., le=0, description="Points for an incorrect prediction")
    time_remaining_ms: int = Field(..., ge=0)
    time_remaining: str = Field(..., description="Countdown text, e.g. '3d 4h 5m'")


class ActivePeriodsResponse(APIResponse):
    """Active period of every duration class at one instant."""
    as_of: str
    periods: Dict[str, ActivePeriodResponse]


class ScoreRuleResponse(APIResponse):
    """Points table row of a duration class."""
    duration: str
    cadence: str
    first_half_points: int
    second_half_points: int
    penalty_on_incorrect: int


# ============================================================================
# VALIDATION MODELS
# ============================================================================

class ValidatePeriodRequest(BaseModel):
    """Request model for validating a period selection."""
    reference_instant: Optional[datetime] = Field(
        None, description="When the selection was made; defaults to now"
    )

    @field_validator('reference_instant')
    @classmethod
    def normalize_reference_instant(cls, v):
        return parse_instant(v) if v is not None else v


class PeriodSelectionResponse(APIResponse):
    """Response model for a period selection check."""
    is_valid: bool
    reason: Optional[str] = None
    period: PeriodResponse


# ============================================================================
# SCORING MODELS
# ============================================================================

class ScorePredictionRequest(BaseModel):
    """Request model for scoring a resolved prediction."""
    direction: Direction = Field(..., description="up or down")
    price_start: float = Field(..., gt=0, description="Asset price at period start")
    price_end: float = Field(..., gt=0, description="Asset price at period end")
    submitted_at: datetime = Field(..., description="When the prediction was submitted")

    @field_validator('submitted_at')
    @classmethod
    def normalize_submitted_at(cls, v):
        return parse_instant(v)

    @field_validator('direction', mode='before')
    @classmethod
    def normalize_direction(cls, v):
        if isinstance(v, str):
            return v.strip().lower()
        return v


class ScorePredictionResponse(APIResponse):
    """Response model for a scored prediction."""
    duration: str
    direction: Direction
    correct: bool
    is_first_half: bool
    points: int
    period: PeriodResponse
