"""Request and response bodies for the analytics API.

Every body uses camelCase keys; analytics value objects are converted with
``model_validate`` (``from_attributes``).
"""

from datetime import date, datetime
from typing import Dict, List, Optional

from pydantic import BaseModel, ConfigDict, Field, field_validator

from ..metrics.load import PeriodScope
from ..models.analytics import AlertLevel
from ..models.profile import Goal, PersonalBest, Season
from ..models.sessions import Session, to_camel
from ..utils.dates import parse_datetime


class CamelModel(BaseModel):
    """Base model with camelCase aliases."""

    model_config = ConfigDict(
        alias_generator=to_camel,
        populate_by_name=True,
        from_attributes=True,
    )


# ============================================================================
# Requests
# ============================================================================

class SessionsRequest(CamelModel):
    sessions: List[Session] = Field(default_factory=list)


class PeriodSummaryRequest(CamelModel):
    """History plus the window to total."""

    sessions: List[Session] = Field(default_factory=list)
    scope: PeriodScope = PeriodScope.WEEKLY
    season: Optional[Season] = None
    now: Optional[datetime] = None

    @field_validator("now", mode="before")
    @classmethod
    def _naive_now(cls, value):
        return parse_datetime(value)


class ReconcileRequest(CamelModel):
    """Full history plus the context reconciliation needs."""

    sessions: List[Session] = Field(default_factory=list)
    profile_pbs: List[PersonalBest] = Field(default_factory=list)
    seasons: List[Season] = Field(default_factory=list)
    active_season_start: Optional[datetime] = None
    today: Optional[datetime] = None

    @field_validator("active_season_start", "today", mode="before")
    @classmethod
    def _naive_moments(cls, value):
        return parse_datetime(value)


class BestEffortRequest(CamelModel):
    """A session about to be saved, checked against the saved history."""

    session: Session
    history: List[Session] = Field(default_factory=list)
    profile_pbs: List[PersonalBest] = Field(default_factory=list)
    season_start: Optional[datetime] = None
    today: Optional[datetime] = None

    @field_validator("season_start", "today", mode="before")
    @classmethod
    def _naive_moments(cls, value):
        return parse_datetime(value)


class PredictionRequest(CamelModel):
    sessions: List[Session] = Field(default_factory=list)
    goals: List[Goal] = Field(default_factory=list)


class StressRequest(CamelModel):
    sessions: List[Session] = Field(default_factory=list)
    today: Optional[date] = None
    days: Optional[int] = Field(None, ge=1, description="Only return the last N days")


class AlertsRequest(CamelModel):
    sessions: List[Session] = Field(default_factory=list)
    now: Optional[datetime] = None

    @field_validator("now", mode="before")
    @classmethod
    def _naive_now(cls, value):
        return parse_datetime(value)


class SessionRequest(CamelModel):
    session: Session


# ============================================================================
# Responses
# ============================================================================

class ReconcileResponse(CamelModel):
    sessions: List[Session]
    personal_best_count: int
    season_best_count: int


class BestEffortResponse(CamelModel):
    is_personal_best: bool
    is_season_best: bool
    distance_name: Optional[str] = None
    seconds: Optional[float] = None
    updated_pbs: List[PersonalBest] = Field(default_factory=list)


class RacePredictionResponse(CamelModel):
    distance_name: str
    distance_km: float
    predicted_seconds: float
    predicted_time: str
    formatted_pace: str
    components: List[str] = Field(default_factory=list)


class TrendPointResponse(CamelModel):
    date: str
    predicted_5k: float


class GoalPredictionResponse(CamelModel):
    goal_id: str
    prediction: Optional[RacePredictionResponse] = None


class PredictionsResponse(CamelModel):
    predictions: List[RacePredictionResponse]
    fitness_score: float
    goals: List[GoalPredictionResponse] = Field(default_factory=list)
    trend: List[TrendPointResponse] = Field(default_factory=list)


class StressPointResponse(CamelModel):
    date: date
    load: float
    fitness: float
    fatigue: float
    form: float


class StressResponse(CamelModel):
    points: List[StressPointResponse]
    band: Optional[str] = None
    band_description: Optional[str] = None
    recommendation: Optional[str] = None


class AlertResponse(CamelModel):
    id: str
    level: AlertLevel
    title: str
    message: str
    metric: Optional[str] = None


class SegmentResponse(CamelModel):
    distance_km: float
    duration_min: float
    source_date: Optional[datetime] = None
    session_id: str


class IntervalGroupResponse(CamelModel):
    distance: float
    label: str
    count: int
    avg_time: float
    best_time: float
    variation: float
    pace: str
    reps: List[float]
    recovery: str


class IntervalAnalysisResponse(CamelModel):
    total_reps: int
    quality_volume: float
    score: int
    consistency_label: str
    variation: float
    groups: List[IntervalGroupResponse]


class SessionSummaryResponse(CamelModel):
    session_id: str
    summary: str
    metric: str


class PeriodSummaryResponse(CamelModel):
    scope: PeriodScope
    label: str
    start: datetime
    end: Optional[datetime] = None
    session_count: int
    total_distance: float
    total_duration: float
    total_load: float
    avg_rpe: Optional[float] = None
    avg_hr: Optional[int] = None
    kind_counts: Dict[str, int] = Field(default_factory=dict)


class RaceStatsResponse(CamelModel):
    count: int
    wins: int
    podiums: int
    top10: int
    personal_bests: int
