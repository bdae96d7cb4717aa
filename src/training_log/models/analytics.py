"""Derived value objects produced by the analytics pipeline.

None of these are persisted; every call recomputes them from the session
history.
"""

from dataclasses import dataclass, field
from datetime import date, datetime
from enum import Enum
from typing import Any, Dict, List, Optional


@dataclass(frozen=True)
class PerformanceSegment:
    """A normalized (distance, duration) sample taken from a session."""

    distance_km: float
    duration_min: float
    source_date: Optional[datetime]
    session_id: str

    @property
    def seconds(self) -> float:
        return self.duration_min * 60

    def to_dict(self) -> Dict[str, Any]:
        return {
            "distance_km": self.distance_km,
            "duration_min": round(self.duration_min, 4),
            "source_date": self.source_date.isoformat() if self.source_date else None,
            "session_id": self.session_id,
        }


class FormBand(str, Enum):
    """Interpretation of form (fitness minus fatigue)."""
    FRESH = "fresh"                # Peak / tapered
    MAINTENANCE = "maintenance"
    OPTIMAL = "optimal"            # Productive training load
    OVERREACHING = "overreaching"  # High fatigue

    @property
    def description(self) -> str:
        return {
            FormBand.FRESH: "Fresh / peak",
            FormBand.MAINTENANCE: "Maintenance",
            FormBand.OPTIMAL: "Optimal training load",
            FormBand.OVERREACHING: "High fatigue / overreaching",
        }[self]


@dataclass
class TrainingStressPoint:
    """Daily fitness-fatigue model output."""

    date: date
    load: float      # Total load for the day
    fitness: float   # 42-day EMA
    fatigue: float   # 7-day EMA
    form: float      # fitness - fatigue

    def to_dict(self) -> Dict[str, Any]:
        """Convert to dictionary for serialization."""
        return {
            "date": self.date.isoformat(),
            "load": self.load,
            "fitness": self.fitness,
            "fatigue": self.fatigue,
            "form": self.form,
        }


@dataclass
class RacePrediction:
    """Predicted time for a target race distance.

    ``predicted_seconds == 0`` means no prediction could be made; the
    formatted fields then read ``"-"``.
    """

    distance_name: str
    distance_km: float
    predicted_seconds: float
    predicted_time: str
    formatted_pace: str
    components: List[str] = field(default_factory=list)

    @property
    def has_prediction(self) -> bool:
        return self.predicted_seconds > 0

    def to_dict(self) -> Dict[str, Any]:
        return {
            "distance_name": self.distance_name,
            "distance_km": self.distance_km,
            "predicted_seconds": round(self.predicted_seconds, 1),
            "predicted_time": self.predicted_time,
            "formatted_pace": self.formatted_pace,
            "components": list(self.components),
        }


@dataclass
class IntervalGroupStats:
    """Statistics for all reps of one distance within a session."""

    distance: float
    label: str
    count: int
    avg_time: float
    best_time: float
    variation: float  # Percentage
    pace: str
    reps: List[float]
    recovery: str

    def to_dict(self) -> Dict[str, Any]:
        return {
            "distance": self.distance,
            "label": self.label,
            "count": self.count,
            "avg_time": round(self.avg_time, 2),
            "best_time": self.best_time,
            "variation": round(self.variation, 2),
            "pace": self.pace,
            "reps": list(self.reps),
            "recovery": self.recovery,
        }


@dataclass
class IntervalAnalysis:
    """Pacing consistency and quality of a structured session."""

    total_reps: int
    quality_volume: float  # km
    score: int             # 0-100
    consistency_label: str
    variation: float       # Aggregate variation across groups
    groups: List[IntervalGroupStats] = field(default_factory=list)

    def to_dict(self) -> Dict[str, Any]:
        return {
            "total_reps": self.total_reps,
            "quality_volume": round(self.quality_volume, 3),
            "score": self.score,
            "consistency_label": self.consistency_label,
            "variation": round(self.variation, 2),
            "groups": [g.to_dict() for g in self.groups],
        }


class AlertLevel(str, Enum):
    """Severity of a training alert."""
    INFO = "INFO"
    WARNING = "WARNING"
    DANGER = "DANGER"


@dataclass
class TrainingAlert:
    """Advisory alert derived from recent sessions."""

    id: str
    level: AlertLevel
    title: str
    message: str
    metric: Optional[str] = None

    def to_dict(self) -> Dict[str, Any]:
        return {
            "id": self.id,
            "level": self.level.value,
            "title": self.title,
            "message": self.message,
            "metric": self.metric,
        }


@dataclass
class BestEffortResult:
    """Outcome of checking a single new session for PB / SB."""

    is_personal_best: bool = False
    is_season_best: bool = False
    distance_name: Optional[str] = None
    seconds: Optional[float] = None

    def to_dict(self) -> Dict[str, Any]:
        return {
            "is_personal_best": self.is_personal_best,
            "is_season_best": self.is_season_best,
            "distance_name": self.distance_name,
            "seconds": self.seconds,
        }


@dataclass
class RaceStats:
    """Career race record: finishing positions and PBs."""

    count: int = 0
    wins: int = 0
    podiums: int = 0
    top10: int = 0
    personal_bests: int = 0

    def to_dict(self) -> Dict[str, Any]:
        return {
            "count": self.count,
            "wins": self.wins,
            "podiums": self.podiums,
            "top10": self.top10,
            "personal_bests": self.personal_bests,
        }
