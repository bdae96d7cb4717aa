"""Training session data models."""

import logging
import re
from datetime import datetime
from enum import Enum
from typing import List, Optional

from pydantic import BaseModel, ConfigDict, Field, field_validator

from ..utils.dates import parse_datetime

logger = logging.getLogger(__name__)

# Upper bound on reps in one line item; rep groups are expanded per rep
MAX_REPS = 100


def to_camel(string: str) -> str:
    """Convert snake_case to camelCase."""
    components = string.split("_")
    return components[0] + "".join(x.title() for x in components[1:])


def _normalize_label(value: str) -> str:
    return re.sub(r"[^a-z0-9]", "", value.lower())


class SessionKind(str, Enum):
    """Closed set of session kinds. Values are the display labels."""
    EASY = "Easy Run"
    TEMPO = "Tempo"
    THRESHOLD = "Threshold"
    INTERVAL = "Intervals"
    SPEED = "Speed Work"
    HILLS = "Hill Repeats"
    RACE = "Race"
    TREADMILL = "Treadmill Run"
    CYCLE = "Cycling"
    CROSS_TRAINING = "Cross Training"
    LONG = "Long Run"
    RECOVERY = "Recovery"

    @classmethod
    def _missing_(cls, value):
        # Accept member names and short forms ("Easy", "interval", "CrossTraining")
        if not isinstance(value, str):
            return None
        wanted = _normalize_label(value)
        for member in cls:
            if wanted in (_normalize_label(member.name), _normalize_label(member.value)):
                return member
        return None

    @property
    def label(self) -> str:
        """Display label used in auto-generated titles."""
        return self.value


class Surface(str, Enum):
    """Running surface."""
    ROAD = "Road"
    TRACK = "Track"
    TRAIL = "Trail"
    TREADMILL = "Treadmill"
    GRASS = "Grass"
    INDOOR = "Indoor"
    MIXED = "Mixed"


class TitleSource(str, Enum):
    """Provenance of a session title."""
    AUTO = "auto"        # Generated and renumbered by reconciliation
    MANUAL = "manual"    # Typed by the athlete, never rewritten


class RepGroup(BaseModel):
    """One structured line item, e.g. 8 x 400m @ 72s w/ 90s jog."""

    model_config = ConfigDict(
        alias_generator=to_camel,
        populate_by_name=True,
    )

    reps: int = Field(default=1, description="Repetition count")
    distance: Optional[float] = Field(None, description="Per-rep distance in metres")
    duration: Optional[str] = Field(None, description="Per-rep time, e.g. '1:12'")
    pace: Optional[str] = Field(None, description="Target pace, e.g. '3:00/km'")
    recovery: str = Field(default="", description="Recovery description")
    notes: Optional[str] = None

    @field_validator("reps", mode="before")
    @classmethod
    def _default_reps(cls, value):
        # A missing or zero count means a single rep
        try:
            reps = int(value or 0)
        except (TypeError, ValueError):
            return 1
        if reps > MAX_REPS:
            logger.warning(f"Capping rep count {reps} to {MAX_REPS}")
            return MAX_REPS
        return reps if reps > 0 else 1

    @field_validator("duration", mode="before")
    @classmethod
    def _duration_as_text(cls, value):
        if value is None:
            return None
        return str(value)


class Session(BaseModel):
    """A single logged training session."""

    model_config = ConfigDict(
        alias_generator=to_camel,
        populate_by_name=True,
    )

    id: str = Field(..., description="Unique session identifier")
    date: Optional[datetime] = Field(None, description="When the session took place")
    kind: SessionKind = Field(..., description="Session kind")
    distance: float = Field(default=0.0, description="Total distance in km")
    duration: float = Field(default=0.0, description="Total duration in minutes")
    rpe: int = Field(default=0, description="Perceived exertion 1-10")
    feeling: Optional[int] = None
    training_load: Optional[float] = Field(None, description="Explicit load, else duration x RPE")
    notes: str = ""

    intervals: List[RepGroup] = Field(default_factory=list)
    splits: List[float] = Field(default_factory=list, description="Split times in seconds")

    surface: Optional[Surface] = None
    route: Optional[str] = None
    course_id: Optional[str] = None
    shoe: Optional[str] = None
    weather: Optional[str] = None
    avg_hr: Optional[int] = None
    max_hr: Optional[int] = None

    # Race metadata
    competition: Optional[str] = None
    team: Optional[str] = None
    place: Optional[str] = None
    event_name: Optional[str] = None

    # Engine-owned fields
    title: str = ""
    title_source: Optional[TitleSource] = None
    is_personal_best: bool = False
    is_season_best: bool = False

    @field_validator("date", mode="before")
    @classmethod
    def _parse_date(cls, value):
        return parse_datetime(value)

    @field_validator("title", mode="before")
    @classmethod
    def _title_text(cls, value):
        return value or ""

    @field_validator("distance", "duration", mode="before")
    @classmethod
    def _non_negative(cls, value):
        try:
            number = float(value or 0)
        except (TypeError, ValueError):
            return 0.0
        return number if number > 0 else 0.0

    @property
    def has_rep_groups(self) -> bool:
        return len(self.intervals) > 0

    @property
    def load(self) -> float:
        """Training load: explicit value, else duration x RPE."""
        if self.training_load:
            return float(self.training_load)
        return self.duration * self.rpe
