"""Athlete profile, season, goal and course models."""

from datetime import datetime
from typing import List, Optional

from pydantic import BaseModel, ConfigDict, Field, field_validator

from ..utils.dates import parse_datetime
from .sessions import Session, Surface, to_camel


class PersonalBest(BaseModel):
    """An externally declared (or season archived) best time."""

    model_config = ConfigDict(
        alias_generator=to_camel,
        populate_by_name=True,
    )

    distance: str = Field(..., description="Distance label, e.g. '5000m' or 'Half Marathon'")
    time: str = Field(..., description="Time string, e.g. '17:45' or '04:28.50'")
    date: Optional[str] = Field(None, description="ISO date the best was set")


class SeasonStats(BaseModel):
    """Aggregated volume for an archived season."""

    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True)

    total_distance: float = 0.0
    total_duration: float = 0.0
    session_count: int = 0


class Season(BaseModel):
    """A training season; only its window matters to the analytics."""

    model_config = ConfigDict(
        alias_generator=to_camel,
        populate_by_name=True,
    )

    id: str
    name: str = ""
    start_date: datetime
    end_date: Optional[datetime] = None
    is_active: bool = False
    start_pbs: List[PersonalBest] = Field(default_factory=list)
    target_pbs: List[PersonalBest] = Field(default_factory=list)
    end_pbs: Optional[List[PersonalBest]] = None
    season_bests: Optional[List[PersonalBest]] = None
    stats: Optional[SeasonStats] = None

    @field_validator("start_date", "end_date", mode="before")
    @classmethod
    def _parse_dates(cls, value):
        return parse_datetime(value)

    def contains(self, moment: datetime, now: datetime) -> bool:
        """Whether a moment falls inside [start, end-or-now)."""
        end = self.end_date or now
        return self.start_date <= moment < end


class Goal(BaseModel):
    """A time goal for a distance."""

    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True)

    id: str
    name: str
    target_time: str
    target_distance: float = Field(..., description="Goal distance in km")
    current_best: str = ""
    baseline: str = ""
    deadline: Optional[str] = None


class CourseRecord(BaseModel):
    """Best effort recorded on a course."""

    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True)

    seconds: float
    formatted_time: str
    date: Optional[datetime] = None
    session_id: str

    @field_validator("date", mode="before")
    @classmethod
    def _parse_date(cls, value):
        return parse_datetime(value)


class Course(BaseModel):
    """A measured course with an optional best effort."""

    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True)

    id: str
    name: str
    distance: float = Field(..., description="Course distance in km")
    location: str = ""
    surface: Optional[Surface] = None
    elevation_gain: Optional[float] = None
    best_effort: Optional[CourseRecord] = None


class UserProfile(BaseModel):
    """Athlete profile as far as the analytics need it."""

    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True)

    name: str = "Runner"
    age: Optional[int] = None
    weight: Optional[float] = None
    preferred_race: str = "5000m"
    pbs: List[PersonalBest] = Field(default_factory=list)
    weekly_availability: str = ""
    injuries: List[str] = Field(default_factory=list, description="Active injury descriptions")


class TrainingLog(BaseModel):
    """The whole document the host application persists."""

    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True)

    version: str = "1.0"
    sessions: List[Session] = Field(default_factory=list)
    seasons: List[Season] = Field(default_factory=list)
    profile: UserProfile = Field(default_factory=UserProfile)
    goals: List[Goal] = Field(default_factory=list)
    courses: List[Course] = Field(default_factory=list)

    @property
    def active_season(self) -> Optional[Season]:
        return next((s for s in self.seasons if s.is_active), None)

    def get_session(self, session_id: str) -> Optional[Session]:
        return next((s for s in self.sessions if s.id == session_id), None)
