"""Data models for the training log."""

from .sessions import (
    RepGroup,
    Session,
    SessionKind,
    Surface,
    TitleSource,
    to_camel,
)
from .profile import (
    Course,
    CourseRecord,
    Goal,
    PersonalBest,
    Season,
    SeasonStats,
    TrainingLog,
    UserProfile,
)
from .analytics import (
    AlertLevel,
    BestEffortResult,
    FormBand,
    IntervalAnalysis,
    IntervalGroupStats,
    PerformanceSegment,
    RacePrediction,
    RaceStats,
    TrainingAlert,
    TrainingStressPoint,
)

__all__ = [
    # Sessions
    "RepGroup",
    "Session",
    "SessionKind",
    "Surface",
    "TitleSource",
    "to_camel",
    # Profile and seasons
    "Course",
    "CourseRecord",
    "Goal",
    "PersonalBest",
    "Season",
    "SeasonStats",
    "TrainingLog",
    "UserProfile",
    # Derived values
    "AlertLevel",
    "BestEffortResult",
    "FormBand",
    "IntervalAnalysis",
    "IntervalGroupStats",
    "PerformanceSegment",
    "RacePrediction",
    "RaceStats",
    "TrainingAlert",
    "TrainingStressPoint",
]
