"""Derived analytics over the session history."""

from .segments import extract_segments
from .prediction import (
    KIND_CATEGORIES,
    RACE_TARGETS,
    RaceTarget,
    TrainingCategory,
    blend_components,
    calculate_fitness_score,
    category_for_session,
    fitness_score_from_predictions,
    generate_race_predictions,
    predict_goal,
    predict_time,
    predicted_5k_trend,
)
from .records import (
    apply_personal_best,
    auto_title_label,
    calculate_season_bests,
    detect_best_efforts,
    reconcile_records,
    resolve_title_source,
)
from .intervals import analyze_interval_session, summarize_session
from .alerts import generate_training_alerts
from .seasons import archive_season
from .courses import check_course_record
from .races import calculate_race_stats, parse_place

__all__ = [
    "extract_segments",
    # Prediction
    "KIND_CATEGORIES",
    "RACE_TARGETS",
    "RaceTarget",
    "TrainingCategory",
    "blend_components",
    "calculate_fitness_score",
    "category_for_session",
    "fitness_score_from_predictions",
    "generate_race_predictions",
    "predict_goal",
    "predict_time",
    "predicted_5k_trend",
    # Records
    "apply_personal_best",
    "auto_title_label",
    "calculate_season_bests",
    "detect_best_efforts",
    "reconcile_records",
    "resolve_title_source",
    # Sessions
    "analyze_interval_session",
    "summarize_session",
    "generate_training_alerts",
    "archive_season",
    "check_course_record",
    "calculate_race_stats",
    "parse_place",
]
