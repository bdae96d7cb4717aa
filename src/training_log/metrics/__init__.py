"""Training metrics calculations."""

from .time_format import (
    extract_splits_from_text,
    format_pace,
    format_seconds,
    format_session_metric,
    pace_from_speed,
    parse_duration,
)
from .distances import (
    PB_ELIGIBLE_NAMES,
    STANDARD_DISTANCES,
    StandardDistance,
    canonical_distance_label,
    match_standard_distance,
    parse_distance_to_km,
)
from .load import (
    LoadRatio,
    PeriodScope,
    PeriodSummary,
    calculate_load_ratio,
    daily_loads,
    period_bounds,
    session_load,
    summarize_period,
)
from .fitness import (
    calculate_ema,
    calculate_training_stress,
    classify_form,
    get_form_recommendation,
    summarize_training_stress,
)

__all__ = [
    # Time formatting
    "extract_splits_from_text",
    "format_pace",
    "format_seconds",
    "format_session_metric",
    "pace_from_speed",
    "parse_duration",
    # Distances
    "PB_ELIGIBLE_NAMES",
    "STANDARD_DISTANCES",
    "StandardDistance",
    "canonical_distance_label",
    "match_standard_distance",
    "parse_distance_to_km",
    # Load
    "LoadRatio",
    "PeriodScope",
    "PeriodSummary",
    "calculate_load_ratio",
    "daily_loads",
    "period_bounds",
    "session_load",
    "summarize_period",
    # Fitness model
    "calculate_ema",
    "calculate_training_stress",
    "classify_form",
    "get_form_recommendation",
    "summarize_training_stress",
]
