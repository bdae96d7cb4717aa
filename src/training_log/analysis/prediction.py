"""
Race Performance Predictor

Blends the most recent evidence from several kinds of training into one
predicted time per target race distance.

Key concepts:
- Each target distance weights five training categories (Speed, Interval,
  Threshold, Tempo, Mileage); the weights of a target sum to 1.0
- For every category the most recent session with a long enough segment
  is the component for that category
- Components are extrapolated to the target distance with Riegel's power
  law and blended with the weights of the categories actually found

References:
- Riegel, P.S. (1981). Athletic records and human endurance. American Scientist.
"""

import heapq
import logging
from dataclasses import dataclass
from datetime import datetime, timedelta
from enum import Enum
from typing import Any, Dict, Iterable, List, Mapping, Optional, Tuple

from ..metrics.distances import HALF_MARATHON_KM
from ..metrics.time_format import format_pace, format_seconds
from ..models.analytics import PerformanceSegment, RacePrediction
from ..models.profile import Goal
from ..models.sessions import Session, SessionKind
from .segments import extract_segments

logger = logging.getLogger(__name__)

RIEGEL_EXPONENT = 1.06


class TrainingCategory(str, Enum):
    """Evidence categories feeding a prediction."""
    SPEED = "Speed"
    INTERVAL = "Interval"
    THRESHOLD = "Threshold"
    TEMPO = "Tempo"
    MILEAGE = "Mileage"


@dataclass(frozen=True)
class RaceTarget:
    """A target race distance and its category weights."""

    name: str
    km: float
    weights: Mapping[TrainingCategory, float]


RACE_TARGETS: Tuple[RaceTarget, ...] = (
    RaceTarget("1500m", 1.5, {
        TrainingCategory.SPEED: 0.35,
        TrainingCategory.INTERVAL: 0.30,
        TrainingCategory.THRESHOLD: 0.15,
        TrainingCategory.TEMPO: 0.10,
        TrainingCategory.MILEAGE: 0.10,
    }),
    RaceTarget("3000m", 3.0, {
        TrainingCategory.SPEED: 0.25,
        TrainingCategory.INTERVAL: 0.35,
        TrainingCategory.THRESHOLD: 0.20,
        TrainingCategory.TEMPO: 0.10,
        TrainingCategory.MILEAGE: 0.10,
    }),
    RaceTarget("5000m", 5.0, {
        TrainingCategory.SPEED: 0.10,
        TrainingCategory.INTERVAL: 0.35,
        TrainingCategory.THRESHOLD: 0.30,
        TrainingCategory.TEMPO: 0.15,
        TrainingCategory.MILEAGE: 0.10,
    }),
    RaceTarget("10K", 10.0, {
        TrainingCategory.SPEED: 0.05,
        TrainingCategory.INTERVAL: 0.20,
        TrainingCategory.THRESHOLD: 0.35,
        TrainingCategory.TEMPO: 0.25,
        TrainingCategory.MILEAGE: 0.15,
    }),
    RaceTarget("Half Marathon", HALF_MARATHON_KM, {
        TrainingCategory.SPEED: 0.03,
        TrainingCategory.INTERVAL: 0.09,
        TrainingCategory.THRESHOLD: 0.35,
        TrainingCategory.TEMPO: 0.35,
        TrainingCategory.MILEAGE: 0.18,
    }),
)

# Category of every session kind. Race is resolved by its distance instead.
KIND_CATEGORIES: Dict[SessionKind, Optional[TrainingCategory]] = {
    SessionKind.EASY: None,
    SessionKind.TEMPO: TrainingCategory.TEMPO,
    SessionKind.THRESHOLD: TrainingCategory.THRESHOLD,
    SessionKind.INTERVAL: TrainingCategory.INTERVAL,
    SessionKind.SPEED: TrainingCategory.SPEED,
    SessionKind.HILLS: None,
    SessionKind.RACE: None,
    SessionKind.TREADMILL: None,
    SessionKind.CYCLE: None,
    SessionKind.CROSS_TRAINING: None,
    SessionKind.LONG: TrainingCategory.MILEAGE,
    SessionKind.RECOVERY: None,
}

_unmapped_kinds = set(SessionKind) - set(KIND_CATEGORIES)
if _unmapped_kinds:
    raise RuntimeError(f"Session kinds without a prediction category: {sorted(k.name for k in _unmapped_kinds)}")

# Race distance upper bounds (km) per category
RACE_CATEGORY_BOUNDS: Tuple[Tuple[float, TrainingCategory], ...] = (
    (1.0, TrainingCategory.SPEED),
    (4.0, TrainingCategory.INTERVAL),
    (12.0, TrainingCategory.THRESHOLD),
)

# Shortest segment (km) accepted as evidence per category
MIN_SEGMENT_KM: Dict[TrainingCategory, float] = {
    TrainingCategory.SPEED: 3.0,
    TrainingCategory.INTERVAL: 2.0,
    TrainingCategory.THRESHOLD: 3.0,
    TrainingCategory.TEMPO: 3.0,
    TrainingCategory.MILEAGE: 3.0,
}
SPEED_MIN_SEGMENT_KM_FOR_1500 = 1.5


def predict_time(base_seconds: float, base_km: float, target_km: float) -> float:
    """
    Riegel extrapolation: t2 = t1 * (d2 / d1) ^ 1.06.

    Args:
        base_seconds: Time for the known distance
        base_km: Known distance
        target_km: Distance to predict

    Returns:
        Predicted seconds, 0 when the inputs are unusable
    """
    if base_seconds <= 0 or base_km <= 0 or target_km <= 0:
        return 0.0
    return base_seconds * (target_km / base_km) ** RIEGEL_EXPONENT


def category_for_session(session: Session) -> Optional[TrainingCategory]:
    """Training category a session is evidence for, if any."""
    if session.kind == SessionKind.RACE:
        for upper_km, category in RACE_CATEGORY_BOUNDS:
            if session.distance < upper_km:
                return category
        return TrainingCategory.TEMPO
    return KIND_CATEGORIES[session.kind]


def min_segment_km(category: TrainingCategory, target: RaceTarget) -> float:
    """Minimum segment distance for a category to count toward a target."""
    if category == TrainingCategory.SPEED and target.km == 1.5:
        return SPEED_MIN_SEGMENT_KM_FOR_1500
    return MIN_SEGMENT_KM[category]


@dataclass
class _Evidence:
    session: Session
    category: TrainingCategory
    segments: List[PerformanceSegment]


def _newest_first(sessions: Iterable[Session]) -> List[Session]:
    return sorted(sessions, key=lambda s: s.date or datetime.min, reverse=True)


def _collect_evidence(sessions: Iterable[Session]) -> List[_Evidence]:
    evidence = []
    for session in _newest_first(sessions):
        category = category_for_session(session)
        if category is None:
            continue
        segments = extract_segments(session)
        if segments:
            evidence.append(_Evidence(session, category, segments))
    return evidence


def _find_components(evidence: List[_Evidence], target: RaceTarget) -> Dict[TrainingCategory, float]:
    """Extrapolated seconds of the most recent valid session per category."""
    components: Dict[TrainingCategory, float] = {}
    for item in evidence:
        if item.category in components or item.category not in target.weights:
            continue
        minimum = min_segment_km(item.category, target)
        candidates = [
            predict_time(seg.seconds, seg.distance_km, target.km)
            for seg in item.segments
            if seg.distance_km >= minimum
        ]
        candidates = [c for c in candidates if c > 0]
        if candidates:
            components[item.category] = min(candidates)
            if len(components) == len(target.weights):
                break
    return components


def blend_components(
    components: Mapping[TrainingCategory, float],
    weights: Mapping[TrainingCategory, float],
) -> float:
    """
    Weighted average over the categories present, renormalized by the
    weights actually used. Missing categories drop out rather than count
    as zero. Returns 0 when nothing is usable.
    """
    used = {cat: seconds for cat, seconds in components.items() if weights.get(cat, 0) > 0}
    total_weight = sum(weights[cat] for cat in used)
    if total_weight <= 0:
        return 0.0
    return sum(weights[cat] * seconds for cat, seconds in used.items()) / total_weight


def _build_prediction(name: str, km: float, seconds: float, components: List[str]) -> RacePrediction:
    if seconds <= 0:
        return RacePrediction(
            distance_name=name,
            distance_km=km,
            predicted_seconds=0.0,
            predicted_time="-",
            formatted_pace="-",
            components=[],
        )
    return RacePrediction(
        distance_name=name,
        distance_km=km,
        predicted_seconds=seconds,
        predicted_time=format_seconds(seconds),
        formatted_pace=format_pace(seconds / km),
        components=components,
    )


def generate_race_predictions(sessions: Iterable[Session]) -> List[RacePrediction]:
    """
    One prediction per catalogue target distance.

    Args:
        sessions: Full session history, any order

    Returns:
        Predictions in catalogue order; a target without any valid
        component gets a "no prediction" entry (0 seconds, "-")
    """
    evidence = _collect_evidence(sessions)
    predictions = []
    for target in RACE_TARGETS:
        components = _find_components(evidence, target)
        seconds = blend_components(components, target.weights)
        used = [cat.value for cat in target.weights if cat in components]
        predictions.append(_build_prediction(target.name, target.km, seconds, used))

    logger.debug(
        f"Generated {sum(p.has_prediction for p in predictions)}/{len(predictions)} "
        f"race predictions from {len(evidence)} qualifying sessions"
    )
    return predictions


def calculate_fitness_score(five_k_seconds: float) -> float:
    """
    VDOT-like fitness score from a 5000m time.

    Linear approximation over the 15:00-25:00 range: 285 / minutes + 12.
    """
    minutes = five_k_seconds / 60
    if minutes <= 0:
        return 0.0
    return round(285 / minutes + 12, 1)


def fitness_score_from_predictions(predictions: Iterable[RacePrediction]) -> float:
    """Fitness score from the 5000m weighted prediction (0 if absent)."""
    five_k = next((p for p in predictions if p.distance_name == "5000m"), None)
    if five_k is None or not five_k.has_prediction:
        return 0.0
    return calculate_fitness_score(five_k.predicted_seconds)


# Session kinds used as fitness markers for the 5K trend
TREND_KINDS = frozenset({SessionKind.RACE, SessionKind.INTERVAL, SessionKind.TEMPO})
TREND_WINDOW_DAYS = 42


def predicted_5k_trend(sessions: Iterable[Session]) -> List[Dict[str, Any]]:
    """
    Peak predicted 5K over time.

    For each dated session (oldest first), the fastest Riegel 5 km
    equivalent among Race/Interval/Tempo sessions in the trailing 42 days,
    totals only.

    Returns:
        List of {"date": ISO day, "predicted_5k": seconds}
    """
    dated = sorted((s for s in sessions if s.date is not None), key=lambda s: s.date)
    window: List[Tuple[float, datetime]] = []
    trend: List[Dict[str, Any]] = []

    for session in dated:
        if session.kind in TREND_KINDS and session.distance > 0 and session.duration > 0:
            prediction = predict_time(session.duration * 60, session.distance, 5.0)
            heapq.heappush(window, (prediction, session.date))

        window_start = session.date - timedelta(days=TREND_WINDOW_DAYS)
        while window and window[0][1] < window_start:
            heapq.heappop(window)

        if window:
            trend.append({
                "date": session.date.date().isoformat(),
                "predicted_5k": round(window[0][0], 1),
            })

    return trend


def predict_goal(goal: Goal, predictions: List[RacePrediction]) -> Optional[RacePrediction]:
    """
    Prediction for a goal distance.

    Uses the catalogue prediction within 0.2 km of the goal distance, else
    extrapolates from the 5000m prediction. None when neither exists.
    """
    for prediction in predictions:
        if prediction.has_prediction and abs(prediction.distance_km - goal.target_distance) < 0.2:
            return prediction

    base = next((p for p in predictions if p.distance_name == "5000m" and p.has_prediction), None)
    if base is None or goal.target_distance <= 0:
        return None

    seconds = predict_time(base.predicted_seconds, base.distance_km, goal.target_distance)
    return _build_prediction(f"{goal.target_distance:g}km", goal.target_distance, seconds, list(base.components))
