"""Fitness-Fatigue model calculations (fitness, fatigue, form)."""

import logging
from datetime import date, timedelta
from typing import Any, Dict, Iterable, List, Optional

from ..models.analytics import FormBand, TrainingStressPoint
from ..models.sessions import Session
from .load import daily_loads

logger = logging.getLogger(__name__)

FITNESS_TIME_CONSTANT = 42  # Chronic load, days
FATIGUE_TIME_CONSTANT = 7   # Acute load, days

# Form thresholds (lower bounds of each band)
FRESH_FORM_THRESHOLD = 5.0
MAINTENANCE_FORM_THRESHOLD = -10.0
OPTIMAL_FORM_THRESHOLD = -30.0


def calculate_ema(
    current_value: float,
    previous_ema: float,
    time_constant: int,
) -> float:
    """
    Exponential moving average step.

    Uses the formula: EMA_n = EMA_{n-1} + (value - EMA_{n-1}) / time_constant

    Args:
        current_value: Today's training load
        previous_ema: Yesterday's EMA value
        time_constant: Time constant in days (42 for fitness, 7 for fatigue)

    Returns:
        New EMA value
    """
    return previous_ema + (current_value - previous_ema) * (1 / time_constant)


def calculate_training_stress(
    sessions: Iterable[Session],
    today: Optional[date] = None,
) -> List[TrainingStressPoint]:
    """
    Daily fitness, fatigue and form over the whole session history.

    Loads are bucketed per calendar day, then every day from the first
    session to ``today`` inclusive is walked. Days without sessions count
    as zero load so rest decays both averages. Both averages start at 0
    and the full series is rebuilt on every call.

    Args:
        sessions: Full session history, any order
        today: Last day of the series (defaults to the current date)

    Returns:
        One TrainingStressPoint per day, values rounded to one decimal
    """
    today = today or date.today()
    loads = daily_loads(sessions)
    if not loads:
        return []

    first_day = min(loads)
    if first_day > today:
        return []

    points: List[TrainingStressPoint] = []
    fitness = 0.0
    fatigue = 0.0
    day = first_day
    while day <= today:
        load = loads.get(day, 0.0)
        fitness = calculate_ema(load, fitness, FITNESS_TIME_CONSTANT)
        fatigue = calculate_ema(load, fatigue, FATIGUE_TIME_CONSTANT)
        points.append(
            TrainingStressPoint(
                date=day,
                load=round(load, 1),
                fitness=round(fitness, 1),
                fatigue=round(fatigue, 1),
                form=round(fitness - fatigue, 1),
            )
        )
        day += timedelta(days=1)

    logger.debug(f"Computed {len(points)} training stress points from {first_day} to {today}")
    return points


def classify_form(form: float) -> FormBand:
    """
    Map form to its band.

    - > 5: fresh / peak
    - >= -10: maintenance
    - >= -30: optimal training load
    - otherwise: high fatigue / overreaching
    """
    if form > FRESH_FORM_THRESHOLD:
        return FormBand.FRESH
    elif form >= MAINTENANCE_FORM_THRESHOLD:
        return FormBand.MAINTENANCE
    elif form >= OPTIMAL_FORM_THRESHOLD:
        return FormBand.OPTIMAL
    else:
        return FormBand.OVERREACHING


def get_form_recommendation(band: FormBand) -> str:
    """Short training recommendation for a form band."""
    recommendations = {
        FormBand.FRESH: "Fresh and recovered. Good window for a race or a key session.",
        FormBand.MAINTENANCE: "Load is stable. Keep the routine, add quality if it feels easy.",
        FormBand.OPTIMAL: "Productive fatigue. Fitness is building, protect the easy days.",
        FormBand.OVERREACHING: "High fatigue. Back off volume and prioritise recovery.",
    }
    return recommendations[band]


def summarize_training_stress(points: List[TrainingStressPoint]) -> Optional[Dict[str, Any]]:
    """Latest point with its form band and recommendation, or None."""
    if not points:
        return None
    latest = points[-1]
    band = classify_form(latest.form)
    return {
        **latest.to_dict(),
        "band": band.value,
        "band_description": band.description,
        "recommendation": get_form_recommendation(band),
    }
