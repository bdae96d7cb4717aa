"""Interval session consistency analysis and one-line session summaries."""

import logging
import math
from dataclasses import dataclass
from typing import Dict, List, Optional

from ..metrics.time_format import format_seconds, format_session_metric, pace_from_speed, parse_duration
from ..models.analytics import IntervalAnalysis, IntervalGroupStats
from ..models.sessions import Session, SessionKind

logger = logging.getLogger(__name__)

# Consistency label upper bounds (variation %)
METRONOMIC_THRESHOLD = 2.0
SOLID_THRESHOLD = 5.0
VARIABLE_THRESHOLD = 8.0

VARIATION_PENALTY = 5       # Score points lost per % of variation
CONSISTENCY_WEIGHT = 0.7
EFFORT_WEIGHT = 0.3

STRUCTURED_KINDS = frozenset({
    SessionKind.INTERVAL,
    SessionKind.SPEED,
    SessionKind.THRESHOLD,
    SessionKind.HILLS,
})


@dataclass
class _Rep:
    distance: float  # metres, 0 for raw splits
    seconds: float
    recovery: str


def _round_half_up(value: float) -> int:
    return int(math.floor(value + 0.5))


def _flatten_reps(session: Session) -> List[_Rep]:
    reps: List[_Rep] = []
    if session.has_rep_groups:
        for group in session.intervals:
            seconds = parse_duration(group.duration)
            if seconds <= 0:
                continue
            reps.extend(_Rep(group.distance or 0.0, seconds, group.recovery) for _ in range(group.reps))
    else:
        reps.extend(_Rep(0.0, seconds, "") for seconds in session.splits if seconds > 0)
    return reps


def consistency_label(variation: float) -> str:
    """Human label for a variation percentage."""
    if variation < METRONOMIC_THRESHOLD:
        return "Metronomic"
    elif variation < SOLID_THRESHOLD:
        return "Solid"
    elif variation < VARIABLE_THRESHOLD:
        return "Variable"
    return "Erratic"


def volume_bonus(quality_km: float) -> int:
    if quality_km > 5:
        return 10
    if quality_km > 3:
        return 5
    return 0


def analyze_interval_session(session: Session) -> Optional[IntervalAnalysis]:
    """
    Score the pacing consistency of a structured session.

    Reps come from the rep groups (expanded, positive durations only) or,
    without groups, from the raw splits. Reps are grouped by distance and
    the spread of each group is (max - min) / avg as a percentage.

    Args:
        session: Session with rep groups or splits

    Returns:
        IntervalAnalysis, or None when the session has no reps
    """
    reps = _flatten_reps(session)
    if not reps:
        return None

    grouped: Dict[float, List[_Rep]] = {}
    for rep in reps:
        grouped.setdefault(rep.distance, []).append(rep)

    groups: List[IntervalGroupStats] = []
    for distance, members in grouped.items():
        times = [rep.seconds for rep in members]
        avg = sum(times) / len(times)
        variation = (max(times) - min(times)) / avg * 100 if avg > 0 else 0.0
        recoveries = list(dict.fromkeys(rep.recovery for rep in members if rep.recovery))
        groups.append(
            IntervalGroupStats(
                distance=distance,
                label=f"{distance:g}m" if distance > 0 else "Split",
                count=len(times),
                avg_time=avg,
                best_time=min(times),
                variation=variation,
                pace=pace_from_speed(avg, distance) if distance > 0 else "-",
                reps=times,
                recovery=" / ".join(recoveries),
            )
        )
    groups.sort(key=lambda g: g.distance, reverse=True)

    # Distance x count weighted mean, plain mean for time-only groups
    total_weight = sum(g.distance * g.count for g in groups if g.distance > 0)
    if total_weight > 0:
        variation = sum(g.variation * g.distance * g.count for g in groups if g.distance > 0) / total_weight
    else:
        variation = sum(g.variation for g in groups) / len(groups)

    quality_km = sum(rep.distance for rep in reps) / 1000

    consistency_score = max(0.0, min(100.0, 100 - variation * VARIATION_PENALTY))
    effort_score = (10 - session.rpe) * 2 if session.rpe else 0
    raw_score = consistency_score * CONSISTENCY_WEIGHT + effort_score * EFFORT_WEIGHT + volume_bonus(quality_km)
    score = max(0, min(100, _round_half_up(raw_score)))

    logger.debug(f"Session {session.id}: {len(reps)} reps, variation {variation:.2f}%, score {score}")

    return IntervalAnalysis(
        total_reps=len(reps),
        quality_volume=quality_km,
        score=score,
        consistency_label=consistency_label(variation),
        variation=variation,
        groups=groups,
    )


def summarize_session(session: Session) -> str:
    """
    One-line description of a session for lists.

    "400m x 8 w/ 90s jog + 200m x 4" for structured sessions,
    "12km • 55:00 (4:35/km)" for Tempo, "10km • 52m" otherwise.
    """
    if session.kind == SessionKind.TEMPO:
        metric = format_session_metric(session.distance, session.duration, session.kind)
        return f"{session.distance:g}km • {format_seconds(session.duration * 60)} ({metric})"

    if session.kind in STRUCTURED_KINDS and session.has_rep_groups:
        # Consecutive groups with the same label and recovery are merged
        parts: List[List] = []
        for group in session.intervals:
            if group.distance:
                label = f"{group.distance:g}m"
            else:
                label = group.duration or "Rep"
            recovery = group.recovery or ""
            if parts and parts[-1][0] == label and parts[-1][2] == recovery:
                parts[-1][1] += group.reps
            else:
                parts.append([label, group.reps, recovery])
        return " + ".join(
            f"{label} x {count} w/ {recovery}" if recovery else f"{label} x {count}"
            for label, count, recovery in parts
        )

    hours = int(session.duration // 60)
    minutes = _round_half_up(session.duration % 60)
    duration = f"{hours}h {minutes}m" if hours > 0 else f"{minutes}m"
    return f"{session.distance:g}km • {duration}"
