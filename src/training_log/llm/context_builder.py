"""Build athlete context for coaching prompts."""

from datetime import datetime
from typing import Any, Dict, List, Optional

from ..metrics.time_format import format_session_metric
from ..models.analytics import RacePrediction
from ..models.profile import Goal, UserProfile
from ..models.sessions import Session

RECENT_SESSION_LIMIT = 10
GOAL_LIMIT = 3


def _session_line(session: Session) -> str:
    day = session.date.date().isoformat() if session.date else "undated"
    line = (
        f"  - {day} {session.kind.label}: {session.distance:g}km in {session.duration:g}min "
        f"({format_session_metric(session.distance, session.duration, session.kind)}), RPE {session.rpe}"
    )
    if session.avg_hr:
        line += f", avg HR {session.avg_hr}"
    if session.is_personal_best:
        line += " [PB]"
    elif session.is_season_best:
        line += " [SB]"
    return line


def build_coach_context(
    profile: Optional[UserProfile] = None,
    sessions: Optional[List[Session]] = None,
    fitness: Optional[Dict[str, Any]] = None,
    predictions: Optional[List[RacePrediction]] = None,
    goals: Optional[List[Goal]] = None,
) -> str:
    """
    Build a formatted athlete context string for a coaching prompt.

    Args:
        profile: Athlete profile
        sessions: Session history (the 10 most recent are listed)
        fitness: Latest training stress summary
        predictions: Race predictions
        goals: Upcoming goals

    Returns:
        Formatted context string
    """
    parts = []

    if profile:
        parts.append("ATHLETE:")
        parts.append(f"  Name: {profile.name}")
        if profile.age:
            parts.append(f"  Age: {profile.age}")
        parts.append(f"  Preferred race: {profile.preferred_race}")
        if profile.weekly_availability:
            parts.append(f"  Weekly availability: {profile.weekly_availability}")
        parts.append(f"  Active injuries: {', '.join(profile.injuries) or 'None'}")
        if profile.pbs:
            parts.append("  Personal bests: " + ", ".join(f"{pb.distance} {pb.time}" for pb in profile.pbs))
        parts.append("")

    if fitness:
        parts.append("FITNESS:")
        parts.append(f"  Fitness (42-day): {fitness.get('fitness', 0):.1f}")
        parts.append(f"  Fatigue (7-day): {fitness.get('fatigue', 0):.1f}")
        parts.append(f"  Form: {fitness.get('form', 0):.1f} ({fitness.get('band_description', 'unknown')})")
        parts.append("")

    usable = [p for p in predictions or [] if p.has_prediction]
    if usable:
        parts.append("RACE PREDICTIONS:")
        for prediction in usable:
            parts.append(f"  {prediction.distance_name}: {prediction.predicted_time} ({prediction.formatted_pace})")
        parts.append("")

    if goals:
        parts.append("GOALS:")
        for goal in goals[:GOAL_LIMIT]:
            deadline = f" by {goal.deadline}" if goal.deadline else ""
            parts.append(f"  - {goal.name}: {goal.target_distance:g}km in {goal.target_time}{deadline}")
        parts.append("")

    if sessions:
        recent = sorted(sessions, key=lambda s: s.date or datetime.min, reverse=True)[:RECENT_SESSION_LIMIT]
        parts.append("RECENT SESSIONS:")
        parts.extend(_session_line(s) for s in recent)
        parts.append("")

    return "\n".join(parts).strip()
