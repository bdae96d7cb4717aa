"""Course record detection."""

import logging
import math
from typing import Optional

from ..metrics.time_format import format_seconds, parse_duration
from ..models.profile import Course, CourseRecord
from ..models.sessions import Session, SessionKind

logger = logging.getLogger(__name__)

REP_MATCH_TOLERANCE_KM = 0.05
TOTAL_MATCH_TOLERANCE_KM = 0.2

# Kinds whose whole-session time is always a candidate course effort
TOTAL_EFFORT_KINDS = frozenset({SessionKind.TEMPO, SessionKind.RACE, SessionKind.EASY})


def check_course_record(session: Session, course: Course) -> Optional[CourseRecord]:
    """
    New course record set by a session, if any.

    The attempt is the fastest rep whose distance is within 50 m of the
    course. The session total (within 200 m) is also considered for Tempo,
    Race and Easy sessions, or when no rep matched.

    Returns:
        The new CourseRecord, or None when the course best stands
    """
    attempt = math.inf

    for group in session.intervals:
        distance_km = (group.distance or 0) / 1000
        if distance_km > 0 and abs(distance_km - course.distance) < REP_MATCH_TOLERANCE_KM:
            seconds = parse_duration(group.duration)
            if 0 < seconds < attempt:
                attempt = seconds

    if math.isinf(attempt) or session.kind in TOTAL_EFFORT_KINDS:
        if session.duration > 0 and abs(course.distance - session.distance) < TOTAL_MATCH_TOLERANCE_KM:
            attempt = min(attempt, session.duration * 60)

    if math.isinf(attempt):
        return None

    current = course.best_effort.seconds if course.best_effort else math.inf
    if attempt >= current:
        return None

    logger.info(f"New course record on {course.name}: {format_seconds(attempt, precise=True)}")
    return CourseRecord(
        seconds=attempt,
        formatted_time=format_seconds(attempt, precise=True),
        date=session.date,
        session_id=session.id,
    )
