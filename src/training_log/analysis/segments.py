"""
Performance segment extraction.

A session yields zero or more (distance, duration) samples: one per rep of
its structured groups, and/or one for its totals, depending on its kind.
"""

from typing import FrozenSet, List

from ..metrics.time_format import parse_duration
from ..models.analytics import PerformanceSegment
from ..models.sessions import Session, SessionKind

# Kinds whose rep groups are not separate maximal efforts
KINDS_WITHOUT_REP_SEGMENTS: FrozenSet[SessionKind] = frozenset({
    SessionKind.TEMPO,
    SessionKind.RACE,
})

# Kinds whose totals include recoveries and so are not a continuous effort
KINDS_WITHOUT_TOTAL_SEGMENT: FrozenSet[SessionKind] = frozenset({
    SessionKind.INTERVAL,
    SessionKind.SPEED,
    SessionKind.HILLS,
    SessionKind.THRESHOLD,
})

# Long runs are run roughly 15% slower than race-equivalent effort
LONG_RUN_DURATION_FACTOR = 0.85


def extract_segments(session: Session, adjust_long_runs: bool = True) -> List[PerformanceSegment]:
    """
    Extract the performance segments of one session.

    Args:
        session: The session to inspect
        adjust_long_runs: Apply the 0.85x potential correction to the
            whole-session segment of Long sessions

    Returns:
        Rep segments first (in group order), then the total segment
    """
    segments: List[PerformanceSegment] = []

    if session.has_rep_groups and session.kind not in KINDS_WITHOUT_REP_SEGMENTS:
        for group in session.intervals:
            distance_km = (group.distance or 0) / 1000
            duration_min = parse_duration(group.duration) / 60
            if distance_km <= 0 or duration_min <= 0:
                continue
            segment = PerformanceSegment(
                distance_km=distance_km,
                duration_min=duration_min,
                source_date=session.date,
                session_id=session.id,
            )
            segments.extend([segment] * group.reps)

    if session.kind not in KINDS_WITHOUT_TOTAL_SEGMENT and session.distance > 0 and session.duration > 0:
        duration_min = session.duration
        if adjust_long_runs and session.kind == SessionKind.LONG:
            duration_min *= LONG_RUN_DURATION_FACTOR
        segments.append(
            PerformanceSegment(
                distance_km=session.distance,
                duration_min=duration_min,
                source_date=session.date,
                session_id=session.id,
            )
        )

    return segments
