"""Personal Best / Season Best reconciliation and title renumbering.

This module handles:
- Full-history reconciliation of PB / SB flags and auto-generated titles
- Detection of PB / SB for a single new session (on-save path)
- Updating the profile PB list after a new PB
- Best efforts per catalogue distance for season archives
"""

import logging
import re
from collections import defaultdict
from datetime import datetime
from typing import Dict, Iterable, List, Optional, Sequence, Tuple

from ..exceptions import ValidationError
from ..metrics.distances import (
    StandardDistance,
    canonical_distance_label,
    distance_km_for,
    is_pb_eligible,
    match_standard_distance,
)
from ..metrics.time_format import format_seconds, parse_duration
from ..models.analytics import BestEffortResult, PerformanceSegment
from ..models.profile import PersonalBest, Season
from ..models.sessions import Session, SessionKind, Surface, TitleSource
from ..utils.dates import parse_datetime
from .segments import extract_segments

logger = logging.getLogger(__name__)

# A log best within this many seconds of the profile time counts as equal
PB_TIME_EPSILON = 0.05

ROAD_TEMPO_LABEL = "Road Tempo"

# Tolerance (km) for comparing non-catalogue segments on the on-save path
NON_STANDARD_SHORT_TOLERANCE_KM = 0.02
NON_STANDARD_LONG_TOLERANCE_KM = 0.1


# =============================================================================
# Titles
# =============================================================================

def auto_title_label(session: Session) -> str:
    """Label used for auto-generated titles ("Road Tempo" for Tempo on Road)."""
    if session.kind == SessionKind.TEMPO and session.surface == Surface.ROAD:
        return ROAD_TEMPO_LABEL
    return session.kind.label


def _auto_title_pattern(session: Session) -> "re.Pattern[str]":
    labels = [session.kind.label]
    if session.kind == SessionKind.TEMPO:
        labels.append(ROAD_TEMPO_LABEL)
    alternatives = "|".join(re.escape(label) for label in labels)
    return re.compile(rf"^(?:{alternatives}) \d+$")


def resolve_title_source(session: Session) -> TitleSource:
    """
    Provenance of a session title.

    Explicit provenance wins. Records without one are classified from the
    title itself: empty or "{Kind label} {n}" is auto-generated, anything
    else was typed by the athlete.
    """
    if session.title_source is not None:
        return session.title_source
    title = session.title.strip()
    if not title or _auto_title_pattern(session).match(title):
        return TitleSource.AUTO
    return TitleSource.MANUAL


def _race_title(session: Session, source: TitleSource) -> Tuple[str, TitleSource]:
    if source == TitleSource.MANUAL and session.title.strip():
        return session.title, TitleSource.MANUAL
    name = (session.competition or session.event_name or "").strip()
    if name:
        return name, TitleSource.AUTO
    return session.title.strip() or session.kind.label, TitleSource.AUTO


def _seasons_latest_first(seasons: Optional[Iterable[Season]]) -> List[Season]:
    return sorted(seasons or [], key=lambda s: s.start_date, reverse=True)


def _title_bucket(moment: Optional[datetime], seasons: Sequence[Season], now: datetime) -> str:
    """Numbering bucket: the latest-starting enclosing season, else the calendar year."""
    if moment is None:
        return "undated"
    for season in seasons:
        if season.contains(moment, now):
            return f"season:{season.id}"
    return f"year:{moment.year}"


# =============================================================================
# Best efforts
# =============================================================================

def _record_segments(session: Session) -> List[PerformanceSegment]:
    # Records are times actually run, so no long-run correction here
    return extract_segments(session, adjust_long_runs=False)


def _profile_pb_seconds(profile_pbs: Optional[Iterable[PersonalBest]]) -> Dict[str, float]:
    """Profile PB seconds keyed by catalogue name. Unparseable times are ignored."""
    seconds_by_name: Dict[str, float] = {}
    for pb in profile_pbs or []:
        name = canonical_distance_label(pb.distance)
        seconds = parse_duration(pb.time)
        if not name or seconds <= 0:
            continue
        if name not in seconds_by_name or seconds < seconds_by_name[name]:
            seconds_by_name[name] = seconds
    return seconds_by_name


def _season_cutoff(
    active_season_start: Optional[datetime],
    seasons: Optional[Iterable[Season]],
    now: datetime,
) -> datetime:
    if active_season_start is not None:
        return active_season_start
    active = next((s for s in seasons or [] if s.is_active), None)
    if active is not None:
        return active.start_date
    return datetime(now.year, 1, 1)


def reconcile_records(
    sessions: Optional[Iterable[Session]],
    profile_pbs: Optional[Iterable[PersonalBest]] = None,
    seasons: Optional[Iterable[Season]] = None,
    active_season_start: Optional[datetime] = None,
    today: Optional[datetime] = None,
) -> List[Session]:
    """
    Recompute titles, PB and SB flags over the full session history.

    The result depends only on the inputs, so running it twice gives the
    same output and deleting a record-holding session hands the flag to
    the next best remaining session.

    Args:
        sessions: Full session history, any order
        profile_pbs: Externally declared personal bests
        seasons: Season windows used for title numbering
        active_season_start: Explicit start of the Season Best window
        today: Reference moment (defaults to now)

    Returns:
        Copies of every session, newest first

    Raises:
        ValidationError: If ``sessions`` is None
    """
    if sessions is None:
        raise ValidationError("A session list is required for reconciliation", field="sessions")

    now = parse_datetime(today) or datetime.now()
    cutoff = _season_cutoff(parse_datetime(active_season_start), seasons, now)
    seasons_by_start = _seasons_latest_first(seasons)

    # Same-day sessions fall back to id so repeated runs agree
    ordered = sorted(sessions, key=lambda s: (s.date or datetime.min, s.id))

    # Titles
    counters: Dict[Tuple[str, str], int] = defaultdict(int)
    titles: List[Tuple[str, TitleSource]] = []
    for session in ordered:
        source = resolve_title_source(session)
        if session.kind == SessionKind.RACE:
            titles.append(_race_title(session, source))
            continue

        label = auto_title_label(session)
        key = (_title_bucket(session.date, seasons_by_start, now), label)
        counters[key] += 1
        if source == TitleSource.AUTO:
            titles.append((f"{label} {counters[key]}", TitleSource.AUTO))
        else:
            titles.append((session.title, TitleSource.MANUAL))

    # Best segment per catalogue distance: (seconds, index into ordered)
    pb_best: Dict[str, Tuple[float, int]] = {}
    sb_best: Dict[str, Tuple[float, int]] = {}
    for index, session in enumerate(ordered):
        in_season = session.date is not None and session.date >= cutoff
        for segment in _record_segments(session):
            standard = match_standard_distance(segment.distance_km)
            if standard is None:
                continue
            seconds = segment.seconds
            # Strict comparison keeps the earliest session on ties
            if is_pb_eligible(standard.name):
                if standard.name not in pb_best or seconds < pb_best[standard.name][0]:
                    pb_best[standard.name] = (seconds, index)
            if in_season:
                if standard.name not in sb_best or seconds < sb_best[standard.name][0]:
                    sb_best[standard.name] = (seconds, index)

    profile_seconds = _profile_pb_seconds(profile_pbs)
    pb_indexes = set()
    for name, (seconds, index) in pb_best.items():
        declared = profile_seconds.get(name)
        if declared is None or seconds <= declared + PB_TIME_EPSILON:
            pb_indexes.add(index)

    sb_indexes = {index for _, index in sb_best.values()} - pb_indexes

    reconciled = []
    for index, session in enumerate(ordered):
        title, source = titles[index]
        reconciled.append(
            session.model_copy(update={
                "title": title,
                "title_source": source,
                "is_personal_best": index in pb_indexes,
                "is_season_best": index in sb_indexes,
            })
        )

    logger.debug(
        f"Reconciled {len(reconciled)} sessions: {len(pb_indexes)} PB holders, "
        f"{len(sb_indexes)} SB holders since {cutoff.date()}"
    )
    reconciled.reverse()
    return reconciled


# =============================================================================
# On-save detection
# =============================================================================

def _non_standard_name(distance_km: float) -> str:
    if distance_km >= 1:
        return f"{distance_km:.2f}km"
    return f"{round(distance_km * 1000)}m"


def _comparison_tolerance(segment: PerformanceSegment, standard: Optional[StandardDistance]) -> float:
    if standard is not None:
        return standard.tolerance_km
    if segment.distance_km < 1:
        return NON_STANDARD_SHORT_TOLERANCE_KM
    return NON_STANDARD_LONG_TOLERANCE_KM


def detect_best_efforts(
    session: Session,
    history: Iterable[Session],
    profile_pbs: Optional[Iterable[PersonalBest]] = None,
    season_start: Optional[datetime] = None,
    today: Optional[datetime] = None,
) -> BestEffortResult:
    """
    Check one new session for a Personal Best or Season Best.

    A PB beats the profile time for its catalogue distance (or is the first
    time recorded for it). An SB beats every earlier effort this season at
    about the same distance; the first effort of the season at a catalogue
    distance is an SB too. PB wins over SB in the result.

    Args:
        session: The session being saved
        history: Previously saved sessions (the new one is ignored if present)
        profile_pbs: Current profile bests
        season_start: Start of the current season (defaults to January 1)
        today: Reference moment for the January 1 default

    Returns:
        BestEffortResult naming the distance and time of the effort
    """
    segments = _record_segments(session)
    if not segments:
        return BestEffortResult()

    now = parse_datetime(today) or datetime.now()
    cutoff = parse_datetime(season_start) or datetime(now.year, 1, 1)

    season_segments = [
        segment
        for old in history
        if old.id != session.id and old.date is not None and old.date >= cutoff
        for segment in _record_segments(old)
    ]
    profile_seconds = _profile_pb_seconds(profile_pbs)

    is_pb = False
    is_sb = False
    distance_name: Optional[str] = None
    effort_seconds: Optional[float] = None

    for segment in segments:
        seconds = segment.seconds
        standard = match_standard_distance(segment.distance_km)

        if standard is not None and is_pb_eligible(standard.name):
            declared = profile_seconds.get(standard.name)
            if declared is None:
                if not is_pb:
                    is_pb = True
                    distance_name, effort_seconds = standard.name, seconds
            elif seconds < declared:
                is_pb = True
                distance_name, effort_seconds = standard.name, seconds

        tolerance = _comparison_tolerance(segment, standard)
        previous = [
            old.seconds
            for old in season_segments
            if abs(old.distance_km - segment.distance_km) <= tolerance
        ]

        if previous:
            if seconds < min(previous):
                is_sb = True
                if distance_name is None:
                    distance_name = standard.name if standard else _non_standard_name(segment.distance_km)
                    effort_seconds = seconds
        elif standard is not None:
            is_sb = True
            if distance_name is None:
                distance_name, effort_seconds = standard.name, seconds

    if is_pb:
        return BestEffortResult(is_personal_best=True, distance_name=distance_name, seconds=effort_seconds)
    if is_sb:
        return BestEffortResult(is_season_best=True, distance_name=distance_name, seconds=effort_seconds)
    return BestEffortResult()


def apply_personal_best(
    profile_pbs: Iterable[PersonalBest],
    result: BestEffortResult,
    session: Session,
) -> List[PersonalBest]:
    """Profile PB list with the new PB written in (replacing any alias of its distance)."""
    updated = [pb.model_copy() for pb in profile_pbs]
    if not result.is_personal_best or not result.distance_name:
        return updated

    seconds = result.seconds or session.duration * 60
    new_pb = PersonalBest(
        distance=result.distance_name,
        time=format_seconds(seconds, precise=True),
        date=session.date.isoformat() if session.date else None,
    )

    wanted = canonical_distance_label(result.distance_name) or result.distance_name
    for position, pb in enumerate(updated):
        if (canonical_distance_label(pb.distance) or pb.distance) == wanted:
            updated[position] = new_pb
            logger.info(f"Updated {result.distance_name} PB to {new_pb.time}")
            return updated

    updated.append(new_pb)
    logger.info(f"Added {result.distance_name} PB of {new_pb.time}")
    return updated


def calculate_season_bests(sessions: Iterable[Session]) -> List[PersonalBest]:
    """Best effort per catalogue distance, shortest distance first."""
    bests: Dict[str, Tuple[float, Optional[datetime]]] = {}
    for session in sessions:
        for segment in _record_segments(session):
            standard = match_standard_distance(segment.distance_km)
            if standard is None:
                continue
            if standard.name not in bests or segment.seconds < bests[standard.name][0]:
                bests[standard.name] = (segment.seconds, session.date)

    return [
        PersonalBest(
            distance=name,
            time=format_seconds(seconds, precise=True),
            date=moment.isoformat() if moment else None,
        )
        for name, (seconds, moment) in sorted(bests.items(), key=lambda item: distance_km_for(item[0]))
    ]
