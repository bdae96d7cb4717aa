"""Training load calculations (session load, daily buckets, acute:chronic ratio, period totals)."""

import logging
from collections import Counter, defaultdict
from dataclasses import dataclass, field
from datetime import date, datetime, timedelta
from enum import Enum
from typing import Any, Dict, Iterable, Optional, Tuple

from ..models.profile import Season
from ..models.sessions import Session
from ..utils.dates import parse_datetime, to_day

logger = logging.getLogger(__name__)

ACUTE_WINDOW_DAYS = 7
CHRONIC_WINDOW_DAYS = 28


def session_load(session: Session) -> float:
    """
    Load of a single session.

    Uses the explicit training load when one was recorded, otherwise
    duration (min) x RPE, the session-RPE method.
    """
    return session.load


def daily_loads(sessions: Iterable[Session]) -> Dict[date, float]:
    """Total load per calendar day. Undated sessions are skipped."""
    buckets: Dict[date, float] = defaultdict(float)
    for session in sessions:
        if session.date is None:
            continue
        buckets[session.date.date()] += session_load(session)
    return dict(buckets)


@dataclass
class LoadRatio:
    """Acute (7-day) load against the weekly average of the last 28 days."""

    acute_load: float
    chronic_weekly_avg: float
    ratio: float

    def to_dict(self) -> dict:
        return {
            "acute_load": round(self.acute_load, 1),
            "chronic_weekly_avg": round(self.chronic_weekly_avg, 1),
            "ratio": round(self.ratio, 2),
        }


def calculate_load_ratio(
    sessions: Iterable[Session],
    now: Optional[datetime] = None,
) -> LoadRatio:
    """
    Acute:chronic workload ratio.

    Args:
        sessions: Full session history
        now: Reference moment (defaults to the current time)

    Returns:
        LoadRatio; ratio is 0 when there is no chronic load
    """
    now = now or datetime.now()
    acute_start = now - timedelta(days=ACUTE_WINDOW_DAYS)
    chronic_start = now - timedelta(days=CHRONIC_WINDOW_DAYS)

    acute = 0.0
    chronic_total = 0.0
    for session in sessions:
        if session.date is None:
            continue
        load = session_load(session)
        if session.date >= acute_start:
            acute += load
        if session.date >= chronic_start:
            chronic_total += load

    chronic_avg = chronic_total / (CHRONIC_WINDOW_DAYS / ACUTE_WINDOW_DAYS)
    ratio = acute / chronic_avg if chronic_avg > 0 else 0.0
    return LoadRatio(acute_load=acute, chronic_weekly_avg=chronic_avg, ratio=ratio)


class PeriodScope(str, Enum):
    """Dashboard reporting window."""
    WEEKLY = "weekly"    # Current calendar week, Monday to Sunday
    MONTHLY = "monthly"  # Current calendar month
    SEASON = "season"    # Active season, else the current calendar year


@dataclass
class PeriodSummary:
    """Training totals for one reporting window."""

    scope: PeriodScope
    label: str
    start: datetime
    end: Optional[datetime]  # Exclusive; None for an open season
    session_count: int = 0
    total_distance: float = 0.0  # km
    total_duration: float = 0.0  # minutes
    total_load: float = 0.0
    avg_rpe: Optional[float] = None
    avg_hr: Optional[int] = None
    kind_counts: Dict[str, int] = field(default_factory=dict)

    def to_dict(self) -> Dict[str, Any]:
        return {
            "scope": self.scope.value,
            "label": self.label,
            "start": self.start.isoformat(),
            "end": self.end.isoformat() if self.end else None,
            "session_count": self.session_count,
            "total_distance": round(self.total_distance, 1),
            "total_duration": round(self.total_duration, 1),
            "total_load": round(self.total_load, 1),
            "avg_rpe": self.avg_rpe,
            "avg_hr": self.avg_hr,
            "kind_counts": dict(self.kind_counts),
        }


def period_bounds(
    scope: PeriodScope,
    now: datetime,
    season: Optional[Season] = None,
) -> Tuple[datetime, Optional[datetime], str]:
    """
    Start, exclusive end and display label of a reporting window.

    A season window runs from the season start with no upper bound; with
    no season it is the calendar year of ``now``.
    """
    today = to_day(now)

    if scope == PeriodScope.WEEKLY:
        monday = today - timedelta(days=today.weekday())
        start = datetime(monday.year, monday.month, monday.day)
        return start, start + timedelta(days=7), "This Week"

    if scope == PeriodScope.MONTHLY:
        start = datetime(today.year, today.month, 1)
        if today.month == 12:
            end = datetime(today.year + 1, 1, 1)
        else:
            end = datetime(today.year, today.month + 1, 1)
        return start, end, "This Month"

    if season is not None:
        return season.start_date, None, f"Season: {season.name}" if season.name else "Season"
    return datetime(today.year, 1, 1), datetime(today.year + 1, 1, 1), f"Season {today.year}"


def summarize_period(
    sessions: Iterable[Session],
    scope: PeriodScope = PeriodScope.WEEKLY,
    now: Optional[datetime] = None,
    season: Optional[Season] = None,
) -> PeriodSummary:
    """
    Distance, duration and load totals for the current week, month or season.

    Average RPE and average heart rate only count sessions that recorded
    a positive value; with none they are None. Undated sessions are
    outside every window.

    Args:
        sessions: Full session history
        scope: Reporting window
        now: Reference moment (defaults to the current time)
        season: Active season, used by the season scope

    Returns:
        PeriodSummary for the window
    """
    scope = PeriodScope(scope)
    now = parse_datetime(now) or datetime.now()
    start, end, label = period_bounds(scope, now, season)

    in_period = [
        s for s in sessions
        if s.date is not None and s.date >= start and (end is None or s.date < end)
    ]

    summary = PeriodSummary(scope=scope, label=label, start=start, end=end)
    summary.session_count = len(in_period)
    summary.total_distance = sum(s.distance for s in in_period)
    summary.total_duration = sum(s.duration for s in in_period)
    summary.total_load = sum(session_load(s) for s in in_period)

    rpes = [s.rpe for s in in_period if s.rpe and s.rpe > 0]
    if rpes:
        summary.avg_rpe = round(sum(rpes) / len(rpes), 1)
    heart_rates = [s.avg_hr for s in in_period if s.avg_hr and s.avg_hr > 0]
    if heart_rates:
        summary.avg_hr = round(sum(heart_rates) / len(heart_rates))

    summary.kind_counts = dict(Counter(s.kind.value for s in in_period))

    logger.debug(f"{label}: {summary.session_count} sessions, {summary.total_distance:.1f} km")
    return summary
