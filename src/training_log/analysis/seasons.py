"""Season archiving."""

import logging
from datetime import datetime
from typing import Iterable, List, Optional

from ..models.profile import PersonalBest, Season, SeasonStats
from ..models.sessions import Session
from .records import calculate_season_bests

logger = logging.getLogger(__name__)


def sessions_in_window(sessions: Iterable[Session], start: datetime, end: datetime) -> List[Session]:
    """Dated sessions with start <= date <= end."""
    return [s for s in sessions if s.date is not None and start <= s.date <= end]


def archive_season(
    season: Season,
    sessions: Iterable[Session],
    profile_pbs: Iterable[PersonalBest],
    end_date: Optional[datetime] = None,
) -> Season:
    """
    Close a season.

    Returns a new, inactive Season carrying its volume stats, the best
    effort per catalogue distance inside the window and a snapshot of the
    profile PBs at the end of the season. The input season is not changed.
    """
    end = end_date or datetime.now()
    season_sessions = sessions_in_window(sessions, season.start_date, end)

    stats = SeasonStats(
        total_distance=round(sum(s.distance for s in season_sessions), 2),
        total_duration=round(sum(s.duration for s in season_sessions), 2),
        session_count=len(season_sessions),
    )

    archived = season.model_copy(update={
        "is_active": False,
        "end_date": end,
        "end_pbs": [pb.model_copy() for pb in profile_pbs],
        "season_bests": calculate_season_bests(season_sessions),
        "stats": stats,
    })

    logger.info(
        f"Archived season '{season.name}' with {stats.session_count} sessions "
        f"and {len(archived.season_bests)} season bests"
    )
    return archived
