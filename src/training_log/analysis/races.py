"""Race results: finishing positions and the career race record."""

import logging
import re
from typing import Iterable, Optional

from ..models.analytics import RaceStats
from ..models.sessions import Session, SessionKind

logger = logging.getLogger(__name__)

_POSITION = re.compile(r"\d+")

PODIUM_PLACES = 3
TOP_PLACES = 10


def parse_place(place: Optional[str]) -> Optional[int]:
    """
    Finishing position from a free-text place such as "1st", "7" or "3/120".

    The first run of digits is the position. Text without digits ("DNF")
    and a position of 0 yield None.
    """
    if not place:
        return None
    match = _POSITION.search(place)
    if match is None:
        return None
    position = int(match.group())
    return position if position > 0 else None


def calculate_race_stats(sessions: Iterable[Session]) -> RaceStats:
    """
    Wins, podiums, top-10 finishes and PBs over all Race sessions.

    Podiums include wins and top-10 finishes include podiums. Races
    without a usable place still count towards ``count`` and
    ``personal_bests``.
    """
    stats = RaceStats()
    for session in sessions:
        if session.kind != SessionKind.RACE:
            continue
        stats.count += 1
        if session.is_personal_best:
            stats.personal_bests += 1

        position = parse_place(session.place)
        if position is None:
            continue
        if position == 1:
            stats.wins += 1
        if position <= PODIUM_PLACES:
            stats.podiums += 1
        if position <= TOP_PLACES:
            stats.top10 += 1

    logger.debug(f"Race record over {stats.count} races: {stats.wins} wins, {stats.podiums} podiums")
    return stats
