"""Shared fixtures for the training-log test suite."""

from datetime import datetime, timedelta
from itertools import count

import pytest

from training_log.models import PersonalBest, RepGroup, Season, Session, SessionKind

_ids = count(1)


def build_session(kind=SessionKind.EASY, date=None, distance=10.0, duration=50.0, rpe=5, **kwargs) -> Session:
    """Build a Session with sensible defaults; rep groups may be given as dicts."""
    intervals = [
        group if isinstance(group, RepGroup) else RepGroup(**group)
        for group in kwargs.pop("intervals", [])
    ]
    return Session(
        id=kwargs.pop("id", f"s{next(_ids)}"),
        date=date or datetime(2024, 6, 1, 7, 0),
        kind=kind,
        distance=distance,
        duration=duration,
        rpe=rpe,
        intervals=intervals,
        **kwargs,
    )


@pytest.fixture
def make_session():
    """Factory fixture for sessions."""
    return build_session


@pytest.fixture
def now():
    """Fixed reference moment."""
    return datetime(2024, 6, 30, 12, 0)


@pytest.fixture
def season_2024():
    return Season(id="season-2024", name="Summer 2024", start_date=datetime(2024, 4, 1), is_active=True)


@pytest.fixture
def profile_pbs():
    return [
        PersonalBest(distance="5K", time="18:00", date="2023-09-01"),
        PersonalBest(distance="10K", time="37:30", date="2023-10-01"),
    ]


@pytest.fixture
def history(make_session, now):
    """A realistic month of mixed training before ``now``."""
    start = now - timedelta(days=30)
    return [
        make_session(SessionKind.EASY, start, 8.0, 42.0, 4, id="easy-1", avg_hr=140),
        make_session(
            SessionKind.INTERVAL, start + timedelta(days=2), 9.0, 50.0, 8, id="int-1",
            intervals=[{"reps": 6, "distance": 1000, "duration": "3:40", "recovery": "90s jog"}],
        ),
        make_session(SessionKind.TEMPO, start + timedelta(days=5), 8.0, 30.0, 7, id="tempo-1"),
        make_session(SessionKind.LONG, start + timedelta(days=8), 20.0, 100.0, 6, id="long-1"),
        make_session(SessionKind.EASY, start + timedelta(days=10), 8.0, 42.0, 4, id="easy-2", avg_hr=142),
        make_session(SessionKind.RACE, start + timedelta(days=14), 5.0, 17.75, 9, id="race-1", competition="Park 5K"),
    ]
