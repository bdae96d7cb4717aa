"""
Advisory training alerts.

Rules over the most recent sessions:
- Acute:chronic load ratio above 1.5 (danger) or 1.3 (warning)
- High RPE on an easy or recovery day
- Easy-run heart rate well above the athlete's usual easy-run average
- Three hard sessions in a row (polarization check)
"""

import logging
from datetime import datetime
from typing import Iterable, List, Optional

from ..metrics.load import calculate_load_ratio
from ..models.analytics import AlertLevel, TrainingAlert
from ..models.sessions import Session, SessionKind
from ..utils.dates import parse_datetime

logger = logging.getLogger(__name__)

LOAD_RATIO_DANGER = 1.5
LOAD_RATIO_WARNING = 1.3
EASY_DAY_RPE_LIMIT = 7
HR_DRIFT_BPM = 10
HARD_STREAK_LENGTH = 3

EASY_KINDS = frozenset({SessionKind.EASY, SessionKind.RECOVERY})
HARD_KINDS = frozenset({
    SessionKind.INTERVAL,
    SessionKind.SPEED,
    SessionKind.TEMPO,
    SessionKind.RACE,
    SessionKind.HILLS,
    SessionKind.THRESHOLD,
})


def _load_alert(sessions: List[Session], now: datetime) -> Optional[TrainingAlert]:
    ratio = calculate_load_ratio(sessions, now=now).ratio
    metric = f"Ratio: {ratio:.2f}"
    if ratio > LOAD_RATIO_DANGER:
        return TrainingAlert(
            id="ac-ratio-high",
            level=AlertLevel.DANGER,
            title="Overtraining Risk",
            message="Acute load is >1.5x your chronic load. High injury risk.",
            metric=metric,
        )
    if ratio > LOAD_RATIO_WARNING:
        return TrainingAlert(
            id="ac-ratio-warn",
            level=AlertLevel.WARNING,
            title="Load Spiking",
            message="Training load is increasing rapidly. Monitor recovery.",
            metric=metric,
        )
    return None


def _easy_day_effort_alert(last: Session) -> Optional[TrainingAlert]:
    if last.kind in EASY_KINDS and last.rpe >= EASY_DAY_RPE_LIMIT:
        return TrainingAlert(
            id="high-rpe-easy",
            level=AlertLevel.WARNING,
            title="High Physiological Cost",
            message=f"Rated a recovery run as RPE {last.rpe}. Potential residual fatigue.",
        )
    return None


def _heart_rate_alert(last: Session, sessions: List[Session]) -> Optional[TrainingAlert]:
    if last.kind != SessionKind.EASY or not last.avg_hr:
        return None

    others = [s.avg_hr for s in sessions if s.kind == SessionKind.EASY and s.avg_hr and s.id != last.id]
    if not others:
        return None

    diff = last.avg_hr - sum(others) / len(others)
    if diff > HR_DRIFT_BPM:
        return TrainingAlert(
            id="hr-drift",
            level=AlertLevel.WARNING,
            title="Heart Rate Anomaly",
            message="Avg HR was significantly higher (+10bpm) than your usual easy runs.",
            metric=f"+{round(diff)} bpm",
        )
    return None


def _polarization_alert(newest_first: List[Session]) -> Optional[TrainingAlert]:
    recent = newest_first[:HARD_STREAK_LENGTH]
    if all(s.kind in HARD_KINDS for s in recent):
        return TrainingAlert(
            id="polarization",
            level=AlertLevel.INFO,
            title="Lack of Recovery",
            message="Last 3 sessions were high intensity. Consider an easy day to maintain polarization.",
        )
    return None


def generate_training_alerts(
    sessions: Iterable[Session],
    now: Optional[datetime] = None,
) -> List[TrainingAlert]:
    """
    Evaluate every alert rule against the session history.

    Args:
        sessions: Full session history, any order
        now: Reference moment for the load windows (defaults to now)

    Returns:
        Alerts in rule order; empty with fewer than two sessions
    """
    sessions = list(sessions)
    if len(sessions) < 2:
        return []

    now = parse_datetime(now) or datetime.now()
    newest_first = sorted(sessions, key=lambda s: s.date or datetime.min, reverse=True)
    last = newest_first[0]

    candidates = [
        _load_alert(sessions, now),
        _easy_day_effort_alert(last),
        _heart_rate_alert(last, sessions),
        _polarization_alert(newest_first),
    ]
    alerts = [alert for alert in candidates if alert is not None]

    if alerts:
        logger.info(f"Generated {len(alerts)} training alerts: {', '.join(a.id for a in alerts)}")
    return alerts
