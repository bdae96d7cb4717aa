"""Conversion between human time/pace strings and seconds.

Every parser here is total: malformed input yields 0 rather than raising,
and callers treat 0 as "unusable".
"""

import math
import re
from typing import List, Optional, Union

from ..models.sessions import SessionKind

Number = Union[int, float]

_NON_TIME_CHARS = re.compile(r"[^\d:.]")
_SPLIT_TOKEN_SEPARATORS = re.compile(r"[\n,|\s]+")
_SPLIT_TIME = re.compile(r"^(\d{1,2}:)?\d{2,3}(\.\d+)?$")


def parse_duration(text: Optional[Union[str, Number]]) -> float:
    """
    Parse "SS", "MM:SS", "MM:SS.ff" or "H:MM:SS" into seconds.

    Characters other than digits, colons and periods are stripped first,
    so "1:12s" and " 72 " both work. Empty or malformed input returns 0.

    Args:
        text: Time string (numbers are taken as seconds)

    Returns:
        Seconds as a float, 0.0 when unusable
    """
    if text is None or isinstance(text, bool):
        return 0.0
    if isinstance(text, (int, float)):
        return float(text) if math.isfinite(text) and text > 0 else 0.0

    clean = _NON_TIME_CHARS.sub("", str(text).strip())
    if not clean:
        return 0.0

    try:
        if ":" in clean:
            parts = [float(p) for p in clean.split(":")]
            if len(parts) == 2:
                return parts[0] * 60 + parts[1]
            if len(parts) == 3:
                return parts[0] * 3600 + parts[1] * 60 + parts[2]
            return 0.0
        return float(clean)
    except ValueError:
        return 0.0


def format_seconds(seconds: Optional[Number], precise: bool = False) -> str:
    """
    Format seconds as "MM:SS" (floored) or "MM:SS.ff".

    Zero, NaN and None format as "-".
    """
    if seconds is None or not math.isfinite(seconds) or seconds == 0:
        return "-"

    total = abs(float(seconds))

    if precise:
        # Round first so 59.999 becomes 01:00.00 instead of 00:60.00
        total = round(total, 2)
        minutes = int(total // 60)
        secs = total - minutes * 60
        return f"{minutes:02d}:{secs:05.2f}"

    minutes = int(total // 60)
    secs = int(total % 60)
    return f"{minutes:02d}:{secs:02d}"


def pace_from_speed(seconds: Optional[Number], meters: Optional[Number]) -> str:
    """Pace per km as "MM:SS.f" for covering ``meters`` in ``seconds``."""
    if not seconds or not meters or seconds <= 0 or meters <= 0:
        return "-"
    tenths = round(seconds / (meters / 1000) * 10)
    minutes, rem = divmod(tenths, 600)
    return f"{minutes:02d}:{rem / 10:04.1f}"


def format_pace(seconds_per_km: Optional[Number]) -> str:
    """Pace per km as "M:SS/km"; non-positive input gives "-"."""
    if not seconds_per_km or not math.isfinite(seconds_per_km) or seconds_per_km <= 0:
        return "-"
    minutes, secs = divmod(round(seconds_per_km), 60)
    return f"{minutes}:{secs:02d}/km"


def format_session_metric(distance_km: float, duration_min: float, kind: SessionKind) -> str:
    """Headline speed of a session: km/h for cycling, pace per km otherwise."""
    if not distance_km or not duration_min:
        return "-"
    if kind == SessionKind.CYCLE:
        return f"{distance_km / (duration_min / 60):.1f} km/h"
    return format_pace(duration_min / distance_km * 60)


def extract_splits_from_text(text: str) -> List[float]:
    """
    Pull split times out of free text such as "72, 71.5 | 1:10\\n69".

    Tokens are separated by commas, pipes, newlines or whitespace. Only
    tokens that look like times (SS, SSS, SS.f, M:SS, MM:SS.f) are kept,
    and only splits strictly between 0 and one hour.
    """
    splits: List[float] = []
    for token in _SPLIT_TOKEN_SEPARATORS.split(text or ""):
        token = token.strip()
        if not token or not _SPLIT_TIME.match(token):
            continue
        seconds = parse_duration(token)
        if 0 < seconds < 3600:
            splits.append(seconds)
    return splits
