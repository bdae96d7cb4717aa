"""Standard distance catalogue and distance-label parsing."""

import re
from dataclasses import dataclass
from typing import Dict, FrozenSet, Optional, Tuple

# Relative tolerance when bucketing an effort to a catalogue distance.
# Tighter below 3 km so 1500m and 1600m stay apart.
SHORT_DISTANCE_TOLERANCE = 0.03
LONG_DISTANCE_TOLERANCE = 0.10
SHORT_DISTANCE_LIMIT_KM = 3.0

HALF_MARATHON_KM = 21.0975
MARATHON_KM = 42.195


@dataclass(frozen=True)
class StandardDistance:
    """A named catalogue distance."""

    name: str
    km: float

    @property
    def tolerance_km(self) -> float:
        ratio = SHORT_DISTANCE_TOLERANCE if self.km < SHORT_DISTANCE_LIMIT_KM else LONG_DISTANCE_TOLERANCE
        return self.km * ratio


STANDARD_DISTANCES: Tuple[StandardDistance, ...] = (
    StandardDistance("100m", 0.1),
    StandardDistance("200m", 0.2),
    StandardDistance("300m", 0.3),
    StandardDistance("400m", 0.4),
    StandardDistance("600m", 0.6),
    StandardDistance("800m", 0.8),
    StandardDistance("1000m", 1.0),
    StandardDistance("1200m", 1.2),
    StandardDistance("1500m", 1.5),
    StandardDistance("1600m", 1.6),
    StandardDistance("2000m", 2.0),
    StandardDistance("3000m", 3.0),
    StandardDistance("4000m", 4.0),
    StandardDistance("5000m", 5.0),
    StandardDistance("6000m", 6.0),
    StandardDistance("7000m", 7.0),
    StandardDistance("8000m", 8.0),
    StandardDistance("9000m", 9.0),
    StandardDistance("10K", 10.0),
    StandardDistance("15km", 15.0),
    StandardDistance("Half Marathon", HALF_MARATHON_KM),
    StandardDistance("Marathon", MARATHON_KM),
)

_BY_NAME: Dict[str, StandardDistance] = {d.name.lower(): d for d in STANDARD_DISTANCES}

# Distances for which a Personal Best is tracked
PB_ELIGIBLE_NAMES: FrozenSet[str] = frozenset({
    "1500m", "3000m", "5000m", "5K", "10K", "10000m", "Half Marathon", "Marathon",
})

# Profile labels that name the same catalogue distance
_LABEL_ALIASES: Dict[str, str] = {
    "5k": "5000m",
    "5km": "5000m",
    "5000": "5000m",
    "10k": "10K",
    "10km": "10K",
    "10000m": "10K",
    "10000": "10K",
    "hm": "Half Marathon",
    "half": "Half Marathon",
    "halfmarathon": "Half Marathon",
    "fm": "Marathon",
    "mile": "1600m",
}


def match_standard_distance(distance_km: float) -> Optional[StandardDistance]:
    """
    Nearest catalogue distance within its relative tolerance.

    Tolerance is 3% of the catalogue distance below 3 km and 10% from 3 km
    up, so 5.08 km is a 5000m effort while 5.6 km is not.

    Returns:
        The matching StandardDistance, or None
    """
    if not distance_km or distance_km <= 0:
        return None

    best: Optional[StandardDistance] = None
    best_gap = 0.0
    for standard in STANDARD_DISTANCES:
        gap = abs(distance_km - standard.km)
        if gap <= standard.tolerance_km + 1e-9 and (best is None or gap < best_gap):
            best = standard
            best_gap = gap
    return best


def canonical_distance_label(label: Optional[str]) -> Optional[str]:
    """Catalogue name for a profile distance label ("5K" -> "5000m")."""
    if not label:
        return None
    clean = label.strip().lower()
    compact = re.sub(r"\s+", "", clean)
    if compact in _LABEL_ALIASES:
        return _LABEL_ALIASES[compact]
    standard = _BY_NAME.get(clean)
    return standard.name if standard else None


def is_pb_eligible(name: str) -> bool:
    return name in PB_ELIGIBLE_NAMES


def distance_km_for(name: str) -> float:
    """Catalogue km for a catalogue name, 0 if unknown."""
    standard = _BY_NAME.get(name.lower())
    return standard.km if standard else 0.0


def parse_distance_to_km(label: Optional[str]) -> float:
    """
    Parse a free-form distance label into km.

    Handles aliases ("HM", "half", "marathon", "5k"), catalogue names,
    explicit units ("800m", "3.2km", "10k") and bare numbers, where values
    of 100 or more are taken as metres.
    """
    if not label:
        return 0.0

    clean = label.strip().lower()

    if clean == "hm" or "half" in clean:
        return HALF_MARATHON_KM
    if clean in ("fm", "marathon"):
        return MARATHON_KM
    if clean == "5k":
        return 5.0
    if clean == "10k":
        return 10.0

    standard = _BY_NAME.get(clean)
    if standard:
        return standard.km

    digits = re.sub(r"[^\d.]", "", clean)
    try:
        number = float(digits)
    except ValueError:
        return 0.0

    if "km" in clean:
        return number
    if clean.endswith("k") and "c" not in clean:
        return number
    if "m" in clean and "mi" not in clean:
        return number / 1000
    if number >= 100:
        return number / 1000
    return number
