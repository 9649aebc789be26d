"""Player valuation and scoring engine.

Every consumer of player points or value reads the fields produced here; the
formula must not be re-implemented anywhere else.
"""

from __future__ import annotations

import math
import re
from typing import Any, Mapping, Optional, Union

from spirit11.models import Category, DerivedMetrics, PerformanceStats


BALLS_PER_OVER = 6
STRIKE_RATE_DIVISOR = 5
AVERAGE_WEIGHT = 0.8
BOWLING_POINTS_NUMERATOR = 500
VALUE_POINTS_WEIGHT = 9
VALUE_BASE = 100
VALUE_SCALE = 1000
VALUE_INCREMENT = 50_000

# Canonical field -> accepted keys in a loosely shaped stats mapping. CSV
# headers are tried first, matching the ingestion aliases.
STAT_FIELD_KEYS: dict[str, tuple[str, ...]] = {
    "total_runs": ("Total Runs", "totalRuns", "total_runs"),
    "balls_faced": ("Balls Faced", "ballsFaced", "balls_faced"),
    "innings_played": ("Innings Played", "inningsPlayed", "innings_played"),
    "wickets": ("Wickets", "wickets"),
    "overs_bowled": ("Overs Bowled", "oversBowled", "overs_bowled"),
    "runs_conceded": ("Runs Conceded", "runsConceded", "runs_conceded"),
}

_INT_PREFIX = re.compile(r"^\s*([+-]?\d+)")
_FLOAT_PREFIX = re.compile(r"^\s*([+-]?(?:\d+\.?\d*|\.\d+)(?:[eE][+-]?\d+)?)")

StatsInput = Union[PerformanceStats, Mapping[str, Any]]


def parse_int(value: Any) -> Optional[int]:
    """Leading integer of ``value`` or ``None`` when nothing parses."""

    if value is None or isinstance(value, bool):
        return None
    if isinstance(value, int):
        return value
    if isinstance(value, float):
        return int(value) if math.isfinite(value) else None
    match = _INT_PREFIX.match(str(value))
    if match is None:
        return None
    return int(match.group(1))


def parse_float(value: Any) -> Optional[float]:
    """Leading finite decimal of ``value`` or ``None`` when nothing parses."""

    if value is None or isinstance(value, bool):
        return None
    if isinstance(value, (int, float)):
        try:
            number = float(value)
        except OverflowError:
            return None
    else:
        match = _FLOAT_PREFIX.match(str(value))
        if match is None:
            return None
        number = float(match.group(1))
    return number if math.isfinite(number) else None


def coerce_int(value: Any, default: int = 0) -> int:
    """Parse an integer stat; missing, unparseable and zero all yield ``default``."""

    return parse_int(value) or default


def coerce_float(value: Any, default: float = 0.0) -> float:
    return parse_float(value) or default


def _lookup(values: Mapping[str, Any], field: str) -> Any:
    # Empty and zero values fall through to the next key.
    for key in STAT_FIELD_KEYS[field]:
        value = values.get(key)
        if value is None or value is False or value == "":
            continue
        if isinstance(value, (int, float)) and value == 0:
            continue
        return value
    return None


def _as_mapping(record: StatsInput) -> Mapping[str, Any]:
    if isinstance(record, PerformanceStats):
        return record.model_dump()
    return record


def _finite(value: float) -> float:
    return value if math.isfinite(value) else 0.0


def _divide(numerator: float, denominator: float) -> float:
    try:
        return numerator / denominator
    except (OverflowError, ZeroDivisionError):
        return math.nan


def _batting_points(strike_rate: float, average: float) -> float:
    return strike_rate / STRIKE_RATE_DIVISOR + average * AVERAGE_WEIGHT


def _bowling_points(strike_rate: float) -> float:
    # Zero strike rate means "no wickets" and earns nothing.
    return BOWLING_POINTS_NUMERATOR / strike_rate if strike_rate > 0 else 0.0


def round_half_up(value: float) -> int:
    return int(math.floor(value + 0.5))


def player_value_from_points(points: float) -> int:
    """Monetary value for ``points``, rounded to the nearest value increment."""

    raw = (VALUE_POINTS_WEIGHT * points + VALUE_BASE) * VALUE_SCALE
    if not math.isfinite(raw):
        return 0
    return round_half_up(raw / VALUE_INCREMENT) * VALUE_INCREMENT


def compute_derived_metrics(record: StatsInput) -> DerivedMetrics:
    """Derive strike rates, average, economy, points and value from raw stats.

    ``record`` may be a :class:`PerformanceStats` or any mapping using
    snake_case or camelCase keys. Values are coerced leniently: unparseable
    input counts as missing. Missing balls faced and innings default to 1, the
    other fields to 0. Wickets and overs gate their dependent rates instead.
    Any non-finite result is stored as 0. This function never raises.
    """

    values = _as_mapping(record)
    total_runs = coerce_int(_lookup(values, "total_runs"))
    balls_faced = coerce_int(_lookup(values, "balls_faced"), 1)
    innings_played = coerce_int(_lookup(values, "innings_played"), 1)
    wickets = coerce_int(_lookup(values, "wickets"))
    overs_bowled = coerce_float(_lookup(values, "overs_bowled"))
    runs_conceded = coerce_int(_lookup(values, "runs_conceded"))

    batting_strike_rate = _divide(total_runs, balls_faced) * 100
    batting_average = _divide(total_runs, innings_played)

    bowling_strike_rate = 0.0
    if wickets > 0:
        bowling_strike_rate = _divide(overs_bowled * BALLS_PER_OVER, wickets)
    economy_rate = 0.0
    if overs_bowled > 0:
        economy_rate = _divide(runs_conceded, overs_bowled) * BALLS_PER_OVER

    player_points = (
        _batting_points(batting_strike_rate, batting_average)
        + _bowling_points(bowling_strike_rate)
        + economy_rate
    )

    return DerivedMetrics(
        batting_strike_rate=_finite(batting_strike_rate),
        batting_average=_finite(batting_average),
        bowling_strike_rate=_finite(bowling_strike_rate),
        economy_rate=_finite(economy_rate),
        player_points=_finite(player_points),
        player_value=player_value_from_points(player_points),
    )


def batting_points(metrics: DerivedMetrics) -> float:
    return _finite(_batting_points(metrics.batting_strike_rate, metrics.batting_average))


def bowling_points(metrics: DerivedMetrics) -> float:
    return _finite(_bowling_points(metrics.bowling_strike_rate))


def normalize_category(raw: Any) -> Category:
    """Map free-text category input onto :class:`Category`.

    Substrings are tested in order ``bat``, ``bowl``, ``all``/``rounder``; the
    first match wins and unmatched input falls back to ``Batsman``.
    """

    text = "" if raw is None else str(raw).strip().lower()
    if "bat" in text:
        return Category.BATSMAN
    if "bowl" in text:
        return Category.BOWLER
    if "all" in text or "rounder" in text:
        return Category.ALL_ROUNDER
    return Category.BATSMAN
