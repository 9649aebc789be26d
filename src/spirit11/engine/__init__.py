"""Scoring engine that turns raw cricket statistics into points and value."""

from .stats import (
    VALUE_INCREMENT,
    batting_points,
    bowling_points,
    coerce_float,
    coerce_int,
    compute_derived_metrics,
    normalize_category,
    player_value_from_points,
)

__all__ = [
    "VALUE_INCREMENT",
    "batting_points",
    "bowling_points",
    "coerce_float",
    "coerce_int",
    "compute_derived_metrics",
    "normalize_category",
    "player_value_from_points",
]
