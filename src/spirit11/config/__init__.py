"""Configuration helpers for team selection rules."""

from .rules import TeamRules, get_rules, iter_rules

__all__ = [
    "TeamRules",
    "get_rules",
    "iter_rules",
]
