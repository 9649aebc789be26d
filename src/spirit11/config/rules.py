"""Team selection rules for supported competition formats."""

from __future__ import annotations

from dataclasses import dataclass
from typing import Dict, Iterable


@dataclass(frozen=True)
class TeamRules:
    key: str
    squad_size: int
    budget: int


_TEAM_RULES: Dict[str, TeamRules] = {
    "default": TeamRules(key="default", squad_size=11, budget=9_000_000),
}


def iter_rules() -> Iterable[TeamRules]:
    """Return an iterator of all configured rule sets."""

    return _TEAM_RULES.values()


def get_rules(key: str = "default") -> TeamRules:
    """Fetch rules by key, raising KeyError if missing."""

    normalized = key.strip().lower()
    if normalized not in _TEAM_RULES:
        raise KeyError(f"No team rules configured for key={key!r}")
    return _TEAM_RULES[normalized]
