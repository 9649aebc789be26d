"""Tournament-wide aggregates over the player catalog."""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Dict, Optional, Sequence

from spirit11.models import Category, PlayerRecord


@dataclass(frozen=True)
class StatLeader:
    name: str
    university: str
    value: int


@dataclass(frozen=True)
class TournamentSummary:
    total_players: int
    total_runs: int
    total_wickets: int
    highest_run_scorer: Optional[StatLeader]
    highest_wicket_taker: Optional[StatLeader]
    category_counts: Dict[str, int] = field(default_factory=dict)


def summarize_tournament(players: Sequence[PlayerRecord]) -> TournamentSummary:
    """Totals and leaders; ties keep the first player seen, zeros are no leader."""

    total_runs = 0
    total_wickets = 0
    top_runs: Optional[StatLeader] = None
    top_wickets: Optional[StatLeader] = None
    counts = {category.value: 0 for category in Category}

    for player in players:
        runs = player.stats.total_runs
        wickets = player.stats.wickets
        total_runs += runs
        total_wickets += wickets
        counts[player.category.value] += 1
        if runs > (top_runs.value if top_runs else 0):
            top_runs = StatLeader(name=player.name, university=player.university, value=runs)
        if wickets > (top_wickets.value if top_wickets else 0):
            top_wickets = StatLeader(name=player.name, university=player.university, value=wickets)

    return TournamentSummary(
        total_players=len(players),
        total_runs=total_runs,
        total_wickets=total_wickets,
        highest_run_scorer=top_runs,
        highest_wicket_taker=top_wickets,
        category_counts=counts,
    )
