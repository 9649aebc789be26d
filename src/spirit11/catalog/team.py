"""Team admission checks driven by stored player values."""

from __future__ import annotations

from collections import Counter
from dataclasses import dataclass, field
from typing import List, Sequence

from spirit11.config import TeamRules
from spirit11.models import StoredPlayer


@dataclass(frozen=True)
class TeamEvaluation:
    player_ids: List[str]
    total_value: int
    total_points: float
    budget: int
    remaining_budget: int
    errors: List[str] = field(default_factory=list)

    @property
    def is_valid(self) -> bool:
        return not self.errors


def evaluate_team(players: Sequence[StoredPlayer], rules: TeamRules) -> TeamEvaluation:
    """Check a proposed selection against squad size and budget.

    Cost and points are read from the persisted ``player_value`` and
    ``player_points``; nothing is re-derived here.
    """

    errors: List[str] = []
    if len(players) > rules.squad_size:
        errors.append(f"A team cannot have more than {rules.squad_size} players")

    duplicates = sorted(pid for pid, count in Counter(p.player_id for p in players).items() if count > 1)
    if duplicates:
        errors.append(f"Duplicate players selected: {', '.join(duplicates)}")

    total_value = sum(player.metrics.player_value for player in players)
    total_points = sum(player.metrics.player_points for player in players)
    if total_value > rules.budget:
        errors.append(f"Insufficient budget: team costs {total_value}, budget is {rules.budget}")

    return TeamEvaluation(
        player_ids=[player.player_id for player in players],
        total_value=total_value,
        total_points=total_points,
        budget=rules.budget,
        remaining_budget=rules.budget - total_value,
        errors=errors,
    )
