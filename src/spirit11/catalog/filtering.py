"""Helpers for slicing the player catalog by common metrics."""

from __future__ import annotations

from dataclasses import dataclass
from typing import Callable, Dict, List, Literal, Sequence, TypeVar

from spirit11.models import Category, PlayerRecord


PlayerT = TypeVar("PlayerT", bound=PlayerRecord)

SortKey = Literal["points", "value", "name", "runs", "wickets"]

_SORT_KEYS: Dict[str, Callable[[PlayerRecord], object]] = {
    "points": lambda player: player.metrics.player_points,
    "value": lambda player: player.metrics.player_value,
    "name": lambda player: player.name.casefold(),
    "runs": lambda player: player.stats.total_runs,
    "wickets": lambda player: player.stats.wickets,
}


@dataclass(frozen=True)
class PlayerFilter:
    """Filtering configuration for player listings."""

    search: str | None = None
    category: Category | None = None
    min_value: int | None = None
    max_value: int | None = None
    min_points: float | None = None
    sort_by: SortKey | None = None
    sort_direction: Literal["asc", "desc"] = "desc"
    limit: int | None = None


def _passes_criteria(player: PlayerRecord, criteria: PlayerFilter) -> bool:
    if criteria.search and criteria.search.casefold() not in player.name.casefold():
        return False
    if criteria.category is not None and player.category != criteria.category:
        return False
    value = player.metrics.player_value
    if criteria.min_value is not None and value < criteria.min_value:
        return False
    if criteria.max_value is not None and value > criteria.max_value:
        return False
    if criteria.min_points is not None and player.metrics.player_points < criteria.min_points:
        return False
    return True


def filter_players(players: Sequence[PlayerT], criteria: PlayerFilter) -> List[PlayerT]:
    """Return players matching ``criteria``, optionally sorted and truncated.

    Without ``sort_by`` the input order is kept.
    """

    selected = [player for player in players if _passes_criteria(player, criteria)]
    if criteria.sort_by is not None:
        if criteria.sort_by not in _SORT_KEYS:
            raise ValueError(f"Unsupported sort key '{criteria.sort_by}'")
        selected.sort(
            key=_SORT_KEYS[criteria.sort_by],
            reverse=criteria.sort_direction == "desc",
        )
    if criteria.limit is not None:
        selected = selected[: max(0, criteria.limit)]
    return selected
