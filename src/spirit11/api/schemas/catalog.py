from __future__ import annotations

from typing import Dict, List

from pydantic import BaseModel, Field
from pydantic.config import ConfigDict


class StatLeaderResponse(BaseModel):
    name: str
    university: str
    value: int


class TournamentSummaryResponse(BaseModel):
    total_players: int = Field(alias="totalPlayers")
    total_runs: int = Field(alias="totalRuns")
    total_wickets: int = Field(alias="totalWickets")
    highest_run_scorer: StatLeaderResponse | None = Field(default=None, alias="highestRunScorer")
    highest_wicket_taker: StatLeaderResponse | None = Field(default=None, alias="highestWicketTaker")
    category_counts: Dict[str, int] = Field(default_factory=dict, alias="categoryCounts")

    model_config = ConfigDict(populate_by_name=True)


class TeamEvaluationRequest(BaseModel):
    player_ids: List[str] = Field(default_factory=list, alias="playerIds")
    rules: str = Field(default="default")

    model_config = ConfigDict(populate_by_name=True)


class TeamEvaluationResponse(BaseModel):
    player_ids: List[str] = Field(alias="playerIds")
    total_value: int = Field(alias="totalValue")
    total_points: float = Field(alias="totalPoints")
    budget: int
    remaining_budget: int = Field(alias="remainingBudget")
    is_valid: bool = Field(alias="isValid")
    errors: List[str] = Field(default_factory=list)

    model_config = ConfigDict(populate_by_name=True)
