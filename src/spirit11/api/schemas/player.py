from __future__ import annotations

from datetime import datetime
from typing import Any, List

from pydantic import BaseModel, Field
from pydantic.config import ConfigDict

from spirit11.models import Category, StoredPlayer


class PlayerResponse(BaseModel):
    player_id: str = Field(alias="id")
    name: str
    university: str
    category: Category
    total_runs: int = Field(alias="totalRuns")
    balls_faced: int = Field(alias="ballsFaced")
    innings_played: int = Field(alias="inningsPlayed")
    wickets: int
    overs_bowled: float = Field(alias="oversBowled")
    runs_conceded: int = Field(alias="runsConceded")
    batting_strike_rate: float = Field(alias="battingStrikeRate")
    batting_average: float = Field(alias="battingAverage")
    bowling_strike_rate: float = Field(alias="bowlingStrikeRate")
    economy_rate: float = Field(alias="economyRate")
    player_points: float = Field(alias="playerPoints")
    player_value: int = Field(alias="playerValue")
    created_at: datetime = Field(alias="createdAt")
    updated_at: datetime = Field(alias="updatedAt")

    model_config = ConfigDict(populate_by_name=True)

    @classmethod
    def from_player(cls, player: StoredPlayer) -> "PlayerResponse":
        return cls.model_validate(player.to_document())


class InvalidPlayerResponse(BaseModel):
    index: int
    data: Any
    error: str


class BatchIngestResponse(BaseModel):
    message: str
    added_count: int = Field(alias="addedCount")
    invalid_count: int = Field(alias="invalidCount")
    players: List[PlayerResponse] = Field(default_factory=list)
    invalid_players: List[InvalidPlayerResponse] = Field(default_factory=list, alias="invalidPlayers")

    model_config = ConfigDict(populate_by_name=True)
