"""Canonical player models shared across ingestion, storage and the API."""

from __future__ import annotations

from datetime import datetime
from enum import Enum
from typing import Any, Dict

from pydantic import BaseModel, Field
from pydantic.config import ConfigDict


class Category(str, Enum):
    BATSMAN = "Batsman"
    BOWLER = "Bowler"
    ALL_ROUNDER = "All-rounder"


class PerformanceStats(BaseModel):
    """Raw counting statistics for one player."""

    total_runs: int = Field(default=0, alias="totalRuns")
    balls_faced: int = Field(default=0, alias="ballsFaced")
    innings_played: int = Field(default=0, alias="inningsPlayed")
    wickets: int = Field(default=0, alias="wickets")
    overs_bowled: float = Field(default=0.0, alias="oversBowled")
    runs_conceded: int = Field(default=0, alias="runsConceded")

    model_config = ConfigDict(frozen=True, populate_by_name=True)


class DerivedMetrics(BaseModel):
    """Metrics computed from :class:`PerformanceStats` by the stats engine."""

    batting_strike_rate: float = Field(default=0.0, alias="battingStrikeRate")
    batting_average: float = Field(default=0.0, alias="battingAverage")
    bowling_strike_rate: float = Field(default=0.0, alias="bowlingStrikeRate")
    economy_rate: float = Field(default=0.0, alias="economyRate")
    player_points: float = Field(default=0.0, alias="playerPoints")
    player_value: int = Field(default=0, alias="playerValue")

    model_config = ConfigDict(frozen=True, populate_by_name=True)


class PlayerRecord(BaseModel):
    """Identity, raw statistics and derived metrics of a player."""

    name: str = Field(..., min_length=1)
    university: str = Field(..., min_length=1)
    category: Category
    stats: PerformanceStats = Field(default_factory=PerformanceStats)
    metrics: DerivedMetrics = Field(default_factory=DerivedMetrics)

    model_config = ConfigDict(frozen=True)

    @property
    def player_points(self) -> float:
        return self.metrics.player_points

    @property
    def player_value(self) -> int:
        return self.metrics.player_value

    def to_document(self) -> Dict[str, Any]:
        """Flatten into the single camelCase record that gets persisted."""

        document: Dict[str, Any] = {
            "name": self.name,
            "university": self.university,
            "category": self.category.value,
        }
        document.update(self.stats.model_dump(by_alias=True))
        document.update(self.metrics.model_dump(by_alias=True))
        return document

    @classmethod
    def from_document(cls, document: Dict[str, Any]) -> "PlayerRecord":
        return cls(
            name=document["name"],
            university=document["university"],
            category=Category(document["category"]),
            stats=PerformanceStats.model_validate(document),
            metrics=DerivedMetrics.model_validate(document),
        )


class StoredPlayer(PlayerRecord):
    """A persisted player with its store-assigned identity."""

    player_id: str = Field(..., min_length=1)
    created_at: datetime
    updated_at: datetime

    def to_document(self) -> Dict[str, Any]:
        document = super().to_document()
        document["id"] = self.player_id
        document["createdAt"] = self.created_at.isoformat()
        document["updatedAt"] = self.updated_at.isoformat()
        return document
