"""Pydantic models for API I/O."""

from .catalog import (
    StatLeaderResponse,
    TeamEvaluationRequest,
    TeamEvaluationResponse,
    TournamentSummaryResponse,
)
from .player import BatchIngestResponse, InvalidPlayerResponse, PlayerResponse

__all__ = [
    "BatchIngestResponse",
    "InvalidPlayerResponse",
    "PlayerResponse",
    "StatLeaderResponse",
    "TeamEvaluationRequest",
    "TeamEvaluationResponse",
    "TournamentSummaryResponse",
]
