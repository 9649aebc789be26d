"""Catalog utilities (filtering, summaries, team checks, export)."""

from .export import export_players_to_csv
from .filtering import PlayerFilter, filter_players
from .summary import StatLeader, TournamentSummary, summarize_tournament
from .team import TeamEvaluation, evaluate_team

__all__ = [
    "PlayerFilter",
    "StatLeader",
    "TeamEvaluation",
    "TournamentSummary",
    "evaluate_team",
    "export_players_to_csv",
    "filter_players",
    "summarize_tournament",
]
