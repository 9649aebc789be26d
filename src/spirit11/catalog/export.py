"""CSV export helpers for the player catalog."""

from __future__ import annotations

import csv
from io import StringIO
from typing import Sequence

from spirit11.models import PlayerRecord, StoredPlayer


# Raw columns reuse the ingestion headers so an export can be re-imported.
EXPORT_HEADERS: tuple[str, ...] = (
    "Id",
    "Name",
    "University",
    "Category",
    "Total Runs",
    "Balls Faced",
    "Innings Played",
    "Wickets",
    "Overs Bowled",
    "Runs Conceded",
    "Batting Strike Rate",
    "Batting Average",
    "Bowling Strike Rate",
    "Economy Rate",
    "Player Points",
    "Player Value",
)


def _format_rate(value: float) -> str:
    return f"{value:.2f}"


def export_players_to_csv(players: Sequence[PlayerRecord]) -> str:
    """Render players, raw and derived fields, as CSV text."""

    buffer = StringIO()
    writer = csv.writer(buffer)
    writer.writerow(EXPORT_HEADERS)
    for player in players:
        stats = player.stats
        metrics = player.metrics
        writer.writerow([
            player.player_id if isinstance(player, StoredPlayer) else "",
            player.name,
            player.university,
            player.category.value,
            stats.total_runs,
            stats.balls_faced,
            stats.innings_played,
            stats.wickets,
            stats.overs_bowled,
            stats.runs_conceded,
            _format_rate(metrics.batting_strike_rate),
            _format_rate(metrics.batting_average),
            _format_rate(metrics.bowling_strike_rate),
            _format_rate(metrics.economy_rate),
            _format_rate(metrics.player_points),
            metrics.player_value,
        ])
    return buffer.getvalue()


__all__ = [
    "EXPORT_HEADERS",
    "export_players_to_csv",
]
