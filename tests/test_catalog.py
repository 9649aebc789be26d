import csv
from datetime import datetime, timezone
from io import StringIO

import pytest

from spirit11.catalog import (
    PlayerFilter,
    evaluate_team,
    export_players_to_csv,
    filter_players,
    summarize_tournament,
)
from spirit11.catalog.export import EXPORT_HEADERS
from spirit11.config import TeamRules, get_rules
from spirit11.engine import compute_derived_metrics, normalize_category
from spirit11.ingest import ingest_batch, read_player_csv
from spirit11.models import Category, PerformanceStats, StoredPlayer


_NOW = datetime(2024, 3, 1, tzinfo=timezone.utc)


def _player(player_id: str, name: str, category: str = "Batsman", **stats) -> StoredPlayer:
    performance = PerformanceStats(**stats)
    return StoredPlayer(
        player_id=player_id,
        name=name,
        university="University of Colombo",
        category=normalize_category(category),
        stats=performance,
        metrics=compute_derived_metrics(performance),
        created_at=_NOW,
        updated_at=_NOW,
    )


@pytest.fixture
def players():
    return [
        _player("a", "Kasun", total_runs=450, balls_faced=300, innings_played=12),
        _player("b", "Nuwan", "Bowler", wickets=10, overs_bowled=40, runs_conceded=200, balls_faced=1, innings_played=1),
        _player("c", "amal", "All-rounder", total_runs=200, balls_faced=180, innings_played=8, wickets=10),
        _player("d", "Dilan"),
    ]


def test_filter_without_sort_keeps_order(players):
    selected = filter_players(players, PlayerFilter())

    assert [p.player_id for p in selected] == ["a", "b", "c", "d"]


def test_filter_by_category_and_value(players):
    bowlers = filter_players(players, PlayerFilter(category=Category.BOWLER))
    valuable = filter_players(players, PlayerFilter(min_value=510_000, max_value=600_000))

    assert [p.player_id for p in bowlers] == ["b"]
    assert [p.player_id for p in valuable] == ["b"]


def test_filter_search_is_case_insensitive(players):
    selected = filter_players(players, PlayerFilter(search="AM"))

    assert [p.player_id for p in selected] == ["c"]


def test_filter_search_folds_non_ascii_case():
    players = [_player("e", "ÉLODIE"), _player("f", "Kasun")]

    selected = filter_players(players, PlayerFilter(search="élodie"))

    assert [p.player_id for p in selected] == ["e"]


def test_sort_and_limit(players):
    by_points = filter_players(players, PlayerFilter(sort_by="points", limit=2))
    by_name = filter_players(players, PlayerFilter(sort_by="name", sort_direction="asc"))

    assert [p.player_id for p in by_points] == ["a", "b"]
    assert [p.name for p in by_name] == ["amal", "Dilan", "Kasun", "Nuwan"]


def test_sort_is_stable_for_ties(players):
    selected = filter_players(players, PlayerFilter(sort_by="wickets"))

    assert [p.player_id for p in selected] == ["b", "c", "a", "d"]


def test_unknown_sort_key_raises(players):
    with pytest.raises(ValueError, match="Unsupported sort key"):
        filter_players(players, PlayerFilter(sort_by="strike_rate"))  # type: ignore[arg-type]


def test_summary_totals_and_leaders(players):
    summary = summarize_tournament(players)

    assert summary.total_players == 4
    assert summary.total_runs == 650
    assert summary.total_wickets == 20
    assert summary.highest_run_scorer.name == "Kasun"
    assert summary.highest_run_scorer.value == 450
    # Tied on wickets; the first player seen leads.
    assert summary.highest_wicket_taker.name == "Nuwan"
    assert summary.category_counts == {"Batsman": 2, "Bowler": 1, "All-rounder": 1}


def test_summary_of_empty_catalog():
    summary = summarize_tournament([])

    assert summary.total_players == 0
    assert summary.highest_run_scorer is None
    assert summary.highest_wicket_taker is None


def test_summary_zero_stats_have_no_leader():
    summary = summarize_tournament([_player("x", "Zero")])

    assert summary.highest_run_scorer is None
    assert summary.highest_wicket_taker is None


def test_evaluate_team_within_budget(players):
    result = evaluate_team(players[:2], get_rules())

    assert result.is_valid
    assert result.total_value == 650_000 + 550_000
    assert result.remaining_budget == 9_000_000 - result.total_value
    assert result.total_points == pytest.approx(players[0].player_points + players[1].player_points)


def test_evaluate_team_reports_every_violation(players):
    rules = TeamRules(key="tight", squad_size=2, budget=1_000_000)

    result = evaluate_team([players[0], players[0], players[1]], rules)

    assert not result.is_valid
    assert result.errors == [
        "A team cannot have more than 2 players",
        "Duplicate players selected: a",
        "Insufficient budget: team costs 1850000, budget is 1000000",
    ]
    assert result.remaining_budget == -850_000


def test_export_round_trips_through_ingestion(players):
    text = export_players_to_csv(players)

    rows = list(csv.reader(StringIO(text)))
    assert tuple(rows[0]) == EXPORT_HEADERS
    assert rows[1][0] == "a"
    assert rows[1][10] == "150.00"
    assert rows[1][-1] == "650000"

    records, report = ingest_batch(read_player_csv(text))

    assert report.invalid_count == 0
    assert [record.metrics for record in records] == [player.metrics for player in players]
