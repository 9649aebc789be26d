import math

import pytest

from spirit11.engine import (
    batting_points,
    bowling_points,
    compute_derived_metrics,
    normalize_category,
    player_value_from_points,
)
from spirit11.engine.stats import parse_float, parse_int
from spirit11.models import Category, PerformanceStats


def _stats(**overrides):
    values = {
        "totalRuns": 0,
        "ballsFaced": 0,
        "inningsPlayed": 0,
        "wickets": 0,
        "oversBowled": 0,
        "runsConceded": 0,
    }
    values.update(overrides)
    return values


def _fields(metrics):
    return [
        metrics.batting_strike_rate,
        metrics.batting_average,
        metrics.bowling_strike_rate,
        metrics.economy_rate,
        metrics.player_points,
        metrics.player_value,
    ]


def test_pure_batter_scenario():
    metrics = compute_derived_metrics(
        _stats(totalRuns=450, ballsFaced=300, inningsPlayed=12)
    )

    assert metrics.batting_strike_rate == pytest.approx(150.0)
    assert metrics.batting_average == pytest.approx(37.5)
    assert metrics.bowling_strike_rate == 0
    assert metrics.economy_rate == 0
    assert metrics.player_points == pytest.approx(60.0)
    assert metrics.player_value == 650_000


def test_all_zero_input_scenario():
    metrics = compute_derived_metrics(_stats())

    assert metrics.batting_strike_rate == 0
    assert metrics.batting_average == 0
    assert metrics.bowling_strike_rate == 0
    assert metrics.economy_rate == 0
    assert metrics.player_points == 0
    assert metrics.player_value == 100_000


def test_pure_bowler_scenario():
    metrics = compute_derived_metrics(
        _stats(wickets=10, oversBowled=40, runsConceded=200, ballsFaced=1, inningsPlayed=1)
    )

    assert metrics.bowling_strike_rate == pytest.approx(24.0)
    assert metrics.economy_rate == pytest.approx(30.0)
    assert bowling_points(metrics) == pytest.approx(500 / 24)
    assert batting_points(metrics) == 0
    assert metrics.player_points == pytest.approx(50.8333, abs=1e-4)
    assert metrics.player_value == 550_000


def test_accepts_performance_stats_model():
    stats = PerformanceStats(total_runs=450, balls_faced=300, innings_played=12)

    assert compute_derived_metrics(stats) == compute_derived_metrics(
        _stats(totalRuns=450, ballsFaced=300, inningsPlayed=12)
    )


def test_accepts_snake_case_keys():
    metrics = compute_derived_metrics({"total_runs": 450, "balls_faced": 300, "innings_played": 12})

    assert metrics.player_value == 650_000


def test_accepts_csv_header_keys():
    metrics = compute_derived_metrics({"Total Runs": 450, "Balls Faced": 300, "Innings Played": 12})

    assert metrics.batting_strike_rate == pytest.approx(150.0)
    assert metrics.player_value == 650_000


def test_csv_header_bowling_keys():
    metrics = compute_derived_metrics(
        {"Wickets": "10", "Overs Bowled": "40", "Runs Conceded": "200", "Balls Faced": "1", "Innings Played": "1"}
    )

    assert metrics.bowling_strike_rate == pytest.approx(24.0)
    assert metrics.economy_rate == pytest.approx(30.0)
    assert metrics.player_value == 550_000


def test_empty_header_value_falls_through_to_camel_case():
    metrics = compute_derived_metrics({"Total Runs": "", "totalRuns": 450, "Balls Faced": 0, "ballsFaced": 300})

    assert metrics.batting_strike_rate == pytest.approx(150.0)


def test_determinism():
    record = _stats(totalRuns=317, ballsFaced=260, inningsPlayed=9, wickets=7, oversBowled=31.4, runsConceded=240)

    assert compute_derived_metrics(record) == compute_derived_metrics(dict(record))


def test_zero_denominators_default_to_one():
    metrics = compute_derived_metrics(_stats(totalRuns=30, ballsFaced=0, inningsPlayed=0))

    assert metrics.batting_strike_rate == pytest.approx(3000.0)
    assert metrics.batting_average == pytest.approx(30.0)


def test_missing_fields_default_like_zero():
    assert compute_derived_metrics({}) == compute_derived_metrics(_stats())


def test_zero_wickets_gate_bowling_strike_rate():
    metrics = compute_derived_metrics(_stats(wickets=0, oversBowled=25, runsConceded=150))

    assert metrics.bowling_strike_rate == 0
    assert bowling_points(metrics) == 0
    assert metrics.economy_rate == pytest.approx(36.0)


def test_zero_overs_gate_economy():
    metrics = compute_derived_metrics(_stats(wickets=3, oversBowled=0, runsConceded=90))

    assert metrics.economy_rate == 0
    # Wickets without overs still gate through a zero strike rate.
    assert metrics.bowling_strike_rate == 0
    assert bowling_points(metrics) == 0


@pytest.mark.parametrize(
    "record",
    [
        _stats(),
        _stats(totalRuns=10**400, ballsFaced=1),
        _stats(wickets=10**400, oversBowled=5),
        _stats(runsConceded=10**400, oversBowled=2),
        _stats(oversBowled="1e999", runsConceded=20, wickets=2),
        _stats(totalRuns=float("nan"), ballsFaced=float("inf")),
        _stats(totalRuns="lots", ballsFaced=None, wickets=True),
        _stats(totalRuns=-40, ballsFaced=-8, wickets=-1, oversBowled=-3),
    ],
)
def test_results_are_always_finite(record):
    metrics = compute_derived_metrics(record)

    assert all(math.isfinite(value) for value in _fields(metrics))
    assert metrics.player_value % 50_000 == 0


def test_overflowing_runs_are_zero_filled():
    metrics = compute_derived_metrics(_stats(totalRuns=10**400, ballsFaced=1))

    assert metrics.batting_strike_rate == 0
    assert metrics.batting_average == 0
    assert metrics.player_points == 0
    assert metrics.player_value == 0


def test_garbage_values_count_as_missing():
    metrics = compute_derived_metrics(_stats(totalRuns="n/a", ballsFaced="", inningsPlayed="?"))

    assert metrics == compute_derived_metrics(_stats())


def test_numeric_prefix_parsing():
    metrics = compute_derived_metrics(_stats(totalRuns="450 runs", ballsFaced="300.9", inningsPlayed=" 12 "))

    assert metrics.batting_strike_rate == pytest.approx(150.0)
    assert metrics.batting_average == pytest.approx(37.5)


def test_negative_inputs_are_not_rejected():
    metrics = compute_derived_metrics(_stats(totalRuns=100, ballsFaced=-50))

    assert metrics.batting_strike_rate == pytest.approx(-200.0)


@pytest.mark.parametrize(
    ("value", "expected"),
    [
        ("12.9", 12),
        ("7abc", 7),
        (" 42 ", 42),
        ("-5", -5),
        (3.7, 3),
        ("abc", None),
        ("", None),
        (None, None),
        (True, None),
        (float("nan"), None),
    ],
)
def test_parse_int(value, expected):
    assert parse_int(value) == expected


@pytest.mark.parametrize(
    ("value", "expected"),
    [
        ("40.5 overs", 40.5),
        (".5", 0.5),
        ("1e3", 1000.0),
        (12, 12.0),
        ("1e999", None),
        (float("inf"), None),
        ("overs", None),
        (False, None),
    ],
)
def test_parse_float(value, expected):
    assert parse_float(value) == expected


@pytest.mark.parametrize(
    ("points", "expected"),
    [
        (0.0, 100_000),
        (60.0, 650_000),
        # 9 * 2.5 + 100 = 122.5 -> 2.45 increments, rounds down
        (2.5, 100_000),
        # 9 * 25 + 100 = 325 -> 6.5 increments, rounds half up
        (25.0, 350_000),
        (float("nan"), 0),
        (float("inf"), 0),
    ],
)
def test_player_value_rounding(points, expected):
    assert player_value_from_points(points) == expected


@pytest.mark.parametrize(
    ("raw", "expected"),
    [
        ("Batsman", Category.BATSMAN),
        ("  BATTER ", Category.BATSMAN),
        ("bowler", Category.BOWLER),
        ("Fast Bowling", Category.BOWLER),
        ("All-Rounder", Category.ALL_ROUNDER),
        ("rounder", Category.ALL_ROUNDER),
        ("all", Category.ALL_ROUNDER),
        ("Batting all-rounder", Category.BATSMAN),
        ("Bowling allrounder", Category.BOWLER),
        ("wicketkeeper", Category.BATSMAN),
        ("", Category.BATSMAN),
        (None, Category.BATSMAN),
    ],
)
def test_normalize_category(raw, expected):
    assert normalize_category(raw) is expected
