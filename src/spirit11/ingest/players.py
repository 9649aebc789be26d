"""Helpers to map loosely shaped player rows onto canonical records."""

from __future__ import annotations

import csv
import logging
import math
import multiprocessing as mp
import os
from dataclasses import dataclass, field
from functools import partial
from io import StringIO
from pathlib import Path
from typing import Any, Dict, Iterable, List, Mapping, Optional, Sequence, Tuple, Union

from pydantic import BaseModel

from spirit11.engine import coerce_float, coerce_int, compute_derived_metrics, normalize_category
from spirit11.models import PerformanceStats, PlayerRecord


logger = logging.getLogger(__name__)

_INGEST_WORKERS_ENV = "SPIRIT11_INGEST_WORKERS"
_PARALLEL_MIN_ROWS_ENV = "SPIRIT11_PARALLEL_MIN_ROWS"
_PARALLEL_MIN_ROWS_DEFAULT = 500

REQUIRED_FIELDS: Tuple[str, ...] = ("name", "university", "category")
STAT_FIELDS: Tuple[str, ...] = (
    "total_runs",
    "balls_faced",
    "innings_played",
    "wickets",
    "overs_bowled",
    "runs_conceded",
)

# Human-readable CSV headers are tried before camelCase keys.
DEFAULT_FIELD_ALIASES: Dict[str, Tuple[str, ...]] = {
    "name": ("Name", "name"),
    "university": ("University", "university"),
    "category": ("Category", "category"),
    "total_runs": ("Total Runs", "totalRuns", "total_runs"),
    "balls_faced": ("Balls Faced", "ballsFaced", "balls_faced"),
    "innings_played": ("Innings Played", "inningsPlayed", "innings_played"),
    "wickets": ("Wickets", "wickets"),
    "overs_bowled": ("Overs Bowled", "oversBowled", "overs_bowled"),
    "runs_conceded": ("Runs Conceded", "runsConceded", "runs_conceded"),
}

AliasSpec = Union[str, Sequence[str]]


def _env_int(name: str, default: int, *, min_value: int | None = None) -> int:
    raw = os.getenv(name)
    if raw is None:
        return default
    try:
        value = int(raw)
    except ValueError:
        logger.warning("Invalid int for %s: %s; using default %d", name, raw, default)
        return default
    if min_value is not None:
        value = max(min_value, value)
    return value


def _parse_spec(key: str, spec: Any) -> Tuple[str, ...]:
    if isinstance(spec, str):
        return tuple(part.strip() for part in spec.split("|") if part.strip())
    if isinstance(spec, (list, tuple)) and all(isinstance(part, str) for part in spec):
        return tuple(spec)
    raise ValueError(f"Invalid alias for '{key}'")


def resolve_mapping(mapping: Mapping[str, AliasSpec] | None = None) -> Dict[str, Tuple[str, ...]]:
    """Overlay per-field alias overrides on :data:`DEFAULT_FIELD_ALIASES`."""

    resolved = dict(DEFAULT_FIELD_ALIASES)
    for key, spec in (mapping or {}).items():
        if key not in resolved:
            raise ValueError(f"Unknown player field '{key}'")
        aliases = _parse_spec(key, spec)
        if aliases:
            resolved[key] = aliases
    return resolved


def _present(value: Any) -> bool:
    if value is None or isinstance(value, bool):
        return bool(value)
    if isinstance(value, str):
        return value != ""
    if isinstance(value, float):
        return not math.isnan(value) and value != 0
    if isinstance(value, int):
        return value != 0
    return True


def coerce_stats(values: Mapping[str, Any]) -> PerformanceStats:
    """Coerce raw stat values for storage; anything missing becomes 0."""

    return PerformanceStats(
        total_runs=coerce_int(values.get("total_runs")),
        balls_faced=coerce_int(values.get("balls_faced")),
        innings_played=coerce_int(values.get("innings_played")),
        wickets=coerce_int(values.get("wickets")),
        overs_bowled=coerce_float(values.get("overs_bowled")),
        runs_conceded=coerce_int(values.get("runs_conceded")),
    )


def find_negative_stats(stats: PerformanceStats) -> List[str]:
    """Aliases of stats below zero, for callers that enforce non-negativity."""

    return [
        PerformanceStats.model_fields[key].alias or key
        for key in STAT_FIELDS
        if getattr(stats, key) < 0
    ]


class PlayerRow(BaseModel):
    raw_name: Optional[str] = None
    raw_university: Optional[str] = None
    raw_category: Optional[str] = None
    raw_total_runs: Any = None
    raw_balls_faced: Any = None
    raw_innings_played: Any = None
    raw_wickets: Any = None
    raw_overs_bowled: Any = None
    raw_runs_conceded: Any = None

    @classmethod
    def from_mapping(
        cls,
        row: Mapping[str, Any],
        mapping: Mapping[str, AliasSpec] | None = None,
    ) -> "PlayerRow":
        aliases = resolve_mapping(mapping)

        def extract(key: str) -> Any:
            # First alias carrying a truthy value wins; falsy values fall through.
            for alias in aliases[key]:
                value = row.get(alias)
                if _present(value):
                    return value
            return None

        def text(key: str) -> Optional[str]:
            value = extract(key)
            return None if value is None else str(value)

        return cls(
            raw_name=text("name"),
            raw_university=text("university"),
            raw_category=text("category"),
            raw_total_runs=extract("total_runs"),
            raw_balls_faced=extract("balls_faced"),
            raw_innings_played=extract("innings_played"),
            raw_wickets=extract("wickets"),
            raw_overs_bowled=extract("overs_bowled"),
            raw_runs_conceded=extract("runs_conceded"),
        )

    def missing_fields(self) -> List[str]:
        missing = []
        for key in REQUIRED_FIELDS:
            value = getattr(self, f"raw_{key}")
            if value is None or not value.strip():
                missing.append(key)
        return missing

    def to_stats(self) -> PerformanceStats:
        return coerce_stats({key: getattr(self, f"raw_{key}") for key in STAT_FIELDS})


@dataclass(frozen=True)
class IngestResult:
    is_valid: bool
    error: Optional[str] = None
    record: Optional[PlayerRecord] = None


@dataclass(frozen=True)
class InvalidRow:
    index: int
    data: Dict[str, Any]
    error: str


@dataclass(frozen=True)
class IngestReport:
    total_rows: int
    valid_rows: int
    invalid_rows: List[InvalidRow] = field(default_factory=list)

    @property
    def invalid_count(self) -> int:
        return len(self.invalid_rows)


def ingest_performance_record(
    raw: Mapping[str, Any],
    *,
    mapping: Mapping[str, AliasSpec] | None = None,
    reject_negative: bool = False,
) -> IngestResult:
    """Validate one raw player row and score it.

    Missing identity fields are reported as a failed :class:`IngestResult`
    rather than raised, so batch callers can keep going. Negative stats are
    accepted unless ``reject_negative`` is set.
    """

    row = PlayerRow.from_mapping(raw, mapping)
    missing = row.missing_fields()
    if missing:
        return IngestResult(is_valid=False, error=f"Missing required fields: {', '.join(missing)}")

    stats = row.to_stats()
    if reject_negative:
        negative = find_negative_stats(stats)
        if negative:
            return IngestResult(is_valid=False, error=f"{negative[0]} cannot be negative")

    record = PlayerRecord(
        name=row.raw_name.strip(),
        university=row.raw_university.strip(),
        category=normalize_category(row.raw_category),
        stats=stats,
        metrics=compute_derived_metrics(stats),
    )
    return IngestResult(is_valid=True, record=record)


def _ingest_parallel(
    rows: Sequence[Mapping[str, Any]],
    mapping: Mapping[str, AliasSpec],
    workers: int,
    reject_negative: bool,
) -> List[IngestResult]:
    ctx = mp.get_context("spawn")
    chunksize = max(1, len(rows) // (workers * 4))
    worker = partial(ingest_performance_record, mapping=mapping, reject_negative=reject_negative)
    with ctx.Pool(processes=workers) as pool:
        return pool.map(worker, rows, chunksize=chunksize)


def ingest_batch(
    rows: Iterable[Mapping[str, Any]],
    *,
    mapping: Mapping[str, AliasSpec] | None = None,
    workers: int | None = None,
    min_parallel_rows: int | None = None,
    reject_negative: bool = False,
) -> Tuple[List[PlayerRecord], IngestReport]:
    """Ingest independent rows, collecting failures instead of aborting."""

    rows = [dict(row) for row in rows]
    resolved = resolve_mapping(mapping)
    if workers is None:
        workers = _env_int(_INGEST_WORKERS_ENV, 1, min_value=1)
    if min_parallel_rows is None:
        min_parallel_rows = _env_int(_PARALLEL_MIN_ROWS_ENV, _PARALLEL_MIN_ROWS_DEFAULT, min_value=1)

    if workers > 1 and len(rows) >= min_parallel_rows:
        logger.debug("Ingesting %d rows across %d workers", len(rows), workers)
        results = _ingest_parallel(rows, resolved, workers, reject_negative)
    else:
        results = [
            ingest_performance_record(row, mapping=resolved, reject_negative=reject_negative)
            for row in rows
        ]

    records: List[PlayerRecord] = []
    invalid_rows: List[InvalidRow] = []
    for index, (row, result) in enumerate(zip(rows, results)):
        if result.is_valid and result.record is not None:
            records.append(result.record)
            continue
        logger.debug("Skipping player row %d: %s", index, result.error)
        invalid_rows.append(InvalidRow(index=index, data=row, error=result.error or "Invalid row"))

    logger.info("Ingested %d/%d player rows", len(records), len(rows))
    report = IngestReport(total_rows=len(rows), valid_rows=len(records), invalid_rows=invalid_rows)
    return records, report


def _clean_row(row: Mapping[Optional[str], Any]) -> Dict[str, Any]:
    cleaned: Dict[str, Any] = {}
    for key, value in row.items():
        if key is None:
            continue
        cleaned[key.strip()] = value.strip() if isinstance(value, str) else value
    return cleaned


def read_player_csv(text: str) -> List[Dict[str, Any]]:
    reader = csv.DictReader(StringIO(text.lstrip("\ufeff")))
    return [_clean_row(row) for row in reader]


def load_player_csv(path: Path) -> List[Dict[str, Any]]:
    with path.open(newline="", encoding="utf-8-sig") as f:
        reader = csv.DictReader(f)
        return [_clean_row(row) for row in reader]


def load_records_from_csv(
    path: Path,
    *,
    mapping: Mapping[str, AliasSpec] | None = None,
    workers: int | None = None,
) -> Tuple[List[PlayerRecord], IngestReport]:
    return ingest_batch(load_player_csv(path), mapping=mapping, workers=workers)


def normalize_update(
    changes: Mapping[str, Any],
    *,
    mapping: Mapping[str, AliasSpec] | None = None,
) -> Dict[str, Any]:
    """Map a partial update onto canonical field names.

    Unlike row ingestion, an explicit zero or empty value is kept so updates
    can clear a stat. Keys that are not raw fields (derived metrics, ids) are
    dropped.
    """

    aliases = resolve_mapping(mapping)
    normalized: Dict[str, Any] = {}
    for key, candidates in aliases.items():
        for alias in candidates:
            if alias in changes and changes[alias] is not None:
                normalized[key] = changes[alias]
                break
    return normalized
