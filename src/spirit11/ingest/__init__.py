"""Input adapters that normalize raw player data."""

from .players import (
    DEFAULT_FIELD_ALIASES,
    STAT_FIELDS,
    IngestReport,
    IngestResult,
    InvalidRow,
    PlayerRow,
    coerce_stats,
    find_negative_stats,
    ingest_batch,
    ingest_performance_record,
    load_player_csv,
    load_records_from_csv,
    normalize_update,
    read_player_csv,
    resolve_mapping,
)

__all__ = [
    "DEFAULT_FIELD_ALIASES",
    "STAT_FIELDS",
    "IngestReport",
    "IngestResult",
    "InvalidRow",
    "PlayerRow",
    "coerce_stats",
    "find_negative_stats",
    "ingest_batch",
    "ingest_performance_record",
    "load_player_csv",
    "load_records_from_csv",
    "normalize_update",
    "read_player_csv",
    "resolve_mapping",
]
