"""Command-line interface for scoring player statistics from CSV."""

from __future__ import annotations

import argparse
import json
import logging
from pathlib import Path

from spirit11.catalog import export_players_to_csv, summarize_tournament
from spirit11.config_loader import MappingProfile
from spirit11.ingest import load_records_from_csv
from spirit11.persistence import PlayerStore


def _parse_args(argv: list[str] | None = None) -> argparse.Namespace:
    parser = argparse.ArgumentParser(description="Score cricket player statistics for fantasy selection")
    parser.add_argument("players", type=Path, help="Path to players CSV")
    parser.add_argument(
        "--column",
        action="append",
        default=[],
        help="Column alias for a player field (e.g., total_runs=Runs or name=Player|Name)",
    )
    parser.add_argument("--load-profile", type=Path, help="Load column mapping JSON", default=None)
    parser.add_argument("--save-profile", type=Path, help="Save column mapping JSON", default=None)
    parser.add_argument("--output", type=Path, default=Path("scored_players.csv"), help="Output CSV path")
    parser.add_argument(
        "--report",
        type=Path,
        default=None,
        help="Optional path to write ingestion summary JSON",
    )
    parser.add_argument(
        "--db",
        type=Path,
        default=None,
        help="Store valid players in this SQLite database",
    )
    parser.add_argument(
        "--workers",
        type=int,
        default=None,
        help="Worker processes for large files (default from SPIRIT11_INGEST_WORKERS)",
    )
    parser.add_argument("--verbose", action="store_true", help="Log skipped rows")
    return parser.parse_args(argv)


def _parse_mapping(entries: list[str]) -> dict[str, str]:
    mapping: dict[str, str] = {}
    for entry in entries:
        if "=" not in entry:
            raise ValueError(f"Invalid mapping entry '{entry}', expected key=value")
        key, value = entry.split("=", 1)
        mapping[key.strip()] = value.strip()
    return mapping


def main(argv: list[str] | None = None) -> None:
    args = _parse_args(argv)
    logging.basicConfig(
        level=logging.DEBUG if args.verbose else logging.WARNING,
        format="%(levelname)s %(name)s: %(message)s",
    )

    mapping = _parse_mapping(args.column)
    if args.load_profile:
        profile = MappingProfile.load(args.load_profile)
        mapping = profile.column_mapping | mapping
    if args.save_profile:
        MappingProfile(mapping).save(args.save_profile)
        print(f"Saved mapping profile to {args.save_profile}")

    if not args.players.exists():
        raise SystemExit(f"Players file not found: {args.players}")

    records, report = load_records_from_csv(args.players, mapping=mapping or None, workers=args.workers)
    print(f"Scored {report.valid_rows}/{report.total_rows} players")

    if report.invalid_rows:
        preview = ", ".join(f"row {row.index + 1}: {row.error}" for row in report.invalid_rows[:5])
        more = report.invalid_count - 5
        suffix = f", +{more} more" if more > 0 else ""
        print(f"Skipped rows: {preview}{suffix}")

    if args.report:
        summary = summarize_tournament(records)
        report_payload = {
            "total_rows": report.total_rows,
            "valid_rows": report.valid_rows,
            "invalid_rows": [
                {"index": row.index, "error": row.error, "data": row.data}
                for row in report.invalid_rows
            ],
            "total_runs": summary.total_runs,
            "total_wickets": summary.total_wickets,
            "category_counts": summary.category_counts,
        }
        args.report.write_text(json.dumps(report_payload, indent=2), encoding="utf-8")
        print(f"Wrote ingestion report to {args.report}")

    players = records
    if args.db:
        players = PlayerStore(args.db).add_players(records)
        print(f"Stored {len(players)} players in {args.db}")

    args.output.write_text(export_players_to_csv(players), encoding="utf-8", newline="")
    print(f"Wrote scored players to {args.output}")


if __name__ == "__main__":
    main()
