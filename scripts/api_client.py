"""Lightweight REST client for the spirit11 API."""

from __future__ import annotations

import argparse
import json
from pathlib import Path

import httpx


def build_mapping(text: str) -> str | None:
    if not text:
        return None
    try:
        json.loads(text)
    except json.JSONDecodeError as exc:
        raise SystemExit(f"Invalid mapping JSON: {exc}") from exc
    return text


def main() -> None:
    parser = argparse.ArgumentParser(description="Interact with the spirit11 REST API")
    parser.add_argument("base_url", help="Base URL of the API, e.g. http://localhost:8000")
    parser.add_argument("players", type=Path, nargs="?", help="Players CSV to upload")
    parser.add_argument("--mapping", default="", help="JSON column mapping for the players CSV")
    parser.add_argument("--list-players", action="store_true", help="List players and exit")
    parser.add_argument("--category", help="Category filter for --list-players")
    parser.add_argument("--sort-by", default="points", help="Sort key for --list-players")
    parser.add_argument("--get-player", metavar="PLAYER_ID", help="Fetch a specific player and exit")
    parser.add_argument("--summary", action="store_true", help="Print the tournament summary and exit")
    parser.add_argument("--export-path", type=Path, help="Download the players CSV to this path and exit")
    args = parser.parse_args()

    with httpx.Client(base_url=args.base_url) as client:
        if args.list_players or args.get_player or args.summary or args.export_path:
            if args.list_players:
                params = {"sort_by": args.sort_by}
                if args.category:
                    params["category"] = args.category
                resp = client.get("/players", params=params)
                resp.raise_for_status()
                print(json.dumps(resp.json(), indent=2))
            if args.get_player:
                resp = client.get(f"/players/{args.get_player}")
                if resp.status_code == 404:
                    raise SystemExit(f"player {args.get_player} not found")
                resp.raise_for_status()
                print(json.dumps(resp.json(), indent=2))
            if args.summary:
                resp = client.get("/summary")
                resp.raise_for_status()
                print(json.dumps(resp.json(), indent=2))
            if args.export_path:
                resp = client.get("/players/export.csv")
                resp.raise_for_status()
                args.export_path.write_text(resp.text)
                print(f"CSV export saved to {args.export_path}")
            return

        if args.players is None:
            raise SystemExit("players file is required unless using --list-players/--get-player/--summary")

        files = {"players": (args.players.name, args.players.read_bytes(), "text/csv")}
        data = {}
        mapping = build_mapping(args.mapping)
        if mapping:
            data["mapping"] = mapping
        resp = client.post("/players/upload", files=files, data=data)
        if resp.status_code == 400:
            raise SystemExit(f"upload rejected: {resp.json().get('detail')}")
        resp.raise_for_status()
        payload = resp.json()
        print(payload["message"])
        for invalid in payload.get("invalidPlayers", []):
            print(f"  row {invalid['index'] + 1}: {invalid['error']}")


if __name__ == "__main__":
    main()
