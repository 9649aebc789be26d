"""Persistence layer for the player catalog."""

from __future__ import annotations

import json
import logging
import os
import sqlite3
import tempfile
from datetime import datetime, timezone
from pathlib import Path
from typing import Any, Iterable, List, Mapping, Optional
from uuid import uuid4

from spirit11.catalog import PlayerFilter, filter_players
from spirit11.engine import compute_derived_metrics, normalize_category
from spirit11.ingest import STAT_FIELDS, coerce_stats, normalize_update
from spirit11.models import Category, PlayerRecord, StoredPlayer


logger = logging.getLogger(__name__)

_DB_PATH_ENV = "SPIRIT11_DB_PATH"
_RECORD_FIELDS = {"name", "university", "category", "stats", "metrics"}


class PlayerStore:
    """Simple SQLite-backed store for scored players."""

    def __init__(self, db_path: Path | str):
        self._use_uri = False
        env_db = os.getenv(_DB_PATH_ENV)
        if env_db:
            if env_db.startswith("file:"):
                self.db_path = env_db
                self._use_uri = True
            else:
                self.db_path = Path(env_db)
        elif isinstance(db_path, str) and db_path.startswith("file:"):
            self.db_path = db_path
            self._use_uri = True
        else:
            self.db_path = Path(db_path)
        self._ensure_schema()

    def _connect(self) -> sqlite3.Connection:
        if isinstance(self.db_path, Path):
            self.db_path.parent.mkdir(parents=True, exist_ok=True)
        try:
            conn = sqlite3.connect(self.db_path, uri=self._use_uri)
        except sqlite3.OperationalError:
            fallback_dir = Path(tempfile.gettempdir()) / "spirit11-runtime"
            fallback_dir.mkdir(parents=True, exist_ok=True)
            fallback = fallback_dir / "spirit11.sqlite"
            logger.warning("Unable to open %s; falling back to %s", self.db_path, fallback)
            conn = sqlite3.connect(fallback)
            self.db_path = fallback
            self._use_uri = False
            self._create_schema(conn)
        conn.row_factory = sqlite3.Row
        return conn

    def _ensure_schema(self) -> None:
        with self._connect() as conn:
            self._create_schema(conn)

    def _create_schema(self, conn: sqlite3.Connection) -> None:
        conn.execute(
            """
            CREATE TABLE IF NOT EXISTS players (
                id TEXT PRIMARY KEY,
                name TEXT NOT NULL,
                university TEXT NOT NULL,
                category TEXT NOT NULL,
                document_json TEXT NOT NULL,
                created_at TEXT NOT NULL,
                updated_at TEXT NOT NULL
            )
            """
        )
        conn.execute("CREATE INDEX IF NOT EXISTS players_category ON players (category)")
        conn.commit()

    def add_player(self, record: PlayerRecord) -> StoredPlayer:
        return self.add_players([record])[0]

    def add_players(self, records: Iterable[PlayerRecord]) -> List[StoredPlayer]:
        now = datetime.now(timezone.utc)
        stored = [
            StoredPlayer(
                **record.model_dump(include=_RECORD_FIELDS),
                player_id=uuid4().hex,
                created_at=now,
                updated_at=now,
            )
            for record in records
        ]
        if not stored:
            return []
        with self._connect() as conn:
            conn.executemany(
                """
                INSERT INTO players (
                    id, name, university, category, document_json, created_at, updated_at
                ) VALUES (?, ?, ?, ?, ?, ?, ?)
                """,
                [self._row_payload(player) for player in stored],
            )
            conn.commit()
        logger.info("Stored %d players", len(stored))
        return stored

    def get_player(self, player_id: str) -> Optional[StoredPlayer]:
        with self._connect() as conn:
            row = conn.execute("SELECT * FROM players WHERE id = ?", (player_id,)).fetchone()
        if row is None:
            return None
        return self._row_to_player(row)

    def list_players(
        self,
        *,
        search: str | None = None,
        category: Category | str | None = None,
    ) -> List[StoredPlayer]:
        query = "SELECT * FROM players"
        params: list[Any] = []
        if category:
            query += " WHERE category = ?"
            params.append(Category(category).value)
        query += " ORDER BY created_at, rowid"
        with self._connect() as conn:
            rows = conn.execute(query, params).fetchall()
        players = [self._row_to_player(row) for row in rows]
        if search:
            # Name search shares the catalog's casefolded matching.
            players = filter_players(players, PlayerFilter(search=search))
        return players

    def update_player(self, player_id: str, changes: Mapping[str, Any]) -> StoredPlayer:
        """Apply ``changes`` on top of the stored player and rescore it.

        Derived metrics are always recomputed from the merged raw stats; any
        derived values present in ``changes`` are ignored.
        """

        existing = self.get_player(player_id)
        if existing is None:
            raise KeyError(f"Player {player_id} not found")

        updates = normalize_update(changes)
        identity: dict[str, str] = {"name": existing.name, "university": existing.university}
        for key in identity:
            if key in updates:
                value = str(updates[key]).strip()
                if not value:
                    raise ValueError(f"{key} cannot be blank")
                identity[key] = value

        category = existing.category
        if "category" in updates:
            if not str(updates["category"]).strip():
                raise ValueError("category cannot be blank")
            category = normalize_category(updates["category"])

        merged = existing.stats.model_dump()
        merged.update({key: updates[key] for key in STAT_FIELDS if key in updates})
        stats = coerce_stats(merged)

        updated = existing.model_copy(
            update={
                "name": identity["name"],
                "university": identity["university"],
                "category": category,
                "stats": stats,
                "metrics": compute_derived_metrics(stats),
                "updated_at": datetime.now(timezone.utc),
            }
        )
        payload = self._row_payload(updated)
        with self._connect() as conn:
            conn.execute(
                """
                UPDATE players
                SET name = ?,
                    university = ?,
                    category = ?,
                    document_json = ?,
                    updated_at = ?
                WHERE id = ?
                """,
                (payload[1], payload[2], payload[3], payload[4], payload[6], player_id),
            )
            conn.commit()
        return updated

    def delete_player(self, player_id: str) -> bool:
        with self._connect() as conn:
            cursor = conn.execute("DELETE FROM players WHERE id = ?", (player_id,))
            conn.commit()
        deleted = cursor.rowcount > 0
        if deleted:
            # Team selections referencing this player are not cleaned up here.
            logger.info("Deleted player %s", player_id)
        return deleted

    @staticmethod
    def _row_payload(player: StoredPlayer) -> tuple:
        document = PlayerRecord.to_document(player)
        return (
            player.player_id,
            player.name,
            player.university,
            player.category.value,
            json.dumps(document),
            player.created_at.isoformat(),
            player.updated_at.isoformat(),
        )

    @staticmethod
    def _row_to_player(row: sqlite3.Row) -> StoredPlayer:
        record = PlayerRecord.from_document(json.loads(row["document_json"]))
        return StoredPlayer(
            **record.model_dump(),
            player_id=row["id"],
            created_at=datetime.fromisoformat(row["created_at"]),
            updated_at=datetime.fromisoformat(row["updated_at"]),
        )


__all__ = ["PlayerStore"]
