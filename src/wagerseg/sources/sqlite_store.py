"""SQLite-backed wager event store that answers aggregate queries."""

from __future__ import annotations

import logging
import os
import sqlite3
import tempfile
from dataclasses import dataclass
from datetime import datetime, timezone
from pathlib import Path
from typing import Iterable, List

from wagerseg.errors import SourceUnavailable
from wagerseg.models import PlayerAggregate, QueryWindow


logger = logging.getLogger(__name__)

DB_PATH_ENV = "WAGERSEG_DB_PATH"


@dataclass
class WagerEvent:
    player: str
    amount: float
    placed_at: int


def _to_epoch(value: int | float | datetime) -> int:
    if isinstance(value, datetime):
        if value.tzinfo is None:
            value = value.replace(tzinfo=timezone.utc)
        return int(value.timestamp())
    return int(value)


class SqliteWagerStore:
    """Simple SQLite store of individual wagers, aggregated per player on read."""

    def __init__(self, db_path: Path | str):
        self._use_uri = False
        env_db = os.getenv(DB_PATH_ENV)
        if env_db:
            if env_db.startswith("file:"):
                self.db_path = env_db
                self._use_uri = True
            else:
                self.db_path = Path(env_db)
        elif os.getenv("PYTEST_CURRENT_TEST"):
            test_dir = Path(tempfile.gettempdir()) / "wagerseg-test"
            test_dir.mkdir(parents=True, exist_ok=True)
            self.db_path = test_dir / "wagerseg.sqlite"
        else:
            self.db_path = Path(db_path)
        self._ensure_schema()

    @classmethod
    def at_path(cls, db_path: Path | str) -> "SqliteWagerStore":
        """Open ``db_path`` exactly, ignoring environment overrides."""

        store = cls.__new__(cls)
        store._use_uri = str(db_path).startswith("file:")
        store.db_path = str(db_path) if store._use_uri else Path(db_path)
        store._ensure_schema()
        return store

    def _connect(self) -> sqlite3.Connection:
        if isinstance(self.db_path, Path):
            self.db_path.parent.mkdir(parents=True, exist_ok=True)
            conn = sqlite3.connect(self.db_path)
        else:
            conn = sqlite3.connect(self.db_path, uri=self._use_uri)
        conn.row_factory = sqlite3.Row
        return conn

    def _ensure_schema(self) -> None:
        with self._connect() as conn:
            conn.execute(
                """
                CREATE TABLE IF NOT EXISTS wagers (
                    id INTEGER PRIMARY KEY AUTOINCREMENT,
                    player TEXT NOT NULL,
                    amount REAL NOT NULL,
                    placed_at INTEGER NOT NULL
                )
                """
            )
            conn.execute(
                "CREATE INDEX IF NOT EXISTS idx_wagers_placed_at ON wagers (placed_at)"
            )
            conn.commit()

    def record_wager(self, player: str, amount: float, placed_at: int | float | datetime) -> None:
        self.record_wagers([WagerEvent(player=player, amount=amount, placed_at=_to_epoch(placed_at))])

    def record_wagers(self, events: Iterable[WagerEvent]) -> int:
        rows = [(event.player, float(event.amount), _to_epoch(event.placed_at)) for event in events]
        if not rows:
            return 0
        with self._connect() as conn:
            conn.executemany(
                "INSERT INTO wagers (player, amount, placed_at) VALUES (?, ?, ?)",
                rows,
            )
            conn.commit()
        logger.info("Recorded %s wager events", len(rows))
        return len(rows)

    def clear(self) -> None:
        with self._connect() as conn:
            conn.execute("DELETE FROM wagers")
            conn.commit()

    def aggregate(self, window: QueryWindow) -> List[PlayerAggregate]:
        with self._connect() as conn:
            rows = conn.execute(
                """
                SELECT player,
                       SUM(amount) AS total_wagered,
                       AVG(amount) AS avg_wager,
                       COUNT(*) AS game_count
                FROM wagers
                WHERE placed_at >= ? AND placed_at < ?
                GROUP BY player
                ORDER BY player
                """,
                (window.time_from, window.time_to),
            ).fetchall()
        return [
            PlayerAggregate(
                player=row["player"],
                total_wagered=float(row["total_wagered"] or 0.0),
                avg_wager=float(row["avg_wager"] or 0.0),
                game_count=int(row["game_count"]),
            )
            for row in rows
        ]

    async def fetch(self, window: QueryWindow) -> list[PlayerAggregate]:
        try:
            return self.aggregate(window)
        except sqlite3.Error as exc:
            raise SourceUnavailable(f"Wager store query failed: {exc}", window) from exc
