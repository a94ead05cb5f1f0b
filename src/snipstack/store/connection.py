"""SQLite connection layer for the snippet store."""

from __future__ import annotations

import sqlite3
from pathlib import Path


class Database:
    """Per-user SQLite database holding the serialised snippet collection."""

    def __init__(self, db_path: Path | str) -> None:
        """Store the database path. Call connect() to open the connection.

        Args:
            db_path: Path to the SQLite database file (created if missing),
                or ``":memory:"``.
        """
        self.db_path = db_path if db_path == ":memory:" else Path(db_path)

    def connect(self) -> sqlite3.Connection:
        """Open a connection and return it."""
        if isinstance(self.db_path, Path):
            self.db_path.parent.mkdir(parents=True, exist_ok=True)
        conn = sqlite3.connect(self.db_path)
        conn.row_factory = sqlite3.Row
        conn.execute("PRAGMA journal_mode = WAL")
        return conn

    def __enter__(self) -> sqlite3.Connection:
        """Open the database and return the connection (context manager support)."""
        self._conn = self.connect()
        return self._conn

    def __exit__(self, *args: object) -> None:
        """Close the connection when leaving the context manager."""
        if self._conn:
            self._conn.close()
            self._conn = None
