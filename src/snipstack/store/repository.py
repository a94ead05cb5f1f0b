"""Snippet persistence over a single-key blob store.

The whole collection is serialised to JSON and written under one key on
every change ("overwrite on every change"). Load happens once at startup.
"""

from __future__ import annotations

import json
import sqlite3

from loguru import logger

from snipstack.store.models import Snippet, snippet_from_dict, snippet_to_dict

SNIPPETS_KEY = "snippets"


class StorageError(Exception):
    """Raised when the store cannot be read or written.

    Attributes:
        capacity: True when the failure was the disk or database being full.
    """

    def __init__(self, message: str, *, capacity: bool = False) -> None:
        super().__init__(message)
        self.capacity = capacity


class SnippetRepository:
    """Data access layer for the persisted snippet collection.

    Wraps an open sqlite3.Connection with the schema applied (see
    snipstack.store.migrations.run_migrations). The connection is owned by
    the caller and must be closed after use.
    """

    def __init__(self, conn: sqlite3.Connection, key: str = SNIPPETS_KEY) -> None:
        self._conn = conn
        self._key = key

    # ------------------------------------------------------------------
    # Raw key/value access
    # ------------------------------------------------------------------

    def get_blob(self, key: str) -> str | None:
        """Return the raw value stored under *key*, or None if missing."""
        try:
            row = self._conn.execute(
                "SELECT value FROM kv_store WHERE key = ?", (key,)
            ).fetchone()
        except sqlite3.Error as exc:
            raise StorageError(f"Could not read '{key}': {exc}") from exc
        return row["value"] if row else None

    def put_blob(self, key: str, value: str) -> None:
        """Overwrite *key* with *value*.

        Raises:
            StorageError: On any write failure; ``capacity`` is set when the
                disk or database is full.
        """
        try:
            self._conn.execute(
                """
                INSERT INTO kv_store (key, value)
                VALUES (?, ?)
                ON CONFLICT(key) DO UPDATE SET
                    value = excluded.value,
                    updated_at = datetime('now')
                """,
                (key, value),
            )
            self._conn.commit()
        except sqlite3.Error as exc:
            capacity = _is_capacity_error(exc)
            try:
                self._conn.rollback()
            except sqlite3.Error:
                pass
            raise StorageError(f"Could not write '{key}': {exc}", capacity=capacity) from exc

    # ------------------------------------------------------------------
    # Snippets
    # ------------------------------------------------------------------

    def load(self) -> list[Snippet]:
        """Return every persisted snippet in stored (insertion) order.

        Records that cannot be decoded are skipped and logged.

        Raises:
            StorageError: If the store cannot be read or the blob is not a JSON list.
        """
        raw = self.get_blob(self._key)
        if raw is None:
            return []
        try:
            records = json.loads(raw)
        except json.JSONDecodeError as exc:
            raise StorageError(f"Stored collection is not valid JSON: {exc}") from exc
        if not isinstance(records, list):
            raise StorageError(
                f"Stored collection must be a JSON list, got {type(records).__name__}"
            )

        snippets: list[Snippet] = []
        for record in records:
            try:
                snippets.append(snippet_from_dict(record))
            except (KeyError, ValueError, TypeError) as exc:
                logger.warning("Skipping unreadable snippet record: {}", exc)
        return snippets

    def save(self, snippets: list[Snippet]) -> None:
        """Overwrite the stored collection with *snippets* (icon blobs included)."""
        payload = json.dumps([snippet_to_dict(s) for s in snippets], ensure_ascii=False)
        self.put_blob(self._key, payload)


def _is_capacity_error(exc: sqlite3.Error) -> bool:
    message = str(exc).lower()
    return "full" in message or "quota" in message or "no space" in message
