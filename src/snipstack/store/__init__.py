"""SnipStack snippet store."""

from snipstack.store.connection import Database
from snipstack.store.migrations import MIGRATIONS, run_migrations
from snipstack.store.repository import SnippetRepository, StorageError

__all__ = [
    "Database",
    "MIGRATIONS",
    "SnippetRepository",
    "StorageError",
    "run_migrations",
]
