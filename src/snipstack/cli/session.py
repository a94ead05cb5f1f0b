"""Shared CLI plumbing: global options and the per-command session."""

from __future__ import annotations

from collections.abc import Iterator
from contextlib import contextmanager
from dataclasses import dataclass
from pathlib import Path

import typer
from rich.console import Console

from snipstack.capture import CaptureHandler
from snipstack.classify.classifier import ContentClassifier
from snipstack.cli.errors import err_ambiguous_id, err_config, err_snippet_not_found, warn_no_api_key
from snipstack.collection import SnippetCollection
from snipstack.config import ConfigError, SnipstackConfig, load_config
from snipstack.dates.resolver import DateResolver
from snipstack.llm.client import validate_api_key
from snipstack.search.query import QueryCompiler
from snipstack.store.connection import Database
from snipstack.store.migrations import run_migrations
from snipstack.store.models import Snippet
from snipstack.store.repository import SnippetRepository

console = Console()


@dataclass
class CliState:
    """Global options given before the command name."""

    db: Path | None = None
    offline: bool = False
    verbose: bool = False


@dataclass
class Session:
    config: SnipstackConfig
    classifier: ContentClassifier
    resolver: DateResolver
    compiler: QueryCompiler
    collection: SnippetCollection
    handler: CaptureHandler


def state_of(ctx: typer.Context) -> CliState:
    return ctx.obj if isinstance(ctx.obj, CliState) else CliState()


def load_cli_config(state: CliState) -> tuple[SnipstackConfig, bool]:
    """Load config and decide whether remote collaborators may be used.

    Returns ``(config, offline)``. A missing API key downgrades to offline
    with a warning instead of failing.
    """
    try:
        cfg = load_config()
    except ConfigError as exc:
        console.print(err_config(str(exc)))
        raise typer.Exit(1)

    offline = state.offline or not cfg.llm.enabled
    if not offline:
        try:
            validate_api_key(cfg.llm.model)
        except EnvironmentError as exc:
            console.print(warn_no_api_key(str(exc)))
            offline = True
    return cfg, offline


def build_classifier(state: CliState) -> ContentClassifier:
    cfg, offline = load_cli_config(state)
    return ContentClassifier.from_config(cfg, offline=offline)


def build_resolver(state: CliState) -> DateResolver:
    cfg, offline = load_cli_config(state)
    return DateResolver.from_config(cfg, offline=offline)


@contextmanager
def open_session(state: CliState) -> Iterator[Session]:
    """Open the database, load the collection, and close everything afterwards."""
    cfg, offline = load_cli_config(state)
    db_path = state.db if state.db is not None else Path(cfg.storage.path).expanduser()

    conn = Database(db_path).connect()
    try:
        run_migrations(conn)
        classifier = ContentClassifier.from_config(cfg, offline=offline)
        resolver = DateResolver.from_config(cfg, offline=offline)
        compiler = QueryCompiler(
            resolver,
            remote=classifier.remote,
            min_term_length=cfg.search.min_term_length,
            smart=cfg.dates.smart,
        )
        collection = SnippetCollection(
            SnippetRepository(conn),
            classifier,
            min_match_ratio=cfg.search.min_match_ratio,
        )
        collection.load()
        handler = CaptureHandler(collection, debounce_ms=cfg.capture.debounce_ms)
        yield Session(cfg, classifier, resolver, compiler, collection, handler)
    finally:
        conn.close()


def find_snippet(collection: SnippetCollection, snippet_id: str) -> Snippet:
    """Resolve a full id or unique id prefix, or exit with an error."""
    exact = collection.get(snippet_id)
    if exact is not None:
        return exact
    candidates = [s for s in collection.snippets if s.id.startswith(snippet_id)]
    if len(candidates) == 1:
        return candidates[0]
    if not candidates:
        console.print(err_snippet_not_found(snippet_id))
    else:
        console.print(err_ambiguous_id(snippet_id, [s.id for s in candidates]))
    raise typer.Exit(1)
