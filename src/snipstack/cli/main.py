"""SnipStack CLI entry point."""

from __future__ import annotations

import importlib.metadata
from pathlib import Path
from typing import Annotated

import typer

from snipstack.cli.browse import list_cmd, search_cmd, show_cmd
from snipstack.cli.capture import capture_cmd
from snipstack.cli.dryrun import classify_cmd, resolve_date_cmd
from snipstack.cli.manage import clear_cmd, delete_cmd, demo_cmd, fav_cmd, note_app
from snipstack.cli.session import CliState
from snipstack.log import configure_logging


def _installed_version() -> str:
    try:
        return importlib.metadata.version("snipstack")
    except importlib.metadata.PackageNotFoundError:
        return "dev"


def _version_callback(value: bool) -> None:
    if value:
        typer.echo(f"snipstack {_installed_version()}")
        raise typer.Exit()


app = typer.Typer(
    name="snipstack",
    help=(
        "SnipStack — classified clipboard history.\n\n"
        "  snipstack capture  Classify text and add it to the collection.\n"
        "  snipstack search   Free text or /date, /type, /app, /fav, /smart, /newest, /oldest."
    ),
    add_completion=False,
)


@app.callback()
def main_callback(
    ctx: typer.Context,
    db: Annotated[
        Path | None,
        typer.Option("--db", help="Snippet database (default: storage.path from config)."),
    ] = None,
    offline: Annotated[
        bool,
        typer.Option("--offline", help="Never call the remote classifier or date resolver."),
    ] = False,
    verbose: Annotated[
        bool,
        typer.Option("--verbose", "-v", help="Log classification and date decisions."),
    ] = False,
    version: Annotated[
        bool,
        typer.Option(
            "--version",
            callback=_version_callback,
            is_eager=True,
            help="Show version and exit.",
        ),
    ] = False,
) -> None:
    """SnipStack — classified clipboard history."""
    configure_logging(verbose)
    ctx.obj = CliState(db=db, offline=offline, verbose=verbose)


app.command("capture")(capture_cmd)
app.command("list")(list_cmd)
app.command("search")(search_cmd)
app.command("show")(show_cmd)
app.command("classify")(classify_cmd)
app.command("resolve-date")(resolve_date_cmd)
app.command("fav")(fav_cmd)
app.command("delete")(delete_cmd)
app.command("clear")(clear_cmd)
app.command("demo")(demo_cmd)
app.add_typer(note_app, name="note")


@app.command("version")
def version_cmd() -> None:
    """Show the installed SnipStack version."""
    typer.echo(f"snipstack {_installed_version()}")


if __name__ == "__main__":
    app()
