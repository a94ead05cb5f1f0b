"""snipstack classify / resolve-date — dry runs that never touch the database."""

from __future__ import annotations

from typing import Annotated

import typer
from rich.table import Table

from snipstack.cli.session import build_classifier, build_resolver, console, state_of
from snipstack.store.models import SourceApp


def classify_cmd(
    ctx: typer.Context,
    text: Annotated[str, typer.Argument(help="Text to classify.")],
    app_name: Annotated[
        str | None,
        typer.Option("--app", "-a", help="Source application name."),
    ] = None,
) -> None:
    """Show how a piece of text would be classified, without saving it."""
    classifier = build_classifier(state_of(ctx))
    result = classifier.classify(text, SourceApp(app_name) if app_name else None)
    if result is None:
        console.print("[yellow]Empty text — nothing to classify.[/]")
        raise typer.Exit(1)

    table = Table(show_header=False, box=None)
    table.add_row("Type", f"[bold]{result.primary_type.value}[/]")
    table.add_row("Tags", ", ".join(result.tags))
    if result.detected_language:
        table.add_row("Language", result.detected_language)
    if result.contact:
        table.add_row("Contact", result.contact)
    if result.color_value:
        table.add_row("Colour", result.color_value)
    table.add_row("Confidence", f"{result.confidence:.2f}")
    table.add_row("Decided by", result.strategy)
    console.print(table)


def resolve_date_cmd(
    ctx: typer.Context,
    phrase: Annotated[list[str], typer.Argument(help="Date phrase, e.g. last night.")],
    smart: Annotated[
        bool,
        typer.Option("--smart", help="Ask the remote resolver when local rules miss."),
    ] = False,
) -> None:
    """Show the date range a phrase resolves to."""
    resolver = build_resolver(state_of(ctx))
    resolution = resolver.resolve(" ".join(phrase), relaxed=smart)
    if not resolution.resolved:
        console.print(
            f"[yellow]Could not resolve[/] '{resolution.label}'.\n"
            "  /date searches will match it as text against snippet timestamps."
        )
        raise typer.Exit(1)
    console.print(f"[green]✓[/] {resolution.label}  [dim]({resolution.strategy})[/]")
