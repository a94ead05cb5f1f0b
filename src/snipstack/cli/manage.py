"""snipstack note / fav / delete / clear / demo — collection maintenance.

Commands:
  snipstack note add <id> <text>      — append a note
  snipstack note remove <id> <number> — remove the numbered note (1-based)
  snipstack fav <id>                  — toggle favourite
  snipstack delete <id>               — delete one snippet
  snipstack clear [--yes]             — delete every snippet
  snipstack demo                      — add the demo snippets
"""

from __future__ import annotations

from typing import Annotated

import typer

from snipstack.cli.errors import err_note_index
from snipstack.cli.render import preview, show_storage_warning, snippet_table
from snipstack.cli.session import console, find_snippet, open_session, state_of
from snipstack.demo import demo_snippets

note_app = typer.Typer(
    name="note",
    help="Add or remove notes on a snippet.",
    add_completion=False,
)

_IdArg = Annotated[str, typer.Argument(help="Snippet id or unique id prefix.")]


@note_app.command("add")
def note_add_cmd(
    ctx: typer.Context,
    snippet_id: _IdArg,
    text: Annotated[str, typer.Argument(help="Note text.")],
) -> None:
    """Append a note to a snippet."""
    with open_session(state_of(ctx)) as session:
        snippet = find_snippet(session.collection, snippet_id)
        session.collection.add_note(snippet.id, text)
        console.print(f"[green]✓[/] Note {len(snippet.notes)} added to {snippet.id[:8]}")
        show_storage_warning(console, session.collection)


@note_app.command("remove")
def note_remove_cmd(
    ctx: typer.Context,
    snippet_id: _IdArg,
    number: Annotated[int, typer.Argument(help="Note number as shown by 'snipstack show'.")],
) -> None:
    """Remove a note from a snippet."""
    with open_session(state_of(ctx)) as session:
        snippet = find_snippet(session.collection, snippet_id)
        if not 1 <= number <= len(snippet.notes):
            console.print(err_note_index(number, len(snippet.notes)))
            raise typer.Exit(1)
        removed = session.collection.remove_note(snippet.id, number - 1)
        console.print(f"[green]✓[/] Removed note: {preview(removed)}")
        show_storage_warning(console, session.collection)


def fav_cmd(ctx: typer.Context, snippet_id: _IdArg) -> None:
    """Toggle the favourite flag of a snippet."""
    with open_session(state_of(ctx)) as session:
        snippet = find_snippet(session.collection, snippet_id)
        if session.collection.toggle_favorite(snippet.id):
            console.print(f"[yellow]★[/] {snippet.id[:8]} added to favourites")
        else:
            console.print(f"[dim]☆[/] {snippet.id[:8]} removed from favourites")
        show_storage_warning(console, session.collection)


def delete_cmd(ctx: typer.Context, snippet_id: _IdArg) -> None:
    """Delete one snippet."""
    with open_session(state_of(ctx)) as session:
        snippet = find_snippet(session.collection, snippet_id)
        session.collection.delete(snippet.id)
        console.print(f"[green]✓[/] Deleted {snippet.id[:8]}: {preview(snippet.content)}")
        show_storage_warning(console, session.collection)


def clear_cmd(
    ctx: typer.Context,
    yes: Annotated[
        bool,
        typer.Option("--yes", "-y", help="Skip confirmation prompt."),
    ] = False,
) -> None:
    """Delete every snippet."""
    with open_session(state_of(ctx)) as session:
        count = len(session.collection)
        if count == 0:
            console.print("[dim]Nothing to delete.[/]")
            raise typer.Exit(0)
        if not yes and not typer.confirm(f"Delete all {count} snippets?", default=False):
            console.print("[dim]Cancelled.[/]")
            raise typer.Exit(0)
        session.collection.delete_all()
        console.print(f"[green]✓[/] Deleted {count} snippets")
        show_storage_warning(console, session.collection)


def demo_cmd(ctx: typer.Context) -> None:
    """Add the demo snippets to the collection."""
    with open_session(state_of(ctx)) as session:
        added = session.collection.add(demo_snippets())
        if not added:
            console.print("[dim]Demo snippets are already in the collection.[/]")
            raise typer.Exit(0)
        console.print(snippet_table(added, title=f"Added {len(added)} demo snippets"))
        show_storage_warning(console, session.collection)
