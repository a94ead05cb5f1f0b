"""snipstack capture — classify text and add it to the collection.

Usage:
  snipstack capture "def foo(): return 1"
  snipstack capture "Alex: running late" --app iMessage
  pbpaste | snipstack capture --stdin --app Safari
"""

from __future__ import annotations

import sys
from typing import Annotated

import typer

from snipstack.capture import CaptureEvent
from snipstack.cli.errors import err_empty_capture
from snipstack.cli.render import show_storage_warning, snippet_panel
from snipstack.cli.session import console, open_session, state_of
from snipstack.store.models import SourceApp


def capture_cmd(
    ctx: typer.Context,
    text: Annotated[
        str | None,
        typer.Argument(help="Text to capture. Omit when using --stdin."),
    ] = None,
    app_name: Annotated[
        str | None,
        typer.Option("--app", "-a", help="Name of the application the text was copied from."),
    ] = None,
    stdin: Annotated[
        bool,
        typer.Option("--stdin", help="Read the text from standard input."),
    ] = False,
) -> None:
    """Capture one piece of clipboard text."""
    content = sys.stdin.read() if stdin else (text or "")
    if not content.strip():
        console.print(err_empty_capture())
        raise typer.Exit(1)

    source_app = SourceApp(app_name) if app_name else None
    with open_session(state_of(ctx)) as session:
        snippet = session.handler.handle(CaptureEvent(content, source_app))
        if snippet is None:
            console.print("[dim]Already captured — nothing added.[/]")
            raise typer.Exit(0)

        console.print(f"[green]✓[/] Captured [bold]{snippet.type.value}[/] ({', '.join(snippet.tags)})")
        console.print(snippet_panel(snippet))
        show_storage_warning(console, session.collection)
