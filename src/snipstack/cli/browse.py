"""snipstack list / search — browse the collection.

Search input is either free text or a command:
  /date <phrase>   /type <phrase>   /app <name>   /fav   /smart <text>
  /newest   /oldest

Several queries are compiled in order, each one starting from the previous
result, the same way successive edits in a search bar behave:
  snipstack search "/date yesterday" "/date yesterday evening"
"""

from __future__ import annotations

from typing import Annotated

import typer

from snipstack.cli.errors import err_bad_choice
from snipstack.cli.render import snippet_panel, snippet_table
from snipstack.cli.session import console, find_snippet, open_session, state_of
from snipstack.search.engine import VIEWS
from snipstack.search.query import SORT_ORDERS, FilterSpec


def _check_choice(option: str, value: str, choices: tuple[str, ...]) -> None:
    if value not in choices:
        console.print(err_bad_choice(option, value, choices))
        raise typer.Exit(1)


def list_cmd(
    ctx: typer.Context,
    view: Annotated[
        str,
        typer.Option("--view", help="all | favorites"),
    ] = "all",
    sort: Annotated[
        str | None,
        typer.Option("--sort", help="newest | oldest (default from config)."),
    ] = None,
) -> None:
    """List captured snippets."""
    _check_choice("view", view, VIEWS)
    with open_session(state_of(ctx)) as session:
        order = sort or session.config.search.default_sort
        _check_choice("sort order", order, SORT_ORDERS)
        results = session.collection.search(FilterSpec(), view=view, sort_order=order)
        if not results:
            console.print("[yellow]No snippets yet.[/]\n  Run:  snipstack capture \"some text\"")
            raise typer.Exit(0)
        console.print(snippet_table(results))


def search_cmd(
    ctx: typer.Context,
    queries: Annotated[
        list[str],
        typer.Argument(help="Search input; several values refine one another in order."),
    ],
    view: Annotated[
        str,
        typer.Option("--view", help="all | favorites"),
    ] = "all",
    sort: Annotated[
        str | None,
        typer.Option("--sort", help="newest | oldest (default from config)."),
    ] = None,
    smart: Annotated[
        bool,
        typer.Option("--smart", help="Let the remote resolver interpret dates local rules miss."),
    ] = False,
) -> None:
    """Search snippets with free text or /commands."""
    _check_choice("view", view, VIEWS)
    with open_session(state_of(ctx)) as session:
        order = sort or session.config.search.default_sort
        _check_choice("sort order", order, SORT_ORDERS)

        spec: FilterSpec | None = None
        for raw in queries:
            spec = session.compiler.compile(raw, spec, relaxed=smart)
        spec = spec or FilterSpec()

        if spec.date_label:
            marker = "" if spec.date_range is not None else " [dim](matched as text)[/]"
            console.print(f"Date: [bold]{spec.date_label}[/]{marker}")

        results = session.collection.search(spec, view=view, sort_order=order)
        if not results:
            console.print("[yellow]No matching snippets.[/]")
            raise typer.Exit(0)
        console.print(snippet_table(results, title=f"Results ({len(results)})"))


def show_cmd(
    ctx: typer.Context,
    snippet_id: Annotated[str, typer.Argument(help="Snippet id or unique id prefix.")],
) -> None:
    """Show one snippet in full, with its notes."""
    with open_session(state_of(ctx)) as session:
        console.print(snippet_panel(find_snippet(session.collection, snippet_id)))
