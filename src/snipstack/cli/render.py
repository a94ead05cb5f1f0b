"""Rich renderers for snippets."""

from __future__ import annotations

from rich.console import Console
from rich.panel import Panel
from rich.table import Table

from snipstack.cli.errors import warn_storage
from snipstack.collection import SnippetCollection
from snipstack.store.models import Snippet

_PREVIEW_CHARS = 60
_TYPE_STYLE = {
    "code": "cyan",
    "link": "blue",
    "color": "magenta",
    "message": "green",
    "quote": "yellow",
    "tweet": "bright_blue",
    "text": "white",
}


def preview(content: str, width: int = _PREVIEW_CHARS) -> str:
    first = content.strip().splitlines()[0] if content.strip() else ""
    if len(first) > width or "\n" in content.strip():
        return first[: width - 1].rstrip() + "…"
    return first


def snippet_table(snippets: list[Snippet], title: str = "Snippets") -> Table:
    table = Table(title=title, show_header=True, header_style="bold")
    table.add_column("ID", style="dim", no_wrap=True)
    table.add_column("Type")
    table.add_column("Tags")
    table.add_column("Source")
    table.add_column("When", no_wrap=True)
    table.add_column("Content")

    for s in snippets:
        style = _TYPE_STYLE.get(s.type.value, "white")
        star = " [yellow]★[/]" if s.is_favorite else ""
        table.add_row(
            s.id[:8],
            f"[{style}]{s.type.value}[/]{star}",
            ", ".join(s.tags),
            s.source,
            s.display_timestamp,
            preview(s.content),
        )
    return table


def snippet_panel(snippet: Snippet) -> Panel:
    lines = [
        f"Type:    [bold]{snippet.type.value}[/]",
        f"Tags:    {', '.join(snippet.tags)}",
        f"Source:  {snippet.source}",
        f"When:    {snippet.display_timestamp}",
    ]
    for name, value in snippet.variant_fields().items():
        if value:
            lines.append(f"{name.replace('_', ' ').capitalize() + ':':<9}{value}")
    for number, note in enumerate(snippet.notes, start=1):
        lines.append(f"Note {number}:  {note}")
    lines.append("")
    lines.append(snippet.content)
    return Panel("\n".join(lines), title=f"[bold]{snippet.id}[/]", expand=False)


def show_storage_warning(console: Console, collection: SnippetCollection) -> None:
    if collection.last_warning:
        console.print(warn_storage(collection.last_warning))
