"""SnipStack rich error messages.

Every error shown to the user says what went wrong and the exact action
that fixes it.

Usage:
    from snipstack.cli.errors import err_snippet_not_found
    console.print(err_snippet_not_found("3f2a"))
    raise typer.Exit(1)
"""

from __future__ import annotations


def err_config(message: str) -> str:
    """Config file could not be used."""
    return (
        f"[red]Error:[/] Invalid configuration.\n"
        f"  {message}\n"
        "  Fix the file and run the command again."
    )


def err_empty_capture() -> str:
    return (
        "[red]Error:[/] Nothing to capture: the text is empty.\n"
        "  Pass the text as an argument or pipe it in with --stdin."
    )


def err_snippet_not_found(snippet_id: str) -> str:
    """No snippet id matches the given id or prefix."""
    return (
        f"[red]Error:[/] No snippet matches id '{snippet_id}'.\n"
        "  Run:  snipstack list  to see snippet ids."
    )


def err_ambiguous_id(snippet_id: str, candidates: list[str]) -> str:
    shown = ", ".join(c[:12] for c in candidates[:5])
    return (
        f"[red]Error:[/] Id prefix '{snippet_id}' matches {len(candidates)} snippets ({shown}).\n"
        "  Type more characters of the id."
    )


def err_note_index(index: int, count: int) -> str:
    if count == 0:
        return f"[red]Error:[/] Note {index} does not exist: the snippet has no notes."
    return (
        f"[red]Error:[/] Note {index} does not exist.\n"
        f"  Valid note numbers: 1-{count}"
    )


def err_bad_choice(option: str, value: str, choices: tuple[str, ...]) -> str:
    return (
        f"[red]Error:[/] Unknown {option} '{value}'.\n"
        f"  Use one of: {', '.join(choices)}"
    )


def warn_storage(message: str) -> str:
    """Shown after a mutation whose save failed. The change still applies for this run."""
    return (
        f"[yellow]Warning:[/] {message}\n"
        "  Free disk space or pass a writable database with --db."
    )


def warn_no_api_key(detail: str) -> str:
    """Remote features requested without credentials; local rules are used instead."""
    return (
        f"[yellow]Warning:[/] {detail} Using local rules only.\n"
        "  Pass --offline to silence this."
    )
