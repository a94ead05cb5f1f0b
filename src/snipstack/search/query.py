"""Query compiler — turn search-bar input into a FilterSpec.

Input starting with ``/`` is a command (``/date``, ``/type``, ``/app``,
``/fav``, ``/smart``, ``/newest``, ``/oldest``); anything else is free text.
Switching to a different command starts from an empty spec; retyping the
same command refines the previous one.
"""

from __future__ import annotations

from collections.abc import Callable
from dataclasses import dataclass, replace

from loguru import logger

from snipstack.classify.remote import RemoteClassifier
from snipstack.dates.models import DateRange
from snipstack.dates.resolver import DateResolver
from snipstack.patterns.code import find_language_name
from snipstack.search.terms import MIN_TERM_LENGTH, significant_terms

SORT_ORDERS: tuple[str, ...] = ("newest", "oldest")

TYPE_KEYWORDS: dict[str, str] = {
    "link": "link",
    "links": "link",
    "url": "link",
    "urls": "link",
    "website": "link",
    "websites": "link",
    "code": "code",
    "script": "code",
    "scripts": "code",
    "programming": "code",
    "text": "text",
    "note": "text",
    "notes": "text",
    "message": "text",
    "messages": "text",
    "color": "color",
    "colors": "color",
    "colour": "color",
    "hex": "color",
    "rgb": "color",
    "rgba": "color",
    "hsl": "color",
}


@dataclass(frozen=True)
class FilterSpec:
    """Compiled search query. ``FilterSpec()`` matches every snippet."""

    content_type: str | None = None
    language: str | None = None
    source_app: str | None = None
    date_range: DateRange | None = None
    date_label: str | None = None
    date_text: str | None = None
    favorites_only: bool = False
    free_text: str | None = None
    free_text_terms: tuple[str, ...] = ()
    command: str | None = None
    sort_order: str | None = None

    @property
    def is_identity(self) -> bool:
        """True when no constraint is set (sort order and command aside)."""
        return (
            self.content_type is None
            and self.language is None
            and not self.source_app
            and self.date_range is None
            and not self.date_text
            and not self.favorites_only
            and not self.free_text
        )


class QueryCompiler:
    """Compile raw search input against an optional previous spec.

    Args:
        dates: Date resolver for ``/date``.
        remote: Remote classifier used to interpret ``/type`` phrases the
            keyword table does not know. None keeps ``/type`` local.
        min_term_length: Shortest significant free-text term.
        smart: Always allow the remote date resolver, as if every query ran
            in relaxed mode.
    """

    def __init__(
        self,
        dates: DateResolver,
        remote: RemoteClassifier | None = None,
        min_term_length: int = MIN_TERM_LENGTH,
        smart: bool = False,
    ) -> None:
        self._dates = dates
        self._remote = remote
        self._min_term_length = min_term_length
        self._smart = smart
        self._commands: dict[str, Callable[[FilterSpec, str, bool], FilterSpec]] = {
            "date": self._date,
            "type": self._type,
            "app": self._app,
            "fav": self._fav,
            "smart": self._smart_text,
        }

    def compile(
        self, raw: str, previous: FilterSpec | None = None, *, relaxed: bool = False
    ) -> FilterSpec:
        """Return the FilterSpec for *raw*. Never raises."""
        text = raw.strip()
        if not text:
            return FilterSpec()
        if not text.startswith("/"):
            return self.free_text(text)

        head, _, arg = text[1:].partition(" ")
        command = head.lower()
        arg = arg.strip()

        if command in SORT_ORDERS:
            return replace(previous or FilterSpec(), sort_order=command)

        handler = self._commands.get(command)
        if handler is None:
            logger.debug("Unknown command /{}; treating input as free text", command)
            return self.free_text(text)

        if previous is not None and previous.command == command:
            base = previous
        else:
            base = FilterSpec(command=command)
        return handler(base, arg, relaxed or self._smart)

    def free_text(self, text: str, command: str | None = None) -> FilterSpec:
        return FilterSpec(
            free_text=text.lower(),
            free_text_terms=tuple(significant_terms(text, self._min_term_length)),
            command=command,
        )

    # ------------------------------------------------------------------
    # Commands
    # ------------------------------------------------------------------

    def _date(self, base: FilterSpec, arg: str, relaxed: bool) -> FilterSpec:
        if not arg:
            return replace(base, date_range=None, date_label=None, date_text=None)
        resolution = self._dates.resolve(arg, relaxed=relaxed)
        if resolution.resolved:
            return replace(
                base, date_range=resolution.range, date_label=resolution.label, date_text=None
            )
        return replace(base, date_range=None, date_label=resolution.label, date_text=arg)

    def _type(self, base: FilterSpec, arg: str, relaxed: bool) -> FilterSpec:
        if not arg:
            return replace(base, content_type=None, language=None)

        content_type, language = self._type_from_keywords(arg)
        if content_type is None and self._remote is not None:
            try:
                content_type, language = self._remote.infer_type(arg)
            except Exception as exc:
                logger.warning("Remote /type inference unavailable: {}", exc)
        if content_type is None:
            return self.free_text(arg, command="type")
        return replace(
            base,
            content_type=content_type,
            language=language if content_type == "code" else None,
            free_text=None,
            free_text_terms=(),
        )

    @staticmethod
    def _type_from_keywords(phrase: str) -> tuple[str | None, str | None]:
        language = find_language_name(phrase)
        if language is not None:
            return "code", language
        for token in phrase.lower().split():
            if token in TYPE_KEYWORDS:
                return TYPE_KEYWORDS[token], None
        return None, None

    def _app(self, base: FilterSpec, arg: str, relaxed: bool) -> FilterSpec:
        return replace(base, source_app=arg or None)

    def _fav(self, base: FilterSpec, arg: str, relaxed: bool) -> FilterSpec:
        spec = replace(base, favorites_only=True)
        if arg:
            found = self.free_text(arg)
            spec = replace(spec, free_text=found.free_text, free_text_terms=found.free_text_terms)
        return spec

    def _smart_text(self, base: FilterSpec, arg: str, relaxed: bool) -> FilterSpec:
        if not arg:
            return FilterSpec(command="smart")
        return self.free_text(arg, command="smart")
