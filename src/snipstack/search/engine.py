"""Filter & sort engine — evaluate a FilterSpec against the snippet collection.

Every dimension must pass (logical AND): view, source app, content type,
language, date, free text. Type matching is dual-mode: a snippet matches
either by its stored type or by re-deriving the type from its content, since
capture-time classification ran under looser rules than a later query.
"""

from __future__ import annotations

import math
from collections.abc import Callable, Iterable

from snipstack.patterns.code import detect_language_markers, languages_match, looks_like_code
from snipstack.patterns.color import is_color_literal
from snipstack.patterns.text import contains_url
from snipstack.search.query import SORT_ORDERS, FilterSpec
from snipstack.store.models import PrimaryType, Snippet

VIEWS: tuple[str, ...] = ("all", "favorites")
MIN_MATCH_RATIO: float = 0.5

LanguageDetector = Callable[[str], "str | None"]


def _matches_type(snippet: Snippet, content_type: str) -> bool:
    wanted = "link" if content_type == "url" else content_type
    if wanted == "code":
        return snippet.type is PrimaryType.CODE or looks_like_code(snippet.content)
    if wanted == "link":
        return snippet.type is PrimaryType.LINK or contains_url(snippet.content)
    if wanted == "text":
        return snippet.type not in (PrimaryType.CODE, PrimaryType.LINK)
    if wanted == "color":
        return snippet.type is PrimaryType.COLOR or is_color_literal(snippet.content) is not None
    return snippet.type.value == wanted


def _matches_app(snippet: Snippet, needle: str) -> bool:
    needle = needle.lower()
    if snippet.source_app is not None and needle in snippet.source_app.name.lower():
        return True
    return needle in snippet.source.lower()


def _matches_text(snippet: Snippet, spec: FilterSpec, min_match_ratio: float) -> bool:
    fields = [snippet.content, *snippet.notes, snippet.source, *snippet.tags]
    haystack = [f.lower() for f in fields if f]
    phrase = spec.free_text or ""
    if phrase and any(phrase in field for field in haystack):
        return True
    terms = spec.free_text_terms
    if not terms:
        return False
    needed = math.ceil(len(terms) * min_match_ratio)
    hits = sum(1 for term in terms if any(term in field for field in haystack))
    return hits >= needed


def matches(
    snippet: Snippet,
    spec: FilterSpec,
    view: str = "all",
    *,
    detect_language: LanguageDetector = detect_language_markers,
    min_match_ratio: float = MIN_MATCH_RATIO,
) -> bool:
    """Return True if *snippet* passes every constraint in *spec*."""
    if (view == "favorites" or spec.favorites_only) and not snippet.is_favorite:
        return False
    if spec.source_app and not _matches_app(snippet, spec.source_app):
        return False
    if spec.content_type and not _matches_type(snippet, spec.content_type):
        return False
    if spec.language and not languages_match(spec.language, detect_language(snippet.content)):
        return False
    if spec.date_range is not None:
        if not spec.date_range.contains(snippet.timestamp):
            return False
    elif spec.date_text:
        if spec.date_text.lower() not in snippet.display_timestamp.lower():
            return False
    if (spec.free_text or spec.free_text_terms) and not _matches_text(
        snippet, spec, min_match_ratio
    ):
        return False
    return True


def apply(
    snippets: Iterable[Snippet],
    spec: FilterSpec,
    view: str = "all",
    sort_order: str = "newest",
    *,
    detect_language: LanguageDetector = detect_language_markers,
    min_match_ratio: float = MIN_MATCH_RATIO,
) -> list[Snippet]:
    """Filter *snippets* by *spec* and sort by timestamp.

    ``spec.sort_order`` (set by ``/newest`` / ``/oldest``) overrides
    *sort_order*. Ties keep their original order.

    Raises:
        ValueError: On an unknown view or sort order.
    """
    if view not in VIEWS:
        raise ValueError(f"unknown view '{view}' (expected one of {', '.join(VIEWS)})")
    order = spec.sort_order or sort_order
    if order not in SORT_ORDERS:
        raise ValueError(f"unknown sort order '{order}' (expected newest or oldest)")

    kept = [
        s
        for s in snippets
        if matches(s, spec, view, detect_language=detect_language, min_match_ratio=min_match_ratio)
    ]
    return sorted(kept, key=lambda s: s.timestamp, reverse=order == "newest")
