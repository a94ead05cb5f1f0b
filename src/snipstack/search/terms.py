"""Significant-term extraction for free-text search."""

from __future__ import annotations

import re

MIN_TERM_LENGTH: int = 3

STOP_WORDS: frozenset[str] = frozenset(
    """
    a about above after again all also am an and any are as at be because been
    before being below between both but by can could did do does doing down
    during each few for from further had has have having he her here hers him
    his how i if in into is it its itself just me more most my no nor not now
    of off on once only or other our ours out over own same she should so some
    such than that the their theirs them then there these they this those
    through to too under until up very was we were what when where which while
    who whom why will with would you your yours
    """.split()
)

_PUNCT_RE = re.compile(r"[^\w\s#+]")


def significant_terms(text: str, min_length: int = MIN_TERM_LENGTH) -> list[str]:
    """Lowercase, strip punctuation, drop stop words and short tokens.

    Order is preserved and duplicates removed.
    """
    seen: set[str] = set()
    terms: list[str] = []
    for token in _PUNCT_RE.sub(" ", text.lower()).split():
        if len(token) < min_length or token in STOP_WORDS or token in seen:
            continue
        seen.add(token)
        terms.append(token)
    return terms
