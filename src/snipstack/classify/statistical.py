"""Statistical language detection backed by Pygments lexer heuristics.

Only lexers for the languages the signature table knows are consulted, so the
result always belongs to the same vocabulary as ``detect_language_markers``.
"""

from __future__ import annotations

from pygments.lexers import get_lexer_by_name
from pygments.util import ClassNotFound

from snipstack.patterns.code import LANGUAGES

MIN_LEXER_SCORE: float = 0.3


def detect_language_statistically(text: str, min_score: float = MIN_LEXER_SCORE) -> str | None:
    """Return the language whose Pygments lexer scores *text* highest.

    Returns None when no lexer reaches *min_score*.
    """
    best: tuple[float, str | None] = (0.0, None)
    for language in LANGUAGES:
        try:
            lexer = get_lexer_by_name(language)
        except ClassNotFound:
            continue
        score = float(lexer.analyse_text(text) or 0.0)
        if score > best[0]:
            best = (score, language)
    return best[1] if best[0] >= min_score else None
