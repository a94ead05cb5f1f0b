"""SnipStack pattern library — pure, stateless text matchers."""

from snipstack.patterns.code import (
    LANGUAGES,
    code_score,
    detect_language_markers,
    find_language_name,
    languages_match,
    looks_like_code,
    normalize_language,
)
from snipstack.patterns.color import ColorValue, is_color_literal
from snipstack.patterns.text import contains_url, first_url, is_url, name_prefix
from snipstack.patterns.time_windows import TIME_WINDOWS, TimeWindow, find_time_window

__all__ = [
    "LANGUAGES",
    "TIME_WINDOWS",
    "ColorValue",
    "TimeWindow",
    "code_score",
    "contains_url",
    "detect_language_markers",
    "find_language_name",
    "find_time_window",
    "first_url",
    "is_color_literal",
    "is_url",
    "languages_match",
    "looks_like_code",
    "name_prefix",
    "normalize_language",
]
