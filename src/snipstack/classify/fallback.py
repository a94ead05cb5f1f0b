"""Deterministic fallback rules used when the remote classifier is unavailable.

Rules are tried in order and the first match wins. The absolute fallback is
``text, clipboard``.
"""

from __future__ import annotations

from collections.abc import Callable
from dataclasses import dataclass

from snipstack.classify.models import Classification
from snipstack.classify.tags import LanguageDetector, derive_primary_type
from snipstack.patterns import text as tp
from snipstack.patterns.code import looks_like_code

FALLBACK_CONFIDENCE: float = 0.4

LONG_TEXT_CHARS: int = 300
MULTI_LINE_LINES: int = 3


@dataclass(frozen=True)
class FallbackRule:
    name: str
    matches: Callable[[str, str | None], bool]
    tags: tuple[str, ...]


def is_messaging_app(app_name: str | None, messaging_apps: tuple[str, ...]) -> bool:
    if not app_name:
        return False
    name = app_name.strip().lower()
    return any(app == name or app in name for app in messaging_apps)


class FallbackClassifier:
    """Ordered rule list over the pattern library.

    Args:
        detect_language: Language detector for code (signature table, then the
            optional statistical detector).
        messaging_apps: Lowercase source-app names that mark messages.
        long_text_chars: Length above which text counts as long-form.
        multi_line_lines: Line count above which text counts as multi-line.
        code_thresholds: ``(single_line, multi_line)`` looks_like_code thresholds.
    """

    def __init__(
        self,
        detect_language: LanguageDetector,
        messaging_apps: tuple[str, ...] = (),
        long_text_chars: int = LONG_TEXT_CHARS,
        multi_line_lines: int = MULTI_LINE_LINES,
        code_thresholds: tuple[int, int] = (4, 3),
    ) -> None:
        self._detect_language = detect_language
        self._messaging_apps = messaging_apps
        self._long_text_chars = long_text_chars
        self._multi_line_lines = multi_line_lines
        self._code_thresholds = code_thresholds
        self.rules: list[FallbackRule] = self._build_rules()

    def _build_rules(self) -> list[FallbackRule]:
        long_chars = self._long_text_chars
        max_lines = self._multi_line_lines
        return [
            FallbackRule("url", lambda t, _a: tp.contains_url(t), ("link", "url")),
            FallbackRule("email", lambda t, _a: bool(tp.EMAIL_RE.search(t)), ("email", "contact")),
            FallbackRule(
                "error", lambda t, _a: bool(tp.ERROR_RE.search(t)), ("error-message", "debug")
            ),
            FallbackRule(
                "list",
                lambda t, _a: len(tp.BULLET_LIST_RE.findall(t)) >= 2,
                ("list", "notes"),
            ),
            FallbackRule(
                "message",
                lambda t, a: is_messaging_app(a, self._messaging_apps) or tp.name_prefix(t) is not None,
                ("message", "chat"),
            ),
            FallbackRule(
                "code-keyword", lambda t, _a: bool(tp.CODE_KEYWORD_RE.search(t)), ("code",)
            ),
            FallbackRule("todo", lambda t, _a: bool(tp.TODO_RE.search(t)), ("todo-item", "reminder")),
            FallbackRule("meeting", lambda t, _a: bool(tp.MEETING_RE.search(t)), ("meeting", "schedule")),
            FallbackRule("long-text", lambda t, _a: len(t) > long_chars, ("article", "reading")),
            FallbackRule(
                "multi-line",
                lambda t, _a: len(t.strip().splitlines()) > max_lines,
                ("notes", "text"),
            ),
            FallbackRule("greeting", lambda t, _a: bool(tp.GREETING_RE.search(t)), ("greeting", "text")),
            FallbackRule(
                "sentence", lambda t, _a: bool(tp.SENTENCE_RE.match(t.strip())), ("note", "text")
            ),
        ]

    def classify(self, text: str, app_name: str | None = None) -> Classification:
        """Classify *text* without any remote call. Never raises."""
        single, multi = self._code_thresholds
        if looks_like_code(text, single_line_threshold=single, multi_line_threshold=multi):
            return self._code(text, "fallback:looks-like-code")

        for rule in self.rules:
            if rule.matches(text, app_name):
                if "code" in rule.tags:
                    return self._code(text, f"fallback:{rule.name}")
                tags = list(rule.tags)
                return Classification(
                    primary_type=derive_primary_type(tags),
                    tags=tags,
                    confidence=FALLBACK_CONFIDENCE,
                    strategy=f"fallback:{rule.name}",
                )

        return Classification(
            primary_type=derive_primary_type(["text", "clipboard"]),
            tags=["text", "clipboard"],
            confidence=FALLBACK_CONFIDENCE,
            strategy="fallback:default",
        )

    def _code(self, text: str, strategy: str) -> Classification:
        language = self._detect_language(text)
        tags = ["code", language] if language else ["code"]
        return Classification(
            primary_type=derive_primary_type(tags),
            tags=tags,
            confidence=FALLBACK_CONFIDENCE,
            detected_language=language,
            strategy=strategy,
        )
