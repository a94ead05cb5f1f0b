"""Content classifier — turn one captured text blob into a Classification.

Chain, in order, stopping at the first stage that returns a result:

  1. colour literal       → color   (color, design)
  2. strict whole-string URL → link (link, url)
  3. remote classifier    → tags re-ranked, primary type derived from tags
  4. deterministic fallback rules

Then, whatever stage answered: the message upgrade and the two-tag floor.
Remote failures are expected; they are logged and the chain moves on.
"""

from __future__ import annotations

from collections.abc import Callable

from loguru import logger

from snipstack.classify.fallback import FallbackClassifier, is_messaging_app
from snipstack.classify.models import Classification
from snipstack.classify.remote import RemoteClassifier
from snipstack.classify.statistical import detect_language_statistically
from snipstack.classify.tags import (
    apply_tag_floor,
    derive_primary_type,
    ensure_tag,
    rank_tags,
)
from snipstack.config import ClassifierCfg, SnipstackConfig
from snipstack.patterns import text as tp
from snipstack.patterns.code import (
    LANGUAGES,
    detect_language_markers,
    looks_like_code,
    normalize_language,
)
from snipstack.patterns.color import is_color_literal
from snipstack.store.models import PrimaryType, SourceApp

Strategy = Callable[[str, "str | None"], "Classification | None"]


class ContentClassifier:
    """Ordered fallback chain over pattern matchers, the remote classifier and rules.

    Args:
        remote: Remote classifier collaborator; None runs fully offline.
        config: Classifier thresholds (defaults when omitted).
    """

    def __init__(
        self,
        remote: RemoteClassifier | None = None,
        config: ClassifierCfg | None = None,
    ) -> None:
        self._cfg = config or ClassifierCfg()
        self._remote = remote
        self._fallback = FallbackClassifier(
            self.detect_language,
            messaging_apps=self._cfg.messaging_apps,
            long_text_chars=self._cfg.long_text_chars,
            multi_line_lines=self._cfg.multi_line_lines,
            code_thresholds=(self._cfg.code_score_single_line, self._cfg.code_score_multi_line),
        )
        self.strategies: list[tuple[str, Strategy]] = [
            ("color", self._by_color),
            ("url", self._by_url),
            ("remote", self._by_remote),
            ("fallback", self._by_fallback),
        ]

    @classmethod
    def from_config(cls, cfg: SnipstackConfig, *, offline: bool = False) -> ContentClassifier:
        remote = None
        if cfg.llm.enabled and not offline:
            remote = RemoteClassifier(
                model=cfg.llm.model,
                max_chars=cfg.classifier.max_chars,
                timeout=cfg.llm.timeout,
                num_retries=cfg.llm.num_retries,
            )
        return cls(remote=remote, config=cfg.classifier)

    @property
    def remote(self) -> RemoteClassifier | None:
        return self._remote

    # ------------------------------------------------------------------
    # Public API
    # ------------------------------------------------------------------

    def classify(self, text: str, source_app: SourceApp | None = None) -> Classification | None:
        """Classify *text*. Returns None only for empty or whitespace-only input."""
        if not text or not text.strip():
            return None

        app_name = source_app.name if source_app else None
        result: Classification | None = None
        for name, strategy in self.strategies:
            result = strategy(text, app_name)
            if result is not None:
                logger.debug("Classified by {} as {} {}", name, result.primary_type.value, result.tags)
                break

        # The fallback stage always answers; this only guards custom chains.
        if result is None:
            result = Classification(PrimaryType.TEXT, ["text", "clipboard"], strategy="default")

        result = self._upgrade_message(result, text, app_name)
        result.tags = apply_tag_floor(result.tags, result.primary_type)
        return result

    def detect_language(self, text: str) -> str | None:
        """Signature table first, then the statistical detector when enabled."""
        language = detect_language_markers(text)
        if language is None and self._cfg.statistical_detector:
            language = detect_language_statistically(text)
        return language

    # ------------------------------------------------------------------
    # Chain stages
    # ------------------------------------------------------------------

    def _by_color(self, text: str, _app: str | None) -> Classification | None:
        color = is_color_literal(text)
        if color is None:
            return None
        return Classification(
            PrimaryType.COLOR, ["color", "design"], strategy="color", color_value=color.value
        )

    def _by_url(self, text: str, _app: str | None) -> Classification | None:
        if not tp.is_url(text):
            return None
        return Classification(PrimaryType.LINK, ["link", "url"], strategy="url")

    def _by_remote(self, text: str, _app: str | None) -> Classification | None:
        if self._remote is None:
            return None
        try:
            answer = self._remote.classify(text)
        except Exception as exc:
            logger.warning("Remote classifier unavailable, using fallback rules: {}", exc)
            return None

        tags = rank_tags(answer.tags, text, self.detect_language)
        if "code" not in tags and self._strong_code_signal(text):
            language = detect_language_markers(text)
            tags = ["code", language] if language else ["code"]
        language = next((t for t in tags if normalize_language(t) in LANGUAGES), None)
        primary = derive_primary_type(tags)
        return Classification(
            primary,
            tags,
            confidence=answer.confidence,
            detected_language=language if primary is PrimaryType.CODE else None,
            strategy="remote",
        )

    def _by_fallback(self, text: str, app: str | None) -> Classification | None:
        return self._fallback.classify(text, app)

    # ------------------------------------------------------------------
    # Post-processing
    # ------------------------------------------------------------------

    def _strong_code_signal(self, text: str) -> bool:
        return (
            looks_like_code(
                text,
                single_line_threshold=self._cfg.code_score_single_line,
                multi_line_threshold=self._cfg.code_score_multi_line,
            )
            and detect_language_markers(text) is not None
        )

    def _upgrade_message(
        self, result: Classification, text: str, app_name: str | None
    ) -> Classification:
        if result.primary_type is not PrimaryType.TEXT:
            return result
        sender = tp.name_prefix(text)
        from_messenger = is_messaging_app(app_name, self._cfg.messaging_apps)
        narrative = (
            len(text.strip()) <= self._cfg.message_max_chars
            and tp.REPORTING_VERB_RE.search(text) is not None
        )
        if sender is None and not from_messenger and not narrative:
            return result
        result.primary_type = PrimaryType.MESSAGE
        result.tags = ensure_tag(result.tags, "message")
        result.contact = sender or (app_name if from_messenger else None)
        return result
