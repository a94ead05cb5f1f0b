"""SnipStack configuration loader.

Priority (high → low):
  1. CLI flags           (handled at call site — not in this module)
  2. Environment variables  (SNIPSTACK_MODEL, SNIPSTACK_DB, SNIPSTACK_LLM_ENABLED)
  3. Per-project snipstack.yaml
  4. Global ~/.snipstack/config.yaml  (no API keys)
  5. Hardcoded defaults

Every heuristic threshold lives here as a named, overridable value. The
defaults are the empirically chosen numbers the classifier and search were
tuned against; change them only to trade behaviour compatibility knowingly.
All YAML reads use yaml.safe_load() — never yaml.load().
"""

from __future__ import annotations

import os
import re
import warnings
from dataclasses import dataclass, field
from pathlib import Path
from typing import Any

import yaml

# ---------------------------------------------------------------------------
# Constants
# ---------------------------------------------------------------------------

_GLOBAL_CONFIG_DIR: Path = Path.home() / ".snipstack"
_GLOBAL_CONFIG_PATH: Path = _GLOBAL_CONFIG_DIR / "config.yaml"
_PROJECT_CONFIG_NAME: str = "snipstack.yaml"
DEFAULT_DB_PATH: Path = _GLOBAL_CONFIG_DIR / "snipstack.db"

# Fields that suggest an API key; forbidden in global config.
_API_KEY_RE: re.Pattern[str] = re.compile(
    r"api[_\-]?(?:key|secret)"
    r"|_token$"
    r"|^token$"
    r"|_secret$"
    r"|^secret$"
    r"|passw(?:ord|d)"
    r"|credential",
    re.IGNORECASE,
)

_KNOWN_SECTIONS: frozenset[str] = frozenset(
    ["llm", "classifier", "dates", "search", "capture", "storage"]
)

DEFAULT_MESSAGING_APPS: tuple[str, ...] = (
    "imessage",
    "messages",
    "whatsapp",
    "slack",
    "discord",
    "telegram",
    "signal",
    "teams",
    "messenger",
)


# ---------------------------------------------------------------------------
# Exceptions
# ---------------------------------------------------------------------------


class ConfigError(ValueError):
    """Raised when a config file contains an invalid or forbidden value."""


# ---------------------------------------------------------------------------
# Data model
# ---------------------------------------------------------------------------


@dataclass
class LlmCfg:
    """Remote classifier / date resolver model (snipstack.yaml: llm:)."""

    model: str = "openai/gpt-4o-mini"
    enabled: bool = True
    timeout: float = 10.0
    num_retries: int = 1


@dataclass
class ClassifierCfg:
    """Content classifier thresholds (snipstack.yaml: classifier:).

    Attributes:
        max_chars: Prefix length sent to the remote classifier.
        long_text_chars: Fallback "long text" threshold (strictly greater).
        multi_line_lines: Fallback "multi-line" threshold (strictly greater).
        message_max_chars: Length ceiling for the narrative-verb message upgrade.
        code_score_single_line: looks_like_code threshold for one-line input.
        code_score_multi_line: looks_like_code threshold for multi-line input.
        statistical_detector: Use the statistical language detector after the
            signature table misses.
        messaging_apps: Source-app names (lowercase) treated as messaging apps.
    """

    max_chars: int = 1_500
    long_text_chars: int = 300
    multi_line_lines: int = 3
    message_max_chars: int = 280
    code_score_single_line: int = 4
    code_score_multi_line: int = 3
    statistical_detector: bool = True
    messaging_apps: tuple[str, ...] = DEFAULT_MESSAGING_APPS


@dataclass
class DatesCfg:
    """Date resolution (snipstack.yaml: dates:)."""

    smart: bool = False
    prefer_past: bool = True


@dataclass
class SearchCfg:
    """Search behaviour (snipstack.yaml: search:)."""

    min_match_ratio: float = 0.5
    min_term_length: int = 3
    default_sort: str = "newest"


@dataclass
class CaptureCfg:
    """Capture de-duplication (snipstack.yaml: capture:)."""

    debounce_ms: int = 500


@dataclass
class StorageCfg:
    """Snippet store location (snipstack.yaml: storage:)."""

    path: str = str(DEFAULT_DB_PATH)


@dataclass
class SnipstackConfig:
    """Root configuration object, built by load_config() from merged YAML layers."""

    llm: LlmCfg = field(default_factory=LlmCfg)
    classifier: ClassifierCfg = field(default_factory=ClassifierCfg)
    dates: DatesCfg = field(default_factory=DatesCfg)
    search: SearchCfg = field(default_factory=SearchCfg)
    capture: CaptureCfg = field(default_factory=CaptureCfg)
    storage: StorageCfg = field(default_factory=StorageCfg)


# ---------------------------------------------------------------------------
# Validation helpers
# ---------------------------------------------------------------------------


def _check_no_api_keys(data: dict[str, Any], source: Path) -> None:
    """Raise ConfigError if *data* contains any API-key-like key names."""

    def _scan(obj: Any, path: str) -> None:
        if isinstance(obj, dict):
            for k, v in obj.items():
                full = f"{path}.{k}" if path else k
                if _API_KEY_RE.search(str(k)):
                    raise ConfigError(
                        f"Global config '{source}' contains a forbidden key '{full}'.\n"
                        f"  API keys must be set via environment variables, not config files.\n"
                        f"  Remove '{full}' from {source.name} and use:\n"
                        f"    export {str(k).upper().replace('-', '_')}=<value>"
                    )
                _scan(v, full)

    _scan(data, "")


def _warn_unknown_keys(data: dict[str, Any], source: Path) -> None:
    """Emit a UserWarning for unrecognised top-level keys."""
    for key in data:
        if key not in _KNOWN_SECTIONS:
            warnings.warn(
                f"Unknown config key '{key}' in '{source}' — ignored.",
                UserWarning,
                stacklevel=4,
            )


def _as_bool(value: Any) -> bool:
    if isinstance(value, str):
        return value.strip().lower() in {"1", "true", "yes", "on"}
    return bool(value)


# ---------------------------------------------------------------------------
# Merge + build
# ---------------------------------------------------------------------------


def _deep_merge(base: dict[str, Any], override: dict[str, Any]) -> dict[str, Any]:
    """Return a new dict that is *base* deep-merged with *override*."""
    result = dict(base)
    for k, v in override.items():
        if k in result and isinstance(result[k], dict) and isinstance(v, dict):
            result[k] = _deep_merge(result[k], v)
        else:
            result[k] = v
    return result


def _cfg_from_dict(data: dict[str, Any]) -> SnipstackConfig:
    """Build a *SnipstackConfig* from a merged raw YAML dict."""
    cfg = SnipstackConfig()

    if "llm" in data:
        m = data["llm"] or {}
        cfg.llm = LlmCfg(
            model=str(m.get("model", cfg.llm.model)),
            enabled=_as_bool(m.get("enabled", cfg.llm.enabled)),
            timeout=float(m.get("timeout", cfg.llm.timeout)),
            num_retries=int(m.get("num_retries", cfg.llm.num_retries)),
        )

    if "classifier" in data:
        c = data["classifier"] or {}
        d = cfg.classifier
        apps = c.get("messaging_apps")
        cfg.classifier = ClassifierCfg(
            max_chars=int(c.get("max_chars", d.max_chars)),
            long_text_chars=int(c.get("long_text_chars", d.long_text_chars)),
            multi_line_lines=int(c.get("multi_line_lines", d.multi_line_lines)),
            message_max_chars=int(c.get("message_max_chars", d.message_max_chars)),
            code_score_single_line=int(
                c.get("code_score_single_line", d.code_score_single_line)
            ),
            code_score_multi_line=int(
                c.get("code_score_multi_line", d.code_score_multi_line)
            ),
            statistical_detector=_as_bool(
                c.get("statistical_detector", d.statistical_detector)
            ),
            messaging_apps=(
                tuple(str(a).lower() for a in apps) if apps else d.messaging_apps
            ),
        )

    if "dates" in data:
        dt = data["dates"] or {}
        cfg.dates = DatesCfg(
            smart=_as_bool(dt.get("smart", cfg.dates.smart)),
            prefer_past=_as_bool(dt.get("prefer_past", cfg.dates.prefer_past)),
        )

    if "search" in data:
        s = data["search"] or {}
        cfg.search = SearchCfg(
            min_match_ratio=float(s.get("min_match_ratio", cfg.search.min_match_ratio)),
            min_term_length=int(s.get("min_term_length", cfg.search.min_term_length)),
            default_sort=str(s.get("default_sort", cfg.search.default_sort)),
        )
        if cfg.search.default_sort not in ("newest", "oldest"):
            raise ConfigError(
                f"search.default_sort must be 'newest' or 'oldest', "
                f"got '{cfg.search.default_sort}'"
            )
        if not 0.0 < cfg.search.min_match_ratio <= 1.0:
            raise ConfigError("search.min_match_ratio must be in (0.0, 1.0]")

    if "capture" in data:
        cp = data["capture"] or {}
        cfg.capture = CaptureCfg(
            debounce_ms=int(cp.get("debounce_ms", cfg.capture.debounce_ms)),
        )

    if "storage" in data:
        st = data["storage"] or {}
        cfg.storage = StorageCfg(path=str(st.get("path", cfg.storage.path)))

    return cfg


def _apply_env_overrides(cfg: SnipstackConfig) -> SnipstackConfig:
    """Apply SNIPSTACK_* environment variable overrides (layer 2)."""
    if model := os.environ.get("SNIPSTACK_MODEL"):
        cfg.llm.model = model
    if db := os.environ.get("SNIPSTACK_DB"):
        cfg.storage.path = db
    if (enabled := os.environ.get("SNIPSTACK_LLM_ENABLED")) is not None:
        cfg.llm.enabled = _as_bool(enabled)
    return cfg


# ---------------------------------------------------------------------------
# Public API
# ---------------------------------------------------------------------------


def load_config(
    project_dir: Path | None = None,
    *,
    global_config_path: Path | None = None,
) -> SnipstackConfig:
    """Load and return a merged *SnipstackConfig*.

    Applies layers in order: global → per-project → env vars.
    CLI flag overrides must be applied by the caller after this function.

    Args:
        project_dir: Directory to search for *snipstack.yaml*. Defaults to CWD.
        global_config_path: Override the global config path (for testing).

    Raises:
        ConfigError: If global config contains API-key-like fields or a value
            is out of range.
    """
    global_path = global_config_path if global_config_path is not None else _GLOBAL_CONFIG_PATH
    search_dir = project_dir if project_dir is not None else Path.cwd()

    merged: dict[str, Any] = {}

    if global_path.exists():
        raw_global = yaml.safe_load(global_path.read_text(encoding="utf-8")) or {}
        _check_no_api_keys(raw_global, global_path)
        _warn_unknown_keys(raw_global, global_path)
        merged = _deep_merge(merged, raw_global)

    project_cfg_path = search_dir / _PROJECT_CONFIG_NAME
    if project_cfg_path.exists():
        raw_project = yaml.safe_load(project_cfg_path.read_text(encoding="utf-8")) or {}
        _warn_unknown_keys(raw_project, project_cfg_path)
        merged = _deep_merge(merged, raw_project)

    cfg = _cfg_from_dict(merged)
    return _apply_env_overrides(cfg)


def ensure_global_config(
    global_config_path: Path | None = None,
) -> Path:
    """Create ``~/.snipstack/config.yaml`` with defaults if it does not exist.

    Creates parent directory with mode 0o700 and the config file with
    mode 0o600 (owner-readable only).
    """
    target = global_config_path if global_config_path is not None else _GLOBAL_CONFIG_PATH
    target.parent.mkdir(mode=0o700, parents=True, exist_ok=True)

    if not target.exists():
        content = (
            "# SnipStack global configuration.\n"
            "# NEVER store API keys here — use environment variables:\n"
            "#   export OPENAI_API_KEY=sk-...\n"
            "\n"
            "llm:\n"
            "  model: openai/gpt-4o-mini\n"
            "  enabled: true\n"
            "\n"
            "search:\n"
            "  default_sort: newest\n"
        )
        target.write_text(content, encoding="utf-8")
        target.chmod(0o600)

    return target
