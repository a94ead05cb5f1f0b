"""Code-likeness scoring and per-language syntax signatures.

``looks_like_code`` scores text on a fixed rubric. Each code indicator adds a
fixed weight, each natural-language indicator subtracts one. Single-line
fragments need a higher score than multi-line text because short prose
fragments produce far more false positives.

``detect_language_markers`` walks an ordered signature table and returns the
first language whose signatures match. Order encodes priority.
"""

from __future__ import annotations

import re

# ---------------------------------------------------------------------------
# Thresholds
# ---------------------------------------------------------------------------

CODE_SCORE_SINGLE_LINE: int = 4
CODE_SCORE_MULTI_LINE: int = 3

# ---------------------------------------------------------------------------
# Rubric patterns
# ---------------------------------------------------------------------------

_CALL_RE = re.compile(r"[A-Za-z_][\w.]*\s*\([^()\n]*\)")
_KEYWORD_RE = re.compile(
    r"\b(?:def|function|class|return|import|const|let|var|public|private|protected|"
    r"static|void|elif|lambda|async|await|struct|enum|interface|namespace|fn|func|"
    r"println|printf|console\.log|SELECT|INSERT|UPDATE|DELETE\s+FROM)\b"
    r"|\b(?:if|for|while|switch|catch)\s*\("
)
_DECLARATION_RE = re.compile(
    r"^\s*(?:def|class|function|fn|func|public|private|protected|static|interface|struct)\s+\w+",
    re.MULTILINE,
)
_OPERATOR_RE = re.compile(r"=>|===|!==|==|!=|\+=|-=|&&|\|\||->|::|<=|>=|\+\+")
_ASSIGNMENT_RE = re.compile(r"\b[A-Za-z_]\w*(?:\[[^\]]*\])?\s*=\s*[^=\s]")
_COMMENT_RE = re.compile(r"(?:^|\s)(?://|/\*|\*/|#!)|^\s*--\s", re.MULTILINE)
_TERMINATOR_RE = re.compile(r"[;{}]\s*$", re.MULTILINE)
_HTML_PAIR_RE = re.compile(r"<([a-zA-Z][\w-]*)\b[^>]*>.*?</\1\s*>", re.DOTALL)
_INDENTED_LINE_RE = re.compile(r"^(?: {2,}|\t)\S", re.MULTILINE)

_PRONOUN_VERB_RE = re.compile(
    r"\b(?:i|you|we|they|he|she|it)\s+(?:am|are|is|was|were|have|had|will|would|can|could|"
    r"should|think|want|need|know|feel|just|really|love|hope)\b",
    re.IGNORECASE,
)
_CONVERSATIONAL_RE = re.compile(
    r"\b(?:hey|hi there|hello|thanks|thank you|please|lol|haha|let me know|"
    r"how are you|see you|talk soon|sounds good|no worries|by the way)\b",
    re.IGNORECASE,
)
_PROSE_ENDING_RE = re.compile(r"[A-Za-z][.!?]$")

# Error text users copy out of apps and browsers. Never code, whatever the score.
_NON_CODE_ERROR_PHRASES: tuple[str, ...] = (
    "something went wrong",
    "an error occurred",
    "an unexpected error",
    "please try again",
    "page not found",
    "404 not found",
    "internal server error",
    "access denied",
    "permission denied",
    "network error",
    "connection refused",
    "connection timed out",
    "failed to fetch",
    "failed to load",
    "unable to connect",
)
# Stack traces and exception headers are error output, not source.
_STACK_TRACE_RE = re.compile(
    r"Traceback \(most recent call last\)"
    r"|^\s*File \"[^\"]+\", line \d+"
    r"|^\s+at \S+(?: \S+)? \(.*:\d+:\d+\)\s*$"
    r"|^\s+at .*:\d+:\d+\s*$"
    r"|^[\w.$]*(?:Error|Exception): ",
    re.MULTILINE,
)


def _has_balanced_braces(text: str) -> bool:
    if "{" not in text:
        return False
    depth = 0
    for ch in text:
        if ch == "{":
            depth += 1
        elif ch == "}":
            depth -= 1
            if depth < 0:
                return False
    return depth == 0


def code_score(text: str) -> int:
    """Return the raw code-likeness score for *text* (may be negative)."""
    stripped = text.strip()
    lines = [ln for ln in stripped.splitlines() if ln.strip()]
    multi_line = len(lines) > 1
    score = 0

    if _has_balanced_braces(stripped):
        score += 2
    if _CALL_RE.search(stripped):
        score += 1
    if _KEYWORD_RE.search(stripped):
        score += 2
    if _DECLARATION_RE.search(stripped):
        score += 1
    if _OPERATOR_RE.search(stripped):
        score += 1
    if _ASSIGNMENT_RE.search(stripped):
        score += 1
    if multi_line and len(_INDENTED_LINE_RE.findall(stripped)) >= 1:
        score += 2
    if _COMMENT_RE.search(stripped):
        score += 1
    terminators = len(_TERMINATOR_RE.findall(stripped))
    if terminators:
        score += 2 if multi_line and terminators > 1 else 1
    if _HTML_PAIR_RE.search(stripped):
        score += 3

    if _PRONOUN_VERB_RE.search(stripped):
        score -= 2
    if _CONVERSATIONAL_RE.search(stripped):
        score -= 2
    if _PROSE_ENDING_RE.search(stripped) and ";" not in stripped and "}" not in stripped:
        score -= 1

    return score


def looks_like_code(
    text: str,
    *,
    single_line_threshold: int = CODE_SCORE_SINGLE_LINE,
    multi_line_threshold: int = CODE_SCORE_MULTI_LINE,
) -> bool:
    """Return True if *text* scores as source code.

    Args:
        text: Raw captured text.
        single_line_threshold: Minimum score for one-line input.
        multi_line_threshold: Minimum score for multi-line input.
    """
    stripped = text.strip()
    if not stripped:
        return False
    lowered = stripped.lower()
    if any(phrase in lowered for phrase in _NON_CODE_ERROR_PHRASES):
        return False
    if _STACK_TRACE_RE.search(stripped):
        return False

    lines = [ln for ln in stripped.splitlines() if ln.strip()]
    threshold = multi_line_threshold if len(lines) > 1 else single_line_threshold
    return code_score(stripped) >= threshold


# ---------------------------------------------------------------------------
# Language signatures
# ---------------------------------------------------------------------------

_M = re.MULTILINE
_MI = re.MULTILINE | re.IGNORECASE

# First match wins. Do not reorder.
LANGUAGE_SIGNATURES: tuple[tuple[str, tuple[re.Pattern[str], ...]], ...] = (
    (
        "python",
        (
            re.compile(r"^\s*def \w+\(.*\)\s*(?:->\s*[\w\[\], .]+)?:\s*$", _M),
            re.compile(r"^\s*from [\w.]+ import [\w*, ()]+\s*$", _M),
            re.compile(r"^\s*import [\w.]+(?: as \w+)?\s*$", _M),
            re.compile(r"^\s*class \w+(?:\([\w., ]*\))?:\s*$", _M),
            re.compile(r"^\s*elif .+:\s*$", _M),
            re.compile(r"\bself\.\w+"),
            re.compile(r"if __name__ == ['\"]__main__['\"]"),
            re.compile(r"^\s*print\(.*\)\s*$", _M),
        ),
    ),
    (
        "javascript",
        (
            re.compile(r"\b(?:const|let|var)\s+[\w$]+\s*=(?!=)"),
            re.compile(r"\bfunction\s*[\w$]*\s*\([^)]*\)\s*\{"),
            re.compile(r"\([^()]*\)\s*=>"),
            re.compile(r"\bconsole\.(?:log|error|warn)\("),
            re.compile(r"\bdocument\.\w+"),
            re.compile(r"\brequire\(['\"]"),
            re.compile(r"^\s*import .+ from ['\"]", _M),
            re.compile(r"^\s*export (?:default|const|function|class)\b", _M),
        ),
    ),
    (
        "typescript",
        (
            re.compile(r"\b(?:const|let|var)\s+\w+\s*:\s*\w+"),
            re.compile(r":\s*(?:string|number|boolean|any|void|unknown|never)\b"),
            re.compile(r"^\s*(?:export\s+)?interface \w+\s*(?:extends [\w, ]+)?\{", _M),
            re.compile(r"^\s*(?:export\s+)?type \w+\s*=", _M),
            re.compile(r"\bas const\b"),
        ),
    ),
    (
        "html",
        (
            re.compile(r"<!DOCTYPE html", re.IGNORECASE),
            re.compile(
                r"<(?:html|head|body|div|span|p|a|ul|ol|li|script|style|section|nav|img|form|input|button|table)\b[^>]*>",
                re.IGNORECASE,
            ),
        ),
    ),
    (
        "css",
        (
            re.compile(r"^\s*[.#]?[\w-]+(?:[\s>+~.#:][\w-]+)*\s*\{[^}]*[\w-]+\s*:\s*[^;{}]+;", _M),
            re.compile(r"^\s*@(?:media|import|keyframes|font-face)\b", _M),
        ),
    ),
    (
        "java",
        (
            re.compile(r"\bpublic\s+(?:static\s+)?(?:final\s+)?(?:class|void|int|String|boolean)\b"),
            re.compile(r"\bSystem\.out\.print"),
            re.compile(r"^\s*import java\.", _M),
            re.compile(r"^\s*package [\w.]+;", _M),
        ),
    ),
    (
        "cpp",
        (
            re.compile(r"^\s*#include\s*[<\"]", _M),
            re.compile(r"\bstd::\w+"),
            re.compile(r"\bcout\s*<<"),
            re.compile(r"\btemplate\s*<"),
        ),
    ),
    (
        "csharp",
        (
            re.compile(r"^\s*using System(?:\.[\w.]+)?;", _M),
            re.compile(r"^\s*namespace [\w.]+", _M),
            re.compile(r"\bConsole\.Write(?:Line)?\("),
            re.compile(r"\{\s*get;\s*set;\s*\}"),
        ),
    ),
    (
        "rust",
        (
            re.compile(r"\bfn \w+\s*(?:<[^>]*>)?\("),
            re.compile(r"\blet mut \w+"),
            re.compile(r"\bprintln!\("),
            re.compile(r"^\s*impl\b", _M),
            re.compile(r"^\s*use (?:std|crate)::", _M),
        ),
    ),
    (
        "go",
        (
            re.compile(r"^\s*package \w+\s*$", _M),
            re.compile(r"\bfunc (?:\([^)]*\)\s*)?\w+\("),
            re.compile(r"\bfmt\.\w+\("),
            re.compile(r"\w+\s*:=\s*"),
        ),
    ),
    (
        "sql",
        (
            re.compile(r"\bSELECT\b[\s\S]+?\bFROM\b", re.IGNORECASE),
            re.compile(r"\bINSERT\s+INTO\b", re.IGNORECASE),
            re.compile(r"\bUPDATE\s+\w+\s+SET\b", re.IGNORECASE),
            re.compile(r"\bCREATE\s+(?:TABLE|INDEX|VIEW)\b", re.IGNORECASE),
            re.compile(r"\bDELETE\s+FROM\b", re.IGNORECASE),
        ),
    ),
    (
        "php",
        (
            re.compile(r"<\?php"),
            re.compile(r"\$\w+\s*=\s*[^=]"),
            re.compile(r"\$this->\w+"),
            re.compile(r"^\s*echo\s+['\"$]", _M),
        ),
    ),
    (
        "ruby",
        (
            re.compile(r"^\s*def \w+[?!]?(?:\(.*\))?\s*$", _M),
            re.compile(r"^\s*puts\s", _M),
            re.compile(r"\.each(?:_with_index)? do \|"),
            re.compile(r"^\s*require ['\"]", _M),
            re.compile(r"^\s*end\s*$", _M),
        ),
    ),
    (
        "bash",
        (
            re.compile(r"^#!/(?:usr/)?bin/(?:env\s+)?(?:ba|z)?sh", _M),
            re.compile(
                r"^\s*(?:sudo|apt(?:-get)?|brew|npm|yarn|pip|git|cd|ls|echo|export|curl|wget|chmod|mkdir|rm|docker)\s",
                _MI,
            ),
            re.compile(r"^\s*(?:fi|done|esac)\s*$", _M),
        ),
    ),
)

LANGUAGES: tuple[str, ...] = tuple(name for name, _ in LANGUAGE_SIGNATURES)

LANGUAGE_ALIASES: dict[str, str] = {
    "js": "javascript",
    "node": "javascript",
    "nodejs": "javascript",
    "py": "python",
    "python3": "python",
    "ts": "typescript",
    "c++": "cpp",
    "cplusplus": "cpp",
    "c#": "csharp",
    "cs": "csharp",
    "golang": "go",
    "sh": "bash",
    "shell": "bash",
    "zsh": "bash",
    "rb": "ruby",
    "htm": "html",
    "postgres": "sql",
    "mysql": "sql",
}


def detect_language_markers(text: str) -> str | None:
    """Return the first language whose signatures match *text*, or None."""
    for language, signatures in LANGUAGE_SIGNATURES:
        if any(sig.search(text) for sig in signatures):
            return language
    return None


def normalize_language(name: str) -> str:
    """Map a user-facing language name or alias to its canonical tag."""
    key = name.strip().lower()
    return LANGUAGE_ALIASES.get(key, key)


def languages_match(wanted: str, detected: str | None) -> bool:
    """Fuzzy containment match between a requested and a detected language.

    ``js`` matches ``javascript``; ``java`` matches ``java`` but also
    ``javascript`` through containment, which mirrors how loose search input
    behaves.
    """
    if not detected:
        return False
    a = normalize_language(wanted)
    b = normalize_language(detected)
    if not a:
        return True
    return a in b or b in a


def find_language_name(text: str) -> str | None:
    """Return the canonical language named anywhere in *text*, or None."""
    for token in re.findall(r"[a-z0-9+#]+", text.lower()):
        if token in LANGUAGES:
            return token
        if token in LANGUAGE_ALIASES:
            return LANGUAGE_ALIASES[token]
    return None
