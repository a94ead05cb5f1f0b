"""URL syntax and the text-shape patterns used by the deterministic fallback rules."""

from __future__ import annotations

import re

# Whole-string match only: text that merely contains a URL is not a link.
_URL_RE = re.compile(
    r"^(?:(?:https?|ftp)://|www\.)"
    r"[^\s/$.?#][^\s]*$",
    re.IGNORECASE,
)
_CONTAINS_URL_RE = re.compile(r"(?:(?:https?|ftp)://|www\.)[^\s<>\"']+", re.IGNORECASE)

EMAIL_RE = re.compile(r"\b[\w.+-]+@[\w-]+\.[\w.-]+\b")
ERROR_RE = re.compile(
    r"Traceback \(most recent call last\)"
    r"|^\s+at [\w$.<>]+\(.*\)\s*$"
    r"|\b(?:[A-Z]\w*(?:Error|Exception))\b:"
    r"|\b(?:ERROR|FATAL|CRITICAL|WARN(?:ING)?)\b[:\]]"
    r"|\bexit (?:code|status) [1-9]\d*"
    r"|\bsegmentation fault\b"
    r"|\bnull ?pointer\b",
    re.MULTILINE,
)
BULLET_LIST_RE = re.compile(r"^\s*(?:[-*•]|\d+[.)])\s+\S", re.MULTILINE)
NAME_PREFIX_RE = re.compile(r"^\s*([A-Z][\w'.-]*(?: [A-Z][\w'.-]*){0,2})\s*:\s+\S")
_LABEL_WORDS = frozenset(
    """
    note notes todo to-do error warning warn info debug fatal re fwd subject date
    to from cc step tip example update summary address phone email url link
    question answer q a ps nb important reminder agenda title description
    """.split()
)
_EXCEPTION_NAME_RE = re.compile(r"(?:Error|Exception|Warning)$")
CODE_KEYWORD_RE = re.compile(
    r"\b(?:function|const|let|var|def|class|import|return|public|private|static|"
    r"void|elif|struct|async|await)\b\s*[\w({]"
    r"|\w+\.\w+\([^)]*\)"
    r"|\b(?:npm|pip|git|docker|kubectl|brew)\s+\w+"
)
TODO_RE = re.compile(
    r"\b(?:todo|to-do|to do|remind(?:er)?|don'?t forget|remember to|need to|buy|pick up)\b"
    r"|^\s*\[[ xX]?\]",
    re.IGNORECASE | re.MULTILINE,
)
MEETING_RE = re.compile(
    r"\b(?:meeting|call|sync|standup|stand-up|appointment|schedule[d]?|agenda|calendar|zoom|"
    r"webinar|interview)\b"
    r".*\b(?:at|on|@|tomorrow|today|monday|tuesday|wednesday|thursday|friday|saturday|sunday|"
    r"\d{1,2}(?::\d{2})?\s*(?:am|pm))\b",
    re.IGNORECASE | re.DOTALL,
)
GREETING_RE = re.compile(
    r"^\s*(?:hi|hey|hello|yo|good (?:morning|afternoon|evening)|greetings|dear \w+)\b",
    re.IGNORECASE,
)
SENTENCE_RE = re.compile(r"^[A-Z\"'][^.!?\n]*[.!?]$")
REPORTING_VERB_RE = re.compile(
    r"\b(?:said|says|told|asked|replied|wrote|texted|messaged|mentioned|sent)\b",
    re.IGNORECASE,
)


def is_url(text: str) -> bool:
    """Return True only if the entire (trimmed) *text* is a single URL."""
    return bool(_URL_RE.match(text.strip()))


def contains_url(text: str) -> bool:
    """Return True if a bare URL appears anywhere in *text*."""
    return bool(_CONTAINS_URL_RE.search(text))


def first_url(text: str) -> str | None:
    """Return the first URL found in *text*, or None."""
    match = _CONTAINS_URL_RE.search(text)
    return match.group(0) if match else None


def name_prefix(text: str) -> str | None:
    """Return the sender name of a ``"Name: message"`` shaped text, or None.

    Common labels (``Note:``, ``TODO:``, ``Error:`` …) are not names.
    """
    match = NAME_PREFIX_RE.match(text)
    if match is None:
        return None
    name = match.group(1)
    if name.split()[0].lower().rstrip(".") in _LABEL_WORDS:
        return None
    # Exception class names ("TypeError: ...")
    if _EXCEPTION_NAME_RE.search(name):
        return None
    return name
