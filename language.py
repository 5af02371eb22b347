"""language.py — Language codes, labels and script-based detection."""

import re

from models import LanguageHint

AUTO = "auto"

LANGUAGE_LABELS = {
    "en": "English",
    "ko": "Korean",
    "ja": "Japanese",
    "zh": "Chinese",
    "fr": "French",
    "es": "Spanish",
    "de": "German",
    "ru": "Russian",
}
LANGUAGE_CODES = frozenset(LANGUAGE_LABELS) | {AUTO}

# Order matters: the first script found wins.
SCRIPT_RULES = [
    ("ko", "contains_hangul", re.compile(r"[\u1100-\u11FF\u3131-\u318E\uAC00-\uD7A3]")),
    ("ja", "contains_kana", re.compile(r"[\u3040-\u309F\u30A0-\u30FF]")),
    ("zh", "contains_cjk", re.compile(r"[\u4E00-\u9FFF]")),
    ("ru", "contains_cyrillic", re.compile(r"[\u0410-\u042F\u0430-\u044F\u0401\u0451]")),
    ("en", "contains_latin", re.compile(r"[A-Za-z]")),
]

SAMPLE_SENTENCES = 120
SAMPLE_CHARS = 5000


def normalize_language_code(code: str | None) -> str:
    """Coerce any input to a member of LANGUAGE_CODES."""
    normalized = (code or "").strip().lower() if isinstance(code, str) else ""
    if normalized in LANGUAGE_LABELS:
        return normalized
    return AUTO


def resolve_language_label(code: str | None) -> str:
    if not code or code == AUTO:
        return "Auto"
    return LANGUAGE_LABELS.get(code, code.upper())


def detect_language_hint(text: str | None) -> LanguageHint:
    trimmed = (text or "").strip()
    if not trimmed:
        return LanguageHint(AUTO, "empty")
    for code, reason, pattern in SCRIPT_RULES:
        if pattern.search(trimmed):
            return LanguageHint(code, reason)
    return LanguageHint(AUTO, "no_script_signal")


def detect_language_from_sentences(sentences: list[str], max_sentences: int = SAMPLE_SENTENCES,
                                   max_chars: int = SAMPLE_CHARS) -> LanguageHint:
    """Classify the dominant script from a prefix of the document."""
    if not sentences:
        return LanguageHint(AUTO, "no_sentences")
    joined = " ".join(sentences[:max_sentences])[:max_chars]
    return detect_language_hint(joined)
