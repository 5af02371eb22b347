"""chapters.py — Read-time chapter normalization and body-chapter selection."""

import re
from collections.abc import Callable, Mapping
from dataclasses import dataclass

from models import UNTITLED, Chapter

IMAGE_MARKER = re.compile(r"<<<IMAGE:([^>]+)>>>")

# Separator lines some EPUBs carry as their own "sentence".
BOILERPLATE_MARKERS = {"***", "* END *", "END", "*** * END * ***"}

CHAPTER_NUMBER_TITLE = re.compile(r"^\s*chapter\s+\d+\s*$", re.IGNORECASE)
NOISE_TITLE = re.compile(
    r"(contents|table of contents|copyright|isbn|publisher|preface|foreword|about|introduction|title page)",
    re.IGNORECASE,
)
MIN_NUMBERED_CHAPTERS = 3
MIN_BODY_SENTENCES = 10


def get_image_key(sentence: str) -> str | None:
    """Key of an inline illustration marker, or None for ordinary text."""
    match = IMAGE_MARKER.search(sentence or "")
    return match.group(1) if match else None


def _as_sentence_list(value) -> list[str]:
    if not isinstance(value, (list, tuple)):
        return []
    return [s if isinstance(s, str) else "" for s in value]


def sanitize_paragraphs(paragraphs, title: str | None = None) -> list[list[str]]:
    """
    Trim sentences, drop empties and boilerplate markers, drop empty paragraphs,
    and drop a leading sentence that just repeats the chapter title.
    """
    cleaned = []
    for para in paragraphs if isinstance(paragraphs, (list, tuple)) else []:
        sentences = [s.strip() for s in _as_sentence_list(para)]
        sentences = [s for s in sentences if s and s not in BOILERPLATE_MARKERS]
        if sentences:
            cleaned.append(sentences)

    title_lower = (title or "").strip().lower()
    # Repeated until clean so a second pass is a no-op.
    while cleaned and title_lower and cleaned[0][0].lower() == title_lower:
        cleaned[0] = cleaned[0][1:]
        if not cleaned[0]:
            cleaned = cleaned[1:]
    return cleaned


def normalize_chapter(raw) -> Chapter:
    """
    Coerce a persisted chapter into the canonical shape.
    Accepts a Chapter, the current {"title", "paragraphs"} mapping, or the
    legacy {"title", "content"} flat list. Never raises.
    """
    if isinstance(raw, Chapter):
        raw = {"title": raw.title, "paragraphs": raw.paragraphs}
    if not isinstance(raw, Mapping):
        raw = {}

    title = raw.get("title")
    title = title.strip() if isinstance(title, str) else ""
    title = title or UNTITLED

    paragraphs = raw.get("paragraphs")
    has_text = isinstance(paragraphs, (list, tuple)) and any(
        s.strip() for p in paragraphs for s in _as_sentence_list(p)
    )
    if not has_text:
        paragraphs = [_as_sentence_list(raw.get("content"))]

    return Chapter(title=title, paragraphs=sanitize_paragraphs(paragraphs, title))


def normalize_chapters(raw) -> list[Chapter]:
    if not isinstance(raw, (list, tuple)):
        return []
    return [normalize_chapter(c) for c in raw]


def flatten_chapter_sentences(chapter: Chapter) -> list[str]:
    return [s for para in chapter.paragraphs for s in para if s]


def is_numbered_chapter(chapter: Chapter) -> bool:
    return bool(CHAPTER_NUMBER_TITLE.match(chapter.title))


def has_sentences(chapter: Chapter) -> bool:
    return bool(flatten_chapter_sentences(chapter))


def is_not_noise_title(chapter: Chapter) -> bool:
    return not NOISE_TITLE.search(chapter.title)


def is_long_enough(chapter: Chapter) -> bool:
    return len(flatten_chapter_sentences(chapter)) >= MIN_BODY_SENTENCES


@dataclass(frozen=True)
class BodyRule:
    name: str
    keep: Callable[[Chapter], bool]


# Applied in order when the numbered-chapter signal is absent; a chapter must pass all.
FALLBACK_RULES = [
    BodyRule("has_sentences", has_sentences),
    BodyRule("not_noise_title", is_not_noise_title),
    BodyRule("min_sentences", is_long_enough),
]


def rejected_by(chapter: Chapter, rules: list[BodyRule] = FALLBACK_RULES) -> str | None:
    """Name of the first fallback rule that rejects the chapter, or None if kept."""
    for rule in rules:
        if not rule.keep(chapter):
            return rule.name
    return None


def pick_body_chapters(chapters) -> list[Chapter]:
    """
    Chapters to display as the book body. Does not modify its input.

    With at least three "Chapter N" titles, exactly those are the body.
    Otherwise front matter is filtered out with FALLBACK_RULES.
    """
    normalized = normalize_chapters(list(chapters) if chapters is not None else [])

    numbered = [c for c in normalized if is_numbered_chapter(c)]
    if len(numbered) >= MIN_NUMBERED_CHAPTERS:
        return numbered

    return [c for c in normalized if rejected_by(c) is None]
