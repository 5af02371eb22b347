"""positions.py — Translate between flat sentence offsets and chapter/paragraph/sentence positions."""

import json
import re
from collections.abc import Mapping

from models import Chapter, ReadingPosition


def _length(paragraph) -> int:
    return len(paragraph) if isinstance(paragraph, (list, tuple)) else 0


def _is_int(value) -> bool:
    return isinstance(value, int) and not isinstance(value, bool)


def _clamp(value: int, count: int) -> int:
    """Clamp into [0, count - 1]; 0 when count is 0."""
    return min(max(0, value), max(0, count - 1))


def _last_in(paragraphs: list[list[str]]) -> tuple[int, int] | None:
    """Last (paragraph, sentence) holding a sentence; None for a chapter without any."""
    for p in range(len(paragraphs) - 1, -1, -1):
        length = _length(paragraphs[p])
        if length:
            return p, length - 1
    return None


def _last_position(chapters: list[Chapter]) -> ReadingPosition:
    for c in range(len(chapters) - 1, -1, -1):
        last = _last_in(chapters[c].paragraphs)
        if last is not None:
            return ReadingPosition(c, *last)
    return ReadingPosition(0, 0, 0)


def _first_position_from(chapters: list[Chapter], start: int) -> ReadingPosition:
    """Start of the first chapter from `start` on that holds a sentence, else the book's last sentence."""
    for c in range(start, len(chapters)):
        if _last_in(chapters[c].paragraphs) is not None:
            return ReadingPosition(c, *flat_index_to_paragraph_sentence(0, chapters[c].paragraphs))
    return _last_position(chapters)


def paragraph_sentence_to_flat_index(paragraphs: list[list[str]], paragraph_index: int,
                                     sentence_index: int) -> int:
    """Offset of a sentence when one chapter's paragraphs are read as a single list."""
    flat = 0
    for p, paragraph in enumerate(paragraphs or []):
        if p == paragraph_index:
            return flat + sentence_index
        flat += _length(paragraph)
    return max(0, flat - 1)


def position_to_flat_index(position: ReadingPosition, chapters: list[Chapter]) -> int:
    """
    Book-wide offset: every sentence of the chapters before, plus the in-chapter offset.
    An out-of-range chapter index is clamped into the book.
    """
    if not chapters:
        return 0
    c = _clamp(position.chapter_index, len(chapters))
    before = sum(_length(p) for ch in chapters[:c] for p in ch.paragraphs)
    return before + paragraph_sentence_to_flat_index(
        chapters[c].paragraphs, position.paragraph_index, position.sentence_index
    )


def flat_index_to_paragraph_sentence(flat_index: int, paragraphs: list[list[str]]) -> tuple[int, int]:
    """(paragraph_index, sentence_index) within one chapter; past the end clamps to the last sentence."""
    idx = max(0, flat_index)
    paragraphs = paragraphs or []
    for p, paragraph in enumerate(paragraphs):
        length = _length(paragraph)
        if idx < length:
            return p, idx
        idx -= length
    return _last_in(paragraphs) or (0, 0)


def flat_index_to_position(flat_index: int, chapters: list[Chapter]) -> ReadingPosition:
    """Position of a book-wide offset; past the end clamps to the book's last sentence."""
    idx = max(0, flat_index)
    for c, chapter in enumerate(chapters):
        for p, paragraph in enumerate(chapter.paragraphs):
            length = _length(paragraph)
            if idx < length:
                return ReadingPosition(c, p, idx)
            idx -= length

    return _last_position(chapters)


def resolve_saved_progress(saved, chapters: list[Chapter]) -> ReadingPosition | None:
    """
    Decode every stored progress shape into a position:

    - a bare integer (or digit string): book-wide flat index
    - {"chapterIndex", "paragraphIndex", "sentenceIndex"}: current shape, clamped
    - {"chapterIndex", "sentenceIndex"}: flat index within the chapter

    Returns None when nothing usable is stored.
    """
    if isinstance(saved, (str, bytes)):
        text = saved.decode("utf-8", errors="replace") if isinstance(saved, bytes) else saved
        text = text.strip()
        if re.fullmatch(r"\d+", text):
            return flat_index_to_position(int(text), chapters)
        try:
            saved = json.loads(text)
        except ValueError:
            return None

    if _is_int(saved):
        return flat_index_to_position(saved, chapters)
    if not isinstance(saved, Mapping):
        return None

    c = saved.get("chapterIndex")
    c = _clamp(c if _is_int(c) else 0, len(chapters))
    if chapters and _last_in(chapters[c].paragraphs) is None:
        return _first_position_from(chapters, c)
    paragraphs = chapters[c].paragraphs if chapters else []

    p, s = saved.get("paragraphIndex"), saved.get("sentenceIndex")
    if _is_int(p) and _is_int(s):
        p = _clamp(p, len(paragraphs))
        s = _clamp(s, _length(paragraphs[p]) if paragraphs else 0)
        return ReadingPosition(c, p, s)
    if _is_int(s):
        return ReadingPosition(c, *flat_index_to_paragraph_sentence(s, paragraphs))
    return ReadingPosition(c, 0, 0)


def position_to_progress(position: ReadingPosition) -> dict:
    """The current stored progress shape."""
    return {
        "chapterIndex": position.chapter_index,
        "paragraphIndex": position.paragraph_index,
        "sentenceIndex": position.sentence_index,
    }
