"""parsers/subtitle_parser.py — Parse SRT/VTT subtitle streams into one paragraph of sentences."""

import re

from models import Chapter
from parsers.base import ParseResult, clean_text
from parsers.text_parser import decode_text
from segmenter import DEFAULT_LANGUAGE, split_sentences

CHAPTER_TITLE = "Subtitles"

_INDEX_LINE = re.compile(r"^\d+$")
_INLINE_TAG = re.compile(r"<[^>]+>")


def subtitle_text_lines(content: str) -> list[str]:
    """Return the spoken-text lines: no cue numbers, no timing lines, no header."""
    lines = []
    for line in content.splitlines():
        line = line.strip()
        if not line:
            continue
        if "-->" in line:
            continue
        if _INDEX_LINE.match(line):
            continue
        if line.upper().startswith("WEBVTT"):
            continue
        line = _INLINE_TAG.sub("", line).strip()
        if line:
            lines.append(line)
    return lines


def parse_subtitles(data: bytes, language: str = DEFAULT_LANGUAGE) -> ParseResult:
    content = clean_text(decode_text(data))
    sentences = split_sentences(" ".join(subtitle_text_lines(content)), language)
    paragraphs = [sentences] if sentences else []
    return ParseResult(chapters=[Chapter(title=CHAPTER_TITLE, paragraphs=paragraphs)])
