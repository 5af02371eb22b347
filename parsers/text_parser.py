"""parsers/text_parser.py — Plain text (and any unrecognized format) as one chapter."""

from models import Chapter
from parsers.base import ParseResult, clean_text
from segmenter import DEFAULT_LANGUAGE, text_to_paragraphs

CHAPTER_TITLE = "Content"


def decode_text(data: bytes) -> str:
    """Decode UTF-8, tolerating a BOM and replacing undecodable bytes."""
    return data.decode("utf-8-sig", errors="replace")


def parse_text(data: bytes, language: str = DEFAULT_LANGUAGE) -> ParseResult:
    paragraphs = text_to_paragraphs(clean_text(decode_text(data)), language)
    return ParseResult(chapters=[Chapter(title=CHAPTER_TITLE, paragraphs=paragraphs)])
