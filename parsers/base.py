"""parsers/base.py — Shared parser utilities and types."""

import re
from dataclasses import dataclass

from models import Chapter


@dataclass
class ParseResult:
    """Standard return type for all parsers."""
    chapters: list[Chapter]
    title: str | None = None        # format-reported title, e.g. EPUB dc:title


class ParseError(ValueError):
    """A document could not be decoded at all; nothing partial is returned."""

    def __init__(self, message: str, filename: str | None = None):
        super().__init__(message)
        self.filename = filename


class PdfParseError(ParseError):
    pass


class EpubParseError(ParseError):
    pass


def clean_text(text: str) -> str:
    """Strip invisible characters that break segmentation; keeps line structure."""
    text = text.replace("\ufeff", "").replace("\u00ad", "").replace("\u200b", "")
    text = text.replace("\u2028", "\n").replace("\u2029", "\n\n")
    text = re.sub(r"[\x00-\x08\x0B\x0C\x0E-\x1F\x7F]", " ", text)
    return text
