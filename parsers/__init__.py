"""parsers/ — Multi-format document parser package."""

import os
import tempfile
from pathlib import Path

from parsers.base import EpubParseError, ParseError, ParseResult, PdfParseError
from segmenter import DEFAULT_LANGUAGE

FORMAT_BY_EXTENSION = {
    ".pdf": "pdf",
    ".epub": "epub",
    ".srt": "subtitle",
    ".vtt": "subtitle",
}

__all__ = [
    "EpubParseError",
    "ParseError",
    "ParseResult",
    "PdfParseError",
    "detect_format",
    "parse_file",
]


def detect_format(filename: str) -> str:
    """Format label for a filename; anything unrecognized is plain text."""
    return FORMAT_BY_EXTENSION.get(Path(filename).suffix.lower(), "text")


def _parse_epub_bytes(data: bytes, language: str) -> ParseResult:
    from parsers.epub_parser import parse_epub

    fd, tmp_name = tempfile.mkstemp(suffix=".epub")
    try:
        with os.fdopen(fd, "wb") as f:
            f.write(data)
        return parse_epub(Path(tmp_name), language=language)
    finally:
        os.unlink(tmp_name)


def parse_file(data: bytes, filename: str, file_path: Path | None = None,
               language: str = DEFAULT_LANGUAGE) -> ParseResult:
    """Dispatch to the appropriate parser based on file extension."""
    fmt = detect_format(filename)

    if fmt == "pdf":
        from parsers.pdf_parser import parse_pdf
        return parse_pdf(data, file_path, language=language)
    elif fmt == "epub":
        if file_path is not None:
            from parsers.epub_parser import parse_epub
            return parse_epub(Path(file_path), language=language)
        return _parse_epub_bytes(data, language)
    elif fmt == "subtitle":
        from parsers.subtitle_parser import parse_subtitles
        return parse_subtitles(data, language=language)
    else:
        from parsers.text_parser import parse_text
        return parse_text(data, language=language)
