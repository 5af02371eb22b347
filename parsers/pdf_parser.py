"""parsers/pdf_parser.py — Parse PDF files into a single chapter using pymupdf."""

import logging
from pathlib import Path

from models import Chapter
from parsers.base import ParseResult, PdfParseError, clean_text
from segmenter import DEFAULT_LANGUAGE, text_to_paragraphs

log = logging.getLogger(__name__)

CHAPTER_TITLE = "Full Text"


def _extract_text(doc) -> str:
    if doc.needs_pass:
        raise PdfParseError("PDF is encrypted or password-protected")
    pages = [doc[page_num].get_text("text") for page_num in range(doc.page_count)]
    return "\n\n".join(pages)


def parse_pdf(data: bytes | None = None, file_path: Path | None = None,
              language: str = DEFAULT_LANGUAGE) -> ParseResult:
    """
    Parse a PDF into one "Full Text" chapter. Embedded metadata titles are
    ignored; the book is named after its file.
    Text extraction failures raise PdfParseError; no partial text is returned.
    """
    import fitz  # pymupdf

    try:
        if data is not None:
            doc = fitz.open(stream=data, filetype="pdf")
        else:
            doc = fitz.open(str(file_path))
    except Exception as e:
        log.error("PDF open failed: %s", e)
        raise PdfParseError("Failed to parse PDF") from e

    try:
        raw_text = _extract_text(doc)
    except PdfParseError:
        raise
    except Exception as e:
        log.error("PDF text extraction failed: %s", e)
        raise PdfParseError("Failed to parse PDF") from e
    finally:
        doc.close()

    paragraphs = text_to_paragraphs(clean_text(raw_text), language)
    log.info("Extracted %d paragraphs from PDF", len(paragraphs))
    return ParseResult(chapters=[Chapter(title=CHAPTER_TITLE, paragraphs=paragraphs)])
