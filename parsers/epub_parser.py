"""parsers/epub_parser.py — Parse packed EPUB files into chapters of paragraphs."""

import logging
import posixpath
import xml.etree.ElementTree as ET
import zipfile
from pathlib import Path

import ebooklib
from bs4 import BeautifulSoup, Comment, NavigableString
from ebooklib import epub

from models import Chapter
from parsers.base import EpubParseError, ParseResult, clean_text
from segmenter import DEFAULT_LANGUAGE, split_sentences

log = logging.getLogger(__name__)

CONTAINER_NS = "urn:oasis:names:tc:opendocument:xmlns:container"

BLOCK_TAGS = ["p", "li", "blockquote", "h1", "h2", "h3", "h4", "h5", "h6"]
HEADING_TAGS = ["h1", "h2", "h3"]


def is_html_like(media_type: str | None) -> bool:
    m = (media_type or "").lower().strip()
    return m in ("application/xhtml+xml", "text/html") or m.endswith("+xml") or "html" in m


def _toc_titles(toc, titles: dict[str, str] | None = None) -> dict[str, str]:
    """Map chapter file names to TOC labels (first label per file wins)."""
    if titles is None:
        titles = {}
    for entry in toc:
        if isinstance(entry, tuple):
            section, children = entry
            _toc_titles([section], titles)
            _toc_titles(children, titles)
            continue
        href = getattr(entry, "href", None) or ""
        label = (getattr(entry, "title", None) or "").strip()
        file_href = href.split("#")[0]
        if file_href and label:
            titles.setdefault(file_href, label)
    return titles


def _opf_dir(archive: zipfile.ZipFile) -> str:
    """Directory of the OPF package document, per META-INF/container.xml."""
    root = ET.fromstring(archive.read("META-INF/container.xml"))
    rootfile = root.find(f".//{{{CONTAINER_NS}}}rootfile")
    if rootfile is None:
        raise ValueError("No rootfile in container.xml")
    return posixpath.dirname(rootfile.get("full-path", ""))


def _read_raw_item(epub_path: Path, item) -> str:
    """Read a chapter file straight from the archive, bypassing the EPUB reader."""
    with zipfile.ZipFile(epub_path) as archive:
        name = posixpath.normpath(posixpath.join(_opf_dir(archive), item.get_name()))
        return archive.read(name).decode("utf-8", errors="replace")


def _read_item_html(epub_path: Path, item) -> str | None:
    """Return chapter markup, or None when the item is unusable."""
    media_type = getattr(item, "media_type", None)
    try:
        content = item.get_content()
        if content:
            return content.decode("utf-8", errors="replace")
    except Exception as e:
        log.debug("EPUB reader could not decode %s: %s", item.get_id(), e)

    # Some books declare chapters as text/html; read those from the archive directly.
    if not is_html_like(media_type):
        log.warning("Skipping non-HTML EPUB item in spine: %s (%s)", item.get_id(), media_type)
        return None
    try:
        return _read_raw_item(epub_path, item)
    except Exception as e:
        log.warning("EPUB chapter fallback read failed: %s (%s)", item.get_id(), e)
        return None


def _own_text(tag) -> str:
    """Text of an outer block that is not inside any nested block element."""
    parts = []
    for child in tag.children:
        if isinstance(child, Comment):
            continue
        if isinstance(child, NavigableString):
            parts.append(str(child))
        elif child.name not in BLOCK_TAGS and child.find(BLOCK_TAGS) is None:
            parts.append(child.get_text(" "))
    return " ".join(" ".join(parts).split())


def extract_paragraph_texts(html: str) -> tuple[list[str], str | None]:
    """
    Return (paragraph texts, first heading) for one chapter document.
    Paragraph-like elements are preferred; an element wrapping other blocks
    contributes only its own loose text so nested markup is not counted twice.
    Without any, the body text is one paragraph.
    """
    soup = BeautifulSoup(html, "lxml")
    body = soup.body or soup
    for tag in body(["script", "style"]):
        tag.decompose()

    heading = body.find(HEADING_TAGS)
    heading_text = " ".join(heading.get_text(" ").split()) if heading else None

    texts = []
    for tag in body.find_all(BLOCK_TAGS):
        if tag.find(BLOCK_TAGS) is None:
            texts.append(" ".join(tag.get_text(" ").split()))
        else:
            texts.append(_own_text(tag))
    if not texts:
        texts = [" ".join(body.get_text(" ").split())]
    return [t for t in texts if t], heading_text or None


def _chapter_from_html(html: str, fallback_title: str, toc_title: str | None,
                       language: str) -> Chapter:
    texts, heading = extract_paragraph_texts(clean_text(html))
    paragraphs = []
    for text in texts:
        sentences = split_sentences(text, language)
        if sentences:
            paragraphs.append(sentences)
    return Chapter(title=toc_title or heading or fallback_title, paragraphs=paragraphs)


def _book_title(book) -> str | None:
    data = book.get_metadata("DC", "title")
    if data and data[0][0]:
        return str(data[0][0]).strip() or None
    return None


def parse_epub(epub_path: Path, language: str = DEFAULT_LANGUAGE) -> ParseResult:
    """
    Main entry point. Chapters follow the spine order.
    An unreadable archive raises EpubParseError; an unreadable chapter is skipped.
    """
    epub_path = Path(epub_path)
    try:
        book = epub.read_epub(str(epub_path))
    except Exception as e:
        log.error("EPUB open failed for %s: %s", epub_path.name, e)
        raise EpubParseError(f"Failed to parse EPUB: {e}", epub_path.name) from e

    toc_titles = _toc_titles(book.toc)

    chapters = []
    for entry in book.spine:
        item_id = entry[0] if isinstance(entry, tuple) else entry
        item = book.get_item_with_id(item_id)
        if item is None:
            log.warning("EPUB spine references missing item: %s", item_id)
            continue
        if item.get_type() not in (ebooklib.ITEM_DOCUMENT, ebooklib.ITEM_UNKNOWN) \
                and not is_html_like(getattr(item, "media_type", None)):
            log.warning("Skipping non-HTML EPUB item in spine: %s", item_id)
            continue

        html = _read_item_html(epub_path, item)
        if not html:
            continue
        try:
            chapter = _chapter_from_html(html, item_id, toc_titles.get(item.get_name()), language)
        except Exception as e:
            log.warning("Skipping EPUB chapter %s: %s", item_id, e)
            continue
        if chapter.paragraphs:
            chapters.append(chapter)

    log.info("Parsed %d chapters from %s", len(chapters), epub_path.name)
    return ParseResult(chapters=chapters, title=_book_title(book))
