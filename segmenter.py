"""segmenter.py — Paragraph and sentence splitting shared by all parsers."""

import logging
import re
from functools import lru_cache

import pysbd

log = logging.getLogger(__name__)

DEFAULT_LANGUAGE = "en"

_FALLBACK_SENTENCE = re.compile(r"[^.!?]+[.!?]+(?=\s|$)")
_BLANK_LINES = re.compile(r"\n\s*\n")


@lru_cache(maxsize=None)
def _get_segmenter(language: str) -> pysbd.Segmenter | None:
    """Return a cached pysbd segmenter, or None when pysbd lacks the language."""
    try:
        return pysbd.Segmenter(language=language, clean=False)
    except ValueError:
        log.info("No sentence rules for language '%s', using punctuation fallback", language)
        return None


def _split_with_regex(text: str) -> list[str]:
    matches = list(_FALLBACK_SENTENCE.finditer(text))
    if not matches:
        return [text]
    sentences = [m.group(0).strip() for m in matches]
    tail = text[matches[-1].end():].strip()
    if tail:
        sentences.append(tail)
    return sentences


def split_sentences(text: str, language: str = DEFAULT_LANGUAGE) -> list[str]:
    """Split a block of text into trimmed, non-empty sentences."""
    clean = (text or "").replace("\r\n", "\n").strip()
    if not clean:
        return []

    if not language or language == "auto":
        language = DEFAULT_LANGUAGE
    segmenter = _get_segmenter(language)

    sentences = None
    if segmenter is not None:
        try:
            sentences = segmenter.segment(clean)
        except Exception as e:
            log.warning("pysbd failed on a %d-char block (%s), using punctuation fallback", len(clean), e)
    if sentences is None:
        sentences = _split_with_regex(clean)

    out = [s.strip() for s in sentences]
    out = [s for s in out if s]
    return out or [clean]


def split_paragraphs(text: str) -> list[str]:
    """
    Split raw text into paragraphs on blank lines.
    Lines inside a paragraph are folded into a single run of text.
    """
    text = (text or "").replace("\r\n", "\n").replace("\r", "\n").replace("\u00a0", " ")
    text = re.sub(r"[ \t]+\n", "\n", text)
    text = re.sub(r"\n[ \t]+", "\n", text)

    paragraphs = []
    for block in _BLANK_LINES.split(text):
        folded = re.sub(r"\s*\n\s*", " ", block).strip()
        if folded:
            paragraphs.append(folded)
    return paragraphs


def text_to_paragraphs(text: str, language: str = DEFAULT_LANGUAGE) -> list[list[str]]:
    """Paragraph-split then sentence-split; paragraphs with no sentences are dropped."""
    paragraphs = []
    for para in split_paragraphs(text):
        sentences = split_sentences(para, language)
        if sentences:
            paragraphs.append(sentences)
    return paragraphs
