"""processor.py — Turn an uploaded file into a ProcessedBook with reading statistics."""

import logging
from pathlib import Path

from models import BookStats, Chapter, ProcessedBook
from parsers import detect_format, parse_file
from segmenter import DEFAULT_LANGUAGE

log = logging.getLogger(__name__)

LEVEL_BANDS = [
    (35.0, "Beginner"),
    (65.0, "Intermediate"),
]
TOP_LEVEL = "Advanced"


def count_words(sentence: str) -> int:
    return len(sentence.split())


def analyze_difficulty(sentences: list[str]) -> float:
    """
    Score 0-100 from average sentence length in words.
    An average of 5 words or fewer scores 0; 30 or more scores 100.
    """
    if not sentences:
        return 0.0
    total_words = sum(count_words(s) for s in sentences)
    avg_sentence_length = total_words / len(sentences)
    return min(100.0, max(0.0, (avg_sentence_length - 5) * 4))


def difficulty_level(score: float) -> str:
    for upper, label in LEVEL_BANDS:
        if score < upper:
            return label
    return TOP_LEVEL


def book_sentences(chapters: list[Chapter]) -> list[str]:
    return [s for ch in chapters for para in ch.paragraphs for s in para]


def default_title(filename: str) -> str:
    """Filename without its last extension."""
    name = Path(filename).name
    stem, dot, _ = name.rpartition(".")
    return stem if dot and stem else name


def process_document(data: bytes, filename: str, mime_type: str | None = None,
                     file_path: Path | None = None,
                     language: str = DEFAULT_LANGUAGE) -> ProcessedBook:
    """
    Parse one uploaded document and compute its statistics.

    The extension picks the parser; mime_type is advisory only. Parse errors
    propagate unchanged. Empty input gives a book with no chapters.
    """
    fmt = detect_format(filename)
    result = parse_file(data, filename, file_path=file_path, language=language)

    chapters = [ch for ch in result.chapters if ch.paragraphs]
    sentences = book_sentences(chapters)
    stats = BookStats(
        word_count=sum(count_words(s) for s in sentences),
        sentence_count=len(sentences),
        difficulty_score=analyze_difficulty(sentences),
        format=fmt,
    )
    log.info("Processed %s (%s, %s): %d chapters, %d sentences, %d words",
             filename, fmt, mime_type or "unknown type", len(chapters),
             stats.sentence_count, stats.word_count)
    return ProcessedBook(
        title=result.title or default_title(filename),
        chapters=chapters,
        metadata=stats,
    )
