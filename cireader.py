#!/usr/bin/env python3
"""
cireader — Ingest documents into a comprehensible-input reading library.

Supported input formats: plain text, EPUB, PDF, SRT/VTT subtitles
(any other extension is read as plain text).

Quick start:
  1. Optionally set CIREADER_DATA_DIR / CIREADER_LANGUAGE in .env
  2. python cireader.py story.txt --dry-run
  3. python cireader.py novel.epub
  4. python cireader.py --list
"""

import argparse
import logging
import mimetypes
import os
import sys
from pathlib import Path

from dotenv import load_dotenv
from tqdm import tqdm


def parse_args(argv=None) -> argparse.Namespace:
    parser = argparse.ArgumentParser(
        description="Ingest documents (TXT, EPUB, PDF, SRT/VTT) into a reading library",
        formatter_class=argparse.RawDescriptionHelpFormatter,
        epilog="""
Examples:
  # Dry run: parse and report, write nothing:
  python cireader.py novel.epub --dry-run

  # Show only the chapters the reader would display:
  python cireader.py novel.epub --dry-run --body-only

  # Force the book language instead of detecting it:
  python cireader.py article.txt --language fr

  # List the library:
  python cireader.py --list
        """,
    )
    parser.add_argument("input_paths", type=Path, nargs="*", help="Documents to ingest")
    parser.add_argument(
        "--language", type=str, default=None, metavar="CODE",
        help="Book language code (en, ko, ja, zh, fr, es, de, ru); default: detect",
    )
    parser.add_argument(
        "--data-dir", type=Path, default=None, metavar="DIR",
        help="Library directory (default: $CIREADER_DATA_DIR or ./data)",
    )
    parser.add_argument(
        "--body-only", action="store_true",
        help="Report only body chapters (front matter filtered out)",
    )
    parser.add_argument(
        "--list", action="store_true", dest="list_books",
        help="List books already in the library and exit",
    )
    parser.add_argument(
        "--dry-run", action="store_true",
        help="Parse input and list chapters without saving",
    )
    parser.add_argument("-v", "--verbose", action="store_true", help="Log parser details")
    return parser.parse_args(argv)


def print_book_report(book, chapters, language: str, level: str):
    from language import resolve_language_label

    stats = book.metadata
    print(f"Title:      {book.title}")
    print(f"Format:     {stats.format}")
    print(f"Language:   {resolve_language_label(language)} ({language})")
    print(f"Level:      {level} (difficulty {stats.difficulty_score:.1f})")
    print(f"\nFound {len(chapters)} chapters:")
    print("-" * 70)
    for i, ch in enumerate(chapters, start=1):
        sentence_count = sum(len(p) for p in ch.paragraphs)
        print(f"  {i:2d}. {ch.title[:44]:<44} {len(ch.paragraphs):>5} para {sentence_count:>6} sent")
    print("-" * 70)
    print(f"  Total: {stats.word_count:,} words | {stats.sentence_count:,} sentences")
    print()


def print_library(library):
    books = library.list_books()
    if not books:
        print(f"Library at {library.data_dir} is empty.")
        return
    for b in books:
        print(f"  {b.id}  {b.title[:40]:<40} {b.level:<13} {b.language:<5} {b.sentence_count:>6} sent")


def main(argv=None) -> int:
    args = parse_args(argv)
    load_dotenv()

    logging.basicConfig(
        level=logging.INFO if args.verbose else logging.WARNING,
        format="%(levelname)s %(name)s: %(message)s",
    )

    # Imported late to keep --help fast
    from chapters import pick_body_chapters
    from language import AUTO, detect_language_from_sentences, normalize_language_code
    from library import Library
    from parsers import ParseError
    from processor import book_sentences, difficulty_level, process_document

    data_dir = args.data_dir or Path(os.getenv("CIREADER_DATA_DIR", "data"))
    library = Library(data_dir)

    if args.list_books:
        print_library(library)
        return 0
    if not args.input_paths:
        print("ERROR: no input files given (use --list to show the library)")
        return 1

    forced = normalize_language_code(args.language or os.getenv("CIREADER_LANGUAGE"))
    segment_language = forced if forced != AUTO else "en"

    failed = []
    for path in tqdm(args.input_paths, desc="Ingesting", unit="file", disable=len(args.input_paths) < 2):
        if not path.is_file():
            print(f"ERROR: file not found: {path}")
            failed.append(path)
            continue

        mime_type, _ = mimetypes.guess_type(path.name)
        try:
            book = process_document(
                path.read_bytes(), path.name, mime_type, file_path=path, language=segment_language,
            )
        except ParseError as e:
            print(f"ERROR: {path.name}: {e}")
            failed.append(path)
            continue

        if forced != AUTO:
            book.language = forced
        else:
            book.language = detect_language_from_sentences(book_sentences(book.chapters)).code
        book.level = difficulty_level(book.metadata.difficulty_score)

        chapters = pick_body_chapters(book.chapters) if args.body_only else book.chapters
        print_book_report(book, chapters, book.language, book.level)

        if args.dry_run:
            continue
        meta = library.add_book(book)
        print(f"Saved as {meta.id} in {library.data_dir}\n")

    if args.dry_run:
        print("Dry run complete. Nothing saved.")
    return 1 if failed else 0


if __name__ == "__main__":
    sys.exit(main())
