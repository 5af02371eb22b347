"""library.py — Flat-file JSON store for processed books.

Layout under the data directory:

    books.json          list of BookMetadata records
    books/<id>.json     BookContent for one book
"""

import json
import logging
import time
from datetime import datetime, timezone
from pathlib import Path

from chapters import normalize_chapters
from language import AUTO, detect_language_from_sentences, normalize_language_code
from models import BookContent, BookMetadata, ProcessedBook
from processor import book_sentences, difficulty_level

log = logging.getLogger(__name__)

INDEX_FILENAME = "books.json"
CONTENT_DIRNAME = "books"
PREVIEW_SENTENCES = 3


class Library:
    def __init__(self, data_dir: Path):
        self.data_dir = Path(data_dir)

    @property
    def index_path(self) -> Path:
        return self.data_dir / INDEX_FILENAME

    def _content_path(self, book_id: str) -> Path:
        return self.data_dir / CONTENT_DIRNAME / f"{book_id}.json"

    def _load_index(self) -> list[dict]:
        if not self.index_path.exists():
            return []
        try:
            data = json.loads(self.index_path.read_text(encoding="utf-8"))
        except (json.JSONDecodeError, OSError) as e:
            log.warning("Unreadable library index %s: %s", self.index_path, e)
            return []
        return [r for r in data if isinstance(r, dict)] if isinstance(data, list) else []

    def _save_index(self, records: list[dict]) -> None:
        self.data_dir.mkdir(parents=True, exist_ok=True)
        self.index_path.write_text(json.dumps(records, indent=2, ensure_ascii=False), encoding="utf-8")

    def _new_id(self, taken: set[str]) -> str:
        base = str(int(time.time() * 1000))
        book_id, n = base, 1
        while book_id in taken:
            book_id = f"{base}-{n}"
            n += 1
        return book_id

    def list_books(self) -> list[BookMetadata]:
        return [BookMetadata.from_dict(r) for r in self._load_index() if r.get("id")]

    def get_book(self, book_id: str) -> BookMetadata | None:
        for book in self.list_books():
            if book.id == book_id:
                return book
        return None

    def add_book(self, book: ProcessedBook) -> BookMetadata:
        """Persist a processed book; fills in language and level when the caller left them unset."""
        sentences = book_sentences(book.chapters)
        language = normalize_language_code(book.language)
        if language == AUTO:
            language = detect_language_from_sentences(sentences).code
        level = book.level or difficulty_level(book.metadata.difficulty_score)

        records = self._load_index()
        book_id = self._new_id({str(r.get("id")) for r in records})
        meta = BookMetadata(
            id=book_id,
            title=book.title,
            level=level,
            language=language,
            word_count=book.metadata.word_count,
            sentence_count=book.metadata.sentence_count,
            difficulty_score=book.metadata.difficulty_score,
            format=book.metadata.format,
            preview=sentences[:PREVIEW_SENTENCES],
            created_at=datetime.now(timezone.utc).isoformat(),
        )
        content = BookContent(id=book_id, chapters=book.chapters)

        path = self._content_path(book_id)
        path.parent.mkdir(parents=True, exist_ok=True)
        path.write_text(json.dumps(content.to_dict(), ensure_ascii=False), encoding="utf-8")
        records.append(meta.to_dict())
        self._save_index(records)
        log.info("Saved book %s (%s) to %s", book_id, book.title, path)
        return meta

    def load_content(self, book_id: str) -> BookContent | None:
        """Content with every chapter normalized; older flat-content records are accepted."""
        path = self._content_path(book_id)
        if not path.exists():
            return None
        try:
            data = json.loads(path.read_text(encoding="utf-8"))
        except (json.JSONDecodeError, OSError) as e:
            log.warning("Unreadable book content %s: %s", path, e)
            return None
        if not isinstance(data, dict):
            return None
        return BookContent(
            id=str(data.get("id") or book_id),
            chapters=normalize_chapters(data.get("chapters")),
            schema_version=data.get("schemaVersion") or 1,
        )

    def delete_book(self, book_id: str) -> bool:
        records = self._load_index()
        kept = [r for r in records if r.get("id") != book_id]
        if len(kept) == len(records):
            return False
        self._save_index(kept)
        self._content_path(book_id).unlink(missing_ok=True)
        return True

    def delete_all_books(self) -> int:
        records = self._load_index()
        for r in records:
            if r.get("id"):
                self._content_path(str(r["id"])).unlink(missing_ok=True)
        self._save_index([])
        return len(records)
