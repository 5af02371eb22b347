"""models.py — Shared data types for cireader."""

from dataclasses import asdict, dataclass, field

UNTITLED = "Untitled"
CONTENT_SCHEMA_VERSION = 2  # v1 stored a flat `content` sentence list per chapter


@dataclass
class Chapter:
    title: str
    paragraphs: list[list[str]] = field(default_factory=list)  # paragraphs of sentences

    def to_dict(self) -> dict:
        return {"title": self.title, "paragraphs": [list(p) for p in self.paragraphs]}


@dataclass
class BookStats:
    word_count: int
    sentence_count: int
    difficulty_score: float
    format: str                     # "text", "pdf", "epub", "subtitle"


@dataclass
class ProcessedBook:
    title: str
    chapters: list[Chapter]
    metadata: BookStats
    language: str | None = None     # set by the caller before persistence
    level: str | None = None        # "Beginner", "Intermediate", "Advanced"


@dataclass
class BookMetadata:
    id: str
    title: str
    level: str
    language: str
    word_count: int = 0
    sentence_count: int = 0
    difficulty_score: float = 0.0
    format: str = "text"
    preview: list[str] = field(default_factory=list)
    created_at: str = ""

    def to_dict(self) -> dict:
        return asdict(self)

    @classmethod
    def from_dict(cls, data: dict) -> "BookMetadata":
        known = {k: data[k] for k in cls.__dataclass_fields__ if k in data}
        known.setdefault("title", UNTITLED)
        known.setdefault("level", "")
        known.setdefault("language", "auto")
        return cls(**known)


@dataclass
class BookContent:
    id: str
    chapters: list[Chapter]
    schema_version: int = CONTENT_SCHEMA_VERSION

    def to_dict(self) -> dict:
        return {
            "schemaVersion": self.schema_version,
            "id": self.id,
            "chapters": [c.to_dict() for c in self.chapters],
        }


@dataclass(frozen=True)
class ReadingPosition:
    chapter_index: int
    paragraph_index: int
    sentence_index: int


@dataclass(frozen=True)
class LanguageHint:
    code: str       # member of language.LANGUAGE_CODES
    reason: str     # e.g. "contains_hangul", "no_script_signal"
