import json

from chapters import normalize_chapter
from models import Chapter, ReadingPosition
from positions import (
    flat_index_to_paragraph_sentence,
    flat_index_to_position,
    paragraph_sentence_to_flat_index,
    position_to_flat_index,
    position_to_progress,
    resolve_saved_progress,
)

BOOK = [
    Chapter("One", [["a", "b"], ["c"], ["d", "e", "f"]]),
    Chapter("Two", [["g"]]),
    Chapter("Three", [["h", "i"], ["j"]]),
]


def _all_positions(chapters):
    for c, chapter in enumerate(chapters):
        for p, paragraph in enumerate(chapter.paragraphs):
            for s in range(len(paragraph)):
                yield ReadingPosition(c, p, s)


def test_paragraph_sentence_to_flat_index():
    paras = BOOK[0].paragraphs
    assert paragraph_sentence_to_flat_index(paras, 0, 0) == 0
    assert paragraph_sentence_to_flat_index(paras, 1, 0) == 2
    assert paragraph_sentence_to_flat_index(paras, 2, 2) == 5


def test_paragraph_sentence_past_end_clamps_to_last():
    assert paragraph_sentence_to_flat_index(BOOK[0].paragraphs, 9, 0) == 5
    assert paragraph_sentence_to_flat_index([], 0, 0) == 0


def test_book_round_trip():
    positions = list(_all_positions(BOOK))
    flats = [position_to_flat_index(pos, BOOK) for pos in positions]
    assert flats == list(range(len(positions)))
    for pos, flat in zip(positions, flats):
        assert flat_index_to_position(flat, BOOK) == pos


def test_chapter_round_trip():
    paras = BOOK[0].paragraphs
    for p, paragraph in enumerate(paras):
        for s in range(len(paragraph)):
            flat = paragraph_sentence_to_flat_index(paras, p, s)
            assert flat_index_to_paragraph_sentence(flat, paras) == (p, s)


def test_flat_index_clamps_to_last_sentence():
    assert flat_index_to_position(10, BOOK) == ReadingPosition(2, 1, 0)
    assert flat_index_to_position(10_000, BOOK) == ReadingPosition(2, 1, 0)
    assert flat_index_to_position(-4, BOOK) == ReadingPosition(0, 0, 0)


def test_flat_index_on_empty_book():
    assert flat_index_to_position(3, []) == ReadingPosition(0, 0, 0)
    assert flat_index_to_position(3, [Chapter("Empty", [])]) == ReadingPosition(0, 0, 0)


def test_chapter_scoped_clamp():
    assert flat_index_to_paragraph_sentence(99, BOOK[0].paragraphs) == (2, 2)
    assert flat_index_to_paragraph_sentence(5, []) == (0, 0)


def test_resolve_legacy_integer():
    assert resolve_saved_progress("8", BOOK) == ReadingPosition(2, 0, 1)
    assert resolve_saved_progress(6, BOOK) == ReadingPosition(1, 0, 0)


def test_resolve_current_shape_is_clamped():
    saved = json.dumps({"chapterIndex": 0, "paragraphIndex": 2, "sentenceIndex": 1})
    assert resolve_saved_progress(saved, BOOK) == ReadingPosition(0, 2, 1)
    wild = {"chapterIndex": 9, "paragraphIndex": 5, "sentenceIndex": 5}
    assert resolve_saved_progress(wild, BOOK) == ReadingPosition(2, 1, 0)


def test_resolve_chapter_scoped_flat_shape():
    saved = {"chapterIndex": 0, "sentenceIndex": 3}
    assert resolve_saved_progress(saved, BOOK) == ReadingPosition(0, 2, 0)


def test_resolve_chapter_only_and_garbage():
    assert resolve_saved_progress({"chapterIndex": 1}, BOOK) == ReadingPosition(1, 0, 0)
    assert resolve_saved_progress("not json", BOOK) is None
    assert resolve_saved_progress("[1, 2]", BOOK) is None
    assert resolve_saved_progress(None, BOOK) is None
    assert resolve_saved_progress(True, BOOK) is None


def test_progress_shape_round_trip():
    pos = ReadingPosition(2, 1, 0)
    assert resolve_saved_progress(json.dumps(position_to_progress(pos)), BOOK) == pos


def test_clamp_skips_trailing_empty_chapter():
    chapters = [Chapter("A", [["x.", "y."]]), normalize_chapter({"title": "B", "content": ["***"]})]
    assert chapters[1].paragraphs == []
    assert flat_index_to_position(99, chapters) == ReadingPosition(0, 0, 1)


def test_resolve_onto_empty_chapter():
    chapters = [
        Chapter("A", [["x.", "y."]]),
        Chapter("Blank", []),
        Chapter("C", [["z."]]),
        Chapter("End", []),
    ]
    assert resolve_saved_progress({"chapterIndex": 1}, chapters) == ReadingPosition(2, 0, 0)
    assert resolve_saved_progress({"chapterIndex": 3, "sentenceIndex": 0}, chapters) == ReadingPosition(2, 0, 0)
    assert resolve_saved_progress({"chapterIndex": 0}, [Chapter("Blank", [])]) == ReadingPosition(0, 0, 0)


def test_position_to_flat_index_clamps_chapter():
    assert position_to_flat_index(ReadingPosition(9, 0, 0), BOOK) == 7
    assert position_to_flat_index(ReadingPosition(-2, 0, 1), BOOK) == 1
    assert position_to_flat_index(ReadingPosition(0, 0, 0), []) == 0
