from chapters import (
    flatten_chapter_sentences,
    get_image_key,
    normalize_chapter,
    normalize_chapters,
    pick_body_chapters,
    rejected_by,
    sanitize_paragraphs,
)
from models import Chapter


def _sentences(n, prefix="Sentence"):
    return [f"{prefix} {i}." for i in range(n)]


def test_duplicate_title_removed():
    chapter = normalize_chapter({"title": "Chapter 1", "paragraphs": [["Chapter 1", "The story begins."]]})
    assert chapter.paragraphs == [["The story begins."]]


def test_duplicate_title_case_insensitive_drops_emptied_paragraph():
    chapter = normalize_chapter({"title": "The Beginning", "paragraphs": [["the beginning"], ["Text."]]})
    assert chapter.paragraphs == [["Text."]]


def test_boilerplate_and_blank_sentences_removed():
    paras = sanitize_paragraphs([["***", "  ", "Real text."], ["* END *", "END"], ["*** * END * ***"]])
    assert paras == [["Real text."]]


def test_legacy_flat_content_becomes_one_paragraph():
    chapter = normalize_chapter({"title": "Old", "content": ["One.", "Two.", "  "]})
    assert chapter.title == "Old"
    assert chapter.paragraphs == [["One.", "Two."]]


def test_paragraphs_take_precedence_over_content():
    chapter = normalize_chapter({"title": "T", "paragraphs": [["New."]], "content": ["Old."]})
    assert chapter.paragraphs == [["New."]]


def test_empty_paragraphs_fall_back_to_content():
    chapter = normalize_chapter({"title": "T", "paragraphs": [[], ["  "]], "content": ["Kept."]})
    assert chapter.paragraphs == [["Kept."]]


def test_missing_title_defaults():
    assert normalize_chapter({"paragraphs": [["x."]]}).title == "Untitled"
    assert normalize_chapter({"title": "   ", "paragraphs": [["x."]]}).title == "Untitled"


def test_malformed_input_degrades_gracefully():
    assert normalize_chapter(None).paragraphs == []
    assert normalize_chapter("junk").title == "Untitled"
    assert normalize_chapter({"title": 5, "paragraphs": "nope", "content": [1, None, "ok."]}).paragraphs == [["ok."]]
    assert normalize_chapters(None) == []
    assert normalize_chapters({"title": "x"}) == []


def test_normalize_is_idempotent():
    shapes = [
        {"title": "Chapter 1", "paragraphs": [["Chapter 1", "The story begins."], ["More."]]},
        {"title": "Chapter 2", "paragraphs": [["chapter 2"], ["Chapter 2", "Body."]]},
        {"title": "Legacy", "content": ["Legacy", "***", "A.", "B."]},
        {"title": "Empty", "paragraphs": [], "content": []},
        {"paragraphs": [["", "x."]]},
        Chapter(title="Obj", paragraphs=[["Obj"], ["Text."]]),
    ]
    for raw in shapes:
        once = normalize_chapter(raw)
        assert normalize_chapter(once) == once
        assert all(p for p in once.paragraphs)


def test_numbered_chapters_strong_rule():
    chapters = [Chapter(f"Chapter {i}", [_sentences(3)]) for i in range(1, 6)]
    chapters.append(Chapter("Copyright", [_sentences(2)]))
    body = pick_body_chapters(chapters)
    assert [c.title for c in body] == [f"Chapter {i}" for i in range(1, 6)]


def test_numbered_rule_needs_three():
    chapters = [
        Chapter("Chapter 1", [_sentences(12)]),
        Chapter("Chapter 2", [_sentences(3)]),
        Chapter("Epilogue", [_sentences(11)]),
    ]
    body = pick_body_chapters(chapters)
    assert [c.title for c in body] == ["Chapter 1", "Epilogue"]


def test_numbered_title_pattern_is_strict():
    chapters = [Chapter(t, [_sentences(1)]) for t in ["  chapter 7 ", "CHAPTER 8", "Chapter 9", "Chapter Ten"]]
    body = pick_body_chapters(chapters)
    assert [c.title for c in body] == ["chapter 7", "CHAPTER 8", "Chapter 9"]


def test_fallback_rules_filter_front_matter():
    chapters = [
        Chapter("Preface", [_sentences(15)]),
        Chapter("Story", [_sentences(12)]),
    ]
    body = pick_body_chapters(chapters)
    assert [c.title for c in body] == ["Story"]


def test_fallback_rule_names():
    assert rejected_by(Chapter("Story", [])) == "has_sentences"
    assert rejected_by(Chapter("Table of Contents", [_sentences(20)])) == "not_noise_title"
    assert rejected_by(Chapter("Story", [_sentences(9)])) == "min_sentences"
    assert rejected_by(Chapter("Story", [_sentences(10)])) is None


def test_body_selection_does_not_mutate_input():
    chapters = [Chapter("Story", [["Story", *_sentences(12)]])]
    body = pick_body_chapters(chapters)
    assert chapters[0].paragraphs[0][0] == "Story"
    assert body[0].paragraphs[0][0] == "Sentence 0."


def test_body_selection_of_unusable_input_is_empty():
    assert pick_body_chapters([]) == []
    assert pick_body_chapters([{"title": "x"}, None]) == []


def test_image_key():
    assert get_image_key("<<<IMAGE:cat-42>>>") == "cat-42"
    assert get_image_key("A normal sentence.") is None


def test_flatten_chapter_sentences():
    chapter = Chapter("A", [["One.", ""], ["Two."]])
    assert flatten_chapter_sentences(chapter) == ["One.", "Two."]
