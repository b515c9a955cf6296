from __future__ import annotations

import json

import pytest

from interview_prep.services.errors import ContentNotFoundError, LoadError
from interview_prep.services.file_reader import ContentStore
from interview_prep.services.md_parser import (
    answer_slug,
    extract_question_slug,
    parse_question_list,
)
from interview_prep.services.question_source import QuestionSource, parse_pool
from interview_prep.services.topics import TopicRegistry


def test_parse_question_list_skips_prose(content_dir):
    md = (content_dir / "questions" / "css.md").read_text(encoding="utf-8")
    links = parse_question_list(md)

    assert [q.text for q in links] == [
        "What is the box model?",
        "Layout talk",
        "How does specificity work?",
    ]
    assert links[0].answer_file == "css/box-model"
    assert links[1].is_youtube and links[1].answer_file is None


def test_answer_slug():
    links = parse_question_list(
        "- [What is the Box Model?](../answers/css/box-model.md)\n"
        "- [Why Flexbox?](https://www.youtube.com/watch?v=1)\n"
    )
    assert answer_slug(links[0]) == "box-model"
    assert answer_slug(links[1]) == "why-flexbox"


@pytest.mark.parametrize(
    "text, slug",
    [
        ("What is the Box Model?", "what-is-the-box-model"),
        ("  null vs. undefined  ", "-null-vs-undefined-"),
        ("- leading dash", "-leading-dash"),
        ("?a", "a"),
        ("a -- b", "a-b"),
    ],
)
def test_extract_question_slug(text, slug):
    assert extract_question_slug(text) == slug


def test_topic_registry_load(content_dir):
    registry = TopicRegistry.load(str(content_dir / "topics.json"))
    assert len(registry) == 3
    assert registry.lookup("css").name == "CSS"
    assert registry.lookup("python") is None
    assert registry.by_file("js.md").id == "js"


def test_topic_registry_rejects_duplicates(tmp_path):
    path = tmp_path / "topics.json"
    path.write_text(
        json.dumps([{"id": "a", "name": "A", "file": "a.md"}, {"id": "a", "name": "B", "file": "b.md"}]),
        encoding="utf-8",
    )
    with pytest.raises(LoadError):
        TopicRegistry.load(str(path))


def test_topic_registry_missing_file(tmp_path):
    with pytest.raises(LoadError):
        TopicRegistry.load(str(tmp_path / "nope.json"))


def test_content_store_reads_answers(content_dir):
    store = ContentStore(str(content_dir))
    assert "padding" in store.read_answer_file("css", "box-model")
    assert "padding" in store.read_answer_file("css", "box-model.md")
    with pytest.raises(ContentNotFoundError):
        store.read_answer_file("css", "specificity")


@pytest.mark.parametrize("slug", ["../../topics", "/etc/passwd"])
def test_content_store_stays_inside_root(content_dir, slug):
    store = ContentStore(str(content_dir))
    with pytest.raises(ContentNotFoundError):
        store.read_answer_file("css", slug)


def test_question_source_reads_pool(content_dir):
    pool = QuestionSource(ContentStore(str(content_dir))).fetch_questions("css")
    assert pool.title == "CSS"
    assert len(pool) == 12


@pytest.mark.parametrize("topic_id", ["js", "html"])
def test_question_source_failures_are_load_errors(content_dir, topic_id):
    with pytest.raises(LoadError):
        QuestionSource(ContentStore(str(content_dir))).fetch_questions(topic_id)


def test_question_source_bad_json(content_dir):
    (content_dir / "tests" / "broken.json").write_text("{not json", encoding="utf-8")
    with pytest.raises(LoadError):
        QuestionSource(ContentStore(str(content_dir))).fetch_questions("broken")


@pytest.mark.parametrize(
    "raw",
    [
        [],
        {"title": "x"},
        {"questions": [{"id": "1", "text": "t", "type": "essay", "correctAnswer": "a"}]},
        {"questions": [{"id": "1", "text": "t", "type": "multiple-choice",
                        "options": ["a", "b"], "correctAnswer": 2}]},
        {"questions": [
            {"id": "1", "text": "t", "type": "open-ended", "correctAnswer": "a"},
            {"id": "1", "text": "u", "type": "open-ended", "correctAnswer": "b"},
        ]},
    ],
)
def test_parse_pool_rejects_malformed(raw):
    with pytest.raises(LoadError):
        parse_pool(raw)


def test_parse_pool_defaults_title_and_numeric_ids():
    pool = parse_pool({"questions": [{"id": 7, "text": "t", "type": "open-ended", "correctAnswer": "a"}]})
    assert pool.title == "Test"
    assert pool.questions[0].id == "7"
