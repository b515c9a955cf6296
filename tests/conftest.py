from __future__ import annotations

import json
from pathlib import Path

import pytest

from interview_prep.models.question_model import (
    MultipleChoiceQuestion,
    OpenEndedQuestion,
    QuestionPool,
)
from interview_prep.services.errors import LoadError
from interview_prep.services.scheduling import ManualScheduler


def build_pool(
    *,
    multiple_choice: int = 10,
    open_ended: int = 2,
    title: str = "Synthetic",
) -> QuestionPool:
    """Deterministic pool: q1..qN, multiple-choice first. Correct option is i % 4."""

    questions = []
    for i in range(1, multiple_choice + 1):
        questions.append(
            MultipleChoiceQuestion(
                id=f"q{i}",
                text=f"Multiple choice #{i}",
                options=["A", "B", "C", "D"],
                correct_index=i % 4,
            )
        )
    for j in range(1, open_ended + 1):
        n = multiple_choice + j
        questions.append(
            OpenEndedQuestion(id=f"q{n}", text=f"Open question #{n}", correct_text=f"answer {n}")
        )
    return QuestionPool(title=title, questions=questions)


def pool_document(pool: QuestionPool) -> dict:
    """Pool in the on-disk test-file format."""
    return {
        "title": pool.title,
        "questions": [q.model_dump(by_alias=True) for q in pool.questions],
    }


class FakeSource:
    """Question source returning a fixed pool, optionally failing first."""

    def __init__(self, pool: QuestionPool, failures: int = 0):
        self.pool = pool
        self.failures = failures
        self.calls = 0

    def fetch_questions(self, topic_id: str) -> QuestionPool:
        self.calls += 1
        if self.failures > 0:
            self.failures -= 1
            raise LoadError("source unreachable")
        return self.pool


@pytest.fixture
def pool() -> QuestionPool:
    return build_pool()


@pytest.fixture
def scheduler() -> ManualScheduler:
    return ManualScheduler()


@pytest.fixture
def content_dir(tmp_path: Path) -> Path:
    """Content tree with a 12-question CSS test, a broken JS test and no HTML test."""

    root = tmp_path / "data"
    (root / "questions").mkdir(parents=True)
    (root / "answers" / "css").mkdir(parents=True)
    (root / "tests").mkdir()

    topics = [
        {"id": "css", "name": "CSS", "file": "css.md"},
        {"id": "js", "name": "JavaScript", "file": "js.md"},
        {"id": "html", "name": "HTML", "file": "html.md"},
    ]
    (root / "topics.json").write_text(json.dumps(topics), encoding="utf-8")

    (root / "questions" / "css.md").write_text(
        "# CSS\n\n"
        "- [What is the box model?](../answers/css/box-model.md)\n"
        "Some prose that is not a question.\n"
        "- [Layout talk](https://youtu.be/abc123)\n"
        "- [How does specificity work?](../answers/css/specificity.md)\n",
        encoding="utf-8",
    )
    (root / "answers" / "css" / "box-model.md").write_text(
        "# Box model\n\ncontent, padding, border, margin\n", encoding="utf-8"
    )

    (root / "tests" / "css.json").write_text(
        json.dumps(pool_document(build_pool(title="CSS"))), encoding="utf-8"
    )
    (root / "tests" / "js.json").write_text(
        json.dumps({"title": "JS", "questions": "not a list"}), encoding="utf-8"
    )
    return root
