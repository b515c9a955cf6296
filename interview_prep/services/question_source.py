"""
services/question_source.py

Quiz question pools, one JSON document per topic:

    {"title": "CSS", "questions": [
        {"id": "1", "text": "...", "type": "multiple-choice",
         "options": ["...", "..."], "correctAnswer": 0},
        {"id": "2", "text": "...", "type": "open-ended", "correctAnswer": "..."}
    ]}

Fetched once when a quiz is opened. Every failure surfaces as LoadError so
the caller can offer retry or a way back.
"""

import json
import logging

from pydantic import ValidationError

from interview_prep.models.question_model import QuestionPool, question_adapter
from interview_prep.services.errors import ContentNotFoundError, LoadError
from interview_prep.services.file_reader import ContentStore

logger = logging.getLogger(__name__)

DEFAULT_TITLE = "Test"


def parse_pool(raw: object) -> QuestionPool:
    """
    Validate a decoded test document.

    Raises:
        LoadError: not an object, `questions` missing or not a list,
                   or a question record that fails validation.
    """
    if not isinstance(raw, dict):
        raise LoadError("invalid test format: document is not an object")
    items = raw.get("questions")
    if not isinstance(items, list):
        raise LoadError("invalid test format: 'questions' must be a list")

    questions = []
    for pos, item in enumerate(items):
        try:
            questions.append(question_adapter.validate_python(item))
        except ValidationError as e:
            raise LoadError(f"invalid question #{pos + 1}: {e.errors()[0]['msg']}") from e

    try:
        return QuestionPool(title=raw.get("title") or DEFAULT_TITLE, questions=questions)
    except ValidationError as e:
        raise LoadError(f"invalid test format: {e.errors()[0]['msg']}") from e


class QuestionSource:
    def __init__(self, store: ContentStore):
        self._store = store

    def fetch_questions(self, topic_id: str) -> QuestionPool:
        try:
            text = self._store.read_test_file(topic_id)
        except ContentNotFoundError as e:
            logger.warning(f"fetch_questions({topic_id}): {e}")
            raise LoadError(f'test for topic "{topic_id}" not found') from e

        try:
            raw = json.loads(text)
        except json.JSONDecodeError as e:
            logger.error(f"fetch_questions({topic_id}): bad JSON - {e}")
            raise LoadError(f'test for topic "{topic_id}" is not valid JSON') from e

        pool = parse_pool(raw)
        logger.info(f"fetch_questions({topic_id}): {len(pool)} questions")
        return pool
