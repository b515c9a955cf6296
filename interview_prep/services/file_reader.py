"""
services/file_reader.py

Read-only access to the content tree:

  data/
    topics.json
    questions/<file>.md          question lists
    answers/<topic>/<slug>.md    markdown answers
    tests/<topic>.json           quiz question pools
    assets/<icon>                topic icons
"""

import logging
import os

from interview_prep.services.errors import ContentNotFoundError

logger = logging.getLogger(__name__)


class ContentStore:
    def __init__(self, root: str):
        self.root = os.path.abspath(root)
        self.questions_dir = os.path.join(self.root, "questions")
        self.answers_dir = os.path.join(self.root, "answers")
        self.tests_dir = os.path.join(self.root, "tests")
        self.assets_dir = os.path.join(self.root, "assets")

    def _resolve(self, base: str, *parts: str) -> str:
        path = os.path.abspath(os.path.join(base, *parts))
        # keep lookups inside their directory ("../" in a slug, absolute parts)
        if os.path.commonpath([path, base]) != base:
            raise ContentNotFoundError(f"path escapes content directory: {os.path.join(*parts)}")
        return path

    def _read(self, path: str) -> str:
        try:
            with open(path, encoding="utf-8") as f:
                return f.read()
        except FileNotFoundError as e:
            raise ContentNotFoundError(f"file not found: {os.path.relpath(path, self.root)}") from e
        except OSError as e:
            logger.error(f"read failed: {path} - {e}")
            raise ContentNotFoundError(f"cannot read {os.path.relpath(path, self.root)}") from e

    def read_question_file(self, topic_file: str) -> str:
        return self._read(self._resolve(self.questions_dir, topic_file))

    def read_answer_file(self, topic_id: str, slug: str) -> str:
        filename = slug if slug.endswith(".md") else f"{slug}.md"
        return self._read(self._resolve(self.answers_dir, topic_id, filename))

    def read_test_file(self, topic_id: str) -> str:
        return self._read(self._resolve(self.tests_dir, f"{topic_id}.json"))

    def asset_path(self, name: str) -> str:
        return self._resolve(self.assets_dir, name)
