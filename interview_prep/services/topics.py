"""
services/topics.py

Topic registry: id -> display name -> question-list file -> icon.

Loaded once from data/topics.json and passed to whoever needs it
(app.state.registry for the API, st.cache_resource for the browser).
"""

import json
import logging
from typing import Dict, Iterable, List, Optional

from pydantic import TypeAdapter, ValidationError

from interview_prep.models.content_model import TopicInfo
from interview_prep.services.errors import LoadError

logger = logging.getLogger(__name__)

_topic_list = TypeAdapter(List[TopicInfo])


class TopicRegistry:
    def __init__(self, topics: Iterable[TopicInfo]):
        self._topics: List[TopicInfo] = list(topics)
        self._by_id: Dict[str, TopicInfo] = {}
        for t in self._topics:
            if t.id in self._by_id:
                raise ValueError(f"duplicate topic id '{t.id}'")
            self._by_id[t.id] = t

    @classmethod
    def load(cls, path: str) -> "TopicRegistry":
        """
        Read the registry file.

        Raises:
            LoadError: file missing, not JSON, or entries fail validation.
        """
        try:
            with open(path, encoding="utf-8") as f:
                raw = json.load(f)
            topics = _topic_list.validate_python(raw)
            registry = cls(topics)
        except (OSError, json.JSONDecodeError, ValidationError, ValueError) as e:
            logger.error(f"topic registry load failed ({path}): {e}")
            raise LoadError(f"cannot load topic registry: {e}") from e

        logger.info(f"topic registry: {len(registry)} topics loaded from {path}")
        return registry

    def __len__(self) -> int:
        return len(self._topics)

    def all(self) -> List[TopicInfo]:
        return list(self._topics)

    def lookup(self, topic_id: str) -> Optional[TopicInfo]:
        return self._by_id.get(topic_id)

    def by_file(self, file: str) -> Optional[TopicInfo]:
        return next((t for t in self._topics if t.file == file), None)
