"""
models/content_model.py

Topic registry entries and parsed question-list links.
"""

from typing import Optional

from pydantic import BaseModel, ConfigDict, Field


class TopicInfo(BaseModel):
    model_config = ConfigDict(frozen=True)

    id: str = Field(..., min_length=1, description="URL-safe topic id, e.g. 'css'")
    name: str = Field(..., min_length=1, description="Display name")
    file: str = Field(..., min_length=1, description="Question-list file under data/questions")
    icon: Optional[str] = Field(None, description="Icon file under data/assets")


class QuestionLink(BaseModel):
    """One entry of a topic's markdown question list."""

    model_config = ConfigDict(frozen=True)

    text: str
    link: str
    answer_file: Optional[str] = None
    is_youtube: bool = False
