"""
services/md_parser.py

Markdown question list -> QuestionLink records.

Only bullet lines of the form `- [question text](link)` are questions;
headings and prose in between are ignored.
"""

import re
from typing import List

from interview_prep.models.content_model import QuestionLink

_QUESTION_RE = re.compile(r"^-\s+\[([^\]]+)\]\(([^)]+)\)")
_YOUTUBE_PREFIXES = ("https://youtu.be", "https://www.youtube.com")


def _to_link(text: str, link: str) -> QuestionLink:
    is_youtube = link.startswith(_YOUTUBE_PREFIXES)
    answer_file = None
    if not is_youtube:
        answer_file = link.replace("../answers/", "").replace(".md", "")
    return QuestionLink(text=text, link=link, answer_file=answer_file, is_youtube=is_youtube)


def parse_question_list(markdown: str) -> List[QuestionLink]:
    questions: List[QuestionLink] = []
    for line in markdown.splitlines():
        m = _QUESTION_RE.match(line)
        if m:
            questions.append(_to_link(m.group(1), m.group(2)))
    return questions


def extract_question_slug(question_text: str) -> str:
    """'What is the Box Model?' -> 'what-is-the-box-model'"""
    slug = question_text.lower()
    slug = re.sub(r"[^\w\s-]", "", slug)
    slug = re.sub(r"\s+", "-", slug)
    slug = re.sub(r"-+", "-", slug)
    return slug.strip()


def answer_slug(question: QuestionLink) -> str:
    """Slug of the answer page: last path segment of the answer file, or the text slug."""
    if question.answer_file:
        return question.answer_file.split("/")[-1]
    return extract_question_slug(question.text)
