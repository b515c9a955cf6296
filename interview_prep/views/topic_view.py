"""
views/topic_view.py — question list of one topic

Layout:
  - header : back button, topic name, "Take the test" link
  - stats  : question count / questions with a written answer
  - list   : numbered questions (answers open inline, YouTube links open outside)
"""

from __future__ import annotations

import logging

import streamlit as st

from interview_prep.services.errors import ContentNotFoundError
from interview_prep.services.file_reader import ContentStore
from interview_prep.services.md_parser import parse_question_list
from interview_prep.services.topics import TopicRegistry
from interview_prep.views.components import question_item
from interview_prep.views.navigation import go_home, not_found, quiz_url

logger = logging.getLogger(__name__)


def render(registry: TopicRegistry, content: ContentStore) -> None:
    topic = registry.lookup(st.session_state.get("topic_id") or "")
    if topic is None:
        not_found()
        return

    # ── header ─────────────────────────────────────────────────────────────
    back_col, title_col, action_col = st.columns([1, 4, 2])
    with back_col:
        if st.button("← Back", key="topic_back"):
            go_home()
    with title_col:
        st.markdown(f"## {topic.name}")
    with action_col:
        st.link_button("Take the test", quiz_url(topic.id), type="primary", use_container_width=True)

    # ── questions ──────────────────────────────────────────────────────────
    try:
        questions = parse_question_list(content.read_question_file(topic.file))
    except ContentNotFoundError as e:
        logger.error(f"question list for '{topic.id}': {e}")
        questions = []

    with_answers = sum(1 for q in questions if not q.is_youtube and q.answer_file)
    c1, c2 = st.columns(2)
    c1.metric("Questions", len(questions))
    c2.metric("With answers", with_answers)

    st.markdown('<hr>', unsafe_allow_html=True)

    if not questions:
        st.info("No questions found.")
        return

    for number, q in enumerate(questions, start=1):
        question_item.render(topic.id, number, q)
