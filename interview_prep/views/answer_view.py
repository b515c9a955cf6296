"""
views/answer_view.py — markdown answer page
"""

from __future__ import annotations

import logging

import streamlit as st

from interview_prep.services.errors import ContentNotFoundError
from interview_prep.services.file_reader import ContentStore
from interview_prep.services.topics import TopicRegistry
from interview_prep.views.navigation import go_home, not_found, open_topic, quiz_url

logger = logging.getLogger(__name__)

NOT_FOUND_MARKDOWN = "# Answer not found\n\nThe answer to this question could not be loaded."


def load_answer(content: ContentStore, topic_id: str, slug: str) -> str:
    """Answer markdown, or a placeholder page when the file is missing."""
    try:
        return content.read_answer_file(topic_id, slug)
    except ContentNotFoundError as e:
        logger.warning(f"answer {topic_id}/{slug}: {e}")
        return NOT_FOUND_MARKDOWN


def render(registry: TopicRegistry, content: ContentStore) -> None:
    topic = registry.lookup(st.session_state.get("topic_id") or "")
    slug = st.session_state.get("answer_slug")
    if topic is None or not slug:
        not_found()
        return

    nav_back, nav_home, _ = st.columns([2, 1, 5])
    with nav_back:
        if st.button("← Back to questions", key="answer_back"):
            open_topic(topic.id)
    with nav_home:
        if st.button("Home", key="answer_home"):
            go_home()

    st.caption(topic.name)
    st.markdown(load_answer(content, topic.id, slug))

    st.markdown('<hr>', unsafe_allow_html=True)
    left, right = st.columns(2)
    with left:
        if st.button("← All questions", key="answer_all", use_container_width=True):
            open_topic(topic.id)
    with right:
        st.link_button("Take the test →", quiz_url(topic.id), type="primary", use_container_width=True)
