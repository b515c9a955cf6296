"""
views/navigation.py

Page switching for the Streamlit browser. Each helper updates
st.session_state and reruns the script.
"""

from typing import Optional

import streamlit as st

import config


def go_home() -> None:
    st.session_state.page = "home"
    st.session_state.topic_id = None
    st.session_state.answer_slug = None
    st.rerun()


def open_topic(topic_id: str) -> None:
    st.session_state.page = "topic"
    st.session_state.topic_id = topic_id
    st.session_state.answer_slug = None
    st.rerun()


def open_answer(topic_id: str, slug: str) -> None:
    st.session_state.page = "answer"
    st.session_state.topic_id = topic_id
    st.session_state.answer_slug = slug
    st.rerun()


def quiz_url(topic_id: str, base_url: Optional[str] = None) -> str:
    """Quiz page on the API server (the guard needs the plain browser page)."""
    return f"{(base_url or config.QUIZ_BASE_URL).rstrip('/')}/quiz/{topic_id}"


def not_found(message: str = "Topic not found.") -> None:
    st.warning(message)
    if st.button("Home", type="primary"):
        go_home()
