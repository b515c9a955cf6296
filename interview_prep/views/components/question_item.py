"""
views/components/question_item.py

One row of a topic's question list.
"""

from __future__ import annotations

import streamlit as st

from interview_prep.models.content_model import QuestionLink
from interview_prep.services.md_parser import answer_slug
from interview_prep.views.navigation import open_answer


def render(topic_id: str, number: int, question: QuestionLink) -> None:
    """
    Render a numbered question.

    Args:
        topic_id: topic the question belongs to.
        number:   1-based position in the list.
        question: parsed list entry.
    """
    text_col, action_col = st.columns([6, 1])
    with text_col:
        st.markdown(f"**{number}.** {question.text}")
    with action_col:
        if question.is_youtube:
            st.link_button("YouTube →", question.link, use_container_width=True)
        elif question.answer_file:
            slug = answer_slug(question)
            if st.button("→", key=f"answer_{number}_{slug}", help="Open answer", use_container_width=True):
                open_answer(topic_id, slug)
