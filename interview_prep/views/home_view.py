"""
views/home_view.py — home screen

Grid of topics; clicking one opens its question list.
"""

from __future__ import annotations

import streamlit as st

from interview_prep.services.topics import TopicRegistry
from interview_prep.views.navigation import open_topic

_COLUMNS = 3


def render(registry: TopicRegistry) -> None:
    """Render the topic grid."""
    st.markdown("## 📚 Interview Prep")
    st.caption("Questions and answers by topic. Open a topic to read answers or take a test.")

    topics = registry.all()
    if not topics:
        st.info("No topics configured.")
        return

    for row_start in range(0, len(topics), _COLUMNS):
        cols = st.columns(_COLUMNS)
        for col, topic in zip(cols, topics[row_start : row_start + _COLUMNS]):
            with col:
                if st.button(topic.name, key=f"topic_{topic.id}", use_container_width=True):
                    open_topic(topic.id)
