"""
streamlit_app.py — topic and answer browser

    streamlit run streamlit_app.py

Pages (st.session_state.page):
  - home   : topic grid
  - topic  : question list of st.session_state.topic_id
  - answer : markdown answer st.session_state.answer_slug
"""

import logging

import streamlit as st

import config
from interview_prep.services.errors import LoadError
from interview_prep.services.file_reader import ContentStore
from interview_prep.services.topics import TopicRegistry
from interview_prep.views import answer_view, home_view, topic_view

logger = logging.getLogger(__name__)
if not logging.getLogger().handlers:
    logging.basicConfig(level=logging.INFO, format='%(asctime)s [%(levelname)s] %(name)s: %(message)s')


@st.cache_resource
def get_registry() -> TopicRegistry:
    return TopicRegistry.load(config.TOPICS_FILE)


@st.cache_resource
def get_content() -> ContentStore:
    return ContentStore(config.DATA_DIR)


def _init_state() -> None:
    defaults = {"page": "home", "topic_id": None, "answer_slug": None}
    for key, value in defaults.items():
        if key not in st.session_state:
            st.session_state[key] = value


def main() -> None:
    st.set_page_config(page_title="Interview Prep", page_icon="📚", layout="wide")
    _init_state()

    try:
        registry = get_registry()
    except LoadError as e:
        st.error(f"Topics could not be loaded: {e}")
        if st.button("Retry", type="primary"):
            get_registry.clear()
            st.rerun()
        return

    content = get_content()
    page = st.session_state.page

    if page == "topic":
        topic_view.render(registry, content)
    elif page == "answer":
        answer_view.render(registry, content)
    else:
        home_view.render(registry)


if __name__ == "__main__":
    main()
