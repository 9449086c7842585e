import streamlit as st

from app.diag import tracer
from app.diag.tracer import trace
from app.state.selection import ensure_session_state
from shinydex.store import CONFIG_KEY, STATE_KEY

tracer.MIRROR_TO_STREAMLIT = st.sidebar.checkbox("echo storage traces", value=False)

tracker = ensure_session_state(st)

st.title("Debug: Tracker State")
st.caption("Instrumented page. Read-only view of the session and the store.")

editing = tracker.editing
trace("render", size=len(tracker.state), editing=editing)

st.json(
    {
        "state": tracker.state.items(),
        "config": tracker.config.config.model_dump(),
        "editing": editing,
        "stored_state": tracker.state.backend.get_item(STATE_KEY),
        "stored_config": tracker.config.backend.get_item(CONFIG_KEY),
        "stats": tracker.stats.model_dump() if tracker.stats else None,
        "scroll_y": tracker.page.scroll_y,
        "scroll_height": tracker.page.scroll_height,
    }
)
