import json
import logging
import time
from typing import Any, Dict

logger = logging.getLogger("shinydex.trace")

# Set by the debug page to echo trace lines into the Streamlit output.
MIRROR_TO_STREAMLIT = False


def _payload(fields: Dict[str, Any]) -> str:
    try:
        return json.dumps(fields, default=str, sort_keys=True)
    except (TypeError, ValueError):
        return repr(fields)


def trace(tag: str, **kvs: Dict[str, Any]):
    ts = time.time()
    line = f"{ts:.3f} [{tag}] {_payload(kvs)}"
    logger.debug(line)
    if not MIRROR_TO_STREAMLIT:
        return
    try:
        import streamlit as st

        st.markdown(
            f"**🧭 {ts:.3f} [{tag}]**\n\n```json\n{_payload(kvs)}\n```"
        )
    except Exception:
        logger.debug("streamlit mirror unavailable for %s", tag)
