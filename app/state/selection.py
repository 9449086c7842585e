import logging
from pathlib import Path
from typing import Callable, Optional

from app.backend.sql_store import SqlKeyValue
from shinydex import paths
from shinydex.catalog import CatalogError, load_catalog
from shinydex.interaction import Tracker
from shinydex.store import ConfigStore, StateStore
from shinydex.view import Control, Label, OptionsBar, StatsBar

logger = logging.getLogger(__name__)

SAVE_LABEL = "Save as image"


def load_regions():
    """Return the catalog, or ``None`` when it cannot be read."""
    try:
        return load_catalog()
    except CatalogError as e:
        logger.error("Error loading catalog: %s", e)
        return None


def make_tracker(storage_path: Optional[Path] = None, backend=None) -> Tracker:
    backend = backend or SqlKeyValue(storage_path or paths.STORAGE_PATH)
    return Tracker(
        load_regions(),
        StateStore(backend),
        ConfigStore(backend),
        stats_bar=StatsBar(total_progress=Label(), percentage=Label()),
        options_bar=OptionsBar(toggle_checked=True, save_button=Control(label=SAVE_LABEL)),
    )


def ensure_session_state(st, factory: Callable[[], Tracker] = make_tracker) -> Tracker:
    if "tracker" not in st.session_state:
        tracker = factory()
        tracker.start()
        st.session_state.tracker = tracker
    if "export_result" not in st.session_state:
        st.session_state.export_result = None
    return st.session_state.tracker


def tile_key(kind: str, region_idx: int, pid: str) -> str:
    # the same id may be rendered in more than one region
    return f"{kind}_{region_idx}_{pid}"


def editor_changed(st, key: str) -> None:
    """Commit the count input.

    Wired to the input's ``on_change`` and to the OK button, so an unchanged
    value still closes the editor. A missing widget value falls back to the
    prefilled one.
    """
    tracker = st.session_state.tracker
    tracker.commit(st.session_state.get(key))
