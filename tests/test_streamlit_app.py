import streamlit as st

import app
from app.backend.mock_store import MemoryKeyValue
from app.state import selection
from shinydex.models import ExportResult


def _fresh_session(monkeypatch, catalog):
    st.session_state.clear()
    monkeypatch.setattr(selection, "load_regions", lambda: catalog)
    backend = MemoryKeyValue()
    return selection.ensure_session_state(st, lambda: selection.make_tracker(backend=backend))


def test_ensure_session_state_builds_tracker_once(monkeypatch, catalog):
    tracker = _fresh_session(monkeypatch, catalog)
    assert st.session_state.export_result is None
    assert selection.ensure_session_state(st) is tracker
    assert tracker.page.options_bar.save_button.label == selection.SAVE_LABEL


def test_editor_change_commits(monkeypatch, catalog):
    tracker = _fresh_session(monkeypatch, catalog)
    tracker.tap_badge("001")
    st.session_state["count_0_001"] = "5"
    selection.editor_changed(st, "count_0_001")
    assert tracker.state.get("001") == 5
    assert tracker.editing is None


def test_toggle_callback_persists_config(monkeypatch, catalog):
    tracker = _fresh_session(monkeypatch, catalog)
    st.session_state["desaturate"] = False
    app.on_toggle_desaturate()
    assert tracker.config.desaturate is False


def test_save_image_callback_stores_result(monkeypatch, catalog):
    tracker = _fresh_session(monkeypatch, catalog)

    class FakeExporter:
        def export(self, page):
            assert page is tracker.page
            return ExportResult(error="no canvas")

    monkeypatch.setattr(app.app_module, "SnapshotExporter", FakeExporter)
    app.on_save_image()
    assert st.session_state.export_result.error == "no canvas"


def test_load_regions_handles_missing_catalog(monkeypatch, tmp_path):
    from shinydex import catalog as catalog_mod

    monkeypatch.setattr(catalog_mod, "CATALOG_PATH", tmp_path / "missing.json")
    assert selection.load_regions() is None


def test_ok_with_unchanged_value_closes_editor(monkeypatch, catalog):
    tracker = _fresh_session(monkeypatch, catalog)
    tracker.state.set("004", 3)
    tracker.render()
    tracker.tap_badge("004")

    # OK pressed without typing: no widget value in the session yet
    selection.editor_changed(st, "count_0_004")

    assert tracker.editing is None
    assert tracker.state.get("004") == 3
    tile = next(t for t in tracker.page.regions[0].tiles if t.item_id == "004")
    assert tile.badge_visible and tile.badge_text == "3"


def test_ok_with_prefilled_widget_value_keeps_count(monkeypatch, catalog):
    tracker = _fresh_session(monkeypatch, catalog)
    tracker.state.set("025", 2)
    tracker.render()
    tracker.tap_badge("025")
    st.session_state["count_1_025"] = "2"

    selection.editor_changed(st, "count_1_025")

    assert tracker.editing is None
    assert tracker.state.get("025") == 2
