import json

from shinydex.interaction import parse_count
from shinydex.store import CONFIG_KEY, STATE_KEY
from shinydex.view import find_open_editor, iter_tiles


def _tile(tracker, pid):
    return next(iter_tiles(tracker.page, pid))


def test_startup_writes_stats(tracker):
    bar = tracker.page.stats_bar
    assert bar.total_progress.text == "0 / 5"
    assert bar.percentage.text == "0%"
    assert bar.total_count.text == "0"


def test_tap_tile_toggles_and_refreshes(tracker, backend):
    assert tracker.tap_tile("001") == 1
    tile = _tile(tracker, "001")
    assert tile.obtained and tile.desaturated and tile.badge_text == "1"
    assert tracker.page.regions[0].progress == "1 / 3"
    assert tracker.page.stats_bar.percentage.text == "20%"
    assert json.loads(backend.data[STATE_KEY]) == {"001": 1}

    assert tracker.tap_tile("001") == 0
    assert not _tile(tracker, "001").badge_visible
    assert json.loads(backend.data[STATE_KEY]) == {}


def test_badge_opens_prefilled_editor_without_toggling(tracker):
    tracker.state.set("004", 3)
    editor = tracker.tap_badge("004")
    assert editor.value == "3"
    tile = _tile(tracker, "004")
    assert tile.badge_hidden and not tile.badge_visible
    assert tracker.state.get("004") == 3
    assert tracker.editing == "004"

    # tapping the tile body while its editor is open does nothing
    assert tracker.tap_tile("004") == 3
    assert tracker.editing == "004"


def test_editor_blank_for_zero(tracker):
    assert tracker.tap_badge("007").value == ""


def test_commit_negative_clamps_to_zero(tracker, backend):
    tracker.state.set("004", 2)
    tracker.tap_badge("004")
    tracker.type_value("-5")
    tracker.key("Enter")
    assert tracker.state.get("004") == 0
    assert "004" not in json.loads(backend.data[STATE_KEY])
    assert tracker.editing is None
    tile = _tile(tracker, "004")
    assert not tile.badge_visible and not tile.obtained


def test_commit_value_updates_everything(tracker):
    tracker.tap_badge("025")
    assert tracker.commit("4") == 4
    tile = _tile(tracker, "025")
    assert tile.badge_visible and tile.badge_text == "4" and not tile.desaturated
    assert tracker.page.regions[1].progress == "1 / 2"
    assert tracker.page.stats_bar.total_count.text == "4"


def test_blur_commits(tracker):
    tracker.tap_badge("035")
    tracker.type_value("abc")
    assert tracker.blur() == 0
    tracker.tap_badge("035")
    tracker.type_value(" 2 ")
    assert tracker.blur() == 2


def test_escape_leaves_state_untouched(tracker):
    tracker.state.set("001", 2)
    tracker.render()
    tracker.tap_badge("001")
    tracker.type_value("9")
    tracker.key("Escape")
    assert tracker.state.get("001") == 2
    tile = _tile(tracker, "001")
    assert tile.editor is None
    assert tile.badge_visible and tile.badge_text == "2"


def test_only_one_editor_open(tracker):
    tracker.tap_badge("001")
    tracker.type_value("2")
    tracker.tap_badge("025")
    open_editors = [t for t in iter_tiles(tracker.page) if t.editor is not None]
    assert [t.item_id for t in open_editors] == ["025"]
    assert find_open_editor(tracker.page).item_id == "025"
    # the first editor was closed by losing focus, which commits it
    assert tracker.state.get("001") == 2


def test_set_desaturate_updates_tiles(tracker, backend):
    tracker.tap_tile("001")
    tracker.set_desaturate(False)
    assert backend.data[CONFIG_KEY] == "false"
    assert not _tile(tracker, "001").desaturated
    assert tracker.page.options_bar.toggle_checked is False
    tracker.set_desaturate(True)
    assert _tile(tracker, "001").desaturated


def test_persisted_state_restored_on_start(tracker, catalog, backend):
    tracker.tap_tile("007")
    tracker.set_desaturate(False)
    from shinydex.interaction import Tracker
    from shinydex.store import ConfigStore, StateStore

    again = Tracker(catalog, StateStore(backend), ConfigStore(backend))
    page = again.start()
    assert again.state.get("007") == 1
    assert not _tile(again, "007").desaturated
    assert page.regions[0].progress == "1 / 3"


def test_missing_catalog_ignores_gestures(backend):
    from shinydex.interaction import Tracker
    from shinydex.store import ConfigStore, StateStore

    t = Tracker(None, StateStore(backend), ConfigStore(backend))
    page = t.start()
    assert page.error
    assert not t.ready
    assert t.tap_tile("001") == 0
    assert t.tap_badge("001") is None
    assert t.stats is None


def test_reset_clears_state(tracker):
    tracker.tap_tile("001")
    tracker.reset()
    assert len(tracker.state) == 0
    assert tracker.page.stats_bar.total_progress.text == "0 / 5"


def test_parse_count():
    assert parse_count("3") == 3
    assert parse_count("") == 0
    assert parse_count("-2") == 0
    assert parse_count("1.5") == 1
    assert parse_count("12abc") == 12
    assert parse_count("2e1") == 2
    assert parse_count(" +4") == 4
    assert parse_count("abc") == 0
    assert parse_count("-3") == 0
    assert parse_count(None) == 0


def test_tapping_another_tile_commits_open_editor(tracker):
    tracker.tap_badge("001")
    tracker.type_value("3")
    assert tracker.tap_tile("025") == 1
    assert tracker.editing is None
    assert tracker.state.get("001") == 3


def test_commit_reads_leading_integer(tracker):
    tracker.state.set("004", 2)
    tracker.tap_badge("004")
    tracker.type_value("3.5")
    tracker.key("Enter")
    assert tracker.state.get("004") == 3
    assert _tile(tracker, "004").badge_text == "3"

    tracker.tap_badge("001")
    assert tracker.commit("2e1") == 2
