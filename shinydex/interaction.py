"""Gesture handling for the tracker page."""

from __future__ import annotations

import json
import logging
import re
from typing import List, Optional

from .models import CatalogRegion, DerivedStats
from .stats import compute_stats, write_stats
from .store import ConfigStore, StateStore
from .view import (
    Editor,
    OptionsBar,
    Page,
    StatsBar,
    build_page,
    find_open_editor,
    iter_tiles,
    refresh_all_visuals,
    refresh_item,
    refresh_region_progress,
)

logger = logging.getLogger(__name__)

_LEADING_INT = re.compile(r"\s*([+-]?\d+)")


def parse_count(text) -> int:
    """Read the leading integer of a manually entered count, like ``parseInt``.

    ``"3.5"`` reads as 3 and ``"12abc"`` as 12. No digits, or a negative
    value, gives 0.
    """
    match = _LEADING_INT.match("" if text is None else str(text))
    if match is None:
        return 0
    value = int(match.group(1))
    return value if value > 0 else 0


class Tracker:
    """Application context tying the catalog, stores and page together.

    All gestures go through here. Each mutating gesture persists first, then
    patches the affected tiles, the region counters and the stats labels.
    """

    def __init__(
        self,
        catalog: Optional[List[CatalogRegion]],
        state: StateStore,
        config: ConfigStore,
        *,
        stats_bar: Optional[StatsBar] = None,
        options_bar: Optional[OptionsBar] = None,
    ) -> None:
        self.catalog = catalog
        self.state = state
        self.config = config
        self.stats_bar = stats_bar
        self.options_bar = options_bar
        self.page: Page = Page()
        self.stats: Optional[DerivedStats] = None

    def start(self) -> Page:
        """Load persisted data and perform the initial full render."""
        self.state.load()
        self.config.load()
        return self.render()

    def render(self) -> Page:
        self.page = build_page(
            self.catalog,
            self.state.items(),
            self.config.config,
            stats_bar=self.stats_bar,
            options_bar=self.options_bar,
        )
        if self.page.error is None:
            self.refresh_stats()
        return self.page

    @property
    def ready(self) -> bool:
        return self.page.error is None and self.catalog is not None

    def refresh_stats(self) -> DerivedStats:
        self.stats = compute_stats(self.catalog or [], self.state.items())
        write_stats(self.page, self.stats)
        return self.stats

    def _after_change(self, item_id: str, count: int) -> None:
        refresh_item(self.page, item_id, count, self.config.config)
        refresh_region_progress(self.page, self.catalog or [], self.state.items())
        self.refresh_stats()

    # -- tile body ---------------------------------------------------------

    def tap_tile(self, item_id: str) -> int:
        """Toggle ``item_id`` unless one of its tiles is being edited."""
        item_id = str(item_id)
        if not self.ready:
            return 0
        if any(t.editor is not None for t in iter_tiles(self.page, item_id)):
            return self.state.get(item_id)
        if find_open_editor(self.page) is not None:
            # tapping elsewhere takes focus from the open editor
            self.blur()
        count = self.state.toggle(item_id)
        logger.info(json.dumps({"event": "toggle", "id": item_id, "count": count}))
        self._after_change(item_id, count)
        return count

    # -- badge editor ------------------------------------------------------

    @property
    def editing(self) -> Optional[str]:
        tile = find_open_editor(self.page)
        return tile.item_id if tile is not None else None

    def tap_badge(self, item_id: str) -> Optional[Editor]:
        """Open the count editor on the first tile for ``item_id``.

        Any editor already open elsewhere loses focus first, which commits it.
        """

        item_id = str(item_id)
        if not self.ready:
            return None
        tile = next(iter_tiles(self.page, item_id), None)
        if tile is None:
            return None
        if tile.editor is not None:
            return tile.editor
        if find_open_editor(self.page) is not None:
            self.blur()

        count = self.state.get(item_id)
        tile.badge_hidden = True
        tile.editor = Editor(value="" if count == 0 else str(count))
        return tile.editor

    def type_value(self, text: str) -> None:
        tile = find_open_editor(self.page)
        if tile is not None:
            tile.editor.value = str(text)

    def commit(self, text: Optional[str] = None) -> Optional[int]:
        """Close the open editor and store its value. Returns the new count."""
        tile = find_open_editor(self.page)
        if tile is None:
            return None
        raw = tile.editor.value if text is None else text
        tile.editor = None
        count = self.state.set(tile.item_id, parse_count(raw))
        logger.info(json.dumps({"event": "edit", "id": tile.item_id, "count": count}))
        self._after_change(tile.item_id, count)
        return count

    def blur(self) -> Optional[int]:
        return self.commit()

    def cancel(self) -> None:
        """Close the open editor and leave the stored count alone."""
        tile = find_open_editor(self.page)
        if tile is None:
            return
        tile.editor = None
        tile.badge_hidden = False

    def key(self, name: str) -> None:
        if name == "Enter":
            self.commit()
        elif name == "Escape":
            self.cancel()

    # -- options -----------------------------------------------------------

    def set_desaturate(self, value: bool) -> None:
        self.config.set(value)
        if self.options_bar is not None and self.options_bar.toggle_checked is not None:
            self.options_bar.toggle_checked = bool(value)
        refresh_all_visuals(self.page, self.state.items(), self.config.config)

    def reset(self) -> None:
        self.state.clear()
        self.render()
