"""Export the tracker page as a PNG download.

The capture needs the page laid out differently from how it is shown: scrolled
to the top, every image loaded, the stats bar pinned to the bottom of the full
document without its blur, and the options bar out of the way. Each of those
changes is a context manager that undoes itself, stacked on one
:class:`contextlib.ExitStack`, so every exit path restores the page exactly
once.
"""

from __future__ import annotations

import copy
import importlib
import logging
import time
from contextlib import ExitStack, contextmanager
from datetime import date, datetime, timezone
from typing import Callable, Iterator, List, Optional, Tuple

from .models import ExportResult
from .view import Page, Tile, iter_tiles

logger = logging.getLogger(__name__)

CAPTURE_TARGET = "shinydex.render:render_png"
FILENAME_PREFIX = "pokemon_shiny_dex"
BACKGROUND = "#1a1a1a"
SETTLE_DELAY = 0.1
BUSY_LABEL = "Generating..."
MISSING_CAPTURE_MESSAGE = "The image component is still loading, please try again later."


class ExportError(Exception):
    """Raised when the page cannot be captured."""


def load_capture(target: Optional[str] = None) -> Optional[Callable[..., bytes]]:
    """Resolve the ``module:function`` capture callable.

    Returns ``None`` when the module (or the imaging library behind it)
    cannot be imported.
    """

    module_name, _, attr = (target or CAPTURE_TARGET).partition(":")
    try:
        module = importlib.import_module(module_name)
    except ImportError as e:
        logger.error("Capture library unavailable: %s", e)
        return None
    return getattr(module, attr, None)


def export_filename(today: Optional[date] = None, prefix: Optional[str] = None) -> str:
    today = today or datetime.now(timezone.utc).date()
    return f"{prefix or FILENAME_PREFIX}_{today.isoformat()}.png"


@contextmanager
def busy_trigger(page: Page) -> Iterator[None]:
    button = page.options_bar.save_button if page.options_bar is not None else None
    if button is None:
        yield
        return
    label, disabled = button.label, button.disabled
    button.label = BUSY_LABEL
    button.disabled = True
    try:
        yield
    finally:
        button.label = label
        button.disabled = disabled


@contextmanager
def scrolled_to_origin(page: Page) -> Iterator[None]:
    scroll_y = page.scroll_y
    page.scroll_to(0)
    try:
        yield
    finally:
        page.scroll_to(scroll_y)


@contextmanager
def eager_images(page: Page) -> Iterator[List[Tile]]:
    touched: List[Tuple[Tile, str]] = []
    for tile in iter_tiles(page):
        if tile.image_loading == "lazy":
            touched.append((tile, tile.image_loading))
            tile.image_loading = "eager"
    try:
        yield [tile for tile, _ in touched]
    finally:
        for tile, loading in touched:
            tile.image_loading = loading


@contextmanager
def hidden_options_bar(page: Page) -> Iterator[None]:
    bar = page.options_bar
    if bar is None:
        yield
        return
    original = copy.deepcopy(bar.style)
    bar.style = dict(bar.style or {}, display="none")
    try:
        yield
    finally:
        bar.style = original


@contextmanager
def pinned_stats_bar(page: Page) -> Iterator[None]:
    bar = page.stats_bar
    if bar is None:
        yield
        return
    original = copy.deepcopy(bar.style)
    top = page.scroll_height - bar.height
    bar.style = dict(
        bar.style or {},
        position="absolute",
        top=f"{top}px",
        bottom="auto",
        left="0",
        width="100%",
        **{"backdrop-filter": "none", "z-index": "9999"},
    )
    try:
        yield
    finally:
        # an empty style attribute is dropped rather than restored
        bar.style = original if original else None


class SnapshotExporter:
    """Capture a :class:`~shinydex.view.Page` as PNG bytes."""

    def __init__(
        self,
        capture: Optional[Callable[..., bytes]] = None,
        *,
        background: Optional[str] = None,
        settle_delay: Optional[float] = None,
        prefix: Optional[str] = None,
        sleep: Callable[[float], None] = time.sleep,
        today: Optional[Callable[[], date]] = None,
    ) -> None:
        self.capture = capture
        self.background = background or BACKGROUND
        self.settle_delay = SETTLE_DELAY if settle_delay is None else settle_delay
        self.prefix = prefix or FILENAME_PREFIX
        self.sleep = sleep
        self.today = today

    def _capture(self, page: Page) -> bytes:
        capture = self.capture or load_capture()
        if capture is None:
            raise ExportError(MISSING_CAPTURE_MESSAGE)
        self.sleep(self.settle_delay)
        try:
            return capture(
                page,
                width=page.viewport_width,
                height=page.scroll_height,
                background=self.background,
            )
        except Exception as e:
            raise ExportError(f"Failed to generate image: {e}") from e

    def export(self, page: Page) -> ExportResult:
        """Capture ``page``; failures come back as ``ExportResult.error``."""

        try:
            with ExitStack() as stack:
                stack.enter_context(busy_trigger(page))
                stack.enter_context(scrolled_to_origin(page))
                stack.enter_context(eager_images(page))
                stack.enter_context(hidden_options_bar(page))
                stack.enter_context(pinned_stats_bar(page))
                data = self._capture(page)
        except ExportError as e:
            logger.error("Export error: %s", e)
            return ExportResult(error=str(e))

        today = self.today() if self.today is not None else None
        filename = export_filename(today, self.prefix)
        logger.info("Exported %s (%d bytes)", filename, len(data))
        return ExportResult(filename=filename, data=data)
