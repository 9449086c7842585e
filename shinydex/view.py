"""Page model for the tracker grid.

Streamlit redraws the whole script on every interaction, so the page the user
sees is kept as a plain object tree that survives reruns in session state.
``build_page`` produces it from scratch and the ``refresh_*`` helpers patch it
in place after a state change.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Dict, Iterator, List, Optional, Sequence

from .catalog import CatalogError, parse_catalog
from .models import CatalogRegion, StateMap, TrackerConfig
from .paths import image_path

CATALOG_ERROR_MESSAGE = "Failed to load region data, check the catalog file."

# Layout metrics in pixels, shared with the PNG renderer.
VIEWPORT_WIDTH = 1200
PAGE_PADDING = 16
TITLE_HEIGHT = 64
REGION_TITLE_HEIGHT = 40
REGION_GAP = 24
TILE_SIZE = 96
TILE_GAP = 8
OPTIONS_BAR_HEIGHT = 48
STATS_BAR_HEIGHT = 56


@dataclass
class Element:
    """A node carrying an inline style; ``None`` means no style attribute."""

    style: Optional[Dict[str, str]] = None

    @property
    def display(self) -> str:
        return (self.style or {}).get("display", "")

    @property
    def hidden(self) -> bool:
        return self.display == "none"


@dataclass
class Label:
    text: str = ""


@dataclass
class Control:
    label: str
    disabled: bool = False


@dataclass
class Editor:
    """Numeric input opened over a tile badge."""

    value: str = ""


@dataclass
class Tile:
    item_id: str
    image: str
    obtained: bool = False
    desaturated: bool = False
    badge_text: str = "0"
    badge_hidden: bool = False
    image_loading: str = "lazy"
    editor: Optional[Editor] = None

    @property
    def title(self) -> str:
        return f"ID: {self.item_id}"

    @property
    def badge_visible(self) -> bool:
        return self.obtained and not self.badge_hidden


@dataclass
class RegionSection:
    name: str
    progress: str
    tiles: List[Tile] = field(default_factory=list)


@dataclass
class StatsBar(Element):
    total_progress: Optional[Label] = None
    percentage: Optional[Label] = None
    total_count: Optional[Label] = None
    height: int = STATS_BAR_HEIGHT


@dataclass
class OptionsBar(Element):
    toggle_checked: Optional[bool] = None
    save_button: Optional[Control] = None
    height: int = OPTIONS_BAR_HEIGHT


@dataclass
class Page:
    regions: List[RegionSection] = field(default_factory=list)
    error: Optional[str] = None
    stats_bar: Optional[StatsBar] = None
    options_bar: Optional[OptionsBar] = None
    scroll_y: int = 0
    viewport_width: int = VIEWPORT_WIDTH
    title: str = "Shiny Dex"

    def scroll_to(self, y: int) -> None:
        self.scroll_y = max(0, int(y))

    @property
    def columns(self) -> int:
        usable = self.viewport_width - 2 * PAGE_PADDING + TILE_GAP
        return max(1, usable // (TILE_SIZE + TILE_GAP))

    def region_height(self, region: RegionSection) -> int:
        rows = -(-len(region.tiles) // self.columns)
        grid = rows * TILE_SIZE + max(0, rows - 1) * TILE_GAP
        return REGION_TITLE_HEIGHT + grid + REGION_GAP

    @property
    def scroll_height(self) -> int:
        """Full document height, including the space the stats bar covers."""
        height = PAGE_PADDING + TITLE_HEIGHT
        if self.options_bar is not None and not self.options_bar.hidden:
            height += self.options_bar.height
        if self.error is not None:
            height += REGION_TITLE_HEIGHT
        height += sum(self.region_height(r) for r in self.regions)
        if self.stats_bar is not None:
            height += self.stats_bar.height
        return height + PAGE_PADDING


def progress_text(obtained: int, total: int) -> str:
    return f"{obtained} / {total}"


def region_progress(region: CatalogRegion, state: StateMap) -> str:
    obtained = sum(1 for item_id in region.items if state.get(item_id, 0) > 0)
    return progress_text(obtained, len(region.items))


def is_desaturated(count: int, config: TrackerConfig) -> bool:
    return count == 1 and config.desaturate_on_single_count


def make_tile(item_id: str, count: int, config: TrackerConfig) -> Tile:
    obtained = count > 0
    return Tile(
        item_id=item_id,
        image=str(image_path(item_id, obtained)),
        obtained=obtained,
        desaturated=obtained and is_desaturated(count, config),
        badge_text=str(count),
    )


def build_page(
    catalog,
    state: StateMap,
    config: TrackerConfig,
    *,
    stats_bar: Optional[StatsBar] = None,
    options_bar: Optional[OptionsBar] = None,
    viewport_width: int = VIEWPORT_WIDTH,
) -> Page:
    """Render ``catalog`` into a fresh page.

    ``catalog`` may be raw JSON data or already validated regions. When it
    is missing or malformed the page holds only an error notice.
    """

    page = Page(
        stats_bar=stats_bar,
        options_bar=options_bar,
        viewport_width=viewport_width,
    )
    if options_bar is not None and options_bar.toggle_checked is not None:
        options_bar.toggle_checked = config.desaturate_on_single_count

    try:
        regions = _coerce_catalog(catalog)
    except CatalogError:
        page.error = CATALOG_ERROR_MESSAGE
        return page

    for region in regions:
        section = RegionSection(name=region.name, progress=region_progress(region, state))
        for item_id in region.items:
            section.tiles.append(make_tile(item_id, state.get(item_id, 0), config))
        page.regions.append(section)
    return page


def _coerce_catalog(catalog) -> Sequence[CatalogRegion]:
    if catalog is None:
        raise CatalogError("no catalog loaded")
    if isinstance(catalog, list) and all(isinstance(r, CatalogRegion) for r in catalog):
        return catalog
    return parse_catalog(catalog)


def iter_tiles(page: Page, item_id: Optional[str] = None) -> Iterator[Tile]:
    for region in page.regions:
        for tile in region.tiles:
            if item_id is None or tile.item_id == item_id:
                yield tile


def find_open_editor(page: Page) -> Optional[Tile]:
    for tile in iter_tiles(page):
        if tile.editor is not None:
            return tile
    return None


def refresh_item(page: Page, item_id: str, count: int, config: TrackerConfig) -> int:
    """Patch every tile showing ``item_id`` to reflect ``count``.

    Returns the number of tiles touched.
    """

    touched = 0
    for tile in iter_tiles(page, str(item_id)):
        obtained = count > 0
        tile.badge_text = str(count)
        tile.badge_hidden = False
        tile.obtained = obtained
        tile.image = str(image_path(tile.item_id, obtained))
        tile.desaturated = obtained and is_desaturated(count, config)
        touched += 1
    return touched


def refresh_region_progress(page: Page, catalog: Sequence[CatalogRegion], state: StateMap) -> None:
    for section, region in zip(page.regions, catalog):
        section.progress = region_progress(region, state)


def refresh_all_visuals(page: Page, state: StateMap, config: TrackerConfig) -> None:
    """Reapply the desaturation flag to every tile, e.g. after a config change."""
    for tile in iter_tiles(page):
        tile.desaturated = is_desaturated(state.get(tile.item_id, 0), config)
