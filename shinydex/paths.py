"""Filesystem locations used by the tracker."""

from pathlib import Path

ROOT = Path(__file__).resolve().parent.parent

ASSETS_DIR = ROOT / "assets"
OBTAINED_ASSET_ROOT = ASSETS_DIR / "tiles_shiny"
MISSING_ASSET_ROOT = ASSETS_DIR / "tiles_normal"

STORAGE_DIR = Path.home() / ".shinydex"
STORAGE_PATH = STORAGE_DIR / "shinydex.db"


def image_path(item_id: str, obtained: bool) -> Path:
    """Return the tile image for ``item_id`` in its obtained or missing variant.

    The filename is derived from the id zero-padded to three digits. No check
    is made that the file exists.
    """

    folder = OBTAINED_ASSET_ROOT if obtained else MISSING_ASSET_ROOT
    return folder / f"tile_{str(item_id).zfill(3)}.png"
