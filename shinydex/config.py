"""Configuration helpers for file locations and export settings."""

from __future__ import annotations

from pathlib import Path
import json
from typing import Any, Dict, Optional

DEFAULT_CONFIG_PATH = Path(__file__).resolve().parent.parent / "config.json"


def load_config(path: Optional[Path] = None) -> Dict[str, Any]:
    """Read tracker settings (catalog, storage, asset folders, export).

    Defaults to ``config.json`` beside the ``shinydex`` package. A missing,
    unreadable or non-object file yields ``{}`` so the built-in locations
    stay in effect.
    """

    cfg_file = Path(path or DEFAULT_CONFIG_PATH)
    try:
        data = json.loads(cfg_file.read_text(encoding="utf-8"))
    except (OSError, ValueError):
        return {}
    return data if isinstance(data, dict) else {}


def apply_config(config: Dict[str, Any]) -> None:
    """Apply configuration values to global modules.

    Supported keys in *config*:

    ``catalog_path``: JSON file holding the region catalog.
    ``storage_path``: sqlite file backing the state and config keys.
    ``asset_roots``: mapping with ``obtained`` and ``missing`` image folders.
    ``export``: mapping with ``prefix``, ``background`` and ``settle_delay``.
    """

    from . import catalog, paths, snapshot

    catalog_path = config.get("catalog_path")
    if catalog_path:
        catalog.CATALOG_PATH = Path(catalog_path)

    storage_path = config.get("storage_path")
    if storage_path:
        paths.STORAGE_PATH = Path(storage_path)

    roots = config.get("asset_roots")
    if isinstance(roots, dict):
        if roots.get("obtained"):
            paths.OBTAINED_ASSET_ROOT = Path(roots["obtained"])
        if roots.get("missing"):
            paths.MISSING_ASSET_ROOT = Path(roots["missing"])

    export_cfg = config.get("export")
    if isinstance(export_cfg, dict):
        if export_cfg.get("prefix"):
            snapshot.FILENAME_PREFIX = str(export_cfg["prefix"])
        if export_cfg.get("background"):
            snapshot.BACKGROUND = str(export_cfg["background"])
        if export_cfg.get("settle_delay") is not None:
            snapshot.SETTLE_DELAY = float(export_cfg["settle_delay"])
