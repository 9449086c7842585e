"""Loading of the static region catalog."""

from __future__ import annotations

import json
import logging
from pathlib import Path
from typing import Any, List, Optional

from pydantic import ValidationError

from .models import CatalogRegion
from .paths import ROOT

logger = logging.getLogger(__name__)

CATALOG_PATH = ROOT / "data" / "regions.json"


class CatalogError(Exception):
    """Raised when the catalog is missing or does not have the expected shape."""


def parse_catalog(raw: Any) -> List[CatalogRegion]:
    """Validate ``raw`` as an ordered sequence of regions.

    Item ids are coerced to strings so numeric ids in hand-written files
    address the same state keys as quoted ones.
    """

    if not isinstance(raw, list):
        raise CatalogError(f"catalog must be a list, got {type(raw).__name__}")
    regions = []
    for idx, entry in enumerate(raw):
        if not isinstance(entry, dict):
            raise CatalogError(f"region #{idx} is not an object")
        items = entry.get("items", entry.get("pokemons"))
        if not isinstance(items, list):
            raise CatalogError(f"region #{idx} has no item list")
        try:
            regions.append(
                CatalogRegion(name=entry.get("name"), items=[str(i) for i in items])
            )
        except ValidationError as e:
            raise CatalogError(f"region #{idx} is invalid: {e}") from e
    return regions


def load_catalog(path: Optional[Path] = None) -> List[CatalogRegion]:
    """Read and validate the catalog JSON file at *path*."""

    cat_path = Path(path or CATALOG_PATH)
    try:
        raw = json.loads(cat_path.read_text(encoding="utf-8"))
    except FileNotFoundError as e:
        raise CatalogError(f"catalog file not found: {cat_path}") from e
    except json.JSONDecodeError as e:
        raise CatalogError(f"catalog file is not valid JSON: {e}") from e
    regions = parse_catalog(raw)
    logger.info(
        "Loaded catalog %s: %d regions, %d items",
        cat_path,
        len(regions),
        sum(len(r.items) for r in regions),
    )
    return regions
