"""Health check utilities for the catalog and the local store."""
from __future__ import annotations

from pathlib import Path
from typing import Optional

from fastapi import FastAPI

from . import paths
from .catalog import CatalogError, load_catalog


def check_storage(catalog_path: Optional[Path] = None, storage_path: Optional[Path] = None) -> dict:
    """Return catalog readability and storage presence info."""
    info = {"catalog_ok": False, "regions": 0, "items": 0, "error": None}
    try:
        regions = load_catalog(catalog_path)
    except CatalogError as e:
        info["error"] = str(e)
    else:
        info["catalog_ok"] = True
        info["regions"] = len(regions)
        info["items"] = sum(len(r.items) for r in regions)
    db = Path(storage_path or paths.STORAGE_PATH)
    info["storage_path"] = str(db)
    info["storage_exists"] = db.exists()
    return info


app = FastAPI()


@app.get("/health")
def health() -> dict:
    """FastAPI endpoint exposing catalog and storage status."""
    return check_storage()
