"""shinydex package."""

from .catalog import CatalogError, load_catalog, parse_catalog
from .interaction import Tracker, parse_count
from .models import CatalogRegion, DerivedStats, ExportResult, RegionStats, TrackerConfig
from .snapshot import ExportError, SnapshotExporter
from .stats import compute_stats, stats_frame, write_stats
from .store import ConfigStore, StateStore, decode_state
from .view import build_page, refresh_item

__all__ = [
    "CatalogError",
    "load_catalog",
    "parse_catalog",
    "Tracker",
    "parse_count",
    "CatalogRegion",
    "DerivedStats",
    "ExportResult",
    "RegionStats",
    "TrackerConfig",
    "ExportError",
    "SnapshotExporter",
    "compute_stats",
    "stats_frame",
    "write_stats",
    "ConfigStore",
    "StateStore",
    "decode_state",
    "build_page",
    "refresh_item",
]
