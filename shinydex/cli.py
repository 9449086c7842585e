"""Command line interface for shinydex."""

from __future__ import annotations

from typing import Optional
import argparse
import logging
from pathlib import Path

from . import paths
from .catalog import CatalogError, load_catalog
from .config import apply_config, load_config
from .interaction import Tracker
from .snapshot import SnapshotExporter
from .stats import stats_frame
from .store import ConfigStore, StateStore
from .view import Label, OptionsBar, StatsBar

logger = logging.getLogger(__name__)


def build_tracker(catalog_path: Optional[str] = None, storage_path: Optional[str] = None) -> Tracker:
    """Wire a tracker against the sqlite store, loading persisted state."""
    from app.backend.sql_store import SqlKeyValue

    backend = SqlKeyValue(Path(storage_path) if storage_path else paths.STORAGE_PATH)
    try:
        catalog = load_catalog(Path(catalog_path) if catalog_path else None)
    except CatalogError as e:
        logger.error("Error loading catalog: %s", e)
        catalog = None
    tracker = Tracker(
        catalog,
        StateStore(backend),
        ConfigStore(backend),
        stats_bar=StatsBar(total_progress=Label(), percentage=Label()),
        options_bar=OptionsBar(toggle_checked=True),
    )
    tracker.start()
    return tracker


def _print_stats(tracker: Tracker) -> None:
    if tracker.stats is None:
        print(tracker.page.error)
        return
    print(stats_frame(tracker.stats).to_string(index=False))
    print(f"Shiny total: {tracker.stats.sum_of_all_counts}")


def _run(args: argparse.Namespace) -> int:
    tracker = build_tracker(args.catalog, args.storage)
    if not tracker.ready:
        print(tracker.page.error)
        return 1

    if args.command == "stats":
        _print_stats(tracker)
    elif args.command == "toggle":
        count = tracker.tap_tile(args.id)
        print(f"{args.id}: {count}")
    elif args.command == "set":
        if tracker.tap_badge(args.id) is None:
            print(f"Unknown item id: {args.id}")
            return 1
        count = tracker.commit(args.count)
        print(f"{args.id}: {count}")
    elif args.command == "reset":
        tracker.reset()
        print("State cleared.")
    elif args.command == "export":
        result = SnapshotExporter(settle_delay=0).export(tracker.page)
        if not result.ok:
            print(result.error)
            return 1
        outdir = Path(args.output_dir or ".")
        outdir.mkdir(parents=True, exist_ok=True)
        out = outdir / result.filename
        out.write_bytes(result.data)
        print(f"Saved {out}")
    return 0


def main(argv: Optional[list[str]] = None) -> int:  # pragma: no cover - thin wrapper
    parser = argparse.ArgumentParser(description="Shiny collection tracker")
    parser.add_argument("--config", type=str, default=None, help="Path to a JSON config file")
    parser.add_argument("--catalog", type=str, default=None, help="Region catalog JSON file")
    parser.add_argument("--storage", type=str, default=None, help="sqlite file holding the tracker state")
    parser.add_argument("-v", "--verbose", action="store_true", help="Enable debug logging")
    sub = parser.add_subparsers(dest="command", required=True)
    sub.add_parser("stats", help="Print region and global progress")
    toggle = sub.add_parser("toggle", help="Flip an item between missing and a count of 1")
    toggle.add_argument("id")
    set_cmd = sub.add_parser("set", help="Set the count of an item (0 removes it)")
    set_cmd.add_argument("id")
    set_cmd.add_argument("count")
    export = sub.add_parser("export", help="Save the tracker view as a PNG")
    export.add_argument("--output-dir", type=str, default=None, help="Directory to save the image")
    sub.add_parser("reset", help="Clear every obtained item")
    args = parser.parse_args(argv)

    logging.basicConfig(level=logging.DEBUG if args.verbose else logging.INFO)
    apply_config(load_config(Path(args.config) if args.config else None))
    return _run(args)


if __name__ == "__main__":  # pragma: no cover
    raise SystemExit(main())
