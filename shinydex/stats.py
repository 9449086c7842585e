"""Completion statistics derived from the catalog and the state map."""

from __future__ import annotations

import math
from typing import Optional, Sequence

import pandas as pd

from .models import CatalogRegion, DerivedStats, RegionStats, StateMap
from .view import Label, Page, progress_text

TOTAL_COUNT_CAPTION = "Shiny total"


def round_half_up(value: float) -> int:
    """Round like a browser's ``Math.round`` (``0.5`` goes up, not to even)."""
    return int(math.floor(value + 0.5))


def compute_stats(catalog: Sequence[CatalogRegion], state: StateMap) -> DerivedStats:
    """Return per-region and global progress for ``state``.

    An item with a count of 3 counts once towards ``obtained`` but three
    times towards ``sum_of_all_counts``.
    """

    regions = []
    obtained = 0
    total = 0
    for region in catalog:
        region_obtained = sum(1 for item_id in region.items if state.get(item_id, 0) > 0)
        regions.append(
            RegionStats(name=region.name, obtained=region_obtained, total=len(region.items))
        )
        obtained += region_obtained
        total += len(region.items)

    percentage = round_half_up(100 * obtained / total) if total > 0 else 0
    return DerivedStats(
        regions=regions,
        obtained=obtained,
        total=total,
        percentage=percentage,
        sum_of_all_counts=sum(state.values()),
    )


def write_stats(page: Page, stats: DerivedStats) -> None:
    """Show ``stats`` in whichever stats labels the page has."""

    bar = page.stats_bar
    if bar is None:
        return
    if bar.total_progress is not None:
        bar.total_progress.text = progress_text(stats.obtained, stats.total)
    if bar.total_count is None and bar.percentage is not None:
        bar.total_count = Label()
    if bar.total_count is not None:
        bar.total_count.text = str(stats.sum_of_all_counts)
    if bar.percentage is not None:
        bar.percentage.text = f"{stats.percentage}%"


def stats_frame(stats: Optional[DerivedStats]) -> pd.DataFrame:
    """Tabulate region progress, one row per region plus a total row."""

    columns = ["Region", "Obtained", "Total", "Percent"]
    if stats is None:
        return pd.DataFrame(columns=columns)
    rows = [
        {
            "Region": r.name,
            "Obtained": r.obtained,
            "Total": r.total,
            "Percent": round_half_up(100 * r.obtained / r.total) if r.total else 0,
        }
        for r in stats.regions
    ]
    rows.append(
        {
            "Region": "All",
            "Obtained": stats.obtained,
            "Total": stats.total,
            "Percent": stats.percentage,
        }
    )
    return pd.DataFrame(rows, columns=columns)
