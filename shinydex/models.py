from typing import Dict, List, Optional

from pydantic import BaseModel, ConfigDict, Field


class CatalogRegion(BaseModel):
    """A named region and the ordered ids of the items it contains."""

    model_config = ConfigDict(frozen=True, populate_by_name=True)

    name: str
    items: List[str] = Field(alias="pokemons")


class TrackerConfig(BaseModel):
    """User preferences persisted next to the state map."""

    desaturate_on_single_count: bool = True


class RegionStats(BaseModel):
    """Completion of one catalog region."""

    name: str
    obtained: int
    total: int


class DerivedStats(BaseModel):
    """Progress derived from the catalog and the state map."""

    regions: List[RegionStats] = Field(default_factory=list)
    obtained: int = 0
    total: int = 0
    percentage: int = 0
    sum_of_all_counts: int = 0


class ExportResult(BaseModel):
    """Outcome of a snapshot export.

    Exactly one of ``data`` or ``error`` is set.
    """

    filename: Optional[str] = None
    data: Optional[bytes] = None
    error: Optional[str] = None

    @property
    def ok(self) -> bool:
        return self.error is None and self.data is not None


StateMap = Dict[str, int]
