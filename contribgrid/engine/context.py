"""PipelineContext — the single state object flowing through all stages.

Each stage reads the previous stage's output and stores a fresh structure:
pixels → level_grid → regions → columns → groups → calendar.
"""

from __future__ import annotations

import enum
from dataclasses import dataclass, field

import numpy as np
from numpy.typing import NDArray

from contribgrid.engine.config import PipelineConfig
from contribgrid.engine.pixels import PixelSource

# Sunday first, matching the widget's row order.
DAY_KEYS: tuple[str, ...] = ("su", "m", "t", "w", "th", "f", "s")

Anchor = tuple[int, int]
Calendar = dict[int, dict[int, dict[str, int]]]


class DetectionStatus(str, enum.Enum):
    OK = "ok"
    EMPTY_IMAGE = "empty_image"
    NO_REGIONS = "no_regions"
    NO_GRID = "no_grid"
    FAILED = "failed"


@dataclass(frozen=True)
class Region:
    """Maximal 4-connected run of same-level pixels."""

    anchor: Anchor  # (x, y) of the top-most, then left-most member
    level: int
    members: frozenset[Anchor] = field(default_factory=frozenset, repr=False, compare=False)

    @property
    def size(self) -> int:
        return len(self.members)


@dataclass(frozen=True)
class AnchorCell:
    x: int
    y: int
    level: int


@dataclass(frozen=True)
class ColumnCluster:
    """Anchors sharing one x bucket, i.e. one week of the calendar."""

    x: int
    cells: tuple[AnchorCell, ...]

    @property
    def size(self) -> int:
        return len(self.cells)

    @property
    def avg_y(self) -> float:
        if not self.cells:
            return 0.0
        return sum(c.y for c in self.cells) / len(self.cells)


@dataclass(frozen=True)
class GridGroup:
    """Columns forming one calendar instance."""

    columns: tuple[ColumnCluster, ...]

    @property
    def avg_y(self) -> float:
        if not self.columns:
            return 0.0
        return sum(c.avg_y for c in self.columns) / len(self.columns)

    @property
    def avg_x(self) -> float:
        if not self.columns:
            return 0.0
        return sum(c.x for c in self.columns) / len(self.columns)


@dataclass
class PipelineContext:
    """Shared state for one pipeline run over one image."""

    pixels: PixelSource | None = None
    # Target years, paired in order with grids sorted top to bottom
    years: list[int] = field(default_factory=list)
    config: PipelineConfig = field(default_factory=PipelineConfig)

    # --- Stage outputs ---
    level_grid: NDArray[np.int8] | None = None
    regions: list[Region] = field(default_factory=list)
    columns: list[ColumnCluster] = field(default_factory=list)
    groups: list[GridGroup] = field(default_factory=list)
    calendar: Calendar = field(default_factory=dict)

    # --- Pipeline metadata ---
    completed_stages: set[str] = field(default_factory=set)
    errors: dict[str, str] = field(default_factory=dict)

    @property
    def width(self) -> int:
        return self.pixels.width if self.pixels is not None else 0

    @property
    def height(self) -> int:
        return self.pixels.height if self.pixels is not None else 0

    @property
    def status(self) -> DetectionStatus:
        if self.errors:
            return DetectionStatus.FAILED
        if self.width == 0 or self.height == 0:
            return DetectionStatus.EMPTY_IMAGE
        if not self.regions:
            return DetectionStatus.NO_REGIONS
        if not self.groups:
            return DetectionStatus.NO_GRID
        return DetectionStatus.OK

    @property
    def grid_detected(self) -> bool:
        return self.status is DetectionStatus.OK
