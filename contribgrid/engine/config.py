"""Pipeline configuration — every threshold the grid heuristics depend on."""

from __future__ import annotations

from dataclasses import dataclass

from contribgrid.engine.palette import Palette, get_palette


@dataclass
class PipelineConfig:
    """Tunable thresholds. Defaults match GitHub-style heatmap screenshots at 1x."""

    # Color classification
    theme: str = "blue"
    palette: Palette | None = None  # overrides theme when set
    max_cell_distance: int | None = 400  # squared RGB distance; beyond = not a cell
    near_white_distance: int = 50
    near_white_floor: int = 240

    # Region extraction
    min_region_size: int = 16  # 4×4 footprint

    # Column clustering
    column_tolerance: int = 3
    min_column_cells: int = 7

    # Grid splitting
    grid_gap: float = 50.0

    # Calendar mapping
    reverse_max_columns: int = 10
    reverse_min_x: float = 400.0
    reverse_week_offset: int = 44
    max_weeks: int = 52
    days_per_week: int = 7

    def resolve_palette(self) -> Palette:
        if self.palette is not None:
            return self.palette
        return get_palette(self.theme)
