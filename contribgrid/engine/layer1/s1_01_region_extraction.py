"""S1.01 — Region Extraction.

Group same-level pixels into 4-connected regions, drop regions smaller than a
4×4 footprint, and reduce each survivor to its anchor (top-most, then
left-most pixel). NOT_A_CELL pixels never seed or join a region.
"""

from __future__ import annotations

import logging

import numpy as np
from numpy.typing import NDArray
from scipy import ndimage

from contribgrid.engine.context import Anchor, PipelineContext, Region
from contribgrid.engine.palette import NOT_A_CELL
from contribgrid.engine.registry import Layer, stage

logger = logging.getLogger(__name__)

# Orthogonal neighbours only (4-connectivity)
_FOUR_CONNECTED = ndimage.generate_binary_structure(2, 1)


def extract_regions(level_grid: NDArray[np.int8], min_size: int = 16) -> list[Region]:
    """Connected same-level regions with at least min_size pixels, in raster order of anchor."""
    grid = np.asarray(level_grid)
    if grid.size == 0:
        return []

    regions: list[Region] = []
    for level in np.unique(grid):
        if level == NOT_A_CELL:
            continue
        labels, n_labels = ndimage.label(grid == level, structure=_FOUR_CONNECTED)
        if n_labels == 0:
            continue
        sizes = np.bincount(labels.ravel())
        for label_id, bounds in enumerate(ndimage.find_objects(labels), start=1):
            if bounds is None or sizes[label_id] < min_size:
                continue
            rows, cols = np.nonzero(labels[bounds] == label_id)
            ys = rows + bounds[0].start
            xs = cols + bounds[1].start
            # np.nonzero is row-major: first hit has the smallest y, then smallest x
            anchor = (int(xs[0]), int(ys[0]))
            members = frozenset(zip(xs.tolist(), ys.tolist()))
            regions.append(Region(anchor=anchor, level=int(level), members=members))

    regions.sort(key=lambda r: (r.anchor[1], r.anchor[0]))
    return regions


def anchor_levels(regions: list[Region]) -> dict[Anchor, int]:
    """Anchor → level mapping, one entry per region."""
    return {r.anchor: r.level for r in regions}


@stage(
    id="S1.01",
    layer=Layer.SEGMENTATION,
    dependencies=["S0.01"],
    description="Flood-fill same-level regions and reduce them to anchors",
)
def region_extraction(ctx: PipelineContext) -> None:
    if ctx.level_grid is None:
        return
    ctx.regions = extract_regions(ctx.level_grid, ctx.config.min_region_size)
    logger.debug("Extracted %d regions (min size %d)", len(ctx.regions), ctx.config.min_region_size)
