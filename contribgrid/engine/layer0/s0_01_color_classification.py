"""S0.01 — Color Classification.

Map every pixel to an intensity level 0-4 by nearest palette color (squared
Euclidean RGB distance). Pixels far from every reference become NOT_A_CELL so
page background and gutters never join a cell.
"""

from __future__ import annotations

import logging

import numpy as np
from numpy.typing import NDArray

from contribgrid.engine.context import PipelineContext
from contribgrid.engine.palette import NOT_A_CELL, Palette
from contribgrid.engine.pixels import pixel_array
from contribgrid.engine.registry import Layer, stage

logger = logging.getLogger(__name__)


def _nearest(r: int, g: int, b: int, palette: Palette) -> tuple[int, int]:
    """(level, squared distance) of the closest entry; first entry wins ties."""
    best_level = palette.entries[0].level
    best_dist = None
    for entry in palette.entries:
        er, eg, eb = entry.rgb
        dist = (r - er) ** 2 + (g - eg) ** 2 + (b - eb) ** 2
        if best_dist is None or dist < best_dist:
            best_dist = dist
            best_level = entry.level
    return best_level, best_dist


def classify(
    r: int,
    g: int,
    b: int,
    palette: Palette,
    near_white_distance: int = 50,
    near_white_floor: int = 240,
) -> int:
    """Level of the nearest palette color. Unrecognized near-white is background (0)."""
    level, dist = _nearest(r, g, b, palette)
    if dist > near_white_distance and min(r, g, b) > near_white_floor:
        return 0
    return level


def classify_cell(
    r: int,
    g: int,
    b: int,
    palette: Palette,
    max_cell_distance: int | None = 400,
    near_white_distance: int = 50,
    near_white_floor: int = 240,
) -> int:
    """Like classify(), but NOT_A_CELL when no palette color is within max_cell_distance."""
    _, dist = _nearest(r, g, b, palette)
    if max_cell_distance is not None and dist > max_cell_distance:
        return NOT_A_CELL
    return classify(r, g, b, palette, near_white_distance, near_white_floor)


def classify_pixels(
    rgb: NDArray[np.uint8],
    palette: Palette,
    max_cell_distance: int | None = 400,
    near_white_distance: int = 50,
    near_white_floor: int = 240,
) -> NDArray[np.int8]:
    """Vectorized classify_cell over an H×W×3 array → H×W level grid.

    Keeps a running nearest entry per pixel, so the working set depends on
    the image size only, however many entries the palette declares.
    """
    r, g, b = (rgb[:, :, c].astype(np.int32) for c in range(3))

    min_dist = np.full(r.shape, np.iinfo(np.int32).max, dtype=np.int32)
    grid = np.zeros(r.shape, dtype=np.int8)
    for entry in palette.entries:
        er, eg, eb = entry.rgb
        dist = (r - er) ** 2
        dist += (g - eg) ** 2
        dist += (b - eb) ** 2
        # strict: ties keep the earlier entry
        closer = dist < min_dist
        min_dist[closer] = dist[closer]
        grid[closer] = entry.level
        del dist, closer

    near_white = (
        (min_dist > near_white_distance)
        & (r > near_white_floor)
        & (g > near_white_floor)
        & (b > near_white_floor)
    )
    grid[near_white] = 0
    if max_cell_distance is not None:
        grid[min_dist > max_cell_distance] = NOT_A_CELL
    return grid


@stage(
    id="S0.01",
    layer=Layer.CLASSIFICATION,
    description="Classify pixels to heatmap levels by nearest palette color",
)
def color_classification(ctx: PipelineContext) -> None:
    if ctx.pixels is None:
        ctx.level_grid = np.full((0, 0), NOT_A_CELL, dtype=np.int8)
        return

    cfg = ctx.config
    palette = cfg.resolve_palette()
    ctx.level_grid = classify_pixels(
        pixel_array(ctx.pixels),
        palette,
        max_cell_distance=cfg.max_cell_distance,
        near_white_distance=cfg.near_white_distance,
        near_white_floor=cfg.near_white_floor,
    )
    logger.debug(
        "Classified %d pixels with palette %r (%d cell pixels)",
        ctx.level_grid.size,
        palette.name,
        int(np.count_nonzero(ctx.level_grid != NOT_A_CELL)),
    )
