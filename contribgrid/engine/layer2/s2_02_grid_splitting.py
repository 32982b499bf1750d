"""S2.02 — Grid Splitting.

Separate stacked calendar instances: walk columns in order of average y and
start a new group wherever the jump from the previous column exceeds the gap.
"""

from __future__ import annotations

import logging

from contribgrid.engine.context import ColumnCluster, GridGroup, PipelineContext
from contribgrid.engine.registry import Layer, stage

logger = logging.getLogger(__name__)


def split_grids(columns: list[ColumnCluster], gap: float = 50.0) -> list[GridGroup]:
    groups: list[GridGroup] = []
    current: list[ColumnCluster] = []
    last_y: float | None = None

    for col in sorted(columns, key=lambda c: c.avg_y):
        if last_y is not None and abs(col.avg_y - last_y) > gap and current:
            groups.append(GridGroup(columns=tuple(current)))
            current = []
        current.append(col)
        last_y = col.avg_y

    if current:
        groups.append(GridGroup(columns=tuple(current)))
    return groups


@stage(
    id="S2.02",
    layer=Layer.LAYOUT,
    dependencies=["S2.01"],
    description="Split week columns into calendar grids by vertical gaps",
)
def grid_splitting(ctx: PipelineContext) -> None:
    ctx.groups = split_grids(ctx.columns, gap=ctx.config.grid_gap)
    logger.debug(
        "Split %d columns into %d grids: %s",
        len(ctx.columns),
        len(ctx.groups),
        [len(g.columns) for g in ctx.groups],
    )
