"""S2.01 — Column Clustering.

Bucket region anchors by x with a small tolerance. Each bucket is one week
column; buckets with fewer than seven anchors are not a week and are dropped.
Cell pitch (size + gap) must exceed 2 × tolerance or adjacent weeks merge.
"""

from __future__ import annotations

import logging
from collections.abc import Iterable

from contribgrid.engine.context import AnchorCell, ColumnCluster, PipelineContext, Region
from contribgrid.engine.registry import Layer, stage

logger = logging.getLogger(__name__)


def cluster_columns(
    cells: Iterable[AnchorCell],
    tolerance: int = 3,
    min_cells: int = 7,
) -> list[ColumnCluster]:
    """Group anchors into x buckets keyed by each bucket's first anchor x."""
    buckets: list[tuple[int, list[AnchorCell]]] = []
    for cell in sorted(cells, key=lambda c: (c.x, c.y)):
        for key, members in buckets:
            if abs(cell.x - key) <= tolerance:
                members.append(cell)
                break
        else:
            buckets.append((cell.x, [cell]))

    columns = [
        ColumnCluster(x=key, cells=tuple(sorted(members, key=lambda c: (c.y, c.x))))
        for key, members in buckets
        if len(members) >= min_cells
    ]
    return columns


def cells_from_regions(regions: Iterable[Region]) -> list[AnchorCell]:
    return [AnchorCell(x=r.anchor[0], y=r.anchor[1], level=r.level) for r in regions]


@stage(
    id="S2.01",
    layer=Layer.LAYOUT,
    dependencies=["S1.01"],
    description="Cluster region anchors into week columns by x proximity",
)
def column_clustering(ctx: PipelineContext) -> None:
    cfg = ctx.config
    ctx.columns = cluster_columns(
        cells_from_regions(ctx.regions),
        tolerance=cfg.column_tolerance,
        min_cells=cfg.min_column_cells,
    )
    logger.debug("Clustered %d anchors into %d columns", len(ctx.regions), len(ctx.columns))
