"""S3.01 — Calendar Mapping.

Pair grids (top to bottom) with target years, number columns as weeks and
cells as days (Sunday first).

A short grid sitting on the right of the image is the tail of a partial year:
its weeks are numbered from a fixed offset (44 by default) up to the last week
instead of from 1.
"""

from __future__ import annotations

import logging

from contribgrid.engine.config import PipelineConfig
from contribgrid.engine.context import (
    DAY_KEYS,
    Calendar,
    ColumnCluster,
    GridGroup,
    PipelineContext,
)
from contribgrid.engine.registry import Layer, stage

logger = logging.getLogger(__name__)

FORWARD = "forward"
REVERSE = "reverse"


def numbering_mode(columns: list[ColumnCluster], config: PipelineConfig) -> str:
    if not columns:
        return FORWARD
    avg_x = sum(c.x for c in columns) / len(columns)
    if len(columns) <= config.reverse_max_columns and avg_x > config.reverse_min_x:
        return REVERSE
    return FORWARD


def _week_days(
    column: ColumnCluster,
    days_per_week: int,
    bounds: tuple[int, int] | None,
) -> dict[str, int]:
    days = {key: 0 for key in DAY_KEYS[:days_per_week]}
    for key, cell in zip(DAY_KEYS[:days_per_week], column.cells):
        if bounds is not None and not (0 <= cell.x < bounds[0] and 0 <= cell.y < bounds[1]):
            continue
        days[key] = cell.level
    return days


def map_group(
    group: GridGroup,
    config: PipelineConfig,
    bounds: tuple[int, int] | None = None,
) -> dict[int, dict[str, int]]:
    """Week → day → level for one grid."""
    columns = sorted(group.columns, key=lambda c: c.x)[: config.max_weeks]
    mode = numbering_mode(columns, config)
    if mode == REVERSE:
        start_week = config.reverse_week_offset
        columns = columns[: max(config.max_weeks - start_week + 1, 0)]
    else:
        start_week = 1

    logger.debug("Grid of %d columns uses %s numbering from week %d", len(columns), mode, start_week)
    days_per_week = min(config.days_per_week, len(DAY_KEYS))
    weeks: dict[int, dict[str, int]] = {}
    for offset, column in enumerate(columns):
        weeks[start_week + offset] = _week_days(column, days_per_week, bounds)
    return weeks


def map_calendar(
    groups: list[GridGroup],
    years: list[int],
    config: PipelineConfig | None = None,
    bounds: tuple[int, int] | None = None,
) -> Calendar:
    """Year → week → day → level. Groups beyond the year list are dropped."""
    config = config or PipelineConfig()
    calendar: Calendar = {}
    for year, group in zip(years, groups):
        calendar[year] = map_group(group, config, bounds)
        logger.debug("Year %d: %d weeks", year, len(calendar[year]))
    if len(groups) > len(years):
        logger.info("Ignoring %d grids beyond the %d target years", len(groups) - len(years), len(years))
    return calendar


@stage(
    id="S3.01",
    layer=Layer.MAPPING,
    dependencies=["S2.02"],
    description="Map grids onto year/week/day calendar cells",
)
def calendar_mapping(ctx: PipelineContext) -> None:
    ctx.calendar = map_calendar(
        ctx.groups,
        ctx.years,
        ctx.config,
        bounds=(ctx.width, ctx.height),
    )
