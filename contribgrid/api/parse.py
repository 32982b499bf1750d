"""POST /api/parse — recover a calendar from an uploaded screenshot."""

from __future__ import annotations

import base64
import binascii
import logging
import time

from fastapi import APIRouter, Depends, HTTPException

from contribgrid.config import Settings
from contribgrid.dependencies import get_settings
from contribgrid.engine.config import PipelineConfig
from contribgrid.engine.context import DetectionStatus
from contribgrid.engine.palette import get_palette
from contribgrid.engine.pipeline import create_pipeline
from contribgrid.heatmap.loader import ImageDecodeError, build_context, load_image
from contribgrid.heatmap.serializer import calendar_to_dict
from contribgrid.models.requests import ParseRequest
from contribgrid.models.responses import ParseResponse

logger = logging.getLogger(__name__)

router = APIRouter()

_WARNINGS = {
    DetectionStatus.NO_REGIONS: "No heatmap cells matched the palette; try another theme",
    DetectionStatus.NO_GRID: "Cells were found but no calendar grid layout was recognized",
    DetectionStatus.FAILED: "A pipeline stage failed; see errors",
}


@router.post("/parse", response_model=ParseResponse)
async def parse(req: ParseRequest, settings: Settings = Depends(get_settings)) -> ParseResponse:
    start = time.perf_counter()

    theme = req.theme or settings.default_theme
    years = req.years if req.years is not None else settings.default_years
    try:
        get_palette(theme)
        raw = base64.b64decode(req.image, validate=True)
        pixels = load_image(raw)
    except (binascii.Error, ImageDecodeError, ValueError) as e:
        raise HTTPException(status_code=400, detail=str(e)) from e

    config = PipelineConfig(theme=theme)
    ctx = create_pipeline(config).run(build_context(pixels, years))

    elapsed = (time.perf_counter() - start) * 1000
    status = ctx.status
    warning = _WARNINGS.get(status)
    if warning:
        logger.warning("Parse %dx%d image: %s", ctx.width, ctx.height, warning)

    return ParseResponse(
        calendar=calendar_to_dict(ctx.calendar),
        status=status.value,
        grid_detected=ctx.grid_detected,
        warning=warning,
        regions_found=len(ctx.regions),
        columns_found=len(ctx.columns),
        grids_found=len(ctx.groups),
        processing_time_ms=round(elapsed, 1),
        stages_completed=len(ctx.completed_stages),
        stages_failed=len(ctx.errors),
        errors=ctx.errors,
    )
