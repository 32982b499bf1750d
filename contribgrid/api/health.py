"""Health check + meta endpoints."""

from __future__ import annotations

from fastapi import APIRouter

from contribgrid import __version__
from contribgrid.engine.palette import THEMES
from contribgrid.engine.registry import get_registry
from contribgrid.models.responses import HealthResponse, PaletteColor, StageInfo

router = APIRouter()


@router.get("/health", response_model=HealthResponse)
async def health() -> HealthResponse:
    registry = get_registry()
    return HealthResponse(
        status="ok",
        version=__version__,
        stages_registered=registry.count,
        stages=[
            StageInfo(
                id=spec.id,
                layer=spec.layer.name.lower(),
                description=spec.description,
                dependencies=list(spec.dependencies),
            )
            for spec in registry.resolve_order()
        ],
    )


@router.get("/themes", response_model=dict[str, list[PaletteColor]])
async def themes() -> dict[str, list[PaletteColor]]:
    return {
        name: [PaletteColor(level=e.level, rgb=list(e.rgb)) for e in palette.entries]
        for name, palette in THEMES.items()
    }
