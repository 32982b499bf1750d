"""API response models."""

from __future__ import annotations

from pydantic import BaseModel, Field


class StageInfo(BaseModel):
    id: str
    layer: str
    description: str = ""
    dependencies: list[str] = Field(default_factory=list)


class HealthResponse(BaseModel):
    status: str = "ok"
    version: str = "0.1.0"
    stages_registered: int = 0
    stages: list[StageInfo] = Field(default_factory=list)


class PaletteColor(BaseModel):
    level: int
    rgb: list[int]


class ParseResponse(BaseModel):
    calendar: dict[str, dict[str, dict[str, int]]] = Field(default_factory=dict)
    status: str = "ok"
    grid_detected: bool = False
    warning: str | None = None
    regions_found: int = 0
    columns_found: int = 0
    grids_found: int = 0
    processing_time_ms: float = 0.0
    stages_completed: int = 0
    stages_failed: int = 0
    errors: dict[str, str] = Field(default_factory=dict)
