"""API request models."""

from __future__ import annotations

from pydantic import BaseModel, Field


class ParseRequest(BaseModel):
    image: str = Field(..., description="Base64-encoded heatmap screenshot (PNG, JPEG, ...)")
    years: list[int] | None = Field(
        default=None,
        description="Target years, paired top to bottom with the grids found (default from settings)",
    )
    theme: str | None = Field(default=None, description="Palette theme: blue or green (default from settings)")
