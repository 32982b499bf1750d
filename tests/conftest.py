"""Shared test fixtures: synthetic heatmap screenshots."""

from __future__ import annotations

import io

import numpy as np
import pytest
from PIL import Image

from contribgrid.engine.palette import BLUE, Palette
from contribgrid.engine.pipeline import register_stages

register_stages()

WHITE = (255, 255, 255)
CELL = 10
GAP = 3
PITCH = CELL + GAP

CANVAS_W, CANVAS_H = 720, 270

# Full year: 52 weeks at the top-left
YEAR_ORIGIN = (20, 20)
YEAR_WEEKS = 52
# Trailing partial year: 9 weeks below and to the right, offset off the
# year grid's column pitch so x buckets stay distinct
PARTIAL_ORIGIN = (20 + 43 * PITCH + 6, 160)
PARTIAL_WEEKS = 9


def year_level(week: int, day: int) -> int:
    return (week + day) % 5


def partial_level(week: int, day: int) -> int:
    return (2 * week + day + 1) % 5


def blank_canvas(width: int = CANVAS_W, height: int = CANVAS_H, color=WHITE) -> np.ndarray:
    canvas = np.empty((height, width, 3), dtype=np.uint8)
    canvas[:, :] = color
    return canvas


def level_color(palette: Palette, level: int) -> tuple[int, int, int]:
    return next(e.rgb for e in palette.entries if e.level == level)


def draw_grid(
    canvas: np.ndarray,
    levels: list[list[int]],
    origin: tuple[int, int],
    palette: Palette = BLUE,
) -> np.ndarray:
    """Paint one heatmap grid; levels[week][day]."""
    ox, oy = origin
    for week, days in enumerate(levels):
        for day, level in enumerate(days):
            x = ox + week * PITCH
            y = oy + day * PITCH
            canvas[y : y + CELL, x : x + CELL] = level_color(palette, level)
    return canvas


def year_levels(weeks: int = YEAR_WEEKS) -> list[list[int]]:
    return [[year_level(w, d) for d in range(7)] for w in range(weeks)]


def partial_levels(weeks: int = PARTIAL_WEEKS) -> list[list[int]]:
    return [[partial_level(w, d) for d in range(7)] for w in range(weeks)]


def render_two_year_heatmap(palette: Palette = BLUE) -> np.ndarray:
    canvas = blank_canvas()
    draw_grid(canvas, year_levels(), YEAR_ORIGIN, palette)
    draw_grid(canvas, partial_levels(), PARTIAL_ORIGIN, palette)
    return canvas


def png_bytes(array: np.ndarray) -> bytes:
    buf = io.BytesIO()
    Image.fromarray(array).save(buf, format="PNG")
    return buf.getvalue()


@pytest.fixture
def two_year_heatmap() -> np.ndarray:
    return render_two_year_heatmap()


@pytest.fixture
def two_year_png() -> bytes:
    return png_bytes(render_two_year_heatmap())


@pytest.fixture
def blank_png() -> bytes:
    return png_bytes(blank_canvas(200, 100))
