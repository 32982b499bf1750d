"""Tests for image loading and the pixel-grid abstraction."""

from __future__ import annotations

import io

import numpy as np
import pytest
from PIL import Image

from contribgrid.engine.pixels import ArrayPixelSource, PixelSource, pixel_array
from contribgrid.heatmap.loader import ImageDecodeError, build_context, load_image
from tests.conftest import png_bytes


class _ListSource:
    """Minimal PixelSource that is not array-backed."""

    def __init__(self, rows: list[list[tuple[int, int, int]]]) -> None:
        self.rows = rows
        self.width = len(rows[0]) if rows else 0
        self.height = len(rows)

    def get_pixel(self, x: int, y: int) -> tuple[int, int, int]:
        return self.rows[y][x]


def test_load_png_bytes(two_year_heatmap, two_year_png):
    pixels = load_image(two_year_png)
    assert (pixels.width, pixels.height) == (720, 270)
    assert np.array_equal(pixels.to_array(), two_year_heatmap)


def test_load_path_and_drop_alpha(tmp_path):
    rgba = np.zeros((5, 8, 4), dtype=np.uint8)
    rgba[..., 0] = 200
    rgba[..., 3] = 255
    path = tmp_path / "shot.png"
    Image.fromarray(rgba).save(path)

    pixels = load_image(str(path))
    assert (pixels.width, pixels.height) == (8, 5)
    assert pixels.get_pixel(7, 4) == (200, 0, 0)


def test_load_jpeg():
    buf = io.BytesIO()
    Image.new("RGB", (6, 3), (10, 20, 30)).save(buf, format="JPEG")
    pixels = load_image(buf.getvalue())
    assert (pixels.width, pixels.height) == (6, 3)


def test_undecodable_bytes():
    with pytest.raises(ImageDecodeError):
        load_image(b"definitely not an image")


def test_missing_file(tmp_path):
    with pytest.raises(ImageDecodeError):
        load_image(tmp_path / "missing.png")


def test_oversized_image_rejected(monkeypatch, blank_png):
    monkeypatch.setattr(Image, "MAX_IMAGE_PIXELS", 100)
    with pytest.raises(ImageDecodeError):
        load_image(blank_png)


def test_get_pixel_bounds():
    pixels = ArrayPixelSource.blank(3, 2, color=(1, 2, 3))
    assert pixels.get_pixel(2, 1) == (1, 2, 3)
    with pytest.raises(IndexError):
        pixels.get_pixel(3, 0)
    with pytest.raises(IndexError):
        pixels.get_pixel(0, -1)


def test_array_source_rejects_bad_shape():
    with pytest.raises(ValueError):
        ArrayPixelSource(np.zeros((4, 4), dtype=np.uint8))


def test_pixel_array_from_protocol_source():
    rows = [[(1, 2, 3), (4, 5, 6)], [(7, 8, 9), (10, 11, 12)], [(0, 0, 0), (255, 255, 255)]]
    source = _ListSource(rows)
    assert isinstance(source, PixelSource)
    arr = pixel_array(source)
    assert arr.shape == (3, 2, 3)
    assert arr[1, 0].tolist() == [7, 8, 9]


def test_build_context():
    pixels = load_image(png_bytes(np.zeros((2, 2, 3), dtype=np.uint8)))
    ctx = build_context(pixels, (2021, 2022))
    assert ctx.years == [2021, 2022]
    assert (ctx.width, ctx.height) == (2, 2)
