"""Pixel-grid abstraction consumed by the engine.

The engine never decodes image formats; it only needs ``width``, ``height``
and ``get_pixel(x, y)``.
"""

from __future__ import annotations

from typing import Protocol, runtime_checkable

import numpy as np
from numpy.typing import NDArray


@runtime_checkable
class PixelSource(Protocol):
    width: int
    height: int

    def get_pixel(self, x: int, y: int) -> tuple[int, int, int]: ...


class ArrayPixelSource:
    """PixelSource over an H×W×3 (or H×W×4) uint8 array. Alpha is dropped."""

    def __init__(self, array: NDArray) -> None:
        arr = np.asarray(array)
        if arr.ndim != 3 or arr.shape[2] < 3:
            raise ValueError(f"Expected an H×W×3 pixel array, got shape {arr.shape}")
        self._rgb = np.ascontiguousarray(arr[:, :, :3], dtype=np.uint8)

    @property
    def width(self) -> int:
        return int(self._rgb.shape[1])

    @property
    def height(self) -> int:
        return int(self._rgb.shape[0])

    def get_pixel(self, x: int, y: int) -> tuple[int, int, int]:
        if not (0 <= x < self.width and 0 <= y < self.height):
            raise IndexError(f"Pixel ({x}, {y}) outside {self.width}×{self.height}")
        r, g, b = self._rgb[y, x]
        return (int(r), int(g), int(b))

    def to_array(self) -> NDArray[np.uint8]:
        return self._rgb

    @classmethod
    def blank(cls, width: int, height: int, color: tuple[int, int, int] = (255, 255, 255)) -> ArrayPixelSource:
        arr = np.empty((height, width, 3), dtype=np.uint8)
        arr[:, :] = color
        return cls(arr)


def pixel_array(source: PixelSource) -> NDArray[np.uint8]:
    """H×W×3 array view of any PixelSource."""
    if isinstance(source, ArrayPixelSource):
        return source.to_array()
    arr = np.zeros((source.height, source.width, 3), dtype=np.uint8)
    for y in range(source.height):
        for x in range(source.width):
            arr[y, x] = source.get_pixel(x, y)
    return arr
