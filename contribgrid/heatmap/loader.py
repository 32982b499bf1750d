"""Image loader — facade over Pillow.

Decodes a screenshot (path or raw bytes) into the engine's pixel-grid
abstraction and wraps it in a PipelineContext.
"""

from __future__ import annotations

import io
import logging
from pathlib import Path

import numpy as np
from PIL import Image, UnidentifiedImageError

from contribgrid.engine.context import PipelineContext
from contribgrid.engine.pixels import ArrayPixelSource, PixelSource

logger = logging.getLogger(__name__)


class ImageDecodeError(ValueError):
    """Raised when the input is not a decodable raster image."""


def load_image(source: bytes | str | Path) -> ArrayPixelSource:
    """Decode PNG/JPEG/... into an RGB ArrayPixelSource. Alpha is flattened away."""
    try:
        if isinstance(source, (bytes, bytearray)):
            image = Image.open(io.BytesIO(source))
        else:
            image = Image.open(Path(source))
        with image:
            rgb = np.array(image.convert("RGB"))
    except (UnidentifiedImageError, Image.DecompressionBombError, OSError) as e:
        raise ImageDecodeError(f"Cannot decode image: {e}") from e

    pixels = ArrayPixelSource(rgb)
    logger.debug("Loaded %dx%d image", pixels.width, pixels.height)
    return pixels


def build_context(pixels: PixelSource, years: list[int]) -> PipelineContext:
    return PipelineContext(pixels=pixels, years=list(years))
