"""
Transparent border trimming.

Finds the smallest rectangle holding every pixel whose alpha is above a
threshold and crops the image to it, like an image editor's "Trim".
"""

from __future__ import annotations

import logging
from dataclasses import dataclass

import numpy as np
from PIL import Image

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class Rectangle:
    """Pixel rectangle with exclusive max edges."""
    min_x: int
    min_y: int
    max_x: int
    max_y: int

    @property
    def width(self) -> int:
        return self.max_x - self.min_x

    @property
    def height(self) -> int:
        return self.max_y - self.min_y

    @property
    def is_empty(self) -> bool:
        """True when no content was found."""
        return self.min_x >= self.max_x or self.min_y >= self.max_y

    @property
    def box(self) -> tuple[int, int, int, int]:
        """(left, upper, right, lower) as expected by Image.crop."""
        return self.min_x, self.min_y, self.max_x, self.max_y


def alpha_plane(img: Image.Image) -> np.ndarray:
    """
    8-bit alpha of every pixel as a (height, width) array.

    Images without an alpha channel are fully opaque.
    """
    if img.mode != "RGBA":
        img = img.convert("RGBA")
    return np.asarray(img.getchannel("A"), dtype=np.uint8)


def find_content_bounds(img: Image.Image, threshold: int) -> Rectangle:
    """
    Bounding box of all pixels with alpha > threshold.

    A pixel with alpha <= threshold counts as transparent. The whole
    plane is scanned; when nothing is opaque enough the returned
    rectangle is empty.
    """
    width, height = img.size
    min_x, min_y = width, height
    max_x, max_y = 0, 0

    mask = alpha_plane(img) > threshold
    cols = np.flatnonzero(mask.any(axis=0))
    rows = np.flatnonzero(mask.any(axis=1))

    if cols.size and rows.size:
        min_x, max_x = int(cols[0]), int(cols[-1])
        min_y, max_y = int(rows[0]), int(rows[-1])

    # Exclusive max edges, like image bounds
    return Rectangle(min_x, min_y, max_x + 1, max_y + 1)


def trim_image(img: Image.Image, threshold: int) -> Image.Image:
    """
    Crop away transparent borders.

    Returns img itself when there is no content to keep. Otherwise a
    new RGBA image holding a copy of the content rectangle.
    """
    bounds = find_content_bounds(img, threshold)

    if bounds.is_empty:
        logger.debug("No content above alpha %d; leaving image as is", threshold)
        return img

    rgba = img if img.mode == "RGBA" else img.convert("RGBA")
    trimmed = rgba.crop(bounds.box)
    logger.debug(
        "Trimmed %dx%d -> %dx%d at (%d, %d)",
        img.width, img.height, bounds.width, bounds.height, bounds.min_x, bounds.min_y,
    )
    return trimmed
