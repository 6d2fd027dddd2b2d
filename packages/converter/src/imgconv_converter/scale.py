"""
Size policies and resampling.

Both policies keep the aspect ratio and only ever shrink:
- clamp: fit under a max width, then under a max height
- thumbnail: a percentage of the current size
"""

from __future__ import annotations

import logging
import math

from PIL import Image

logger = logging.getLogger(__name__)

# Pillow's bicubic kernel uses a = -0.5, i.e. Catmull-Rom
RESAMPLE_FILTER = Image.Resampling.BICUBIC


def round_half_up(value: float) -> int:
    """Round a non-negative value to nearest, halves up (not banker's rounding)."""
    return int(math.floor(value + 0.5))


def clamp_size(width: int, height: int, max_width: int, max_height: int) -> tuple[int, int]:
    """
    Target size under max_width/max_height (0 = no limit).

    The width limit is applied first; the height limit is then checked
    against the already scaled height. A scaled axis never drops below 1.
    """
    new_w, new_h = width, height

    if max_width > 0 and new_w > max_width:
        scale = max_width / new_w
        new_w = max_width
        new_h = max(1, round_half_up(new_h * scale))

    if max_height > 0 and new_h > max_height:
        scale = max_height / new_h
        new_h = max_height
        new_w = max(1, round_half_up(new_w * scale))

    return new_w, new_h


def thumbnail_size(width: int, height: int, percent: int) -> tuple[int, int]:
    """Size of a percent-scaled thumbnail, never below 1x1."""
    if not 1 <= percent <= 100:
        raise ValueError(f"Thumbnail percent must be 1..100, got {percent}")

    thumb_w = max(1, round_half_up(width * percent / 100.0))
    thumb_h = max(1, round_half_up(height * percent / 100.0))
    return thumb_w, thumb_h


def resample(img: Image.Image, size: tuple[int, int]) -> Image.Image:
    """
    Catmull-Rom resample of img, composited over a fresh transparent canvas.

    Always returns a new RGBA image; img is left untouched.
    """
    rgba = img if img.mode == "RGBA" else img.convert("RGBA")
    scaled = rgba.resize(size, RESAMPLE_FILTER)

    canvas = Image.new("RGBA", size, (0, 0, 0, 0))
    canvas.alpha_composite(scaled)
    return canvas


def clamp_resize(img: Image.Image, max_width: int, max_height: int) -> Image.Image:
    """Downscale to fit the limits. Returns img itself when nothing changes."""
    width, height = img.size
    new_w, new_h = clamp_size(width, height, max_width, max_height)

    if (new_w, new_h) == (width, height):
        return img

    logger.debug("Resizing %dx%d -> %dx%d", width, height, new_w, new_h)
    return resample(img, (new_w, new_h))


def make_thumbnail(img: Image.Image, percent: int) -> Image.Image:
    """Percent-scaled copy of img. Resamples even at 100%."""
    size = thumbnail_size(img.width, img.height, percent)
    logger.debug("Thumbnail %dx%d -> %dx%d (%d%%)", img.width, img.height, size[0], size[1], percent)
    return resample(img, size)
