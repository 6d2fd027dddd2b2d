"""
Decode/encode capability backed by Pillow.

This module provides:
- Decoding of the supported source formats into RGB/RGBA images
- WebP encoding straight into a file object or to bytes
- Cheap size probing for already written .webp files
"""

from __future__ import annotations

import io
import logging
from pathlib import Path
from typing import BinaryIO

from PIL import Image, ImageOps

logger = logging.getLogger(__name__)

WEBP_METHOD = 4


class CodecError(RuntimeError):
    """Base class for decode and encode failures."""


class DecodeError(CodecError):
    """Raised when a source file is unreadable or not a supported image."""

    def __init__(self, path: Path, cause: Exception):
        self.path = path
        self.cause = cause
        super().__init__(f"decode: {cause}")


class EncodeError(CodecError):
    """Raised when Pillow fails to write a WebP image."""

    def __init__(self, cause: Exception, label: str = "webp"):
        self.cause = cause
        self.label = label
        super().__init__(f"encode {label}: {cause}")


def has_alpha(img: Image.Image) -> bool:
    return img.mode in ("RGBA", "LA", "PA", "RGBa", "La") or (
        img.mode == "P" and "transparency" in img.info
    )


def _normalize_mode(img: Image.Image) -> Image.Image:
    """Bring any decoded mode down to 8-bit RGB or RGBA."""
    if img.mode in ("RGB", "RGBA"):
        return img

    if img.mode == "I" or img.mode.startswith("I;16"):
        # 16-bit grayscale: keep the high byte of each sample
        return img.convert("I").point(lambda v: v * (1 / 256)).convert("L").convert("RGB")

    if has_alpha(img):
        return img.convert("RGBA")
    return img.convert("RGB")


def decode(path: Path) -> Image.Image:
    """
    Decode the first frame of an image file.

    EXIF orientation is applied so the pixels match what viewers show.

    Raises DecodeError: If the file can't be opened or decoded
    """
    try:
        with Image.open(path) as src:
            src.load()
            img = ImageOps.exif_transpose(src)
            img = _normalize_mode(img)
    except (OSError, ValueError, SyntaxError, Image.DecompressionBombError) as e:
        raise DecodeError(path, e) from e

    logger.debug("Decoded %s: %dx%d %s", path.name, img.width, img.height, img.mode)
    return img


def write_webp(
    fp: BinaryIO,
    img: Image.Image,
    quality: int,
    lossless: bool,
    label: str = "webp",
) -> None:
    """
    Encode img as WebP into an open binary file object.

    Raises EncodeError: If Pillow fails to encode
    """
    try:
        img.save(
            fp,
            format="WEBP",
            quality=quality,
            lossless=lossless,
            method=WEBP_METHOD,
        )
    except (OSError, ValueError, KeyError) as e:
        raise EncodeError(e, label) from e


def encode(img: Image.Image, quality: int, lossless: bool) -> bytes:
    buf = io.BytesIO()
    write_webp(buf, img, quality, lossless)
    return buf.getvalue()


def read_size(path: Path) -> tuple[int, int]:
    """
    Read the dimensions of an image without decoding its pixels.

    Raises DecodeError: If the header can't be parsed
    """
    try:
        with Image.open(path) as img:
            return img.size
    except (OSError, ValueError, SyntaxError, Image.DecompressionBombError) as e:
        raise DecodeError(path, e) from e
