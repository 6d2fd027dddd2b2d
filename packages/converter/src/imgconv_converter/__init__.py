"""
WebP Conversion Engine.

This package is the core image-to-webp conversion logic.
It is used only by the batch workers.

Deployment:
    pip install image-convert

This package has no threading of its own. It's pure per-file image processing.

"""

from .codec import CodecError, DecodeError, EncodeError, decode, encode, read_size
from .pipeline import ConversionPipeline, DeleteOriginalError, convert
from .scale import clamp_resize, clamp_size, make_thumbnail, resample, thumbnail_size
from .thumbnails import backfill_thumbnail
from .trim import Rectangle, find_content_bounds, trim_image

__all__ = [
    "CodecError",
    "DecodeError",
    "EncodeError",
    "decode",
    "encode",
    "read_size",
    "Rectangle",
    "find_content_bounds",
    "trim_image",
    "clamp_size",
    "thumbnail_size",
    "resample",
    "clamp_resize",
    "make_thumbnail",
    "ConversionPipeline",
    "DeleteOriginalError",
    "convert",
    "backfill_thumbnail",
]
