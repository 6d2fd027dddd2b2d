"""Thumbnails for .webp files that already exist on disk."""

from __future__ import annotations

import logging
from pathlib import Path

from imgconv_shared.files import thumbnail_path_for
from imgconv_shared.jobs import ConversionOptions, ConversionOutcome

from .codec import CodecError, decode
from .pipeline import is_blocked, write_image
from .scale import make_thumbnail

logger = logging.getLogger(__name__)


def backfill_thumbnail(webp_path: Path, options: ConversionOptions) -> ConversionOutcome:
    """
    Write ``<name>_thumbnail.webp`` next to an existing .webp file.

    Skipped when the thumbnail exists and overwrite is off.
    """
    webp_path = Path(webp_path)
    thumb_path = thumbnail_path_for(webp_path)

    if is_blocked(thumb_path, options):
        return ConversionOutcome.skipped(webp_path, reason="thumbnail exists")

    try:
        img = decode(webp_path)
        thumb = make_thumbnail(img, options.thumbnail_percent)
        write_image(thumb_path, thumb, options, label="thumbnail webp")
    except (CodecError, OSError) as e:
        logger.debug("Thumbnail for %s failed: %s", webp_path, e)
        return ConversionOutcome.failed(webp_path, str(e))

    return ConversionOutcome.success(webp_path, [thumb_path])
