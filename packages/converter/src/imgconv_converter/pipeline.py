"""
Single-file conversion workflow for WebP output.

This module handles one source image end to end:
1. Decode, then optionally trim and clamp to max dimensions
2. Skip when the destination already exists (unless overwriting)
3. Write the .webp (and optional thumbnail) through a temp file + rename
4. Optionally delete the source
"""

from __future__ import annotations

import logging
from pathlib import Path

from PIL import Image

from imgconv_shared.files import atomic_output, thumbnail_path_for, webp_path_for
from imgconv_shared.jobs import ConversionOptions, ConversionOutcome

from .codec import CodecError, decode, write_webp
from .scale import clamp_resize, make_thumbnail
from .trim import trim_image

logger = logging.getLogger(__name__)


class DeleteOriginalError(OSError):
    """Raised when the source can't be removed after conversion."""

    def __init__(self, path: Path, cause: OSError):
        self.path = path
        self.cause = cause
        super().__init__(f"failed to delete original file {path}: {cause}")


def write_image(dest: Path, img: Image.Image, options: ConversionOptions, label: str = "webp") -> None:
    """
    Encode img to dest through ``<dest>.tmp``.

    Raises:
        EncodeError: If encoding fails (temp file removed)
        AtomicWriteError: If the temp file can't be created or renamed
    """
    with atomic_output(dest) as fh:
        write_webp(fh, img, options.quality, options.lossless, label=label)


def is_blocked(dest: Path, options: ConversionOptions) -> bool:
    """True when dest exists and must not be replaced."""
    return not options.overwrite and dest.exists()


class ConversionPipeline:
    """
    Converts a single image to WebP.

    Each stage produces a new image; nothing is shared with other
    pipelines, so many can run side by side on different files.
    """

    def __init__(self, source_path: Path, options: ConversionOptions | None = None):
        self.source_path = Path(source_path)
        self.options: ConversionOptions = options or ConversionOptions()

        self.output_path = webp_path_for(self.source_path)
        self.thumbnail_path = thumbnail_path_for(self.source_path)
        self._written: list[Path] = []

    def run(self) -> ConversionOutcome:
        """Execute the conversion. Never raises for per-file problems."""
        try:
            return self._run()
        except (CodecError, OSError) as e:
            logger.debug("Conversion of %s failed: %s", self.source_path, e)
            return ConversionOutcome.failed(self.source_path, str(e), self._written)

    def _run(self) -> ConversionOutcome:
        img = decode(self.source_path)
        img = self._transform(img)

        if is_blocked(self.output_path, self.options):
            logger.debug("Skipping %s: %s exists", self.source_path, self.output_path)
            if self.options.delete_original:
                self._delete_original()
            return ConversionOutcome.skipped(self.source_path)

        write_image(self.output_path, img, self.options)
        self._written.append(self.output_path)

        if self.options.wants_thumbnail():
            self._write_thumbnail(img)

        if self.options.delete_original:
            self._delete_original()

        logger.debug("Converted %s -> %s", self.source_path, self.output_path)
        return ConversionOutcome.success(self.source_path, self._written)

    def _transform(self, img: Image.Image) -> Image.Image:
        if self.options.trim:
            img = trim_image(img, self.options.trim_threshold)

        if self.options.has_bounds():
            img = clamp_resize(img, self.options.max_width, self.options.max_height)

        return img

    def _write_thumbnail(self, img: Image.Image) -> None:
        if is_blocked(self.thumbnail_path, self.options):
            logger.debug("Keeping existing thumbnail %s", self.thumbnail_path)
            return

        thumb = make_thumbnail(img, self.options.thumbnail_percent)
        write_image(self.thumbnail_path, thumb, self.options, label="thumbnail webp")
        self._written.append(self.thumbnail_path)

    def _delete_original(self) -> None:
        try:
            self.source_path.unlink()
        except OSError as e:
            raise DeleteOriginalError(self.source_path, e) from e


def convert(source_path: Path, options: ConversionOptions) -> ConversionOutcome:
    """Convert one file; the per-job entry point used by the worker pool."""
    return ConversionPipeline(source_path, options).run()
