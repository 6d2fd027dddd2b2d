"""
File handling utilities for the pipeline and the batch runner.
"""

from __future__ import annotations

import contextlib
import logging
import os
from pathlib import Path
from typing import BinaryIO, Iterator

logger = logging.getLogger(__name__)

SOURCE_IMG_EXTS: frozenset[str] = frozenset(
    {".jpg", ".jpeg", ".png", ".gif", ".bmp", ".tif", ".tiff"}
)
WEBP_EXT = ".webp"
THUMBNAIL_SUFFIX = "_thumbnail"
TMP_SUFFIX = ".tmp"


class AtomicWriteError(OSError):
    """Raised when a temp file can't be created or moved into place."""


def is_hidden(name: str) -> bool:
    return name.startswith(".")


def is_thumbnail(path: Path) -> bool:
    """True for files named like ``<name>_thumbnail.webp``."""
    return path.name.lower().endswith(THUMBNAIL_SUFFIX + WEBP_EXT)


def webp_path_for(source: Path) -> Path:
    """Primary output path: same directory, extension replaced by .webp."""
    return source.with_name(source.stem + WEBP_EXT)


def thumbnail_path_for(path: Path) -> Path:
    """Thumbnail sibling of a source or .webp path."""
    return path.with_name(path.stem + THUMBNAIL_SUFFIX + WEBP_EXT)


def tmp_path_for(dest: Path) -> Path:
    return dest.with_name(dest.name + TMP_SUFFIX)


def _walk(root: Path, recursive: bool) -> Iterator[Path]:
    if not recursive:
        for entry in sorted(root.iterdir()):
            if entry.is_file() and not is_hidden(entry.name):
                yield entry
        return

    for dirpath, dirnames, filenames in os.walk(root):
        # Prune hidden directories (.git, .cache, ...) in place
        dirnames[:] = sorted(d for d in dirnames if not is_hidden(d))
        for name in sorted(filenames):
            if not is_hidden(name):
                yield Path(dirpath) / name


def discover_images(root: Path, recursive: bool = False) -> list[Path]:
    """List convertible source images under root. .webp files are never sources."""
    paths = [p for p in _walk(root, recursive) if p.suffix.lower() in SOURCE_IMG_EXTS]
    logger.debug("Found %d source image(s) under %s", len(paths), root)
    return paths


def discover_webps(root: Path, recursive: bool = False) -> list[Path]:
    paths = [p for p in _walk(root, recursive) if p.suffix.lower() == WEBP_EXT]
    logger.debug("Found %d .webp file(s) under %s", len(paths), root)
    return paths


def discard(path: Path) -> None:
    """Remove a leftover temp file, logging instead of raising."""
    try:
        path.unlink(missing_ok=True)
    except OSError as e:
        logger.warning("Failed to remove temp file %s: %s", path, e)


@contextlib.contextmanager
def atomic_output(dest: Path) -> Iterator[BinaryIO]:
    """
    Open ``<dest>.tmp`` for writing and move it over dest on success.

    dest is never observed half written: any failure while writing,
    closing or renaming removes the temp file before the error propagates.

    Raises AtomicWriteError: If the temp file can't be created or renamed
    """
    try:
        dest.parent.mkdir(parents=True, exist_ok=True)
    except OSError as e:
        raise AtomicWriteError(f"create directory {dest.parent}: {e}") from e

    tmp = tmp_path_for(dest)
    try:
        fh = open(tmp, "wb")
    except OSError as e:
        raise AtomicWriteError(f"create {tmp}: {e}") from e

    try:
        yield fh
        fh.close()
    except BaseException:
        with contextlib.suppress(OSError):
            fh.close()
        discard(tmp)
        raise

    try:
        os.replace(tmp, dest)
    except OSError as e:
        discard(tmp)
        raise AtomicWriteError(f"rename {tmp} -> {dest}: {e}") from e


def atomic_write_bytes(dest: Path, data: bytes) -> None:
    with atomic_output(dest) as fh:
        fh.write(data)
