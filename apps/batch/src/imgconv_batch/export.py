"""
Metadata export of converted .webp files.

Writes ``info.json`` at the root of the processed directory:
    [{"name", "width", "height", "mime", "thumbnail",
      "thumbnailWidth", "thumbnailHeight"}, ...]
"""

from __future__ import annotations

import json
import logging
from dataclasses import dataclass
from pathlib import Path
from typing import Any

from imgconv_converter.codec import DecodeError, read_size
from imgconv_shared.files import atomic_write_bytes, discover_webps, is_thumbnail, thumbnail_path_for

logger = logging.getLogger(__name__)

INFO_FILENAME = "info.json"
WEBP_MIME = "image/webp"


class ExportError(RuntimeError):
    """Raised when a .webp file can't be read during export."""


@dataclass(frozen=True)
class WebpInfo:
    """One entry of info.json."""
    name: str
    width: int
    height: int
    thumbnail_width: int = 0
    thumbnail_height: int = 0

    @property
    def has_thumbnail(self) -> bool:
        return self.thumbnail_width > 0 and self.thumbnail_height > 0

    def to_dict(self) -> dict[str, Any]:
        return {
            "name": self.name,
            "width": self.width,
            "height": self.height,
            "mime": WEBP_MIME,
            "thumbnail": self.has_thumbnail,
            "thumbnailWidth": self.thumbnail_width,
            "thumbnailHeight": self.thumbnail_height,
        }


def _thumbnail_size(webp_path: Path) -> tuple[int, int]:
    """Size of the sibling thumbnail, (0, 0) when missing or unreadable."""
    thumb_path = thumbnail_path_for(webp_path)
    if not thumb_path.is_file():
        return 0, 0
    try:
        return read_size(thumb_path)
    except DecodeError as e:
        logger.warning("Ignoring unreadable thumbnail %s: %s", thumb_path, e)
        return 0, 0


def collect_info(root: Path, recursive: bool = False) -> list[WebpInfo]:
    """
    Describe every primary .webp file under root.

    Raises ExportError: If a primary .webp file can't be read
    """
    entries: list[WebpInfo] = []
    for path in discover_webps(root, recursive):
        if is_thumbnail(path):
            continue

        try:
            width, height = read_size(path)
        except DecodeError as e:
            raise ExportError(f"decode config {path}: {e.cause}") from e

        thumb_w, thumb_h = _thumbnail_size(path)
        entries.append(WebpInfo(path.name, width, height, thumb_w, thumb_h))
    return entries


def export_info(root: Path, recursive: bool = False) -> tuple[Path, int]:
    """
    Write info.json atomically. Returns (path, entry count).

    Raises:
        ExportError: If a .webp file can't be read
        AtomicWriteError: If info.json can't be written
    """
    entries = collect_info(root, recursive)
    data = json.dumps([e.to_dict() for e in entries], indent="\t") + "\n"

    dest = Path(root) / INFO_FILENAME
    atomic_write_bytes(dest, data.encode("utf-8"))
    logger.debug("Exported %d entries to %s", len(entries), dest)
    return dest, len(entries)
