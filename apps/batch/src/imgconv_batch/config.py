"""Configuration for a batch run."""

from __future__ import annotations

import os
from dataclasses import dataclass, field
from pathlib import Path

from imgconv_shared.jobs import ConversionOptions, OptionsError

_TRUE_VALUES = ("1", "true", "yes", "on")


def _env_flag(name: str, default: bool = False) -> bool:
    value = os.getenv(name)
    if value is None or value.strip() == "":
        return default
    return value.strip().lower() in _TRUE_VALUES


def _env_int(name: str, default: int) -> int:
    value = os.getenv(name)
    if value is None or value.strip() == "":
        return default
    try:
        return int(value)
    except ValueError as e:
        raise OptionsError(f"{name} must be an integer, got {value!r}") from e


def default_workers() -> int:
    return max(1, os.cpu_count() or 1)


@dataclass(frozen=True)
class BatchConfig:
    """Batch configuration. Defaults can be overridden from the environment."""

    directory: Path = Path(".")
    recursive: bool = False
    workers: int = field(default_factory=default_workers)
    export: bool = False

    quality: int = 100
    lossless: bool = False
    overwrite: bool = False
    delete_original: bool = False
    trim: bool = False
    trim_threshold: int = 0
    max_width: int = 0
    max_height: int = 0
    thumbnail_percent: int = 0

    @classmethod
    def load(cls) -> BatchConfig:
        """Load from environment variables."""
        return cls(
            directory=Path(os.getenv("IMGCONV_DIRECTORY", ".")),
            recursive=_env_flag("IMGCONV_RECURSIVE"),
            workers=_env_int("IMGCONV_WORKERS", default_workers()),
            quality=_env_int("IMGCONV_QUALITY", 100),
            lossless=_env_flag("IMGCONV_LOSSLESS"),
            overwrite=_env_flag("IMGCONV_OVERWRITE"),
            delete_original=_env_flag("IMGCONV_DELETE_ORIGINAL"),
            trim=_env_flag("IMGCONV_TRIM"),
            trim_threshold=_env_int("IMGCONV_TRIM_THRESHOLD", 0),
            max_width=_env_int("IMGCONV_MAX_WIDTH", 0),
            max_height=_env_int("IMGCONV_MAX_HEIGHT", 0),
            thumbnail_percent=_env_int("IMGCONV_THUMBNAIL", 0),
        )

    def to_options(self) -> ConversionOptions:
        """Snapshot handed to every worker."""
        return ConversionOptions(
            quality=self.quality,
            lossless=self.lossless,
            overwrite=self.overwrite,
            delete_original=self.delete_original,
            trim=self.trim,
            trim_threshold=self.trim_threshold,
            max_width=self.max_width,
            max_height=self.max_height,
            thumbnail_percent=self.thumbnail_percent,
        )

    def validate(self) -> BatchConfig:
        """
        Check every value before any work starts.

        Raises OptionsError: On the first out-of-range value
        """
        if self.workers < 1:
            raise OptionsError("workers must be at least 1")
        self.to_options().validate()
        return self
