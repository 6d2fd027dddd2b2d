"""
Value types passed between the scheduler and the conversion pipeline.

Flow:
    Feeder -> Worker: ConversionJob (one source file)
    Worker -> Collector: ConversionOutcome (success, skipped or failed)
    Every worker reads the same ConversionOptions snapshot.
"""
from __future__ import annotations

from dataclasses import dataclass, field
from pathlib import Path
from typing import Literal

OutcomeKind = Literal["success", "skipped", "failed"]

MAX_QUALITY = 100
MAX_THRESHOLD = 255
MAX_THUMBNAIL_PERCENT = 100


class OptionsError(ValueError):
    """Raised when a configuration value is out of range."""


@dataclass(frozen=True)
class ConversionOptions:
    """
    Settings applied to every file of a batch. Built once before the
    first job is dispatched and never changed afterwards.
    """
    quality: int = 100
    lossless: bool = False
    overwrite: bool = False
    delete_original: bool = False

    trim: bool = False
    trim_threshold: int = 0

    max_width: int = 0
    max_height: int = 0

    thumbnail_percent: int = 0

    def validate(self) -> "ConversionOptions":
        if not 0 <= self.quality <= MAX_QUALITY:
            raise OptionsError("quality must be between 0 and 100")
        if not 0 <= self.trim_threshold <= MAX_THRESHOLD:
            raise OptionsError("trim threshold must be between 0 and 255")
        if self.max_width < 0 or self.max_height < 0:
            raise OptionsError("max width and height must be 0 or greater")
        if not 0 <= self.thumbnail_percent <= MAX_THUMBNAIL_PERCENT:
            raise OptionsError("thumbnail percent must be between 0 and 100")
        return self

    def has_bounds(self) -> bool:
        """True if a max width or height is set."""
        return self.max_width > 0 or self.max_height > 0

    def wants_thumbnail(self) -> bool:
        return self.thumbnail_percent > 0


@dataclass(frozen=True)
class ConversionJob:
    """One source file handed to exactly one worker."""
    source_path: Path
    index: int = 0


@dataclass(frozen=True)
class ConversionOutcome:
    """Terminal result of one job."""
    source_path: Path
    kind: OutcomeKind
    reason: str = ""
    outputs: tuple[Path, ...] = field(default_factory=tuple)

    @classmethod
    def success(cls, source_path: Path, outputs: list[Path] | None = None) -> "ConversionOutcome":
        return cls(source_path=source_path, kind="success", outputs=tuple(outputs or ()))

    @classmethod
    def skipped(cls, source_path: Path, reason: str = "destination exists") -> "ConversionOutcome":
        return cls(source_path=source_path, kind="skipped", reason=reason)

    @classmethod
    def failed(
        cls,
        source_path: Path,
        reason: str,
        outputs: list[Path] | None = None,
    ) -> "ConversionOutcome":
        return cls(
            source_path=source_path,
            kind="failed",
            reason=reason,
            outputs=tuple(outputs or ()),
        )

    @property
    def ok(self) -> bool:
        return self.kind == "success"

    @property
    def is_skipped(self) -> bool:
        return self.kind == "skipped"

    @property
    def is_failed(self) -> bool:
        return self.kind == "failed"
