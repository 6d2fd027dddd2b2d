"""
Shared value types and file helpers for image-convert

The package is a dependency of both the converter and the batch app:
- Converter uses it for options, outcomes and atomic writes
- Batch app uses it for discovery and the job/outcome types

Deployment:
    pip install image-convert
"""

from .jobs import (
    ConversionJob,
    ConversionOptions,
    ConversionOutcome,
    OptionsError,
    OutcomeKind,
)
from .files import (
    SOURCE_IMG_EXTS,
    AtomicWriteError,
    atomic_output,
    atomic_write_bytes,
    discover_images,
    discover_webps,
    is_hidden,
    is_thumbnail,
    thumbnail_path_for,
    tmp_path_for,
    webp_path_for,
)

__all__ = [
    # Jobs
    "ConversionJob",
    "ConversionOptions",
    "ConversionOutcome",
    "OptionsError",
    "OutcomeKind",
    # Files
    "SOURCE_IMG_EXTS",
    "AtomicWriteError",
    "atomic_output",
    "atomic_write_bytes",
    "discover_images",
    "discover_webps",
    "is_hidden",
    "is_thumbnail",
    "thumbnail_path_for",
    "tmp_path_for",
    "webp_path_for",
]
