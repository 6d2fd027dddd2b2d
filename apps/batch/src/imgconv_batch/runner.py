"""
Batch orchestration: discover, convert through the pool, report.
"""
from __future__ import annotations

import functools
import logging
from dataclasses import dataclass, field
from pathlib import Path

import click

from imgconv_converter import backfill_thumbnail, convert
from imgconv_shared.files import discover_images, discover_webps, is_thumbnail
from imgconv_shared.jobs import ConversionJob, ConversionOptions, ConversionOutcome

from .config import BatchConfig
from .pool import WorkerPool

logger = logging.getLogger(__name__)


@dataclass
class BatchReport:
    """Everything the collector saw during one pass over the pool."""
    results: list[tuple[ConversionJob, ConversionOutcome]] = field(default_factory=list)

    def add(self, job: ConversionJob, outcome: ConversionOutcome) -> None:
        self.results.append((job, outcome))

    @property
    def outcomes(self) -> list[ConversionOutcome]:
        """Outcomes in completion order."""
        return [outcome for _, outcome in self.results]

    def in_submission_order(self) -> list[ConversionOutcome]:
        return [outcome for _, outcome in sorted(self.results, key=lambda r: r[0].index)]

    @property
    def converted(self) -> int:
        return sum(1 for o in self.outcomes if o.ok)

    @property
    def failed(self) -> int:
        return sum(1 for o in self.outcomes if o.is_failed)

    @property
    def skipped(self) -> int:
        return sum(1 for o in self.outcomes if o.is_skipped)

    def written(self) -> set[Path]:
        """Every file written by successful jobs."""
        return {p for o in self.outcomes if o.ok for p in o.outputs}


def echo_outcome(outcome: ConversionOutcome) -> None:
    """One console line per converted file."""
    if outcome.is_failed:
        click.echo(f"[FAIL]\t{outcome.source_path}: {outcome.reason}", err=True)
    elif outcome.is_skipped:
        click.echo(f"[SKIP]\t{outcome.source_path}")
    else:
        click.echo(f"[OK]\t{outcome.source_path}")


def echo_thumbnail(outcome: ConversionOutcome) -> None:
    """Console line for a backfilled thumbnail. Existing thumbnails stay quiet."""
    if outcome.is_failed:
        click.echo(f"[FAIL]\t{outcome.source_path}: {outcome.reason}", err=True)
    elif outcome.ok:
        for path in outcome.outputs:
            click.echo(f"[THUMB]\t{path}")


class BatchRunner:
    """Runs one batch described by a BatchConfig."""

    def __init__(self, config: BatchConfig):
        self._config = config.validate()
        self._options: ConversionOptions = config.to_options()
        self._root = Path(config.directory)

    @property
    def options(self) -> ConversionOptions:
        return self._options

    def run(self) -> BatchReport:
        """Convert every source image, then backfill thumbnails if requested."""
        files = discover_images(self._root, self._config.recursive)

        if not files:
            if self._options.wants_thumbnail():
                self.backfill_thumbnails()
            else:
                click.echo("No images found to convert.")
            return BatchReport()

        click.echo(f"Found {len(files)} image(s). Converting to WebP...")
        report = self.convert_all(files)
        click.echo(f"Done. Converted: {report.converted}, Failed: {report.failed}")

        if self._options.wants_thumbnail():
            self.backfill_thumbnails(exclude=report.written())

        return report

    def convert_all(self, files: list[Path]) -> BatchReport:
        handler = functools.partial(convert, options=self._options)
        pool = WorkerPool(self._config.workers, handler)
        logger.info("Converting %d file(s) with %d worker(s)", len(files), pool.worker_count)

        report = BatchReport()
        for job, outcome in pool.iter_results(files):
            report.add(job, outcome)
            echo_outcome(outcome)

        logger.info(
            "Batch finished: %d converted, %d skipped, %d failed",
            report.converted, report.skipped, report.failed,
        )
        return report

    def backfill_thumbnails(self, exclude: set[Path] | None = None) -> BatchReport:
        """Create thumbnails for .webp files this run did not just write."""
        exclude = exclude or set()
        webps = [
            p for p in discover_webps(self._root, self._config.recursive)
            if not is_thumbnail(p) and p not in exclude
        ]

        report = BatchReport()
        if not webps:
            return report

        handler = functools.partial(backfill_thumbnail, options=self._options)
        pool = WorkerPool(self._config.workers, handler)
        for job, outcome in pool.iter_results(webps):
            report.add(job, outcome)
            echo_thumbnail(outcome)

        logger.info("Thumbnail pass finished: %d written, %d failed", report.converted, report.failed)
        return report
