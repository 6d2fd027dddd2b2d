"""CLI for batch WebP conversion."""

from __future__ import annotations

import dataclasses
import logging
import sys
from pathlib import Path

import click

from imgconv_shared.files import AtomicWriteError
from imgconv_shared.jobs import OptionsError

from .config import BatchConfig
from .export import ExportError, export_info
from .runner import BatchRunner


def _setup_logging(verbose: bool) -> None:
    level = logging.DEBUG if verbose else logging.INFO
    logging.basicConfig(
        level=level,
        format="%(asctime)s [%(levelname)s] %(name)s: %(message)s",
        handlers=[logging.StreamHandler(sys.stdout)],
    )


@click.command()
@click.option(
    "-D", "--directory", required=True,
    type=click.Path(exists=True, file_okay=False, path_type=Path),
    help="Directory to process",
)
@click.option("-q", "--quality", type=int, default=None, help="WebP quality (0-100)")
@click.option("-l", "--lossless", is_flag=True, help="Use lossless WebP encoding")
@click.option("-o", "--overwrite", is_flag=True, help="Overwrite existing .webp files if present")
@click.option("-d", "--delete-original", is_flag=True,
              help="Delete the original image after successful conversion")
@click.option("-r", "--recursive", is_flag=True, help="Recurse into subdirectories")
@click.option("-p", "--trim", is_flag=True, help="Trim transparent borders from images")
@click.option("-T", "--trim-threshold", type=int, default=None,
              help="Alpha at or below which a pixel counts as transparent (0-255)")
@click.option("-C", "--workers", type=int, default=None, help="Number of concurrent workers")
@click.option("-w", "--width", "max_width", type=int, default=None, help="Max output width (0 = no limit)")
@click.option("-H", "--height", "max_height", type=int, default=None, help="Max output height (0 = no limit)")
@click.option("-t", "--thumbnail", "thumbnail_percent", type=int, default=None,
              help="Thumbnail percent size (1-100). Creates name_thumbnail.webp")
@click.option("-e", "--export", is_flag=True, help="Write info.json for existing .webp files and exit")
@click.option("-v", "--verbose", is_flag=True, help="Debug logging")
def cli(directory: Path, quality: int | None, lossless: bool, overwrite: bool,
        delete_original: bool, recursive: bool, trim: bool, trim_threshold: int | None,
        workers: int | None, max_width: int | None, max_height: int | None,
        thumbnail_percent: int | None, export: bool, verbose: bool) -> None:
    """Convert JPEG, PNG, GIF, BMP and TIFF images to WebP.

    Optionally trims transparent borders, caps the output size and writes
    percent-scaled thumbnails, using a pool of concurrent workers.
    """
    _setup_logging(verbose)

    try:
        config = BatchConfig.load()
    except OptionsError as e:
        raise click.UsageError(str(e)) from e

    overrides = {
        "quality": quality,
        "trim_threshold": trim_threshold,
        "workers": workers,
        "max_width": max_width,
        "max_height": max_height,
        "thumbnail_percent": thumbnail_percent,
    }
    config = dataclasses.replace(
        config,
        directory=directory,
        lossless=lossless or config.lossless,
        overwrite=overwrite or config.overwrite,
        delete_original=delete_original or config.delete_original,
        recursive=recursive or config.recursive,
        trim=trim or config.trim,
        export=export,
        **{k: v for k, v in overrides.items() if v is not None},
    )

    if config.export:
        try:
            dest, count = export_info(config.directory, config.recursive)
        except (ExportError, AtomicWriteError) as e:
            raise click.ClickException(str(e)) from e
        click.echo(f"Wrote {count} entries to {dest}")
        return

    try:
        runner = BatchRunner(config)
    except OptionsError as e:
        raise click.UsageError(str(e)) from e

    try:
        runner.run()
    except KeyboardInterrupt:
        logging.info("Interrupted")
        sys.exit(130)


def main() -> None:
    cli()


if __name__ == "__main__":
    main()
