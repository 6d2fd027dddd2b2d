"""Shared fixtures: small synthetic images written with Pillow."""

from __future__ import annotations

from pathlib import Path
from typing import Callable

import pytest
from PIL import Image

from imgconv_shared.jobs import ConversionOptions


def solid_png(path: Path, size: tuple[int, int] = (100, 50), color=(200, 40, 40, 255)) -> Path:
    Image.new("RGBA", size, color).save(path)
    return path


def bordered_png(path: Path, content: int = 50, border: int = 10) -> Path:
    """Opaque square of side `content` inside a fully transparent border."""
    side = content + 2 * border
    img = Image.new("RGBA", (side, side), (0, 0, 0, 0))
    img.paste(Image.new("RGBA", (content, content), (10, 120, 200, 255)), (border, border))
    img.save(path)
    return path


@pytest.fixture
def make_png(tmp_path: Path) -> Callable[..., Path]:
    def _make(name: str = "image.png", size: tuple[int, int] = (100, 50), color=(200, 40, 40, 255)) -> Path:
        return solid_png(tmp_path / name, size, color)
    return _make


@pytest.fixture
def bordered(tmp_path: Path) -> Path:
    return bordered_png(tmp_path / "bordered.png")


@pytest.fixture
def options() -> ConversionOptions:
    return ConversionOptions(quality=80)


def decoded_size(path: Path) -> tuple[int, int]:
    with Image.open(path) as img:
        img.load()
        return img.size
