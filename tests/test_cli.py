"""End-to-end tests through the click command."""

import json

import pytest
from click.testing import CliRunner
from PIL import Image

from conftest import bordered_png, decoded_size, solid_png
from imgconv_batch.cli import cli


@pytest.fixture
def runner():
    return CliRunner()


def run(runner, directory, *args):
    return runner.invoke(cli, ["-D", str(directory), "-C", "1", *args])


def test_scenario_a_default_conversion(runner, tmp_path):
    solid_png(tmp_path / "image.png")

    result = run(runner, tmp_path)

    assert result.exit_code == 0, result.output
    assert "Found 1 image(s)" in result.output
    assert f"[OK]\t{tmp_path / 'image.png'}" in result.output
    assert "Done. Converted: 1, Failed: 0" in result.output
    assert decoded_size(tmp_path / "image.webp") == (100, 50)
    assert not list(tmp_path.glob("*.tmp"))


def test_scenario_b_max_width(runner, tmp_path):
    solid_png(tmp_path / "image.png")

    result = run(runner, tmp_path, "--width", "50")

    assert result.exit_code == 0, result.output
    assert decoded_size(tmp_path / "image.webp") == (50, 25)


def test_scenario_c_trim(runner, tmp_path):
    bordered_png(tmp_path / "sprite.png")

    result = run(runner, tmp_path, "--trim", "--trim-threshold", "0")

    assert result.exit_code == 0, result.output
    assert decoded_size(tmp_path / "sprite.webp") == (50, 50)


def test_scenario_d_second_run_skips(runner, tmp_path):
    solid_png(tmp_path / "image.png")
    run(runner, tmp_path)
    first = (tmp_path / "image.webp").read_bytes()

    result = run(runner, tmp_path, "-q", "10")

    assert result.exit_code == 0, result.output
    assert f"[SKIP]\t{tmp_path / 'image.png'}" in result.output
    assert "Done. Converted: 0, Failed: 0" in result.output
    assert (tmp_path / "image.webp").read_bytes() == first


def test_overwrite_rewrites(runner, tmp_path):
    solid_png(tmp_path / "image.png")
    run(runner, tmp_path, "-q", "90")

    result = run(runner, tmp_path, "--overwrite", "--width", "10")

    assert "Done. Converted: 1, Failed: 0" in result.output
    assert decoded_size(tmp_path / "image.webp") == (10, 5)


def test_failures_do_not_change_exit_code(runner, tmp_path):
    solid_png(tmp_path / "good.png")
    (tmp_path / "bad.jpg").write_bytes(b"junk")

    result = runner.invoke(cli, ["-D", str(tmp_path), "-C", "4"])

    assert result.exit_code == 0, result.output
    assert f"[FAIL]\t{tmp_path / 'bad.jpg'}: decode: " in result.output
    assert "Done. Converted: 1, Failed: 1" in result.output


def test_delete_original(runner, tmp_path):
    src = solid_png(tmp_path / "image.png")

    result = run(runner, tmp_path, "-d")

    assert result.exit_code == 0, result.output
    assert not src.exists()
    assert (tmp_path / "image.webp").exists()


def test_recursive(runner, tmp_path):
    (tmp_path / "sub").mkdir()
    solid_png(tmp_path / "top.png")
    solid_png(tmp_path / "sub" / "deep.png")

    flat = run(runner, tmp_path)
    assert "Converted: 1," in flat.output
    assert not (tmp_path / "sub" / "deep.webp").exists()

    deep = run(runner, tmp_path, "-r")
    assert "Converted: 1," in deep.output
    assert (tmp_path / "sub" / "deep.webp").exists()


def test_thumbnail_flag(runner, tmp_path):
    solid_png(tmp_path / "image.png")

    result = run(runner, tmp_path, "-t", "50")

    assert result.exit_code == 0, result.output
    assert decoded_size(tmp_path / "image.webp") == (100, 50)
    assert decoded_size(tmp_path / "image_thumbnail.webp") == (50, 25)
    assert not (tmp_path / "image_thumbnail_thumbnail.webp").exists()
    assert "[THUMB]" not in result.output


def test_thumbnail_backfill_for_existing_webps(runner, tmp_path):
    Image.new("RGB", (40, 20)).save(tmp_path / "old.webp", format="WEBP")

    result = run(runner, tmp_path, "-t", "50")

    assert result.exit_code == 0, result.output
    assert "No images found" not in result.output
    assert f"[THUMB]\t{tmp_path / 'old_thumbnail.webp'}" in result.output
    assert decoded_size(tmp_path / "old_thumbnail.webp") == (20, 10)


def test_thumbnail_backfill_after_skip(runner, tmp_path):
    solid_png(tmp_path / "image.png")
    run(runner, tmp_path)

    result = run(runner, tmp_path, "-t", "10")

    assert f"[SKIP]\t{tmp_path / 'image.png'}" in result.output
    assert f"[THUMB]\t{tmp_path / 'image_thumbnail.webp'}" in result.output
    assert decoded_size(tmp_path / "image_thumbnail.webp") == (10, 5)


def test_nothing_to_do(runner, tmp_path):
    result = run(runner, tmp_path)

    assert result.exit_code == 0
    assert "No images found to convert." in result.output


@pytest.mark.parametrize(
    "args",
    [
        ["-q", "101"],
        ["-q", "-1"],
        ["-C", "0"],
        ["-T", "256"],
        ["-w", "-5"],
        ["-t", "150"],
    ],
)
def test_invalid_options(runner, tmp_path, args):
    solid_png(tmp_path / "image.png")

    result = runner.invoke(cli, ["-D", str(tmp_path), *args])

    assert result.exit_code == 2
    assert not (tmp_path / "image.webp").exists()


def test_missing_directory(runner, tmp_path):
    result = runner.invoke(cli, ["-D", str(tmp_path / "nope")])
    assert result.exit_code == 2


def test_environment_defaults(runner, tmp_path, monkeypatch):
    monkeypatch.setenv("IMGCONV_MAX_WIDTH", "20")
    solid_png(tmp_path / "image.png")

    result = run(runner, tmp_path)

    assert result.exit_code == 0, result.output
    assert decoded_size(tmp_path / "image.webp") == (20, 10)


def test_export(runner, tmp_path):
    solid_png(tmp_path / "a.png")
    solid_png(tmp_path / "b.png", size=(30, 60))
    run(runner, tmp_path)
    run(runner, tmp_path, "-t", "50", "-o")
    (tmp_path / "b_thumbnail.webp").unlink()

    result = run(runner, tmp_path, "--export")

    assert result.exit_code == 0, result.output
    info_path = tmp_path / "info.json"
    assert f"Wrote 2 entries to {info_path}" in result.output

    text = info_path.read_text()
    assert text.endswith("\n")
    assert "\t" in text
    assert json.loads(text) == [
        {
            "name": "a.webp", "width": 100, "height": 50, "mime": "image/webp",
            "thumbnail": True, "thumbnailWidth": 50, "thumbnailHeight": 25,
        },
        {
            "name": "b.webp", "width": 30, "height": 60, "mime": "image/webp",
            "thumbnail": False, "thumbnailWidth": 0, "thumbnailHeight": 0,
        },
    ]


def test_export_fails_on_unreadable_webp(runner, tmp_path):
    (tmp_path / "bad.webp").write_bytes(b"broken")

    result = run(runner, tmp_path, "--export")

    assert result.exit_code == 1
    assert "decode config" in result.output
    assert not (tmp_path / "info.json").exists()
