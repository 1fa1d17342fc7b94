"""Tests for Pillow-backed plane decoding and encoding."""
from __future__ import annotations

from pathlib import Path

import pytest

pytest.importorskip("numpy")

import numpy as np
from PIL import Image

from softedge.core.errors import ImageIOError
from softedge.core.utils_io import load_channel_planes, write_channel_planes


def _write_sprite(path: Path) -> Image.Image:
    sprite = Image.new("RGBA", (4, 3), (0, 0, 0, 0))
    sprite.putpixel((0, 0), (255, 128, 0, 255))
    sprite.putpixel((3, 2), (10, 20, 30, 64))
    sprite.save(path)
    return sprite


def test_load_rgba_planes(tmp_path: Path) -> None:
    path = tmp_path / "sprite.png"
    _write_sprite(path)
    decoded = load_channel_planes(path)
    assert decoded.order == ("R", "G", "B", "A")
    assert decoded.mode == "RGBA"
    assert decoded.size == (4, 3)
    for plane in decoded.planes.values():
        assert plane.dtype == np.float32
        assert plane.shape == (3, 4)
    assert decoded.planes["R"][0, 0] == pytest.approx(1.0)
    assert decoded.planes["G"][0, 0] == pytest.approx(128 / 255)
    assert decoded.planes["A"][2, 3] == pytest.approx(64 / 255)


def test_unchanged_planes_write_back_identically(tmp_path: Path) -> None:
    src = tmp_path / "sprite.png"
    dst = tmp_path / "out" / "sprite.png"
    sprite = _write_sprite(src)
    write_channel_planes(load_channel_planes(src), dst)
    with Image.open(dst) as written:
        assert written.mode == "RGBA"
        np.testing.assert_array_equal(np.asarray(written), np.asarray(sprite))
    assert not list(dst.parent.glob(".*.tmp"))


def test_palette_transparency_expands_to_rgba(tmp_path: Path) -> None:
    path = tmp_path / "palette.png"
    palette = Image.new("P", (2, 2), 0)
    palette.putpalette([255, 0, 0, 0, 255, 0])
    palette.putpixel((1, 1), 1)
    palette.save(path, transparency=0)
    decoded = load_channel_planes(path)
    assert decoded.order == ("R", "G", "B", "A")
    assert decoded.planes["A"][0, 0] == 0.0
    assert decoded.planes["A"][1, 1] == pytest.approx(1.0)
    assert decoded.planes["G"][1, 1] == pytest.approx(1.0)


def test_missing_file(tmp_path: Path) -> None:
    with pytest.raises(ImageIOError, match="not found"):
        load_channel_planes(tmp_path / "absent.png")


def test_corrupt_file(tmp_path: Path) -> None:
    path = tmp_path / "broken.png"
    path.write_bytes(b"definitely not an image")
    with pytest.raises(ImageIOError):
        load_channel_planes(path)


def test_unknown_output_format(tmp_path: Path) -> None:
    src = tmp_path / "sprite.png"
    _write_sprite(src)
    dst = tmp_path / "sprite.unknownext"
    with pytest.raises(ImageIOError, match="unknown image format"):
        write_channel_planes(load_channel_planes(src), dst)
    assert not dst.exists()


def test_unwritable_output(tmp_path: Path) -> None:
    src = tmp_path / "sprite.png"
    _write_sprite(src)
    blocker = tmp_path / "blocker"
    blocker.write_text("file, not a directory")
    with pytest.raises(ImageIOError):
        write_channel_planes(load_channel_planes(src), blocker / "out.png")


def test_oversized_image_is_an_io_error(tmp_path: Path, monkeypatch: pytest.MonkeyPatch) -> None:
    path = tmp_path / "large.png"
    Image.new("RGBA", (64, 64), (0, 0, 0, 0)).save(path)
    monkeypatch.setattr(Image, "MAX_IMAGE_PIXELS", 10)
    with pytest.raises(ImageIOError) as excinfo:
        load_channel_planes(path)
    assert isinstance(excinfo.value.__cause__, Image.DecompressionBombError)
