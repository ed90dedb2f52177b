"""Tests for the directory recompressor CLI."""

from __future__ import annotations

import logging
from io import BytesIO
from pathlib import Path

import pytest
from PIL import Image

from photohub import batch


def write_image(path: Path, image_format: str, **options) -> None:
    buffer = BytesIO()
    Image.effect_noise((32, 32), 40).convert("RGB").save(buffer, format=image_format, **options)
    path.write_bytes(buffer.getvalue())


def test_recompress_directory_handles_each_format(tmp_path: Path) -> None:
    source = tmp_path / "in"
    source.mkdir()
    write_image(source / "a.jpg", "JPEG", quality=95)
    write_image(source / "b.png", "PNG")
    write_image(source / "c.webp", "WEBP", quality=100)
    (source / "d.gif").write_bytes(b"GIF89a")
    (source / "e.jpg").write_bytes(b"broken")
    (source / "nested").mkdir()

    report = batch.recompress_directory(source, tmp_path / "out", batch.build_batch_profiles())

    assert report.compressed == ["a.jpg", "b.png", "c.webp"]
    assert report.skipped == ["d.gif"]
    assert report.failed == ["e.jpg"]
    assert sorted(p.name for p in (tmp_path / "out").iterdir()) == ["a.jpg", "b.png", "c.webp"]
    with Image.open(tmp_path / "out" / "c.webp") as image:
        assert image.format == "WEBP"
    assert (source / "a.jpg").exists()


def test_main_exit_codes(tmp_path: Path, caplog: pytest.LogCaptureFixture) -> None:
    source = tmp_path / "in"
    source.mkdir()
    write_image(source / "a.png", "PNG")

    assert batch.main([str(source), str(tmp_path / "out")]) == 0

    (source / "bad.png").write_bytes(b"nope")
    with caplog.at_level(logging.WARNING):
        assert batch.main([str(source), str(tmp_path / "out")]) == 1
    assert "Failed to compress file" in caplog.text

    assert batch.main([str(tmp_path / "missing"), str(tmp_path / "out")]) == 2
