"""Unit tests for upload storage, atomic replace and listing."""

from __future__ import annotations

import re
from pathlib import Path

import pytest
from fastapi import HTTPException

from photohub.errors import ListingUnavailable, NoFileProvided, ReplaceFailed
from photohub.storage import ImageStorage


def test_generated_filename_keeps_original_extension() -> None:
    name = ImageStorage.generate_filename("holiday.Photo.JPG")
    assert re.fullmatch(r"\d{13,}-[0-9a-f]{8}\.JPG", name)


def test_generated_filenames_do_not_collide_within_a_millisecond() -> None:
    names = {ImageStorage.generate_filename("a.png") for _ in range(200)}
    assert len(names) == 200


def test_save_upload_requires_a_filename(tmp_path: Path) -> None:
    storage = ImageStorage(tmp_path)
    with pytest.raises(NoFileProvided):
        storage.save_upload("", b"data")


def test_save_upload_writes_raw_bytes(tmp_path: Path) -> None:
    storage = ImageStorage(tmp_path / "uploads")
    path = storage.save_upload("cat.png", b"raw")
    assert path.parent == tmp_path / "uploads"
    assert path.read_bytes() == b"raw"


def test_commit_replaces_content_and_removes_temp(tmp_path: Path) -> None:
    storage = ImageStorage(tmp_path)
    path = tmp_path / "1.jpg"
    path.write_bytes(b"old")

    storage.commit(path, b"new")

    assert path.read_bytes() == b"new"
    assert sorted(p.name for p in tmp_path.iterdir()) == ["1.jpg"]


def test_commit_failure_cleans_temp_file(tmp_path: Path) -> None:
    storage = ImageStorage(tmp_path)
    missing = tmp_path / "gone.jpg"

    with pytest.raises(ReplaceFailed):
        storage.commit(missing, b"new")

    assert list(tmp_path.iterdir()) == []


def test_list_images_filters_by_extension(tmp_path: Path) -> None:
    storage = ImageStorage(tmp_path)
    for name in ["a.jpg", "b.JPEG", "c.png", "d.WebP", "e.gif", "f.txt", "g.jpg_compressed"]:
        (tmp_path / name).write_bytes(b"x")

    urls = storage.list_images()

    assert sorted(urls) == ["/uploads/a.jpg", "/uploads/b.JPEG", "/uploads/c.png", "/uploads/d.WebP"]


def test_list_images_raises_when_directory_unreadable(tmp_path: Path) -> None:
    storage = ImageStorage(tmp_path / "uploads")
    storage.base_dir.rmdir()

    with pytest.raises(ListingUnavailable):
        storage.list_images()


def test_resolve_image_path_rejects_missing_and_traversal(tmp_path: Path) -> None:
    storage = ImageStorage(tmp_path / "uploads")
    (tmp_path / "secret.txt").write_text("x")

    with pytest.raises(HTTPException) as missing:
        storage.resolve_image_path("nope.jpg")
    assert missing.value.status_code == 404

    with pytest.raises(HTTPException) as traversal:
        storage.resolve_image_path("../secret.txt")
    assert traversal.value.status_code == 400


def test_guess_media_type() -> None:
    assert ImageStorage.guess_media_type(Path("a.JPG")) == "image/jpeg"
    assert ImageStorage.guess_media_type(Path("a.png")) == "image/png"
    assert ImageStorage.guess_media_type(Path("a.unknownext")) == "application/octet-stream"
