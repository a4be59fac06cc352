from __future__ import annotations

import asyncio

import pytest

from services.image_storage import ImageStorage


def test_save_writes_file_under_generated_name(tmp_path) -> None:
    storage = ImageStorage(tmp_path / "uploads")

    stored = asyncio.run(storage.save("Cat.JPG", b"data"))

    assert stored.storage_path.endswith(f"{stored.identity}.jpg")
    assert (tmp_path / "uploads" / f"{stored.identity}.jpg").read_bytes() == b"data"


def test_each_save_gets_a_fresh_identity(tmp_path) -> None:
    storage = ImageStorage(tmp_path)

    first = asyncio.run(storage.save("a.png", b"1"))
    second = asyncio.run(storage.save("a.png", b"2"))

    assert first.identity != second.identity


def test_save_rejects_empty_bytes(tmp_path) -> None:
    with pytest.raises(ValueError):
        asyncio.run(ImageStorage(tmp_path).save("a.png", b""))


def test_delete_removes_file_and_raises_when_missing(tmp_path) -> None:
    storage = ImageStorage(tmp_path)
    stored = asyncio.run(storage.save("a.png", b"1"))

    asyncio.run(storage.delete(stored.storage_path))

    assert not (tmp_path / f"{stored.identity}.png").exists()
    with pytest.raises(OSError):
        asyncio.run(storage.delete(stored.storage_path))


def test_public_url_is_relative_to_public_dir(tmp_path, monkeypatch) -> None:
    monkeypatch.chdir(tmp_path)
    storage = ImageStorage("public/uploads", public_dir="public")

    assert storage.public_url("public/uploads/abc.jpg") == "/public/uploads/abc.jpg"


def test_public_url_hides_absolute_directories(tmp_path) -> None:
    storage = ImageStorage(tmp_path / "assets" / "images", public_dir=tmp_path / "assets")
    stored = asyncio.run(storage.save("a.png", b"1"))

    assert storage.public_url(stored.storage_path) == f"/public/images/{stored.identity}.png"


def test_upload_dir_must_be_inside_public_dir(tmp_path) -> None:
    with pytest.raises(ValueError):
        ImageStorage(tmp_path / "uploads", public_dir=tmp_path / "public")
