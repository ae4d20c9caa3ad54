"""Local Storage — filesystem adapter used in development and tests."""

import pytest

from photobooth.core.errors import StorageError, ValidationFailedError
from photobooth.infrastructure.storage import LocalStorage


async def test_put_get_list_delete(tmp_path):
    storage = LocalStorage(str(tmp_path), "/media")
    url = await storage.put("projects/p1/styles/a.png", b"png", "image/png")
    assert url == "/media/projects/p1/styles/a.png"
    assert await storage.get("projects/p1/styles/a.png") == b"png"

    await storage.put("projects/p2/x.png", b"x", "image/png")
    listed = await storage.list("projects/p1/")
    assert [o.key for o in listed] == ["projects/p1/styles/a.png"]
    assert listed[0].size == 3
    assert await storage.count("projects/") == 2

    await storage.delete("projects/p1/styles/a.png")
    assert await storage.count("projects/p1/") == 0


async def test_delete_missing_is_silent(tmp_path):
    await LocalStorage(str(tmp_path)).delete("uploads/none.png")


async def test_get_missing_raises(tmp_path):
    with pytest.raises(StorageError):
        await LocalStorage(str(tmp_path)).get("uploads/none.png")


def test_key_from_url(tmp_path):
    storage = LocalStorage(str(tmp_path), "/media/")
    assert storage.key_from_url("/media/uploads/a.png") == "uploads/a.png"
    assert storage.key_from_url("https://elsewhere/a.png") is None


async def test_unsafe_keys_are_refused(tmp_path):
    with pytest.raises(ValidationFailedError):
        await LocalStorage(str(tmp_path)).put("../escape.png", b"x", "image/png")


async def test_listing_an_empty_root(tmp_path):
    storage = LocalStorage(str(tmp_path / "never-created"))
    assert await storage.list("projects/") == []
    assert await storage.count("projects/") == 0
