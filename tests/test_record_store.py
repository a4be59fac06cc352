from __future__ import annotations

import pytest

from models.image_record import ImageRecord
from services.catalog.errors import DuplicateIdentity, NotFound
from services.catalog.record_store import RecordStore


def _record(identity: str) -> ImageRecord:
    return ImageRecord(identity=identity, storage_path=f"public/uploads/{identity}.jpg", keywords=("cat",))


def test_put_rejects_duplicate_identity() -> None:
    store = RecordStore()
    store.put("a1", _record("a1"))

    with pytest.raises(DuplicateIdentity):
        store.put("a1", _record("a1"))
    assert len(store) == 1


def test_remove_returns_record_and_forgets_it() -> None:
    store = RecordStore()
    record = _record("a1")
    store.put("a1", record)

    assert store.remove("a1") is record
    assert store.get("a1") is None
    assert "a1" not in store


def test_remove_missing_raises_not_found() -> None:
    with pytest.raises(NotFound):
        RecordStore().remove("missing")


def test_all_is_an_ordered_snapshot() -> None:
    store = RecordStore()
    store.put("b", _record("b"))
    store.put("a", _record("a"))

    snapshot = store.all()
    store.remove("b")

    assert [identity for identity, _ in snapshot] == ["b", "a"]


def test_record_requires_hash_iff_password_enabled() -> None:
    with pytest.raises(ValueError):
        ImageRecord(identity="a", storage_path="p", keywords=(), password_enabled=True)
    with pytest.raises(ValueError):
        ImageRecord(identity="a", storage_path="p", keywords=(), password_hash=b"x")
