from __future__ import annotations

import io
from typing import Dict, List, Sequence

import pytest
from PIL import Image

from services.catalog.catalog_service import CatalogService
from services.credential_gate import BcryptCredentialGate


def make_png(color: tuple = (255, 0, 0), size: tuple = (8, 8)) -> bytes:
    """Return the bytes of a small solid-colour PNG."""
    buffer = io.BytesIO()
    Image.new("RGB", size, color).save(buffer, format="PNG")
    return buffer.getvalue()


class FakeLabelSource:
    """Deterministic label source keyed by image bytes; unknown bytes fail."""

    def __init__(self) -> None:
        self.labels: Dict[bytes, List[str]] = {}
        self.calls = 0

    def register(self, image_bytes: bytes, labels: Sequence[str]) -> bytes:
        self.labels[image_bytes] = list(labels)
        return image_bytes

    async def detect_labels(self, image_bytes: bytes) -> List[str]:
        self.calls += 1
        if image_bytes not in self.labels:
            raise ValueError("No labels were returned for the image.")
        return list(self.labels[image_bytes])


class FakeStorage:
    """Records deletes; can be told to fail them."""

    def __init__(self, fail: bool = False) -> None:
        self.fail = fail
        self.deleted: List[str] = []

    async def delete(self, storage_path: str) -> None:
        if self.fail:
            raise PermissionError(f"cannot remove {storage_path}")
        self.deleted.append(storage_path)


@pytest.fixture
def labels() -> FakeLabelSource:
    return FakeLabelSource()


@pytest.fixture
def storage() -> FakeStorage:
    return FakeStorage()


@pytest.fixture
def gate() -> BcryptCredentialGate:
    return BcryptCredentialGate(rounds=4)


@pytest.fixture
def catalog(labels: FakeLabelSource, gate: BcryptCredentialGate, storage: FakeStorage) -> CatalogService:
    return CatalogService(labels, gate, storage)


@pytest.fixture
def png():
    return make_png


@pytest.fixture
def failing_storage() -> FakeStorage:
    return FakeStorage(fail=True)
