"""Catalog service coordinating the record store and the keyword index.

The service is the only writer of both structures. Each add or delete commits
its in-memory mutations inside one critical section, and calls to the label
source, the credential gate and physical storage happen outside it, so a slow
collaborator only stalls the operation that is waiting on it.
"""

from __future__ import annotations

import asyncio
import logging
import os
import threading
from dataclasses import dataclass
from typing import Any, Dict, Iterable, List, Optional, Protocol, Sequence

from models.image_record import ImageRecord
from services.catalog.errors import (
    InvalidPassword,
    InvalidQueryImage,
    LabelDetectionFailed,
    NotFound,
    PasswordRequired,
    StorageCleanupFailed,
)
from services.catalog.keyword_index import KeywordIndex
from services.catalog.record_store import RecordStore

LOGGER = logging.getLogger(__name__)


class LabelSource(Protocol):
    async def detect_labels(self, image_bytes: bytes) -> Sequence[str]:
        ...


class CredentialGate(Protocol):
    def hash_secret(self, secret: str) -> bytes:
        ...

    def verify_secret(self, secret: str, hashed: bytes) -> bool:
        ...


class ImageRemover(Protocol):
    async def delete(self, storage_path: str) -> None:
        ...


@dataclass
class DeleteResult:
    """Outcome of a committed delete.

    Attributes:
        identity: Identity of the removed record.
        storage_path: Where the removed image was stored.
        cleanup_error: Set when the stored bytes could not be removed.
    """

    identity: str
    storage_path: str
    cleanup_error: Optional[StorageCleanupFailed] = None

    @property
    def storage_cleaned(self) -> bool:
        return self.cleanup_error is None


def normalize_keywords(values: Iterable[str]) -> List[str]:
    """Lowercase, strip and deduplicate keywords, keeping first-seen order."""
    cleaned = (value.strip().lower() for value in values if value)
    return list(dict.fromkeys(value for value in cleaned if value))


def name_keyword(original_filename: str) -> str:
    """Return the lowercased filename without directory or extension."""
    stem, _ = os.path.splitext(os.path.basename(original_filename or ""))
    return stem.lower()


class CatalogService:
    """Add, delete and search images across the record store and keyword index.

    Args:
        label_source: Produces keywords for image bytes.
        credential_gate: Hashes and verifies per-image passwords.
        storage: Optional collaborator that removes stored bytes on delete.
        prune_empty_keywords: Drop keyword buckets once they become empty.
    """

    def __init__(
        self,
        label_source: LabelSource,
        credential_gate: CredentialGate,
        storage: Optional[ImageRemover] = None,
        *,
        prune_empty_keywords: bool = True,
    ) -> None:
        self.label_source = label_source
        self.credential_gate = credential_gate
        self.storage = storage
        self._records = RecordStore()
        self._keywords = KeywordIndex(prune_empty=prune_empty_keywords)
        self._lock = threading.Lock()

    async def add_image(
        self,
        image_bytes: bytes,
        original_filename: str,
        identity: str,
        storage_path: str,
        password: Optional[str] = None,
    ) -> ImageRecord:
        """Label an already stored image and index it under its keywords.

        Args:
            image_bytes: Raw bytes of the stored image.
            original_filename: Name the client uploaded the image with.
            identity: Fresh unique identity issued by the storage layer.
            storage_path: Location of the stored bytes.
            password: Optional plaintext password protecting deletion.

        Returns:
            The stored ImageRecord.

        Raises:
            LabelDetectionFailed: If the label source fails; nothing is stored.
            DuplicateIdentity: If ``identity`` is already in the catalog.
        """
        try:
            labels = await self.label_source.detect_labels(image_bytes)
        except Exception as exc:
            LOGGER.error("Label detection failed for %s: %s", original_filename, exc)
            raise LabelDetectionFailed(f"Could not generate keywords for {original_filename}") from exc

        keywords = normalize_keywords([*labels, name_keyword(original_filename)])
        LOGGER.info("Keywords for %s: %s", identity, keywords)

        password_hash: Optional[bytes] = None
        if password:
            password_hash = await asyncio.to_thread(self.credential_gate.hash_secret, password)

        record = ImageRecord(
            identity=identity,
            storage_path=storage_path,
            keywords=tuple(keywords),
            password_enabled=password_hash is not None,
            password_hash=password_hash,
        )

        with self._lock:
            self._records.put(identity, record)
            for keyword in record.keywords:
                self._keywords.add_entry(keyword, identity)

        LOGGER.info("Stored image %s at %s (protected=%s)", identity, storage_path, record.password_enabled)
        return record

    async def delete_image(self, identity: str, password: Optional[str] = None) -> DeleteResult:
        """Remove an image from both indexes, then ask storage to drop its bytes.

        Raises:
            NotFound: If no image has this identity.
            PasswordRequired: If the image is protected and no password was given.
            InvalidPassword: If the given password does not match.
        """
        with self._lock:
            record = self._records.get(identity)
        if record is None:
            raise NotFound(f"No image named {identity} found")

        if record.password_enabled:
            if not password:
                raise PasswordRequired("Please enter a password")
            valid = await asyncio.to_thread(self.credential_gate.verify_secret, password, record.password_hash)
            if not valid:
                raise InvalidPassword("Wrong password")

        with self._lock:
            # another delete may have committed while the password was checked
            if self._records.get(identity) is not record:
                raise NotFound(f"No image named {identity} found")
            self._records.remove(identity)
            for keyword in record.keywords:
                self._keywords.remove_entry(keyword, identity)

        LOGGER.info("Deleted image %s", identity)
        result = DeleteResult(identity=identity, storage_path=record.storage_path)

        if self.storage is not None:
            try:
                await self.storage.delete(record.storage_path)
            except OSError as exc:
                LOGGER.warning("Could not remove stored file %s: %s", record.storage_path, exc)
                result.cleanup_error = StorageCleanupFailed(
                    f"Image {identity} was removed but its file could not be deleted: {exc}"
                )
        return result

    def search_by_keyword(self, query: str) -> List[str]:
        """Return paths of images named ``query`` or carrying it as a keyword."""
        needle = query.lower()
        with self._lock:
            entries = self._records.all()
        return [
            record.storage_path
            for identity, record in entries
            if identity == needle or needle in record.keywords
        ]

    async def search_by_image(self, image_bytes: bytes) -> List[str]:
        """Return paths of images sharing at least one label with the query image.

        Raises:
            InvalidQueryImage: If the bytes are empty or cannot be labelled.
        """
        if not image_bytes:
            raise InvalidQueryImage("Please select an image file")
        try:
            labels = await self.label_source.detect_labels(image_bytes)
        except Exception as exc:
            LOGGER.error("Label detection failed for query image: %s", exc)
            raise InvalidQueryImage("Could not generate keywords for the query image") from exc

        paths: List[str] = []
        seen = set()
        with self._lock:
            for label in normalize_keywords(labels):
                for identity in self._keywords.lookup(label):
                    if identity in seen:
                        continue
                    seen.add(identity)
                    record = self._records.get(identity)
                    if record is not None:
                        paths.append(record.storage_path)
        return paths

    def get(self, identity: str) -> Optional[ImageRecord]:
        with self._lock:
            return self._records.get(identity)

    def index_snapshot(self) -> Dict[str, List[str]]:
        """Return a copy of the keyword index, keyword -> identities."""
        with self._lock:
            return {keyword: self._keywords.lookup(keyword) for keyword in self._keywords.keywords()}

    def stats(self) -> Dict[str, Any]:
        with self._lock:
            return {"images": len(self._records), "keywords": len(self._keywords)}
