"""Simple in-memory store for image records keyed by identity."""

from __future__ import annotations

from typing import Dict, List, Optional, Tuple

from models.image_record import ImageRecord
from services.catalog.errors import DuplicateIdentity, NotFound


class RecordStore:
	"""Own the identity -> ImageRecord mapping.

	Not synchronized on its own; the catalog service serializes access.
	"""

	def __init__(self) -> None:
		self._records: Dict[str, ImageRecord] = {}

	def put(self, identity: str, record: ImageRecord) -> None:
		"""Store a record under a fresh identity, refusing to overwrite."""
		if identity in self._records:
			raise DuplicateIdentity(f"Image {identity} is already stored")
		self._records[identity] = record

	def get(self, identity: str) -> Optional[ImageRecord]:
		return self._records.get(identity)

	def remove(self, identity: str) -> ImageRecord:
		"""Remove and return the record, or raise NotFound if missing."""
		record = self._records.pop(identity, None)
		if record is None:
			raise NotFound(f"No image named {identity} found")
		return record

	def all(self) -> List[Tuple[str, ImageRecord]]:
		"""Return a snapshot of (identity, record) pairs in insertion order."""
		return list(self._records.items())

	def __len__(self) -> int:
		return len(self._records)

	def __contains__(self, identity: object) -> bool:
		return identity in self._records
