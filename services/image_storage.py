"""Disk storage for uploaded images.

Uploads are written under the configured upload directory with a generated
`uuid4` name that keeps the lowercased original extension. The name without
extension becomes the image identity in the catalog.
"""

from __future__ import annotations

import os
import uuid
from dataclasses import dataclass
from pathlib import Path
from typing import Optional

import aiofiles
import aiofiles.os


PUBLIC_URL_PREFIX = "/public"


@dataclass(frozen=True)
class StoredImage:
    identity: str
    storage_path: str


class ImageStorage:
    """Write and remove uploaded image files.

    Args:
        upload_dir: Directory (relative to the working directory or absolute)
            where uploads are written. Must lie inside ``public_dir``.
        public_dir: Directory served under ``PUBLIC_URL_PREFIX``; defaults to
            the parent of ``upload_dir``.

    Raises:
        ValueError: If ``upload_dir`` is not inside ``public_dir``.
    """

    def __init__(self, upload_dir: str | Path, public_dir: Optional[str | Path] = None) -> None:
        self.upload_dir = Path(upload_dir)
        self.public_dir = Path(public_dir) if public_dir is not None else self.upload_dir.parent
        try:
            self.upload_dir.resolve().relative_to(self.public_dir.resolve())
        except ValueError as exc:
            raise ValueError(
                f"Upload directory {self.upload_dir} must be inside public directory {self.public_dir}"
            ) from exc

    def ensure_directory(self) -> None:
        self.upload_dir.mkdir(parents=True, exist_ok=True)

    async def save(self, original_filename: str, data: bytes) -> StoredImage:
        """Save ``data`` under a fresh unique name.

        Args:
            original_filename: Client-supplied name; only its extension is kept.
            data: Raw image bytes.

        Returns:
            The generated identity and the POSIX storage path.

        Raises:
            ValueError: If ``data`` is empty.
        """
        if not data:
            raise ValueError("Image bytes are required for saving.")
        identity = uuid.uuid4().hex
        extension = os.path.splitext(original_filename or "")[1].lower()

        self.ensure_directory()
        path = self.upload_dir / f"{identity}{extension}"
        async with aiofiles.open(path, "wb") as f:
            await f.write(data)
        return StoredImage(identity=identity, storage_path=path.as_posix())

    async def delete(self, storage_path: str) -> None:
        """Remove a stored file. Raises OSError if it cannot be removed."""
        await aiofiles.os.remove(storage_path)

    def public_url(self, storage_path: str) -> str:
        """Return the URL path the static mount serves ``storage_path`` under."""
        relative = Path(storage_path).resolve().relative_to(self.public_dir.resolve())
        return f"{PUBLIC_URL_PREFIX}/{relative.as_posix()}"
