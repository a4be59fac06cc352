from __future__ import annotations

from dataclasses import dataclass
from typing import Optional, Tuple


@dataclass(frozen=True)
class ImageRecord:
    """In-memory representation of one stored image.

    Records are immutable once created; the catalog replaces nothing in place
    and only ever adds or removes whole records.

    Attributes:
        identity: Unique key, the generated upload filename without extension.
        storage_path: Location of the stored bytes (opaque to the catalog).
        keywords: Unique lowercase keywords in first-seen order.
        password_enabled: Whether deleting this image requires a password.
        password_hash: bcrypt hash of the password, present iff enabled.
    """

    identity: str
    storage_path: str
    keywords: Tuple[str, ...]
    password_enabled: bool = False
    password_hash: Optional[bytes] = None

    def __post_init__(self) -> None:
        if self.password_enabled != (self.password_hash is not None):
            raise ValueError("password_hash must be set if and only if password_enabled is true")

