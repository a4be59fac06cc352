"""Inverted index from keyword to the identities of images carrying it."""

from __future__ import annotations

from typing import Dict, List


class KeywordIndex:
    """Map each keyword to an insertion-ordered set of image identities.

    Buckets are created on first use. With ``prune_empty`` a bucket is
    dropped as soon as its last identity is retracted; otherwise empty
    buckets stay behind, which lookups treat the same as unknown keywords.

    Args:
        prune_empty: Drop a keyword once no identity references it.
    """

    def __init__(self, prune_empty: bool = True) -> None:
        self.prune_empty = prune_empty
        # dict values are unused; the inner dict is an ordered set
        self._buckets: Dict[str, Dict[str, None]] = {}

    def add_entry(self, keyword: str, identity: str) -> None:
        """Add ``identity`` under ``keyword``. Adding the same pair twice is a no-op."""
        self._buckets.setdefault(keyword, {})[identity] = None

    def remove_entry(self, keyword: str, identity: str) -> None:
        """Retract ``identity`` from ``keyword``; silently ignores missing entries."""
        bucket = self._buckets.get(keyword)
        if bucket is None:
            return
        bucket.pop(identity, None)
        if self.prune_empty and not bucket:
            del self._buckets[keyword]

    def lookup(self, keyword: str) -> List[str]:
        """Return the identities under ``keyword`` (empty for unknown keywords)."""
        return list(self._buckets.get(keyword, ()))

    def keywords(self) -> List[str]:
        return list(self._buckets)

    def __len__(self) -> int:
        return len(self._buckets)
