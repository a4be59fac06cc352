from __future__ import annotations

from services.catalog.keyword_index import KeywordIndex


def test_add_entry_is_idempotent() -> None:
    index = KeywordIndex()
    index.add_entry("cat", "a1")
    index.add_entry("cat", "a1")

    assert index.lookup("cat") == ["a1"]


def test_lookup_unknown_keyword_is_empty() -> None:
    assert KeywordIndex().lookup("dog") == []


def test_lookup_keeps_insertion_order() -> None:
    index = KeywordIndex()
    for identity in ("b", "a", "c"):
        index.add_entry("cat", identity)

    assert index.lookup("cat") == ["b", "a", "c"]


def test_remove_entry_tolerates_missing_keyword_and_identity() -> None:
    index = KeywordIndex()
    index.remove_entry("cat", "a1")
    index.add_entry("cat", "a1")
    index.remove_entry("cat", "zz")

    assert index.lookup("cat") == ["a1"]


def test_prunes_empty_buckets_by_default() -> None:
    index = KeywordIndex()
    index.add_entry("cat", "a1")
    index.remove_entry("cat", "a1")

    assert index.keywords() == []
    assert len(index) == 0


def test_keeps_empty_buckets_without_pruning() -> None:
    index = KeywordIndex(prune_empty=False)
    index.add_entry("cat", "a1")
    index.remove_entry("cat", "a1")

    assert index.keywords() == ["cat"]
    assert index.lookup("cat") == []


def test_lookup_returns_a_copy() -> None:
    index = KeywordIndex()
    index.add_entry("cat", "a1")
    index.lookup("cat").append("intruder")

    assert index.lookup("cat") == ["a1"]
