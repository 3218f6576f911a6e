import pytest

from socials.errors import UnknownSourceError
from socials.keywords import KeywordStore


def test_add_then_remove_restores_previous_set():
    store = KeywordStore({"reddit": ["rust"], "hn": ["go"]})
    before = store.snapshot()

    store.add("reddit", "python")
    store.remove("reddit", "python")

    assert store.snapshot() == before


def test_add_all_scope_then_remove_all_scope():
    store = KeywordStore()
    store.add(None, "python")
    assert store.snapshot() == {"reddit": ["python"], "hn": ["python"], "ddg": ["python"]}

    store.remove(None, "python")
    assert store.is_empty()


def test_add_is_idempotent():
    store = KeywordStore()
    assert store.add("hn", "python") is True
    assert store.add("hn", "python") is False
    assert store.for_source("hn") == ["python"]


def test_remove_missing_keyword_is_noop():
    store = KeywordStore({"hn": ["go"]})
    assert store.remove("hn", "python") is False
    assert store.for_source("hn") == ["go"]


def test_blank_keywords_are_ignored():
    store = KeywordStore()
    assert store.add(None, "   ") is False
    assert store.add("ddg", "") is False
    assert store.is_empty()


def test_keywords_are_trimmed_and_case_preserved():
    store = KeywordStore()
    store.add("reddit", "  Raspberry Pi ")
    assert store.for_source("reddit") == ["Raspberry Pi"]


def test_all_is_union_without_duplicates():
    store = KeywordStore({"reddit": ["rust", "go"], "hn": ["go", "zig"], "ddg": ["rust"]})
    assert store.all() == ["rust", "go", "zig"]
    assert len(store) == 5


def test_pairs_are_per_source():
    store = KeywordStore({"reddit": ["go"], "hn": ["go"]})
    assert store.pairs() == [("reddit", "go"), ("hn", "go")]


def test_unknown_source_rejected():
    store = KeywordStore()
    with pytest.raises(UnknownSourceError):
        store.add("twitter", "python")
    assert store.is_empty()


def test_snapshot_is_detached():
    store = KeywordStore({"hn": ["go"]})
    snapshot = store.snapshot()
    store.add("hn", "rust")
    assert snapshot["hn"] == ["go"]
