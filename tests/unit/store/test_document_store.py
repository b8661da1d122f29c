"""Unit tests for the document store registry and persistence."""

from __future__ import annotations

import json
import shutil
from datetime import date

import pytest

from core.errors import CellaStoreError, InsertionError, InvalidItemError
from store.document_store import DocumentStore
from tests.fixture_paths import fixture_path


def test_in_memory_store_counts_and_never_writes(tmp_path, monkeypatch) -> None:
    """An empty path should keep the store in memory only."""
    monkeypatch.chdir(tmp_path)
    store = DocumentStore("")

    store.collections("users").insert_no_persist({"name": "a"})
    store.collections("users").insert({"name": "b"})
    store.persist()

    assert store.path is None
    assert store.collections("users").count() == 2
    assert list(tmp_path.iterdir()) == []


def test_collections_is_lazy_and_identity_stable() -> None:
    """Collections should be created on first reference and reused."""
    store = DocumentStore()

    assert not store.has_collection("x")
    first = store.collections("x")
    second = store.collections("x")

    assert first is second
    assert store.has_collection("x")
    assert store.collection_names() == ["x"]


@pytest.mark.parametrize("name", ["", 3, None])
def test_collections_rejects_invalid_names(name: object) -> None:
    """Collection names must be non-empty strings."""
    store = DocumentStore()

    with pytest.raises(CellaStoreError):
        store.collections(name)  # type: ignore[arg-type]


def test_serialize_orders_collections_then_records() -> None:
    """Serialization should follow registration and insertion order."""
    store = DocumentStore()
    store.collections("users").insert_no_persist({"name": "a"}, 2)
    store.collections("messages").insert_no_persist({"content": "oi"}, "m-1")
    store.collections("users").insert_no_persist({"name": "b"}, 1)

    payload = json.loads(store.serialize())

    assert payload == [
        {"_id": 2, "_collection": "users", "name": "a"},
        {"_id": 1, "_collection": "users", "name": "b"},
        {"_id": "m-1", "_collection": "messages", "content": "oi"},
    ]


def test_serialize_uses_configured_indent() -> None:
    """json_indent should pretty-print the store text."""
    store = DocumentStore(json_indent=2)
    store.collections("users").insert_no_persist({"name": "a"}, 1)

    assert "\n  {" in store.serialize()


def test_insert_persists_whole_store(tmp_path) -> None:
    """Persisted inserts should rewrite the file with all collections."""
    store_path = tmp_path / "data" / "store.json"
    store = DocumentStore(store_path)
    store.collections("users").insert_no_persist({"name": "a"}, 1)

    store.collections("messages").insert({"content": "oi"}, "m-1")

    payload = json.loads(store_path.read_text(encoding="utf-8"))
    assert [item["_collection"] for item in payload] == ["users", "messages"]


def test_persist_does_not_create_missing_ancestors(tmp_path) -> None:
    """Only the immediate parent directory should be created."""
    store = DocumentStore(tmp_path / "a" / "b" / "store.json")

    with pytest.raises(FileNotFoundError):
        store.collections("users").insert({"name": "a"}, 1)

    assert store.collections("users").count() == 1


def test_store_loads_existing_file_on_open(tmp_path) -> None:
    """Opening a path with a file should rebuild its collections."""
    store_path = tmp_path / "store.json"
    shutil.copy(fixture_path("stores/users.json"), store_path)

    store = DocumentStore(store_path)

    assert store.collections("users").get(1) == {"_id": 1, "name": "a"}
    assert store_path.read_text(encoding="utf-8").strip() == (
        '[{"_id":1,"_collection":"users","name":"a"}]'
    )


def test_store_skips_load_for_missing_parent_or_file(tmp_path) -> None:
    """Missing directories and files should bootstrap a fresh store."""
    missing_parent = DocumentStore(tmp_path / "nope" / "store.json")
    missing_file = DocumentStore(tmp_path / "store.json")

    assert missing_parent.collection_names() == []
    assert missing_file.collection_names() == []


def test_store_open_fails_for_non_array_file(tmp_path) -> None:
    """Non-array file content should fail construction."""
    store_path = tmp_path / "store.json"
    shutil.copy(fixture_path("stores/not_array.json"), store_path)

    with pytest.raises(CellaStoreError):
        DocumentStore(store_path)


def test_store_open_fails_for_truncated_json(tmp_path) -> None:
    """Malformed JSON should fail construction."""
    store_path = tmp_path / "store.json"
    shutil.copy(fixture_path("stores/truncated.json"), store_path)

    with pytest.raises(CellaStoreError):
        DocumentStore(store_path)


def test_store_open_fails_for_invalid_record(tmp_path) -> None:
    """One invalid tagged record should fail the whole load."""
    store_path = tmp_path / "store.json"
    shutil.copy(fixture_path("stores/empty_id.json"), store_path)

    with pytest.raises(InvalidItemError):
        DocumentStore(store_path)


def test_store_open_fails_for_duplicate_ids(tmp_path) -> None:
    """Repeated ids within one collection should fail the load."""
    store_path = tmp_path / "store.json"
    store_path.write_text(
        json.dumps([{"_id": 1, "_collection": "u"}, {"_id": 1, "_collection": "u"}]),
        encoding="utf-8",
    )

    with pytest.raises(InsertionError):
        DocumentStore(store_path)


def test_autoload_disabled_ignores_existing_file(tmp_path) -> None:
    """autoload=False should adopt the path without reading it."""
    store_path = tmp_path / "store.json"
    shutil.copy(fixture_path("stores/users.json"), store_path)

    store = DocumentStore(store_path, autoload=False)

    assert store.collection_names() == [] and store.path == store_path


def test_rejected_value_keeps_store_persistable(tmp_path) -> None:
    """A record that cannot be encoded should not block later writes."""
    store_path = tmp_path / "store.json"
    store = DocumentStore(store_path)

    with pytest.raises(InsertionError):
        store.collections("users").insert({"when": date(2024, 1, 1)}, "bad")
    store.collections("other").insert({"ok": 1}, 1)

    assert store.collections("users").get("bad") is None
    payload = json.loads(store_path.read_text(encoding="utf-8"))
    assert payload == [{"_id": 1, "_collection": "other", "ok": 1}]
