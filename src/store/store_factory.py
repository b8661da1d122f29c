"""Store construction entry points.

This module builds stores from nothing, from a file, or from an
already-decoded array of tagged records.
"""

from __future__ import annotations

from pathlib import Path
from typing import Any

from core.constants import STORE_FILE_ENCODING
from store.document_store import DocumentStore
from store.tagged_codec import ensure_record_array, parse_store_text


def open_store(path: str | Path | None = None, json_indent: int | None = None) -> DocumentStore:
    """Open a store, loading its file when one exists.

    Args:
        path: Store file path; None or "" keeps the store in memory.
        json_indent: Optional indent for serialized output.

    Returns:
        Initialized store.
    """
    return DocumentStore(path, json_indent=json_indent)


def store_from_file(path: str | Path, json_indent: int | None = None) -> DocumentStore:
    """Read, validate and build a store from an existing file.

    Args:
        path: Existing store file path.
        json_indent: Optional indent for serialized output.

    Returns:
        Store that persists back to the same path.

    Raises:
        FileNotFoundError: If the file does not exist.
        CellaStoreError: If the file is not a JSON array.
        InvalidItemError: If any record is invalid.
    """
    store_path = Path(path)
    payload = parse_store_text(store_path.read_text(encoding=STORE_FILE_ENCODING), str(store_path))
    items = ensure_record_array(payload, str(store_path))
    return build_store_from_tagged_records(items, store_path, json_indent=json_indent)


def store_from_records(
    records: Any,
    path: str | Path | None = None,
    json_indent: int | None = None,
) -> DocumentStore:
    """Build a store from an in-memory array of tagged records.

    Args:
        records: Tagged record array.
        path: Optional path adopted for future persistence.
        json_indent: Optional indent for serialized output.

    Returns:
        Built store.
    """
    return build_store_from_tagged_records(records, path, json_indent=json_indent)


def build_store_from_tagged_records(
    records: Any,
    path: str | Path | None = None,
    json_indent: int | None = None,
) -> DocumentStore:
    """Validate tagged records and rebuild a fresh store from them.

    The store does not read ``path``; it only adopts it for later
    persists. No persistence runs during the build.

    Args:
        records: Tagged record array.
        path: Optional store file path.
        json_indent: Optional indent for serialized output.

    Returns:
        Built store.

    Raises:
        CellaStoreError: If records is not an array.
        InvalidItemError: If any record is invalid.
        InsertionError: If an id repeats within one collection.
    """
    items = ensure_record_array(records, "records argument")
    store = DocumentStore(path, json_indent=json_indent, autoload=False)
    store.load_tagged_records(items)
    return store
