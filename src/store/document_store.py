"""Document store and collection registry.

This module owns named collections and the optional JSON store file.
It provides load-on-open, whole-file persistence and serialization.
"""

from __future__ import annotations

from pathlib import Path
from typing import Any

from core.constants import STORE_FILE_ENCODING
from core.errors import CellaStoreError
from core.logging_config import get_logger
from store.collection import Collection
from store.tagged_codec import (
    ensure_record_array,
    group_tagged_records,
    parse_store_text,
    render_store_text,
    tag_record,
)

_LOGGER = get_logger(__name__)


class DocumentStore:
    """Registry of collections with optional file persistence.

    An empty or missing path keeps the store in memory only. With a path,
    every persisted insert rewrites the whole file from current state.
    """

    def __init__(
        self,
        path: str | Path | None = None,
        *,
        json_indent: int | None = None,
        autoload: bool = True,
    ) -> None:
        """Create a store and load its file when present.

        Args:
            path: Store file path; None or "" means never persist.
            json_indent: Optional indent for serialized output.
            autoload: Whether to load existing file contents on open.

        Raises:
            CellaStoreError: If the existing file is malformed.
            InvalidItemError: If a stored record is invalid.
            InsertionError: If the file repeats an id within a collection.
        """
        self._path = Path(path) if path else None
        self._json_indent = json_indent
        self._collections: dict[str, Collection] = {}
        if autoload:
            self.initialize()

    @property
    def path(self) -> Path | None:
        """Configured store file path, or None for in-memory stores."""
        return self._path

    def initialize(self) -> None:
        """Load collections from the store file without writing back.

        Loading is skipped when no path is configured, when the parent
        directory does not exist, or when the file does not exist.

        Raises:
            CellaStoreError: If the file is not a JSON array.
            InvalidItemError: If any stored record is invalid.
        """
        if self._path is None:
            return
        if not self._path.parent.exists() or not self._path.exists():
            return
        source = str(self._path)
        payload = parse_store_text(self._path.read_text(encoding=STORE_FILE_ENCODING), source)
        items = ensure_record_array(payload, source)
        self.load_tagged_records(items)
        _LOGGER.info(
            "store_loaded",
            path=source,
            collection_count=len(self._collections),
            record_count=len(items),
        )

    def load_tagged_records(self, items: list[Any]) -> None:
        """Rebuild collections from tagged records without persisting.

        Args:
            items: Tagged records; every one is validated before any insert.

        Raises:
            InvalidItemError: If any record is invalid.
            InsertionError: If a record id repeats within a collection.
        """
        for collection_name, records in group_tagged_records(items).items():
            collection = self.collections(collection_name)
            for record in records:
                collection.insert_raw(record)

    def collections(self, name: str) -> Collection:
        """Return a collection by name, creating it on first reference.

        Args:
            name: Collection name.

        Returns:
            The same collection instance for the store lifetime.

        Raises:
            CellaStoreError: If name is not a non-empty string.
        """
        if not isinstance(name, str) or not name:
            raise CellaStoreError(
                f"Collection name must be a non-empty string, got {name!r}."
            )
        collection = self._collections.get(name)
        if collection is not None:
            return collection
        collection = Collection(name, self.persist)
        self._collections[name] = collection
        _LOGGER.debug("collection_created", collection=name)
        return collection

    def has_collection(self, name: str) -> bool:
        return name in self._collections

    def collection_names(self) -> list[str]:
        """Return collection names in registration order."""
        return list(self._collections)

    def tagged_records(self) -> list[dict[str, Any]]:
        """Flatten every collection into tagged records.

        Returns:
            Tagged records, collections in registration order and records
            in insertion order.
        """
        items: list[dict[str, Any]] = []
        for collection in self._collections.values():
            items.extend(tag_record(collection.name, record) for record in collection.all())
        return items

    def serialize(self) -> str:
        """Render the full store as a JSON array of tagged records."""
        return render_store_text(self.tagged_records(), indent=self._json_indent)

    def persist(self) -> None:
        """Overwrite the store file with the current full state.

        Does nothing for in-memory stores. The parent directory is created
        when missing, but not its ancestors.

        Raises:
            OSError: If the directory or file cannot be written.
        """
        if self._path is None:
            return
        self._path.parent.mkdir(exist_ok=True)
        text = self.serialize()
        self._path.write_text(text, encoding=STORE_FILE_ENCODING)
        _LOGGER.debug(
            "store_persisted",
            path=str(self._path),
            record_count=sum(c.count() for c in self._collections.values()),
        )
