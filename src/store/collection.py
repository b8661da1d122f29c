"""Identity-indexed record collection.

This module keeps the id-unique record index for one collection.
It never performs I/O; persistence is delegated to an injected hook.
"""

from __future__ import annotations

from typing import Any, Mapping

from core.constants import COLLECTION_FIELD, ID_FIELD
from core.errors import InsertionError
from core.identifiers import generate_identifier, is_identifier_type
from core.types import Identifier, PersistHook, QuerySpec, Record
from store.query_evaluator import execute_query
from store.tagged_codec import find_unencodable_value


class Collection:
    """Named set of records keyed by a unique identifier.

    Records are kept in insertion order and are never updated or removed.
    Every insertion path applies the same validation, and a rejected
    record leaves the index unchanged.
    """

    def __init__(self, name: str, on_update: PersistHook) -> None:
        """Create an empty collection.

        Args:
            name: Collection name, immutable after creation.
            on_update: Persistence trigger called after persisted inserts.
        """
        self._name = name
        self._on_update = on_update
        self._items: dict[Identifier, Record] = {}

    @property
    def name(self) -> str:
        """Collection name."""
        return self._name

    def insert(self, fields: Mapping[str, Any], record_id: Identifier | None = None) -> Identifier:
        """Insert a record and persist the owning store.

        The record stays in memory even if persistence fails.

        Args:
            fields: Record fields without the reserved keys.
            record_id: Optional identifier; generated when omitted.

        Returns:
            Identifier of the inserted record.

        Raises:
            InsertionError: If the identifier is invalid or already used.
            OSError: If the store file cannot be written.
        """
        inserted_id = self.insert_no_persist(fields, record_id)
        self._on_update()
        return inserted_id

    def insert_no_persist(
        self,
        fields: Mapping[str, Any],
        record_id: Identifier | None = None,
    ) -> Identifier:
        """Insert a record into memory only.

        Args:
            fields: Record fields without the reserved keys.
            record_id: Optional identifier; generated when omitted.

        Returns:
            Identifier of the inserted record.

        Raises:
            InsertionError: If the identifier is invalid or already used.
        """
        if not isinstance(fields, Mapping):
            raise InsertionError(
                f"Record fields for collection '{self._name}' must be a mapping, "
                f"got {type(fields).__name__}."
            )
        if ID_FIELD in fields:
            raise InsertionError(
                f"Field '{ID_FIELD}' is reserved in collection '{self._name}'. "
                "Pass the identifier through the record_id argument instead."
            )
        if record_id is None:
            record_id = generate_identifier()
        record: Record = {ID_FIELD: record_id, **fields}
        self._put(record)
        return record_id

    def insert_raw(self, record: Mapping[str, Any]) -> None:
        """Insert an already-identified record without persisting.

        Used when rebuilding a store from validated tagged records.

        Args:
            record: Record fields including the reserved ``_id`` key.

        Raises:
            InsertionError: If the identifier is missing, invalid or used.
        """
        if not isinstance(record, Mapping):
            raise InsertionError(
                f"Raw record for collection '{self._name}' must be a mapping, "
                f"got {type(record).__name__}."
            )
        self._put(dict(record))

    def get(self, record_id: Identifier) -> Record | None:
        """Look up a record by identifier.

        Args:
            record_id: Identifier to look up.

        Returns:
            Copy of the record, or None when absent.
        """
        if not is_identifier_type(record_id):
            return None
        record = self._items.get(record_id)
        if record is None:
            return None
        return dict(record)

    def query(self, query: QuerySpec) -> list[Record]:
        """Return records matching a query, scanning the full collection.

        Args:
            query: Query mapping, record predicate, or None for all records.

        Returns:
            Matching record copies in insertion order.

        Raises:
            CellaQueryError: If the query is malformed.
        """
        return execute_query(self.all(), query)

    def all(self) -> list[Record]:
        """Return a snapshot of every record in insertion order."""
        return [dict(record) for record in self._items.values()]

    def count(self) -> int:
        return len(self._items)

    def _put(self, record: Record) -> None:
        self._validate_insert(record)
        self._items[record[ID_FIELD]] = record

    def _validate_insert(self, record: Record) -> None:
        """Check identifier typing, uniqueness, reserved keys and JSON values.

        Args:
            record: Candidate record including ``_id``.

        Raises:
            InsertionError: If any insertion invariant is violated.
        """
        record_id = record.get(ID_FIELD)
        if not is_identifier_type(record_id):
            raise InsertionError(
                f"The id of a record must be a string or an integer, got {record_id!r} "
                f"({type(record_id).__name__}) in collection '{self._name}'."
            )
        if record_id == "":
            raise InsertionError(
                f"The id of a record must not be empty in collection '{self._name}'."
            )
        if COLLECTION_FIELD in record:
            raise InsertionError(
                f"Field '{COLLECTION_FIELD}' is reserved in collection '{self._name}'. "
                "Rename the field before inserting."
            )
        for field_name, value in record.items():
            if field_name == ID_FIELD:
                continue
            if type(field_name) is not str:
                raise InsertionError(
                    f"Field names must be strings, got {field_name!r} in collection '{self._name}'."
                )
            problem = find_unencodable_value(value, field_name)
            if problem is not None:
                raise InsertionError(
                    f"Record {record_id!r} cannot be stored as JSON in collection "
                    f"'{self._name}': {problem}. Convert the value to JSON types first."
                )
        if record_id in self._items:
            raise InsertionError(
                f"The id {record_id!r} already exists in the '{self._name}' collection."
            )
