"""Tagged-record serialization and validation.

This module isolates the flat interchange format: one JSON array of
records, each carrying its ``_id`` and owning ``_collection`` name.
It keeps store orchestration focused on registry and persistence flow.
"""

from __future__ import annotations

import json
import math
from typing import Any, Iterable, Mapping

from core.constants import COLLECTION_FIELD, ID_FIELD, RESERVED_FIELDS
from core.errors import CellaStoreError, InvalidItemError
from core.identifiers import is_identifier_type
from core.types import Record, TaggedRecord


def validate_tagged_record(item: Any) -> None:
    """Validate one tagged record from a file or caller-supplied array.

    Args:
        item: Candidate tagged record.

    Raises:
        InvalidItemError: If the record is not a mapping, or its identifier
            or collection name is empty, absent or of the wrong type.
    """
    if not isinstance(item, Mapping):
        raise InvalidItemError(
            f"Tagged record must be a JSON object, got {type(item).__name__}: {_describe(item)}"
        )
    if item.get(ID_FIELD) == "":
        raise InvalidItemError(f"Record id must not be empty. Record: {_describe(item)}")
    if item.get(COLLECTION_FIELD) == "":
        raise InvalidItemError(
            f"Collection name must not be empty. Record: {_describe(item)}"
        )
    id_is_valid = is_identifier_type(item.get(ID_FIELD))
    collection_is_valid = isinstance(item.get(COLLECTION_FIELD), str)
    if not (id_is_valid and collection_is_valid):
        raise InvalidItemError(
            "The following record is missing reserved fields or has fields of the "
            f"wrong type ('{ID_FIELD}' must be a string or integer, "
            f"'{COLLECTION_FIELD}' must be a string): {_describe(item)}"
        )


def ensure_record_array(payload: Any, source: str) -> list[Any]:
    """Check that a decoded payload is a top-level array.

    Args:
        payload: Decoded JSON value or caller-supplied object.
        source: Human-readable origin used in error messages.

    Returns:
        The payload as a list.

    Raises:
        CellaStoreError: If payload is not a list.
    """
    if not isinstance(payload, list):
        raise CellaStoreError(
            f"Invalid store data from {source}: expected an array of objects, "
            f"got {type(payload).__name__}."
        )
    return payload


def tag_record(collection_name: str, record: Mapping[str, Any]) -> dict[str, Any]:
    """Flatten a record into its tagged interchange form.

    Args:
        collection_name: Owning collection name.
        record: Record including ``_id``.

    Returns:
        Tagged record with ``_id`` first and ``_collection`` second.
    """
    fields = {key: value for key, value in record.items() if key != ID_FIELD}
    return {ID_FIELD: record[ID_FIELD], COLLECTION_FIELD: collection_name, **fields}


def untag_record(item: TaggedRecord) -> Record:
    """Strip the collection tag from a validated tagged record.

    Args:
        item: Validated tagged record.

    Returns:
        Record with ``_id`` first followed by user fields.
    """
    fields = {
        key: value
        for key, value in item.items()
        if key not in RESERVED_FIELDS
    }
    return {ID_FIELD: item[ID_FIELD], **fields}


def find_unencodable_value(value: Any, path: str) -> str | None:
    """Locate the first value that would not survive a JSON round-trip.

    Only exact JSON types are accepted: None, bool, int, finite float, str,
    lists, and mappings with string keys. Tuples, sets, subclasses and
    other objects would be rejected by the encoder or decode differently.

    Args:
        value: Value to check.
        path: Dotted path of the value, used in the returned description.

    Returns:
        Description of the offending value, or None when it is encodable.
    """
    value_type = type(value)
    if value is None or value_type in (bool, int, str):
        return None
    if value_type is float:
        return None if math.isfinite(value) else f"{path} is a non-finite float ({value!r})"
    if value_type is list:
        for index, item in enumerate(value):
            problem = find_unencodable_value(item, f"{path}[{index}]")
            if problem is not None:
                return problem
        return None
    if value_type is dict:
        for key, item in value.items():
            if type(key) is not str:
                return f"{path} has a non-string key {key!r}"
            problem = find_unencodable_value(item, f"{path}.{key}" if path else key)
            if problem is not None:
                return problem
        return None
    return f"{path} has unsupported type {value_type.__name__}"


def group_tagged_records(items: Iterable[Any]) -> dict[str, list[Record]]:
    """Validate every tagged record, then group them by collection.

    Validation runs over the whole batch before anything is grouped, so
    a single invalid record rejects the batch.

    Args:
        items: Tagged records.

    Returns:
        Mapping of collection name to untagged records, in first-seen order.

    Raises:
        InvalidItemError: If any record fails validation.
    """
    item_list = list(items)
    for item in item_list:
        validate_tagged_record(item)
    grouped: dict[str, list[Record]] = {}
    for item in item_list:
        grouped.setdefault(item[COLLECTION_FIELD], []).append(untag_record(item))
    return grouped


def parse_store_text(text: str, source: str) -> Any:
    """Decode store file text.

    Args:
        text: Raw JSON text.
        source: Human-readable origin used in error messages.

    Returns:
        Decoded JSON value.

    Raises:
        CellaStoreError: If the text is not valid JSON.
    """
    try:
        return json.loads(text)
    except json.JSONDecodeError as error:
        raise CellaStoreError(
            f"Failed to parse store data from {source}: {error.msg} "
            f"(line {error.lineno}, column {error.colno}). "
            "Restore the file from a backup or remove it to start a fresh store."
        ) from error


def render_store_text(items: list[dict[str, Any]], indent: int | None = None) -> str:
    """Encode tagged records as store file text.

    Args:
        items: Tagged records.
        indent: Optional pretty-print indent.

    Returns:
        JSON array text.
    """
    return json.dumps(items, indent=indent, ensure_ascii=False)


def _describe(item: Any) -> str:
    try:
        return json.dumps(item, default=repr)
    except (TypeError, ValueError):
        return repr(item)
