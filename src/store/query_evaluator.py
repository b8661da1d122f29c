"""Record query evaluation helpers.

This module filters collection records against Mongo-style query
mappings. It is a pure full scan; no indexes or caching are kept.
"""

from __future__ import annotations

import re
from typing import Any, Callable, Iterable, Mapping

from core.constants import FIELD_PATH_SEPARATOR, QUERY_OPERATOR_PREFIX
from core.errors import CellaQueryError
from core.types import QuerySpec, Record

_MISSING = object()


def execute_query(records: Iterable[Record], query: QuerySpec) -> list[Record]:
    """Filter records using a query specification.

    Args:
        records: Input records to filter.
        query: Query mapping, record predicate, or None to match all.

    Returns:
        Matching records in input order.

    Raises:
        CellaQueryError: If the query uses unknown operators or bad shapes.
    """
    if query is None:
        return list(records)
    if callable(query):
        return [record for record in records if query(record)]
    if not isinstance(query, Mapping):
        raise CellaQueryError(
            f"Invalid query: expected mapping or callable, got {type(query).__name__}."
        )
    return [record for record in records if matches_query(record, query)]


def matches_query(record: Mapping[str, Any], query: Mapping[str, Any]) -> bool:
    """Return whether one record satisfies every clause of a query.

    Args:
        record: Record to test.
        query: Query mapping.

    Returns:
        True when all clauses match.
    """
    for key, condition in query.items():
        if key.startswith(QUERY_OPERATOR_PREFIX):
            if not _match_logical(record, key, condition):
                return False
            continue
        value = resolve_field(record, key)
        if not _match_condition(value, condition):
            return False
    return True


def resolve_field(record: Mapping[str, Any], path: str) -> Any:
    """Resolve a dotted field path inside nested mappings.

    Args:
        record: Record to read from.
        path: Field name or dotted path.

    Returns:
        Field value, or a private sentinel when any segment is missing.
    """
    if path in record:
        return record[path]
    current: Any = record
    for segment in path.split(FIELD_PATH_SEPARATOR):
        if not isinstance(current, Mapping) or segment not in current:
            return _MISSING
        current = current[segment]
    return current


def _match_logical(record: Mapping[str, Any], operator: str, condition: Any) -> bool:
    if operator == "$not":
        return not matches_query(record, _require_mapping(operator, condition))
    if operator not in ("$and", "$or", "$nor"):
        raise CellaQueryError(
            f"Unknown top-level query operator '{operator}'. "
            "Use $and, $or, $nor or $not."
        )
    if not isinstance(condition, (list, tuple)):
        raise CellaQueryError(f"Operator {operator} expects a list of sub-queries.")
    results = (matches_query(record, _require_mapping(operator, sub)) for sub in condition)
    if operator == "$and":
        return all(results)
    if operator == "$or":
        return any(results)
    return not any(results)


def _match_condition(value: Any, condition: Any) -> bool:
    if not _is_operator_set(condition):
        return value is not _MISSING and value == condition
    for operator, operand in condition.items():
        matcher = _FIELD_OPERATORS.get(operator)
        if matcher is None:
            raise CellaQueryError(
                f"Unknown field query operator '{operator}'. "
                f"Supported operators: {', '.join(sorted(_FIELD_OPERATORS))}."
            )
        if not matcher(value, operand):
            return False
    return True


def _is_operator_set(condition: Any) -> bool:
    if not isinstance(condition, Mapping) or not condition:
        return False
    return all(
        isinstance(key, str) and key.startswith(QUERY_OPERATOR_PREFIX) for key in condition
    )


def _require_mapping(operator: str, condition: Any) -> Mapping[str, Any]:
    if not isinstance(condition, Mapping):
        raise CellaQueryError(f"Operator {operator} expects query mappings as operands.")
    return condition


def _compare(check: Callable[[Any, Any], bool]) -> Callable[[Any, Any], bool]:
    def matcher(value: Any, operand: Any) -> bool:
        if value is _MISSING or value is None:
            return False
        try:
            return bool(check(value, operand))
        except TypeError:
            return False

    return matcher


def _match_in(value: Any, operand: Any) -> bool:
    if not isinstance(operand, (list, tuple, set, frozenset)):
        raise CellaQueryError("Operator $in/$nin expects a list operand.")
    return value is not _MISSING and value in operand


def _match_regex(value: Any, operand: Any) -> bool:
    if not isinstance(value, str):
        return False
    try:
        return re.search(operand, value) is not None
    except re.error as error:
        raise CellaQueryError(f"Invalid $regex pattern '{operand}': {error}.") from error


_FIELD_OPERATORS: dict[str, Callable[[Any, Any], bool]] = {
    "$eq": lambda value, operand: value is not _MISSING and value == operand,
    "$ne": lambda value, operand: value is _MISSING or value != operand,
    "$gt": _compare(lambda value, operand: value > operand),
    "$gte": _compare(lambda value, operand: value >= operand),
    "$lt": _compare(lambda value, operand: value < operand),
    "$lte": _compare(lambda value, operand: value <= operand),
    "$in": _match_in,
    "$nin": lambda value, operand: not _match_in(value, operand),
    "$exists": lambda value, operand: (value is not _MISSING) == bool(operand),
    "$regex": _match_regex,
}
