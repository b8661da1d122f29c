"""Shared typed models.

This module defines the record and identifier shapes used by the
collection, codec, query and CLI layers to keep interfaces explicit.
"""

from __future__ import annotations

from typing import Any, Callable, Mapping, Union

Identifier = Union[str, int]
"""Record identifier: a non-empty string or an integer, unique per collection."""

Record = dict[str, Any]
"""Schema-free record fields plus the reserved ``_id`` key."""

TaggedRecord = Mapping[str, Any]
"""Interchange form of a record carrying ``_id`` and ``_collection``."""

QuerySpec = Union[Mapping[str, Any], Callable[[Record], bool], None]
"""Mongo-style query mapping, a record predicate, or None for all records."""

PersistHook = Callable[[], None]
"""Zero-argument persistence trigger injected into collections."""
