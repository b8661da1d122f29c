"""Public SDK surface for Cella.

This module provides a stable import path for library users.
It re-exports the store, collection, factories and error types.
"""

from __future__ import annotations

from core.config import CellaConfig
from core.errors import (
    CellaConfigError,
    CellaError,
    CellaQueryError,
    CellaStoreError,
    InsertionError,
    InvalidItemError,
)
from store.collection import Collection
from store.document_store import DocumentStore
from store.query_evaluator import execute_query
from store.store_factory import (
    build_store_from_tagged_records,
    open_store,
    store_from_file,
    store_from_records,
)
from store.tagged_codec import validate_tagged_record

__all__ = [
    "CellaConfig",
    "CellaConfigError",
    "CellaError",
    "CellaQueryError",
    "CellaStoreError",
    "Collection",
    "DocumentStore",
    "InsertionError",
    "InvalidItemError",
    "build_store_from_tagged_records",
    "execute_query",
    "open_store",
    "store_from_file",
    "store_from_records",
    "validate_tagged_record",
]
