"""Core constants used across Cella modules.

This module centralizes reserved field names and defaults.
Keeping values here avoids magic literals in business logic.
"""

from __future__ import annotations

ID_FIELD = "_id"
COLLECTION_FIELD = "_collection"
RESERVED_FIELDS = (ID_FIELD, COLLECTION_FIELD)
STORE_FILE_ENCODING = "utf-8"
DEFAULT_LOG_LEVEL = "WARNING"
QUERY_OPERATOR_PREFIX = "$"
FIELD_PATH_SEPARATOR = "."
