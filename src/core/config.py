"""Runtime configuration model for Cella.

This module owns all environment variable parsing and validation.
Other modules consume a typed config object instead of raw env reads.
"""

from __future__ import annotations

from dataclasses import dataclass
import logging
import os
from pathlib import Path

from core.constants import DEFAULT_LOG_LEVEL
from core.errors import CellaConfigError


@dataclass(frozen=True)
class CellaConfig:
    """Validated runtime configuration.

    Attributes:
        store_path: Default store file used by the CLI, None for in-memory.
        json_indent: Optional indent for serialized store files.
        log_level: Minimum level for emitted log events.
    """

    store_path: Path | None
    json_indent: int | None
    log_level: str

    @classmethod
    def from_env(cls) -> "CellaConfig":
        """Build config from process environment variables.

        Returns:
            A validated config object.

        Raises:
            CellaConfigError: If environment values are invalid.
        """
        store_path_value = os.getenv("CELLA_STORE_PATH", "")
        json_indent_value = os.getenv("CELLA_JSON_INDENT", "")
        return cls(
            store_path=Path(store_path_value).expanduser() if store_path_value else None,
            json_indent=_parse_json_indent(json_indent_value),
            log_level=resolve_log_level(),
        )


def resolve_log_level() -> str:
    """Read and validate the CELLA_LOG_LEVEL environment value.

    Returns:
        Upper-case logging level name.

    Raises:
        CellaConfigError: If the value is not a known level name.
    """
    raw_value = os.getenv("CELLA_LOG_LEVEL", DEFAULT_LOG_LEVEL).strip().upper()
    if not isinstance(logging.getLevelName(raw_value), int):
        raise CellaConfigError(
            "Invalid CELLA_LOG_LEVEL value: "
            f"expected a logging level name, got '{raw_value}'. "
            "Use one of DEBUG, INFO, WARNING, ERROR, CRITICAL."
        )
    return raw_value


def _parse_json_indent(raw_value: str) -> int | None:
    """Parse the JSON indent environment value.

    Args:
        raw_value: Raw string from environment.

    Returns:
        Parsed non-negative indent, or None when unset.

    Raises:
        CellaConfigError: If value is not a non-negative integer.
    """
    if not raw_value.strip():
        return None
    try:
        indent = int(raw_value)
    except ValueError as error:
        raise CellaConfigError(
            "Invalid CELLA_JSON_INDENT value: "
            f"expected integer, got '{raw_value}'. "
            "Set CELLA_JSON_INDENT to a non-negative number or leave it unset."
        ) from error
    if indent < 0:
        raise CellaConfigError(
            f"Invalid CELLA_JSON_INDENT value: expected non-negative integer, got {indent}."
        )
    return indent
