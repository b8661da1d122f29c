"""Identifier typing and generation helpers.

Identifiers are strings or integers; booleans are excluded even though
Python treats them as integers.
"""

from __future__ import annotations

from uuid import uuid4

from core.types import Identifier


def is_identifier_type(value: object) -> bool:
    """Return whether a value has an allowed identifier type.

    Args:
        value: Candidate identifier.

    Returns:
        True for str or int values, False otherwise (including bool).
    """
    if isinstance(value, bool):
        return False
    return isinstance(value, (str, int))


def generate_identifier() -> Identifier:
    """Generate a fresh random identifier.

    The value carries 122 random bits (UUID4), so collisions are
    improbable but not impossible.

    Returns:
        A 32-character hex string.
    """
    return uuid4().hex
