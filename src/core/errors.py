"""Cella exception hierarchy.

This module defines traceable domain errors with clear boundaries.
Each subsystem raises a specific error type for debuggability.
"""

from __future__ import annotations


class CellaError(Exception):
    """Base exception for all Cella failures."""


class CellaConfigError(CellaError):
    """Raised for invalid runtime configuration."""


class CellaStoreError(CellaError):
    """Raised for malformed store files and invalid store usage."""


class CellaQueryError(CellaError):
    """Raised for malformed query specifications."""


class InvalidItemError(CellaError):
    """Raised when a tagged record from an external source is malformed."""


class InsertionError(CellaError):
    """Raised when an insert violates identifier typing or uniqueness."""
