"""Pytest configuration for repository test runs."""

from __future__ import annotations

import sys
from pathlib import Path
from typing import Iterator

import pytest


def pytest_sessionstart() -> None:
    """Add src directory to sys.path for test imports."""
    project_root = Path(__file__).resolve().parent.parent
    src_path = project_root / "src"
    if str(src_path) not in sys.path:
        sys.path.insert(0, str(src_path))


@pytest.fixture(autouse=True)
def _clear_cella_env(monkeypatch: pytest.MonkeyPatch) -> Iterator[None]:
    """Keep developer CELLA_* variables out of test runs and reset logging."""
    from core.constants import DEFAULT_LOG_LEVEL
    from core.logging_config import configure_logging

    for name in ("CELLA_STORE_PATH", "CELLA_JSON_INDENT", "CELLA_LOG_LEVEL"):
        monkeypatch.delenv(name, raising=False)
    yield
    configure_logging(DEFAULT_LOG_LEVEL)
