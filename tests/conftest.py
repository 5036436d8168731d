"""Pytest configuration: importable src tree and shared catalog fixtures."""

import sys
from pathlib import Path

import pytest

ROOT = Path(__file__).resolve().parents[1]
SRC = ROOT / "src"
if str(SRC) not in sys.path:
    sys.path.insert(0, str(SRC))

from actuator_sizing.catalog import ActuatorCatalog, default_catalog  # noqa: E402


@pytest.fixture(scope="session")
def catalog() -> ActuatorCatalog:
    """Packaged catalog; snapshots are immutable so one copy serves every test."""
    return default_catalog()
