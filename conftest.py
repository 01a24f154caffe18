"""Pytest configuration: ensures the project root is importable."""

import os
import sys
from pathlib import Path

import pytest

sys.path.insert(0, str(Path(__file__).parent))


@pytest.fixture(autouse=True)
def _isolated_env(monkeypatch):
    """Keep a developer's CROSSCHECK_* settings out of the suite."""
    for name in list(os.environ):
        if name.startswith("CROSSCHECK_"):
            monkeypatch.delenv(name)
    yield
