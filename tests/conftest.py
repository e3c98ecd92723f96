"""Pytest configuration for dataknobs_rules tests."""

import sys
from pathlib import Path

import pytest

# Add the package source to path for testing
src_path = Path(__file__).parent.parent / "src"
if str(src_path) not in sys.path:
    sys.path.insert(0, str(src_path))

from dataknobs_rules import EvaluatorRegistry, default_registry  # noqa: E402


@pytest.fixture
def registry() -> EvaluatorRegistry:
    """An isolated copy of the default registry that tests may modify."""
    return default_registry.copy("test")


@pytest.fixture
def settings_env(monkeypatch):
    """Clear validator settings variables from the environment."""
    import os

    for key in list(os.environ):
        if key.startswith("DATAKNOBS_RULES__"):
            monkeypatch.delenv(key)
    return monkeypatch
