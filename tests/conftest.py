"""
Pytest configuration and shared fixtures for authpath tests.

This conftest.py:
1. Adds project root to sys.path for imports
2. Provides commonly-used fixtures via pytest's autodiscovery
3. Configures pytest markers and settings
"""

import sys
from pathlib import Path

import pytest

# =============================================================================
# Path Setup - Must happen before any local imports
# =============================================================================

_PROJECT_ROOT = Path(__file__).resolve().parent.parent
_TESTS_ROOT = Path(__file__).resolve().parent

for _path in [str(_PROJECT_ROOT), str(_TESTS_ROOT)]:
    if _path not in sys.path:
        sys.path.insert(0, _path)

# =============================================================================
# Import fixtures using importlib (more robust for pytest loading)
# =============================================================================

import importlib

_common = importlib.import_module("fixtures.common")

leaf = _common.leaf
make_bundle = _common.make_bundle
recompute_root = _common.recompute_root


# =============================================================================
# Pytest Fixtures (autodiscovered by pytest)
# =============================================================================

@pytest.fixture
def hasher():
    """Default SHA-256 digest mixer."""
    from authpath.crypto.hashing import SHA256
    return SHA256


@pytest.fixture
def depth2_bundle():
    """Depth-2 bundle holding leaves 0..3 with leaf 1 retained."""
    return make_bundle(2, 4, keep={1})


@pytest.fixture
def depth3_all_kept():
    """Full depth-3 bundle with every leaf retained."""
    return make_bundle(3, 8)


@pytest.fixture(autouse=True)
def _isolate_env(monkeypatch):
    """Keep AUTHPATH_* variables from the developer's shell out of tests."""
    import os
    for key in list(os.environ):
        if key.startswith("AUTHPATH_"):
            monkeypatch.delenv(key, raising=False)


# =============================================================================
# Pytest Configuration
# =============================================================================

def pytest_configure(config):
    """Register custom markers."""
    config.addinivalue_line(
        "markers", "slow: marks tests as slow (deselect with '-m \"not slow\"')"
    )
    config.addinivalue_line(
        "markers", "unit: marks tests as unit tests"
    )
