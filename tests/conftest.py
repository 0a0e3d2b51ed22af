"""
Pytest Configuration and Fixtures.

This file configures pytest and provides shared fixtures for all tests.
"""
import os
import pytest
import sys
from pathlib import Path

# Add project root to path
PROJECT_ROOT = Path(__file__).parent.parent
sys.path.insert(0, str(PROJECT_ROOT))

# Give Rich a wide terminal so CLI messages are not wrapped mid-phrase
os.environ.setdefault("COLUMNS", "200")

from config import get_settings
from src.content import sample_catalog
from src.core.state import LearnerState, new_learner
from src.engine import ProgressionReducer


def pytest_configure(config):
    """Configure pytest markers."""
    config.addinivalue_line("markers", "unit: Unit tests")
    config.addinivalue_line("markers", "integration: Integration tests (store, persistence, resolver)")
    config.addinivalue_line("markers", "smoke: Smoke tests for CLI commands")
    config.addinivalue_line("markers", "slow: Slow tests")


def pytest_collection_modifyitems(config, items):
    """Automatically mark tests based on their location."""
    for item in items:
        # Mark based on test file location
        if "unit" in str(item.fspath):
            item.add_marker(pytest.mark.unit)
        elif "integration" in str(item.fspath):
            item.add_marker(pytest.mark.integration)
        elif "smoke" in str(item.fspath):
            item.add_marker(pytest.mark.smoke)


@pytest.fixture(scope="session")
def project_root():
    """Return the project root directory."""
    return PROJECT_ROOT


@pytest.fixture
def learner() -> LearnerState:
    """A fresh learner at 0 XP."""
    return new_learner("ayse", "Ayse Yilmaz")


@pytest.fixture
def catalog():
    """The built-in sample catalog."""
    return sample_catalog()


@pytest.fixture
def reducer() -> ProgressionReducer:
    return ProgressionReducer()


@pytest.fixture
def data_dir(tmp_path, monkeypatch):
    """Point PUSULA_DATA_DIR at a temp directory and reset cached settings."""
    directory = tmp_path / "data"
    monkeypatch.setenv("PUSULA_DATA_DIR", str(directory))
    monkeypatch.delenv("PUSULA_CATALOG_PATH", raising=False)
    monkeypatch.delenv("PUSULA_DEFAULT_LEARNER_ID", raising=False)
    get_settings.cache_clear()
    yield directory
    get_settings.cache_clear()
