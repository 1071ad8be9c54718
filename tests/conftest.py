"""
Pytest configuration and shared fixtures for the myprof test suite.

This module provides common fixtures, a hand-built result set for the
renderer tests, and test isolation from the user's configuration file.
"""

import os
import sys
import tempfile
import shutil
from pathlib import Path

import pytest

# Add src to Python path for testing
sys.path.insert(0, str(Path(__file__).parent.parent / "src"))

from myprof.config import clear_config_cache
from myprof.engine.results import ROOT_KEY, CallNode, MethodKey, ProcessInfo, ResultSet
from myprof.models.enums import MeasureMode


# ============================================================================
# Test Configuration
# ============================================================================


def pytest_configure(config):
    """Configure pytest with custom markers and settings."""
    config.addinivalue_line("markers", "unit: mark test as a unit test")
    config.addinivalue_line("markers", "integration: mark test as an integration test")
    config.addinivalue_line("markers", "e2e: mark test as an end-to-end test")
    config.addinivalue_line("markers", "slow: mark test as slow running")


@pytest.fixture(autouse=True)
def isolated_config(monkeypatch, tmp_path_factory):
    """Point the config loader at a file that does not exist and reset its cache."""
    missing = tmp_path_factory.mktemp("config") / "missing.toml"
    monkeypatch.setenv("MYPROF_CONFIG", str(missing))
    monkeypatch.delenv("MYPROF_LOG_LEVEL", raising=False)
    clear_config_cache()
    yield
    clear_config_cache()


# ============================================================================
# Core Fixtures
# ============================================================================


@pytest.fixture
def temp_dir():
    """Create a temporary directory for test files."""
    temp_path = tempfile.mkdtemp()
    yield Path(temp_path)
    shutil.rmtree(temp_path, ignore_errors=True)


@pytest.fixture
def restore_cwd():
    """Restore the working directory after a test that changes it."""
    previous = os.getcwd()
    yield Path(previous)
    os.chdir(previous)


@pytest.fixture
def script_environment(monkeypatch):
    """Protect sys.argv and sys.path from scripts run in-process."""
    monkeypatch.setattr(sys, "argv", list(sys.argv))
    monkeypatch.setattr(sys, "path", list(sys.path))


# ============================================================================
# Result Fixtures
# ============================================================================

MAIN_KEY = MethodKey(module="app", name="main", filename="/src/app.py", lineno=1)
WORK_KEY = MethodKey(module="app", name="work", filename="/src/app.py", lineno=10)
SORTED_KEY = MethodKey(module="builtins", name="sorted", is_builtin=True)


@pytest.fixture
def sample_result():
    """
    A small call tree with known costs:

        main     total 1.0, 1 call
          work   total 0.6, 2 calls
            sorted   total 0.2, 4 calls
          sorted total 0.1, 1 call
    """
    root = CallNode(ROOT_KEY)
    main = root.child(MAIN_KEY)
    main.calls, main.total_time = 1, 1.0
    work = main.child(WORK_KEY)
    work.calls, work.total_time = 2, 0.6
    nested_sorted = work.child(SORTED_KEY)
    nested_sorted.calls, nested_sorted.total_time = 4, 0.2
    direct_sorted = main.child(SORTED_KEY)
    direct_sorted.calls, direct_sorted.total_time = 1, 0.1
    return ResultSet(root, MeasureMode.WALL_TIME, "seconds", ProcessInfo(pid=4321))


@pytest.fixture
def empty_result():
    """A result set with nothing recorded."""
    return ResultSet(CallNode(ROOT_KEY), MeasureMode.WALL_TIME, "seconds", ProcessInfo(pid=4321))


@pytest.fixture
def write_script(tmp_path):
    """Write a Python script into a temporary directory and return its path."""

    def _write(source: str, name: str = "target.py") -> Path:
        path = tmp_path / name
        path.write_text(source, encoding="utf-8")
        return path

    return _write
