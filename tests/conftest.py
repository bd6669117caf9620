"""
Pytest configuration and fixtures.

Ensures the biblint package can be imported from tests.
"""

import logging
import sys
import os
from pathlib import Path

import pytest

# Add the repository root to Python path so tests can import biblint
repo_root = Path(__file__).parent.parent
sys.path.insert(0, str(repo_root))

# Also set PYTHONPATH environment variable
os.environ['PYTHONPATH'] = str(repo_root)


@pytest.fixture(autouse=True)
def fresh_config(monkeypatch, tmp_path):
    """Run every test without a cached config or a stray biblint.yaml."""
    from biblint.config import reset_config

    monkeypatch.delenv("BIBLINT_CONFIG_PATH", raising=False)
    monkeypatch.chdir(tmp_path)
    reset_config()

    # the CLI reconfigures the root logger onto the runner's stderr
    root = logging.getLogger()
    handlers, level = root.handlers[:], root.level
    yield
    root.handlers[:] = handlers
    root.setLevel(level)
    reset_config()
