"""Pytest configuration shared by every suite.

What:
  Put the in-repo ``maillink/src`` tree on ``sys.path`` and pin the runtime
  configuration to the canned fixture file for every test.

Why:
  Tests must exercise the source tree rather than an installed wheel, and the
  runtime configuration is cached at module level; without explicit resets
  tests would depend on execution order or on a developer's own
  ``config.yaml``.

How:
  Compute the project root relative to this file, prepend the source directory
  when present, and define the autouse :func:`runtime_config` fixture which sets
  ``MAILLINK_CONFIG_PATH`` and clears the cache before and after each test.
"""

import sys
from pathlib import Path

PROJECT_ROOT = Path(__file__).resolve().parents[1]
SRC_DIR = PROJECT_ROOT / "maillink" / "src"
if SRC_DIR.exists():
    sys.path.insert(0, str(SRC_DIR))

import pytest

from maillink.config.loader import reset_runtime_config

CONFIG_PATH = Path(__file__).resolve().parent / "data" / "config.yaml"


@pytest.fixture(autouse=True)
def runtime_config(monkeypatch: pytest.MonkeyPatch):
    """Apply the canned configuration file for every test."""

    monkeypatch.setenv("MAILLINK_CONFIG_PATH", str(CONFIG_PATH))
    reset_runtime_config()
    try:
        yield
    finally:
        reset_runtime_config()


@pytest.fixture
def registry_config(tmp_path: Path) -> Path:
    """Write a config whose account registry lives under ``tmp_path``."""

    config_path = tmp_path / "config.yaml"
    config_path.write_text(
        "version: 1\n"
        "accounts:\n"
        f"  path: {tmp_path / 'state' / 'accounts.yaml'}\n"
        "  retention_days: 30\n"
        "logging:\n"
        "  level: ERROR\n"
    )
    return config_path
