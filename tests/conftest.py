"""Pytest configuration for test isolation.

The CLI reads several environment variables and loads ``.env`` from the
current working directory, and the logging setup mutates the package root
logger once per process. Both would leak between tests, so each test runs in
its own temporary working directory with a clean environment and a fresh
logging state.
"""

from __future__ import annotations

import logging
from pathlib import Path

import pytest

import wallos_import.logging_setup as logging_setup

_ENV_VARS = (
    "ACTUAL_DATA_DIR",
    "ACTUAL_BUDGET_ID",
    "ACTUAL_SERVER_URL",
    "ACTUAL_PASSWORD",
    "ACTUAL_ENCRYPTION_PASSWORD",
    "WALLOS_URL",
    "WALLOS_API_KEY",
    "WALLOS_IMPORT_LOG_LEVEL",
)


@pytest.fixture(autouse=True)
def _isolate_env(tmp_path: Path, monkeypatch: pytest.MonkeyPatch) -> None:
    for name in _ENV_VARS:
        monkeypatch.delenv(name, raising=False)
    monkeypatch.chdir(tmp_path)


@pytest.fixture(autouse=True)
def _reset_logging(monkeypatch: pytest.MonkeyPatch):
    monkeypatch.setattr(logging_setup, "_CONFIGURED", False)
    pkg_logger = logging.getLogger("wallos_import")
    saved = (list(pkg_logger.handlers), pkg_logger.level, pkg_logger.propagate)
    yield
    pkg_logger.handlers[:] = saved[0]
    pkg_logger.setLevel(saved[1])
    pkg_logger.propagate = saved[2]

