"""
Shared pytest fixtures for taskpad tests.
"""

from __future__ import annotations

import logging

import pytest


@pytest.fixture(autouse=True)
def isolate_taskpad_files(tmp_path, monkeypatch):
    """
    Ensure tests do not read/write the real tasks, config or log files.

    Parameters
    ----------
    tmp_path : pathlib.Path
        Temporary path provided by pytest.
    monkeypatch : pytest.MonkeyPatch
        Monkeypatch fixture for environment updates.
    """
    monkeypatch.setenv("TASKPAD_PATH", str(tmp_path / "tasks.json"))
    monkeypatch.setenv("TASKPAD_CONFIG", str(tmp_path / "config.toml"))
    monkeypatch.setenv("TASKPAD_LOG_DIR", str(tmp_path / "logs"))
    monkeypatch.delenv("TASKPAD_LOG_LEVEL", raising=False)
    yield
    logger = logging.getLogger("taskpad")
    for handler in list(logger.handlers):
        logger.removeHandler(handler)
        handler.close()
