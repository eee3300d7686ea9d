"""Shared pytest fixtures for PhantomKit tests."""

from __future__ import annotations

import json
import logging
from pathlib import Path

import pytest
import structlog


@pytest.fixture(autouse=True)
def quiet_logging(monkeypatch):
    """Keep INFO events out of CLI output and drop handlers bound to closed streams."""
    monkeypatch.setenv("PHANTOMKIT_LOG_LEVEL", "WARNING")
    monkeypatch.setenv("PHANTOMKIT_LOG_FORMAT", "console")
    yield
    structlog.reset_defaults()
    logger = logging.getLogger("phantomkit")
    for handler in list(logger.handlers):
        logger.removeHandler(handler)
    logger.setLevel(logging.NOTSET)
    logger.propagate = True


@pytest.fixture
def write(tmp_path: Path):
    """Write a file relative to tmp_path, creating parent directories."""

    def _write(name: str, content: str | dict) -> Path:
        target = tmp_path / name
        target.parent.mkdir(parents=True, exist_ok=True)
        if isinstance(content, dict):
            content = json.dumps(content)
        target.write_text(content)
        return target

    return _write
