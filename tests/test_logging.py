"""Tests for starlist logging setup."""

from __future__ import annotations

import logging
from pathlib import Path

import pytest

from starlist.logging import ActionsFormatter, configure_logging, get_logger


def _record(level: int, message: str) -> logging.LogRecord:
    return logging.LogRecord("starlist.test", level, __file__, 1, message, None, None)


def test_actions_formatter_emits_workflow_commands() -> None:
    formatter = ActionsFormatter("%(message)s")

    assert formatter.format(_record(logging.WARNING, "slow down")) == "::warning::slow down"
    assert formatter.format(_record(logging.ERROR, "50%\nfailed")) == "::error::50%25%0Afailed"
    assert formatter.format(_record(logging.INFO, "progress")) == "progress"


def test_configure_logging_replaces_handlers(tmp_path: Path) -> None:
    log_file = tmp_path / "run.log"

    configure_logging(verbose=True, annotate=False)
    logger = configure_logging(verbose=True, log_file=log_file, annotate=False)
    get_logger("test").debug("detail")

    assert logger.level == logging.DEBUG
    assert len(logger.handlers) == 2
    for handler in logger.handlers:
        handler.flush()
    assert "starlist.test: detail" in log_file.read_text(encoding="utf-8")
    for handler in list(logger.handlers):
        handler.close()
        logger.removeHandler(handler)


def test_annotations_follow_actions_environment(monkeypatch: pytest.MonkeyPatch) -> None:
    monkeypatch.setenv("GITHUB_ACTIONS", "true")

    logger = configure_logging()

    assert isinstance(logger.handlers[0].formatter, ActionsFormatter)
    for handler in list(logger.handlers):
        logger.removeHandler(handler)
