"""Logging utilities for starlist runs."""

from __future__ import annotations

import logging
import os
from pathlib import Path

_LOGGER_NAME = "starlist"

# GitHub Actions workflow command for each level that has one.
_ANNOTATIONS = {
    logging.DEBUG: "debug",
    logging.WARNING: "warning",
    logging.ERROR: "error",
    logging.CRITICAL: "error",
}


class ActionsFormatter(logging.Formatter):
    """Render records as GitHub Actions workflow commands (``::warning::...``)."""

    def format(self, record: logging.LogRecord) -> str:
        message = super().format(record)
        command = _ANNOTATIONS.get(record.levelno)
        if command is None:
            return message
        escaped = message.replace("%", "%25").replace("\r", "%0D").replace("\n", "%0A")
        return f"::{command}::{escaped}"


def get_logger(name: str | None = None) -> logging.Logger:
    """Return a module-scoped logger under the starlist hierarchy."""
    full_name = f"{_LOGGER_NAME}.{name}" if name else _LOGGER_NAME
    return logging.getLogger(full_name)


def running_in_actions() -> bool:
    return os.getenv("GITHUB_ACTIONS", "").lower() == "true"


def configure_logging(
    *,
    verbose: bool = False,
    log_file: Path | None = None,
    annotate: bool | None = None,
) -> logging.Logger:
    """Configure the starlist logger.

    Console output uses workflow-command annotations when ``annotate`` is true,
    which defaults to whether the process runs inside GitHub Actions.
    """
    level = logging.DEBUG if verbose else logging.INFO
    logger = logging.getLogger(_LOGGER_NAME)
    logger.setLevel(level)
    logger.propagate = False

    # Reset handlers so repeated runs in one process (service mode) do not duplicate output.
    for handler in list(logger.handlers):
        logger.removeHandler(handler)

    if annotate is None:
        annotate = running_in_actions()

    stream_handler = logging.StreamHandler()
    stream_handler.setLevel(level)
    if annotate:
        stream_handler.setFormatter(ActionsFormatter("%(message)s"))
    else:
        stream_handler.setFormatter(logging.Formatter("[starlist] %(levelname)s %(message)s"))
    logger.addHandler(stream_handler)

    if log_file is not None:
        file_handler = logging.FileHandler(log_file, encoding="utf-8")
        file_handler.setLevel(level)
        file_handler.setFormatter(
            logging.Formatter("%(asctime)s %(levelname)s %(name)s: %(message)s")
        )
        logger.addHandler(file_handler)

    return logger


__all__ = ["ActionsFormatter", "configure_logging", "get_logger", "running_in_actions"]
