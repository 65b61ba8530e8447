"""Logging utilities for action-docs commands."""

from __future__ import annotations

import logging
import os
import sys
from pathlib import Path
from typing import IO, Dict, Optional

_LOGGER_NAME = "actiondocs"

_RESET = "\033[0m"
_LEVEL_COLORS: Dict[int, str] = {
    logging.DEBUG: "\033[90m",
    logging.INFO: "\033[36m",
    logging.WARNING: "\033[31m",
    logging.ERROR: "\033[91m",
    logging.CRITICAL: "\033[91m",
}


def get_logger(name: str | None = None) -> logging.Logger:
    """Return a module-scoped logger under the actiondocs hierarchy."""
    full_name = f"{_LOGGER_NAME}.{name}" if name else _LOGGER_NAME
    return logging.getLogger(full_name)


class ComponentFormatter(logging.Formatter):
    """Prefixes each record with its component tag, coloured by level."""

    def __init__(self, *, color: bool = False) -> None:
        super().__init__("%(levelname)s %(message)s")
        self.color = color

    def format(self, record: logging.LogRecord) -> str:
        message = super().format(record)
        component = record.name
        if component.startswith(f"{_LOGGER_NAME}."):
            component = component[len(_LOGGER_NAME) + 1 :]
        if self.color:
            code = _LEVEL_COLORS.get(record.levelno, "")
            component = f"{code}{component}{_RESET}"
        return f"[{component}] {message}"


def configure_logging(
    *,
    verbose: bool = False,
    color: Optional[bool] = None,
    stream: IO[str] | None = None,
) -> logging.Logger:
    """Configure the actiondocs logger with a single console handler."""
    level = logging.DEBUG if verbose else logging.INFO
    logger = logging.getLogger(_LOGGER_NAME)
    logger.setLevel(level)
    logger.propagate = False

    # Reset handlers to avoid duplicate output when the CLI is invoked multiple times.
    for handler in list(logger.handlers):
        logger.removeHandler(handler)

    target = stream if stream is not None else sys.stderr
    if color is None:
        color = _supports_color(target)

    stream_handler = logging.StreamHandler(target)
    stream_handler.setLevel(level)
    stream_handler.setFormatter(ComponentFormatter(color=color))
    logger.addHandler(stream_handler)
    return logger


def display_path(path: Path | str) -> str:
    """Render ``path`` relative to the working directory when it lives below it."""
    candidate = Path(path)
    try:
        return str(candidate.resolve().relative_to(Path.cwd()))
    except ValueError:
        return str(candidate)


def _supports_color(stream: IO[str]) -> bool:
    if os.environ.get("NO_COLOR"):
        return False
    isatty = getattr(stream, "isatty", None)
    return bool(isatty and isatty())


__all__ = ["ComponentFormatter", "configure_logging", "display_path", "get_logger"]
