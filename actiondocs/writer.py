"""Persist rendered documentation to disk."""

from __future__ import annotations

import logging
from pathlib import Path

from .logging import display_path, get_logger


class ReadmeWriter:
    """Prepares output directories and writes rendered Markdown files."""

    def __init__(self, logger: logging.Logger | None = None) -> None:
        self.logger = logger or get_logger("writer")

    def prepare(self, directory: Path) -> bool:
        """Make sure ``directory`` exists and is a directory.

        Returns False, after logging why, when nothing should be written there.
        """
        try:
            exists = directory.exists()
        except OSError as exc:
            self.logger.error("Error while checking directory %s: %s", display_path(directory), exc)
            return False

        if exists:
            if directory.is_dir():
                return True
            self.logger.error(
                "Expected a directory for README output but found a file: %s",
                display_path(directory),
            )
            return False
        try:
            directory.mkdir(parents=True, exist_ok=True)
        except OSError as exc:
            self.logger.error("Error creating directory %s: %s", display_path(directory), exc)
            return False
        self.logger.debug("Created output directory %s", display_path(directory))
        return True

    def write(self, path: Path, content: str) -> Path:
        """Write ``content`` to ``path``, replacing any existing file."""
        path.write_text(content, encoding="utf-8")
        self.logger.debug("Wrote %s", display_path(path))
        return path


__all__ = ["ReadmeWriter"]
