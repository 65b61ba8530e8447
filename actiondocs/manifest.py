"""Locate and load action and workflow manifests."""

from __future__ import annotations

import os
from pathlib import Path
from typing import Any, List, Optional

import yaml

ACTION_MANIFEST_NAMES = ("action.yml", "action.yaml")
WORKFLOW_EXTENSIONS = (".yml", ".yaml")
DEFAULT_WORKFLOW_PREFIX = "reusable-"


def find_action_manifest(directory: Path | str) -> Optional[Path]:
    """Return the first manifest present in ``directory``, or None."""
    root = Path(directory)
    for name in ACTION_MANIFEST_NAMES:
        candidate = root / name
        if candidate.is_file():
            return candidate
    return None


def find_workflow_manifest(path: Path | str) -> Optional[Path]:
    candidate = Path(path)
    return candidate if candidate.is_file() else None


def read_manifest(path: Path) -> Any:
    """Parse a manifest into a plain mapping.

    Malformed YAML raises ``yaml.YAMLError``; an empty document yields ``{}``.
    Anything other than a mapping at the root is left for the normaliser to
    reject.
    """
    text = path.read_text(encoding="utf-8")
    loaded = yaml.safe_load(text)
    if loaded is None:
        return {}
    return loaded


def list_workflow_files(
    directory: Path | str, prefix: str = DEFAULT_WORKFLOW_PREFIX
) -> List[str]:
    """Return workflow file names under ``directory`` in listing order."""
    return [
        name
        for name in os.listdir(directory)
        if name.startswith(prefix) and name.endswith(WORKFLOW_EXTENSIONS)
    ]


__all__ = [
    "ACTION_MANIFEST_NAMES",
    "DEFAULT_WORKFLOW_PREFIX",
    "find_action_manifest",
    "find_workflow_manifest",
    "list_workflow_files",
    "read_manifest",
]
