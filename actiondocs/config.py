"""Configuration loading for action-docs (.action-docs.yml)."""

from __future__ import annotations

import os
from dataclasses import dataclass
from pathlib import Path
from typing import Any, Dict, Optional

import yaml

from .manifest import DEFAULT_WORKFLOW_PREFIX

CONFIG_FILENAME = ".action-docs.yml"


class ConfigError(RuntimeError):
    """Raised when the configuration file cannot be parsed."""


@dataclass
class ActionDocsConfig:
    """Represents the settings defined in .action-docs.yml."""

    root: Path
    template_root: Optional[Path] = None
    readme_out: Optional[Path] = None
    workflow_prefix: str = DEFAULT_WORKFLOW_PREFIX
    repository: Optional[str] = None
    version: Optional[str] = None

    def template_context(self) -> Dict[str, Optional[str]]:
        """Values handed to every template alongside the component."""
        return {"repository": self.repository, "version": self.version}

    def action_path(self, directory: Path | str) -> str:
        """Path of an action directory below the repository root, in posix form.

        Empty for an action at the root itself. Directories outside the root
        fall back to their base name.
        """
        resolved = Path(directory).expanduser().resolve()
        relative = Path(os.path.relpath(resolved, Path(self.root).resolve())).as_posix()
        if relative == ".":
            return ""
        if relative == ".." or relative.startswith("../"):
            return resolved.name
        return relative


def load_config(config_path: Path) -> ActionDocsConfig:
    """Load configuration from disk; a missing file yields defaults."""
    config_file = _resolve_config_path(config_path)
    root = config_file.parent.resolve()

    if not config_file.exists():
        return ActionDocsConfig(root=root)

    data = _read_config(config_file)
    if not isinstance(data, dict):
        raise ConfigError(f"{CONFIG_FILENAME} must contain a mapping at the root")

    template_root = _as_str(data.get("template_root"))
    workflow_prefix = _as_str(data.get("workflow_prefix"))
    readme_out = _as_str(data.get("readme_out"))

    return ActionDocsConfig(
        root=root,
        template_root=root / template_root if template_root else None,
        readme_out=root / readme_out if readme_out else None,
        workflow_prefix=workflow_prefix if workflow_prefix is not None else DEFAULT_WORKFLOW_PREFIX,
        repository=_as_str(data.get("repository")),
        version=_as_str(data.get("version")),
    )


def _resolve_config_path(config_path: Path) -> Path:
    config_path = config_path.expanduser()
    if config_path.is_dir():
        return (config_path / CONFIG_FILENAME).resolve()
    return config_path.resolve()


def _read_config(path: Path) -> Any:
    text = path.read_text(encoding="utf-8")
    if not text.strip():
        return {}
    try:
        loaded = yaml.safe_load(text)
    except yaml.YAMLError as exc:
        raise ConfigError(f"Failed to parse {path.name}: {exc}") from exc
    return loaded if loaded is not None else {}


def _as_str(value: Any) -> Optional[str]:
    if isinstance(value, bool):
        return "true" if value else "false"
    return str(value) if isinstance(value, (str, int, float)) else None


__all__ = ["ActionDocsConfig", "CONFIG_FILENAME", "ConfigError", "load_config"]
