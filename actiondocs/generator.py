"""Generation pipeline: manifest -> record -> rendered Markdown -> file."""

from __future__ import annotations

import logging
import os
from dataclasses import replace
from pathlib import Path
from typing import Any, Dict, List, Mapping, Optional

from .config import ActionDocsConfig
from .logging import display_path, get_logger
from .manifest import DEFAULT_WORKFLOW_PREFIX, list_workflow_files
from .models import Action, Component, ComponentType, Workflow
from .normalizer import parse_action, parse_workflow
from .rendering import DocRenderer
from .writer import ReadmeWriter

ACTION_README_NAME = "README.md"


class DocGenerator:
    """Renders and writes documentation for components below one root."""

    def __init__(
        self,
        component_root: Path | str,
        component_type: ComponentType,
        template_root: Path | str = "",
        *,
        renderer: DocRenderer | None = None,
        writer: ReadmeWriter | None = None,
        context: Mapping[str, Any] | None = None,
        logger: logging.Logger | None = None,
    ) -> None:
        self.component_root = Path(component_root).expanduser().resolve()
        self.component_type = component_type
        self.logger = logger or get_logger("generator")
        self.renderer = renderer or DocRenderer(component_type, template_root, logger=self.logger)
        self.writer = writer or ReadmeWriter(logger=self.logger)
        self.context: Dict[str, Any] = dict(context or {})

    def generate_readme(self, component: Component, readme_out: Path | str | None = "") -> Optional[Path]:
        """Write the documentation for ``component``.

        ``readme_out`` defaults to the component root. Returns the written path,
        or None when the output directory could not be prepared.
        """
        output_dir = Path(readme_out).expanduser().resolve() if readme_out else self.component_root

        prepared: Component
        if isinstance(component, Action):
            if output_dir == self.component_root:
                readme_path = output_dir / ACTION_README_NAME
            else:
                readme_path = output_dir / f"{component.id}.md"
            prepared = replace(
                component,
                readme_path=readme_path,
                relative_readme_path=_relative(readme_path, self.component_root),
            )
        elif isinstance(component, Workflow):
            readme_path = output_dir / f"{component.id}.md"
            prepared = replace(
                component,
                readme_path=readme_path,
                relative_manifest_path=_relative(component.manifest_file.resolve(), output_dir),
            )
        else:
            raise TypeError(f"Unsupported component type: {type(component).__name__}")

        if not self.writer.prepare(output_dir):
            return None

        self.logger.debug(
            "Generating %s for %s %s",
            readme_path.name,
            prepared.component_type.value.lower(),
            prepared.id,
        )
        content = self.renderer.render(prepared, **self.context)
        return self.writer.write(readme_path, content)


def run_action(
    action_root: Path | str,
    template_root: Path | str = "",
    readme_out: Path | str = "",
    *,
    config: ActionDocsConfig | None = None,
    logger: logging.Logger | None = None,
) -> Optional[Path]:
    """Generate documentation for the action in ``action_root``.

    A directory without ``action.yml``/``action.yaml`` produces nothing.
    """
    logger = logger or get_logger("generator")
    action = parse_action(action_root)
    if action is None:
        logger.info("No action manifest found in %s; nothing to generate", display_path(action_root))
        return None

    context = config.template_context() if config is not None else {}
    if config is not None:
        context["action_path"] = config.action_path(action.path)
    generator = DocGenerator(
        action_root,
        ComponentType.ACTION,
        template_root,
        context=context,
        logger=logger,
    )
    return generator.generate_readme(action, readme_out)


def run_workflows(
    workflow_root: Path | str,
    template_root: Path | str = "",
    readme_out: Path | str = "",
    *,
    prefix: str = DEFAULT_WORKFLOW_PREFIX,
    config: ActionDocsConfig | None = None,
    logger: logging.Logger | None = None,
) -> List[Path]:
    """Generate documentation for every ``<prefix>*.yml`` workflow in ``workflow_root``.

    Workflows are handled one at a time in directory-listing order. A workflow
    whose output cannot be written is skipped; parse errors propagate.
    """
    logger = logger or get_logger("generator")
    root = Path(workflow_root)
    if not root.is_dir():
        logger.info("Workflow directory %s does not exist; nothing to generate", display_path(root))
        return []

    context = config.template_context() if config is not None else {}
    generator = DocGenerator(
        root,
        ComponentType.WORKFLOW,
        template_root,
        context=context,
        logger=logger,
    )

    written: List[Path] = []
    for name in list_workflow_files(root, prefix):
        workflow = parse_workflow(root / name)
        if workflow is None:
            continue
        path = generator.generate_readme(workflow, readme_out)
        if path is not None:
            written.append(path)
    if not written:
        logger.info("No workflows matching '%s*' documented in %s", prefix, display_path(root))
    return written


def _relative(path: Path, start: Path) -> str:
    return Path(os.path.relpath(path, start)).as_posix()


__all__ = ["ACTION_README_NAME", "DocGenerator", "run_action", "run_workflows"]
