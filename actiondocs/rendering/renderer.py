"""Render component documentation from Jinja2 partials."""

from __future__ import annotations

import logging
from pathlib import Path
from typing import Any, Dict, List, Tuple

from jinja2 import DictLoader, Environment

from ..logging import display_path, get_logger
from ..models import Action, Component, ComponentType, Workflow
from .helpers import TEMPLATE_FILTERS, TEMPLATE_GLOBALS

TEMPLATES_DIR = Path(__file__).with_name("templates")
TEMPLATE_SUFFIX = ".j2"
ROOT_PARTIAL = "readme"

_ACTION_PARTIALS: Tuple[str, ...] = ("header", "usage", "inputs", "outputs", "readme")
_WORKFLOW_PARTIALS: Tuple[str, ...] = _ACTION_PARTIALS + ("permissions", "secrets")

_TEMPLATE_SETS: Dict[ComponentType, Tuple[str, Tuple[str, ...]]] = {
    ComponentType.ACTION: ("actions", _ACTION_PARTIALS),
    ComponentType.WORKFLOW: ("workflows", _WORKFLOW_PARTIALS),
}

GENERATED_NOTICE = "[//]: # (This file is auto generated from {source}. Do not edit)\n"


class DocRenderer:
    """Compiles the partial set for one component type and renders records with it.

    Each partial ``<name>`` is looked up as ``_<name>.j2`` in the user's
    template root first, then in the built-in template set. Partials that
    cannot be read are logged and left out; a template that still includes
    them fails at render time with :class:`jinja2.TemplateNotFound`.
    """

    def __init__(
        self,
        component_type: ComponentType,
        template_root: Path | str = "",
        *,
        logger: logging.Logger | None = None,
    ) -> None:
        self.component_type = component_type
        self.template_root = str(template_root)
        self.logger = logger or get_logger("renderer")
        set_name, self.partial_names = _TEMPLATE_SETS[component_type]
        self.default_dir = TEMPLATES_DIR / set_name
        self.partials = self._load_partials()
        self._env = self._create_env(self.partials)

    @property
    def template_source(self) -> str:
        """Location named in the generated-file notice."""
        if self.template_root:
            return self.template_root
        package_root = Path(__file__).resolve().parent.parent
        return self.default_dir.resolve().relative_to(package_root.parent).as_posix()

    def candidate_paths(self, name: str) -> List[Path]:
        """Ordered override-then-default locations for partial ``name``."""
        filename = f"_{name}{TEMPLATE_SUFFIX}"
        candidates: List[Path] = []
        if self.template_root:
            candidates.append(Path(self.template_root).expanduser().resolve() / filename)
        candidates.append(self.default_dir / filename)
        return candidates

    def render(self, component: Component, **context: Any) -> str:
        """Render ``component`` into Markdown, prefixed by the generated-file notice."""
        if isinstance(component, Action):
            variables: Dict[str, Any] = {"action": component}
        elif isinstance(component, Workflow):
            variables = {"workflow": component}
        else:
            raise TypeError(f"Cannot render documentation for {type(component).__name__}")
        if component.component_type is not self.component_type:
            raise ValueError(
                f"Renderer configured for {self.component_type.value.lower()} templates "
                f"cannot render a {component.component_type.value.lower()}"
            )

        variables["component"] = component
        variables.update(context)
        template = self._env.get_template(ROOT_PARTIAL)
        body = template.render(**variables)
        return GENERATED_NOTICE.format(source=self.template_source) + body

    def _load_partials(self) -> Dict[str, str]:
        partials: Dict[str, str] = {}
        for name in self.partial_names:
            candidates = self.candidate_paths(name)
            path = next((candidate for candidate in candidates if candidate.is_file()), candidates[-1])
            try:
                partials[name] = path.read_text(encoding="utf-8")
            except OSError as exc:
                self.logger.error("Error reading partial '%s' from %s: %s", name, display_path(path), exc)
                continue
            self.logger.debug("Registered partial '%s' from %s", name, display_path(path))
        return partials

    @staticmethod
    def _create_env(partials: Dict[str, str]) -> Environment:
        env = Environment(
            loader=DictLoader(partials),
            autoescape=False,
            trim_blocks=True,
            lstrip_blocks=True,
            keep_trailing_newline=True,
        )
        env.globals.update(TEMPLATE_GLOBALS)
        env.filters.update(TEMPLATE_FILTERS)
        return env


__all__ = ["DocRenderer", "GENERATED_NOTICE", "TEMPLATES_DIR"]
