"""Typed records for the components documented by action-docs."""

from __future__ import annotations

from dataclasses import dataclass, field
from enum import Enum
from pathlib import Path
from typing import Dict, Optional, Union


class ComponentType(str, Enum):
    """Variant tag shared by every documented component."""

    ACTION = "ACTION"
    WORKFLOW = "WORKFLOW"


class ManifestError(ValueError):
    """Raised when a manifest parses as YAML but does not describe a component."""


class PermissionAccess(str, Enum):
    """Access level a job may request for a permission scope."""

    NONE = "none"
    READ = "read"
    WRITE = "write"

    @property
    def rank(self) -> int:
        return _ACCESS_RANK[self]


_ACCESS_RANK = {
    PermissionAccess.NONE: 0,
    PermissionAccess.READ: 1,
    PermissionAccess.WRITE: 2,
}


def is_greater(access: PermissionAccess, existing: Optional[PermissionAccess]) -> bool:
    """Return True when ``access`` should replace ``existing``.

    An unset scope is always inferior; otherwise the ranks must be strictly
    greater, so equal accesses keep the value seen first.
    """
    if existing is None:
        return True
    return access.rank > existing.rank


class PermissionScope(str, Enum):
    """Permission scopes GitHub recognises for the ``GITHUB_TOKEN``."""

    ACTIONS = "actions"
    CHECKS = "checks"
    CONTENTS = "contents"
    DEPLOYMENTS = "deployments"
    ID_TOKEN = "id-token"
    ISSUES = "issues"
    DISCUSSIONS = "discussions"
    PACKAGES = "packages"
    PAGES = "pages"
    PULL_REQUESTS = "pull-requests"
    REPOSITORY_PROJECTS = "repository-projects"
    SECURITY_EVENTS = "security-events"
    STATUSES = "statuses"


@dataclass
class ActionInput:
    description: str = ""
    required: bool = False
    default: Optional[str] = None
    deprecation_message: Optional[str] = None
    example: Optional[str] = None


@dataclass
class ActionOutput:
    description: Optional[str] = None
    value: Optional[str] = None


@dataclass
class ActionRuns:
    """Execution descriptor from the ``runs`` section."""

    using: Optional[str] = None
    main: Optional[str] = None
    pre: Optional[str] = None
    post: Optional[str] = None
    pre_if: Optional[str] = None
    post_if: Optional[str] = None
    image: Optional[str] = None
    args: list[str] = field(default_factory=list)
    steps: int = 0


@dataclass
class ActionBranding:
    icon: Optional[str] = None
    color: Optional[str] = None
    icon_path: Optional[str] = None


@dataclass
class Action:
    """A single-unit automation step described by ``action.yml``."""

    path: Path
    id: str
    manifest_file: str
    name: str
    description: str = ""
    author: Optional[str] = None
    inputs: Dict[str, ActionInput] = field(default_factory=dict)
    outputs: Dict[str, ActionOutput] = field(default_factory=dict)
    runs: ActionRuns = field(default_factory=ActionRuns)
    branding: ActionBranding = field(default_factory=ActionBranding)
    readme_path: Optional[Path] = None
    relative_readme_path: Optional[str] = None

    @property
    def component_type(self) -> ComponentType:
        return ComponentType.ACTION


@dataclass
class WorkflowInput:
    description: Optional[str] = None
    type: str = "string"
    default: Optional[str] = None
    required: bool = False
    deprecation_message: Optional[str] = None


@dataclass
class WorkflowSecret:
    description: Optional[str] = None
    required: bool = False
    # Name under which a job of this workflow forwards the secret.
    inherited_key: Optional[str] = None


@dataclass
class WorkflowOutput:
    description: Optional[str] = None
    value: Optional[str] = None


@dataclass
class WorkflowCall:
    """The ``on.workflow_call`` interface other workflows invoke."""

    inputs: Dict[str, WorkflowInput] = field(default_factory=dict)
    secrets: Dict[str, WorkflowSecret] = field(default_factory=dict)
    outputs: Dict[str, WorkflowOutput] = field(default_factory=dict)


@dataclass
class Job:
    name: Optional[str] = None
    uses: Optional[str] = None
    permissions: Dict[str, PermissionAccess] = field(default_factory=dict)
    secrets_inherit: bool = False
    secrets: Dict[str, str] = field(default_factory=dict)


@dataclass
class Workflow:
    """A reusable workflow file and the facts derived from it."""

    manifest_file: Path
    basename: str
    id: str
    name: Optional[str] = None
    description: str = ""
    permissions: Dict[str, PermissionAccess] = field(default_factory=dict)
    declared_permissions: Dict[str, PermissionAccess] = field(default_factory=dict)
    inherited_secrets: bool = False
    workflow_call: WorkflowCall = field(default_factory=WorkflowCall)
    env: Dict[str, str] = field(default_factory=dict)
    jobs: Dict[str, Job] = field(default_factory=dict)
    readme_path: Optional[Path] = None
    relative_manifest_path: Optional[str] = None

    @property
    def component_type(self) -> ComponentType:
        return ComponentType.WORKFLOW


Component = Union[Action, Workflow]


__all__ = [
    "Action",
    "ActionBranding",
    "ActionInput",
    "ActionOutput",
    "ActionRuns",
    "Component",
    "ComponentType",
    "Job",
    "ManifestError",
    "PermissionAccess",
    "PermissionScope",
    "Workflow",
    "WorkflowCall",
    "WorkflowInput",
    "WorkflowOutput",
    "WorkflowSecret",
    "is_greater",
]
