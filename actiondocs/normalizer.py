"""Turn parsed manifests into typed Action and Workflow records."""

from __future__ import annotations

import re
from pathlib import Path
from typing import Any, Dict, Iterable, Mapping, Optional

from .manifest import find_action_manifest, find_workflow_manifest, read_manifest
from .models import (
    Action,
    ActionBranding,
    ActionInput,
    ActionOutput,
    ActionRuns,
    Job,
    ManifestError,
    PermissionAccess,
    PermissionScope,
    Workflow,
    WorkflowCall,
    WorkflowInput,
    WorkflowOutput,
    WorkflowSecret,
    is_greater,
)

_WORKFLOW_ID_PATTERN = re.compile(r"(^\.)|(\.ya?ml)")
_DESCRIPTION_PREFIX = "# "
_SECRET_REFERENCE = re.compile(r"^\$\{\{\s*secrets\.([A-Za-z0-9_-]+)\s*\}\}$")
_PERMISSION_SHORTHANDS = {
    "read-all": PermissionAccess.READ,
    "write-all": PermissionAccess.WRITE,
}


def parse_action(directory: Path | str) -> Optional[Action]:
    """Load the action living in ``directory``; None when it has no manifest."""
    root = Path(directory).resolve()
    manifest = find_action_manifest(root)
    if manifest is None:
        return None
    return build_action(root, manifest.name, read_manifest(manifest))


def parse_workflow(path: Path | str) -> Optional[Workflow]:
    """Load a workflow file; None when it does not exist."""
    manifest = find_workflow_manifest(path)
    if manifest is None:
        return None
    workflow = build_workflow(manifest, read_manifest(manifest))
    workflow.description = extract_description(manifest)
    return workflow


def build_action(directory: Path, manifest_file: str, data: Any) -> Action:
    """Map a parsed ``action.yml`` onto an :class:`Action`."""
    source = f"{directory.name}/{manifest_file}"
    tree = _require_mapping(data, source)

    name = _as_str(tree.get("name"))
    if not name:
        raise ManifestError(f"{source}: missing required field 'name'")

    inputs: Dict[str, ActionInput] = {}
    for key, raw in _section(tree, "inputs", source).items():
        entry = _as_dict(raw)
        inputs[str(key)] = ActionInput(
            description=_as_str(entry.get("description")) or "",
            required=_as_bool(entry.get("required")),
            default=_as_str(entry.get("default")),
            deprecation_message=_as_str(entry.get("deprecationMessage")),
            example=_as_str(entry.get("example")),
        )

    outputs: Dict[str, ActionOutput] = {}
    for key, raw in _section(tree, "outputs", source).items():
        entry = _as_dict(raw)
        outputs[str(key)] = ActionOutput(
            description=_as_str(entry.get("description")),
            value=_as_str(entry.get("value")),
        )

    runs_data = _section(tree, "runs", source)
    steps = runs_data.get("steps")
    args = runs_data.get("args")
    runs = ActionRuns(
        using=_as_str(runs_data.get("using")),
        main=_as_str(runs_data.get("main")),
        pre=_as_str(runs_data.get("pre")),
        post=_as_str(runs_data.get("post")),
        pre_if=_as_str(runs_data.get("pre-if")),
        post_if=_as_str(runs_data.get("post-if")),
        image=_as_str(runs_data.get("image")),
        args=[text for text in (_as_str(arg) for arg in args) if text is not None]
        if isinstance(args, list)
        else [],
        steps=len(steps) if isinstance(steps, list) else 0,
    )

    branding_data = _section(tree, "branding", source)
    branding = ActionBranding(
        icon=_as_str(branding_data.get("icon")),
        color=_as_str(branding_data.get("color")),
        icon_path=_as_str(branding_data.get("iconPath")),
    )

    return Action(
        path=directory,
        id=directory.name,
        manifest_file=manifest_file,
        name=name,
        description=_as_str(tree.get("description")) or "",
        author=_as_str(tree.get("author")),
        inputs=inputs,
        outputs=outputs,
        runs=runs,
        branding=branding,
    )


def build_workflow(manifest: Path, data: Any) -> Workflow:
    """Map a parsed workflow file onto a :class:`Workflow`.

    The description is not derived here since it comes from the raw file
    text rather than the parsed tree; see :func:`extract_description`.
    """
    source = manifest.name
    tree = _require_mapping(data, source)

    jobs: Dict[str, Job] = {}
    for job_id, raw in _section(tree, "jobs", source).items():
        jobs[str(job_id)] = _build_job(_as_dict(raw), f"{source}: job '{job_id}'")

    workflow_call = _build_workflow_call(_workflow_call_section(tree, source), source)
    inherited = resolve_inherited_secrets(jobs.values(), workflow_call.secrets)

    env = {
        str(key): text
        for key, text in ((key, _as_str(value)) for key, value in _section(tree, "env", source).items())
        if text is not None
    }

    return Workflow(
        manifest_file=manifest,
        basename=manifest.name,
        id=workflow_id(manifest.name),
        name=_as_str(tree.get("name")),
        permissions=aggregate_permissions(jobs.values()),
        declared_permissions=_parse_permissions(tree.get("permissions"), source),
        inherited_secrets=inherited,
        workflow_call=workflow_call,
        env=env,
        jobs=jobs,
    )


def workflow_id(name: str) -> str:
    """Strip a leading dot and the YAML extension from a workflow file name."""
    return _WORKFLOW_ID_PATTERN.sub("", Path(name).name)


def extract_description(path: Path) -> str:
    """Collect the leading ``# `` comment block of a manifest file."""
    description = ""
    with path.open(encoding="utf-8") as handle:
        for raw_line in handle:
            line = raw_line.rstrip("\r\n")
            if not line.startswith(_DESCRIPTION_PREFIX):
                break
            description += line[len(_DESCRIPTION_PREFIX) :]
            description += "\n"
    return description


def aggregate_permissions(jobs: Iterable[Job]) -> Dict[str, PermissionAccess]:
    """Fold per-job permissions into the strongest access requested per scope.

    Only strictly greater access replaces a value already recorded, so when two
    jobs request the same level the first one seen is kept.
    """
    aggregated: Dict[str, PermissionAccess] = {}
    for job in jobs:
        for scope, access in job.permissions.items():
            if is_greater(access, aggregated.get(scope)):
                aggregated[scope] = access
    return aggregated


def resolve_inherited_secrets(
    jobs: Iterable[Job], secrets: Mapping[str, WorkflowSecret]
) -> bool:
    """Record how declared secrets are passed on by the workflow's jobs.

    Returns True when any job hands every secret to its callee with
    ``secrets: inherit``. Secrets forwarded explicitly under another name get
    that name stored as their ``inherited_key``.
    """
    inherits = False
    for job in jobs:
        if job.secrets_inherit:
            inherits = True
        for target, expression in job.secrets.items():
            match = _SECRET_REFERENCE.match(expression.strip())
            if match is None:
                continue
            declared = secrets.get(match.group(1))
            if declared is not None and declared.inherited_key is None:
                declared.inherited_key = target
    return inherits


def _build_job(data: Mapping[str, Any], source: str) -> Job:
    raw_secrets = data.get("secrets")
    secrets: Dict[str, str] = {}
    if isinstance(raw_secrets, dict):
        for key, value in raw_secrets.items():
            text = _as_str(value)
            if text is not None:
                secrets[str(key)] = text
    return Job(
        name=_as_str(data.get("name")),
        uses=_as_str(data.get("uses")),
        permissions=_parse_permissions(data.get("permissions"), source),
        secrets_inherit=raw_secrets == "inherit",
        secrets=secrets,
    )


def _parse_permissions(value: Any, source: str) -> Dict[str, PermissionAccess]:
    if isinstance(value, str):
        access = _PERMISSION_SHORTHANDS.get(value.strip().lower())
        if access is None:
            return {}
        return {scope.value: access for scope in PermissionScope}
    if value is None:
        return {}
    if not isinstance(value, dict):
        raise ManifestError(f"{source}: 'permissions' must be a mapping or shorthand string")
    permissions: Dict[str, PermissionAccess] = {}
    for scope, raw_access in value.items():
        text = _as_str(raw_access)
        try:
            permissions[str(scope)] = PermissionAccess((text or "").lower())
        except ValueError as exc:
            raise ManifestError(
                f"{source}: unknown access level {raw_access!r} for permission '{scope}'"
            ) from exc
    return permissions


def _workflow_call_section(tree: Mapping[str, Any], source: str) -> Dict[str, Any]:
    # YAML 1.1 loaders read a bare ``on`` key as the boolean True.
    triggers = tree.get("on", tree.get(True))
    if not isinstance(triggers, dict):
        return {}
    call = triggers.get("workflow_call")
    if call is None:
        return {}
    if not isinstance(call, dict):
        raise ManifestError(f"{source}: 'on.workflow_call' must be a mapping")
    return call


def _build_workflow_call(data: Mapping[str, Any], source: str) -> WorkflowCall:
    inputs: Dict[str, WorkflowInput] = {}
    for key, raw in _section(data, "inputs", source).items():
        entry = _as_dict(raw)
        inputs[str(key)] = WorkflowInput(
            description=_as_str(entry.get("description")),
            type=_as_str(entry.get("type")) or "string",
            default=_as_str(entry.get("default")),
            required=_as_bool(entry.get("required")),
            deprecation_message=_as_str(entry.get("deprecationMessage")),
        )

    secrets: Dict[str, WorkflowSecret] = {}
    for key, raw in _section(data, "secrets", source).items():
        entry = _as_dict(raw)
        secrets[str(key)] = WorkflowSecret(
            description=_as_str(entry.get("description")),
            required=_as_bool(entry.get("required")),
        )

    outputs: Dict[str, WorkflowOutput] = {}
    for key, raw in _section(data, "outputs", source).items():
        entry = _as_dict(raw)
        outputs[str(key)] = WorkflowOutput(
            description=_as_str(entry.get("description")),
            value=_as_str(entry.get("value")),
        )

    return WorkflowCall(inputs=inputs, secrets=secrets, outputs=outputs)


def _require_mapping(data: Any, source: str) -> Dict[str, Any]:
    if not isinstance(data, dict):
        raise ManifestError(f"{source}: manifest must contain a mapping at the root")
    return data


def _section(tree: Mapping[str, Any], key: str, source: str) -> Dict[str, Any]:
    value = tree.get(key)
    if value is None:
        return {}
    if not isinstance(value, dict):
        raise ManifestError(f"{source}: '{key}' must be a mapping")
    return value


def _as_dict(value: Any) -> Dict[str, Any]:
    return value if isinstance(value, dict) else {}


def _as_str(value: Any) -> Optional[str]:
    if isinstance(value, bool):
        return "true" if value else "false"
    if isinstance(value, (str, int, float)):
        return str(value)
    return None


def _as_bool(value: Any) -> bool:
    if isinstance(value, bool):
        return value
    if isinstance(value, str):
        return value.strip().lower() in {"true", "yes", "1"}
    return False


__all__ = [
    "aggregate_permissions",
    "build_action",
    "build_workflow",
    "extract_description",
    "parse_action",
    "parse_workflow",
    "resolve_inherited_secrets",
    "workflow_id",
]
