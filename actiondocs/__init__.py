"""Generate Markdown documentation from action and reusable workflow manifests."""

__version__ = "0.1.0"

from .generator import DocGenerator, run_action, run_workflows
from .models import Action, ComponentType, ManifestError, Workflow
from .normalizer import parse_action, parse_workflow

__all__ = [
    "Action",
    "ComponentType",
    "DocGenerator",
    "ManifestError",
    "Workflow",
    "__version__",
    "parse_action",
    "parse_workflow",
    "run_action",
    "run_workflows",
]
