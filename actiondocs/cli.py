"""CLI entrypoints for action-docs commands."""

from __future__ import annotations

import argparse
import sys
from pathlib import Path

import yaml

from . import __version__
from .config import ConfigError, load_config
from .generator import run_action, run_workflows
from .logging import configure_logging
from .models import ManifestError


def _add_verbose_option(
    parser: argparse.ArgumentParser, *, suppress_default: bool = False
) -> None:
    kwargs: dict[str, object] = {
        "action": "store_true",
        "help": "Increase log verbosity for troubleshooting.",
    }
    if suppress_default:
        kwargs["default"] = argparse.SUPPRESS
    else:
        kwargs["default"] = False
    parser.add_argument(
        "-v",
        "--verbose",
        **kwargs,
    )


def _add_output_options(parser: argparse.ArgumentParser) -> None:
    parser.add_argument(
        "--templateRoot",
        "--template-root",
        dest="template_root",
        default="",
        help="Directory holding _<partial>.j2 overrides (defaults to the built-in templates).",
    )
    parser.add_argument(
        "--readmeOut",
        "--readme-out",
        dest="readme_out",
        default="",
        help="Directory to write documentation to (defaults to the component root).",
    )


def _build_parser() -> argparse.ArgumentParser:
    cwd = Path.cwd()
    parser = argparse.ArgumentParser(
        prog="action-docs",
        description="Generate documentation for GitHub actions and reusable workflows.",
        epilog="examples:\n"
        "  action-docs generate action    Generate action documentation\n"
        "  action-docs generate workflow  Generate workflow documentation",
        formatter_class=argparse.RawDescriptionHelpFormatter,
    )
    _add_verbose_option(parser)
    parser.add_argument(
        "--config",
        default=None,
        help="Path to .action-docs.yml or the directory holding it (defaults to current directory).",
    )
    parser.add_argument("--version", action="version", version=f"%(prog)s {__version__}")
    subparsers = parser.add_subparsers(dest="command", required=True)

    generate_parser = subparsers.add_parser(
        "generate",
        help="Generate documentation for actions or workflows.",
    )
    _add_verbose_option(generate_parser, suppress_default=True)
    targets = generate_parser.add_subparsers(dest="type", required=True)

    action_parser = targets.add_parser("action", help="Generate action documentation.")
    _add_verbose_option(action_parser, suppress_default=True)
    action_parser.add_argument(
        "--actionRoot",
        "--action-root",
        dest="action_root",
        default=str(cwd),
        help="Action directory path (defaults to current directory).",
    )
    _add_output_options(action_parser)

    workflow_parser = targets.add_parser("workflow", help="Generate workflow documentation.")
    _add_verbose_option(workflow_parser, suppress_default=True)
    workflow_parser.add_argument(
        "--workflowRoot",
        "--workflow-root",
        dest="workflow_root",
        default=str(cwd / ".github" / "workflows"),
        help="Workflows directory path (defaults to .github/workflows).",
    )
    workflow_parser.add_argument(
        "--prefix",
        default=None,
        help="Only document workflow files starting with this prefix (defaults to 'reusable-').",
    )
    _add_output_options(workflow_parser)

    return parser


def main(argv: list[str] | None = None) -> None:
    """CLI entrypoint for action-docs commands."""
    parser = _build_parser()
    args = parser.parse_args(argv)

    configure_logging(verbose=bool(args.verbose))

    try:
        config = load_config(Path(args.config) if args.config else Path.cwd())
    except ConfigError as exc:
        parser.exit(1, f"{exc}\n")

    template_root = args.template_root or _config_path(config.template_root)
    readme_out = args.readme_out or _config_path(config.readme_out)

    if args.type == "action":
        try:
            readme_path = run_action(args.action_root, template_root, readme_out, config=config)
        except (yaml.YAMLError, ManifestError) as exc:
            parser.exit(1, f"action-docs generate action failed: {exc}\n")
        if readme_path is not None:
            print(f"README created at {_relativize(readme_path)}")
    elif args.type == "workflow":
        prefix = args.prefix if args.prefix is not None else config.workflow_prefix
        try:
            written = run_workflows(
                args.workflow_root,
                template_root,
                readme_out,
                prefix=prefix,
                config=config,
            )
        except (yaml.YAMLError, ManifestError) as exc:
            parser.exit(1, f"action-docs generate workflow failed: {exc}\n")
        for readme_path in written:
            print(f"README created at {_relativize(readme_path)}")
    else:  # pragma: no cover - argparse enforces choices
        parser.exit(1, "Unknown command\n")


def _config_path(value: Path | None) -> str:
    return str(value) if value is not None else ""


def _relativize(path: Path) -> str:
    try:
        return str(path.relative_to(Path.cwd()))
    except ValueError:
        return str(path)


if __name__ == "__main__":
    main(sys.argv[1:])
