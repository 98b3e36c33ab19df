"""Command-line entry point for the devcontainer bootstrapper.

Usage::

    scaffolder <project_name> [workdir]
    python -m bootstrapper.create my-project ~/work --superclaude core,ui
"""

from __future__ import annotations

import argparse
import sys
from typing import Any

from bootstrapper.config import BootstrapConfig
from bootstrapper.errors import BootstrapError, UsageError
from bootstrapper.models import SUPERCLAUDE_OPTION, SuperClaudeCategories
from bootstrapper.scaffolder import ProjectGenerator
from bootstrapper.utils import err_console, print_error


PROG = "scaffolder"

USAGE_TEXT = f"""\
Usage: {PROG} <project_name> [workdir]
  project_name: Name of the project to create
  workdir: Optional working directory (absolute or relative path)
           Relative paths resolve against the scaffolder's installation directory
           If not provided, creates in current directory
Examples:
  {PROG} myproject                    # Creates ./myproject
  {PROG} myproject /home/user/work    # Creates /home/user/work/myproject
  {PROG} myproject --superclaude none # No SuperClaude MCP servers"""

SUPERCLAUDE_CATEGORIES = ("core", "ui", "codeOps")


class _ArgumentParser(argparse.ArgumentParser):
    """Argument parser that reports errors as ``UsageError`` (exit code 1)."""

    def error(self, message: str) -> None:  # type: ignore[override]
        raise UsageError(message)


def build_parser() -> argparse.ArgumentParser:
    parser = _ArgumentParser(
        prog=PROG,
        usage="%(prog)s <project_name> [workdir] [options]",
        description="Scaffold a devcontainer workspace with MCP servers for a coding agent",
        formatter_class=argparse.RawDescriptionHelpFormatter,
    )
    parser.add_argument("project_name", help="Name of the project to create")
    parser.add_argument(
        "workdir",
        nargs="?",
        default=None,
        help="Parent directory (default: current directory)",
    )
    parser.add_argument(
        "--task-master",
        action=argparse.BooleanOptionalAction,
        default=None,
        help="Install task-master-ai and add its MCP server",
    )
    parser.add_argument(
        "--superclaude",
        default=None,
        metavar="CATEGORIES",
        help="Comma-separated SuperClaude categories (core,ui,codeOps) or 'none'",
    )
    parser.add_argument(
        "--strict",
        action="store_true",
        help="Reject unknown feature options in devcontainer.json",
    )
    parser.add_argument(
        "--force",
        action="store_true",
        help="Scaffold into an existing, non-empty project directory",
    )
    return parser


def parse_superclaude(value: str) -> SuperClaudeCategories:
    """Parse ``--superclaude`` into categories.

    Raises:
        UsageError: On an unknown category name.
    """
    names = [part.strip() for part in value.split(",") if part.strip()]
    if names == ["none"]:
        names = []
    unknown = [name for name in names if name not in SUPERCLAUDE_CATEGORIES]
    if unknown:
        raise UsageError(
            f"Unknown SuperClaude category: {unknown[0]} "
            f"(expected {', '.join(SUPERCLAUDE_CATEGORIES)} or none)"
        )
    return SuperClaudeCategories.model_validate(
        {category: category in names for category in SUPERCLAUDE_CATEGORIES}
    )


def collect_overrides(args: argparse.Namespace) -> dict[str, Any]:
    """Translate CLI flags into feature option overrides (on-disk form)."""
    overrides: dict[str, Any] = {}
    if args.task_master is not None:
        overrides["installTaskMaster"] = args.task_master
    if args.superclaude is not None:
        overrides[SUPERCLAUDE_OPTION] = parse_superclaude(args.superclaude).encode()
    return overrides


def _print_usage(message: str) -> None:
    err_console.print(USAGE_TEXT, markup=False, highlight=False, soft_wrap=True)
    err_console.print(f"Error: {message}", markup=False, highlight=False, soft_wrap=True)


def main(argv: list[str] | None = None) -> None:
    """CLI entry point for ``scaffolder`` / ``python -m bootstrapper.create``."""
    parser = build_parser()
    try:
        args = parser.parse_args(argv)
        overrides = collect_overrides(args)
        config = BootstrapConfig.from_env(
            strict_toggles=args.strict, allow_existing=args.force
        )
        ProjectGenerator(config, overrides=overrides).generate(args.project_name, args.workdir)
    except UsageError as exc:
        _print_usage(str(exc))
        sys.exit(1)
    except BootstrapError as exc:
        print_error(f"Error: {exc}")
        sys.exit(1)
    except OSError as exc:
        where = f" ({exc.filename})" if exc.filename else ""
        print_error(f"Error: {exc.strerror or exc}{where}")
        sys.exit(1)


if __name__ == "__main__":
    main()
