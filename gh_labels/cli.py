"""CLI entry point for gh-labels."""

from __future__ import annotations

import argparse
import sys

# Ensure all commands are registered by importing the commands package
import gh_labels.commands  # noqa: F401
from gh_labels.commands import get_command_registry
from gh_labels.errors import LabelToolError
from gh_labels.logging_utils import setup_logging

# Commands listed in this order in --help; anything registered later goes last
COMMAND_ORDER = ["list", "get", "create", "update", "delete", "apply", "template", "auth"]


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="gh-labels",
        description="Manage GitHub repository labels through the gh CLI.",
        formatter_class=argparse.RawDescriptionHelpFormatter,
        epilog="""
gh-labels: list, create, update and delete labels, or apply a whole label set
from a TOML file or a named template. The repository is taken from the origin
remote of the current git checkout unless --repo is given.

Environment:
    GH_LABELS_GH                   - gh executable (default: gh)
    GH_LABELS_TEMPLATE_DIR         - user template directory
                                     (default: ~/.config/gh-labels/templates)
    GH_LABELS_SYSTEM_TEMPLATE_DIR  - system template directory
                                     (default: /usr/local/share/gh-labels/templates)

Examples:
    # Show all labels of the current repository
    gh-labels list

    # Create a label
    gh-labels create bug d73a49 --description "Something isn't working"

    # Rename a label and change its color
    gh-labels update "help-wanted" --new-name "help wanted" --color 008672

    # Preview a batch from labels.toml, then apply it
    gh-labels apply labels.toml --dry-run
    gh-labels apply labels.toml --skip-existing

    # Apply a built-in template
    gh-labels template apply standard --dry-run
""",
    )
    parser.add_argument(
        "--json", action="store_true", dest="json_output", help="Output results as JSON (data on stdout, logs on stderr)"
    )
    parser.add_argument("--verbose", "-v", action="store_true", help="Enable debug logging")
    parser.add_argument(
        "--repo", "-R", default=None, help="Target repository as OWNER/REPO (default: from the git origin remote)"
    )

    subparsers = parser.add_subparsers(dest="command", required=True, help="Command to run")

    registry = get_command_registry()
    ordered = [name for name in COMMAND_ORDER if name in registry]
    ordered += sorted(name for name in registry if name not in COMMAND_ORDER)
    for name in ordered:
        cmd_cls = registry[name]
        sub = subparsers.add_parser(name, help=cmd_cls.__doc__, description=cmd_cls.__doc__)
        cmd_cls.add_arguments(sub)

    return parser


def main(argv: list[str] | None = None) -> int:
    parser = build_parser()
    args = parser.parse_args(argv)

    # Setup logging
    logger = setup_logging(json_mode=args.json_output, verbose=args.verbose)

    registry = get_command_registry()
    command = registry[args.command](args)

    try:
        return command.run()
    except LabelToolError as e:
        logger.error(str(e))
        return 1
    except KeyboardInterrupt:
        logger.info("Interrupted by user")
        return 130


if __name__ == "__main__":
    sys.exit(main())
