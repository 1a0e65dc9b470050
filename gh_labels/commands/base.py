"""Base class and registry for commands."""

from __future__ import annotations

import argparse
import logging
import os
from abc import ABC, abstractmethod
from pathlib import Path

from gh_labels import git
from gh_labels.client import GhClient, LabelGateway, ensure_gh
from gh_labels.errors import InvalidInputError
from gh_labels.models import DEFAULT_GH_EXECUTABLE, ENV_GH_EXECUTABLE, RepoId, normalize_color

# ---------------------------------------------------------------------------
# Command Registry
# ---------------------------------------------------------------------------

_command_registry: dict[str, type[Command]] = {}


def register_command(name: str):
    """Decorator to register a command class under a CLI subcommand name."""

    def decorator(cls):
        _command_registry[name] = cls
        cls.command_name = name
        return cls

    return decorator


def get_command_registry() -> dict[str, type[Command]]:
    """Get the command registry."""
    return _command_registry


# ---------------------------------------------------------------------------
# Command Base Class
# ---------------------------------------------------------------------------


class Command(ABC):
    """Base class for all commands."""

    command_name: str = ""

    def __init__(self, args: argparse.Namespace):
        self.args = args
        self.logger = logging.getLogger("gh-labels")

    @staticmethod
    @abstractmethod
    def add_arguments(parser: argparse.ArgumentParser) -> None:
        """Add command-specific CLI arguments."""
        ...

    @abstractmethod
    def run(self) -> int:
        """Execute the command and return the process exit code."""
        ...

    @property
    def json_output(self) -> bool:
        return bool(getattr(self.args, "json_output", False))

    @property
    def gh_path(self) -> str:
        return os.environ.get(ENV_GH_EXECUTABLE) or DEFAULT_GH_EXECUTABLE

    def resolve_repo(self) -> RepoId:
        """Use --repo when given, otherwise the origin remote of the enclosing repository."""
        explicit = getattr(self.args, "repo", None)
        if explicit:
            try:
                return RepoId.parse(explicit)
            except ValueError as e:
                raise InvalidInputError(f"--repo: {e}") from None
        return git.resolve(Path.cwd())

    def make_gateway(self, repo: RepoId) -> LabelGateway:
        """Check gh is installed before any remote call."""
        gh_path = ensure_gh(self.gh_path)
        self.logger.debug(f"Using {gh_path} for {repo}")
        return GhClient(repo, gh_path=gh_path)

    @staticmethod
    def color_argument(value: str | None, flag: str = "color") -> str | None:
        if value is None:
            return None
        try:
            return normalize_color(value)
        except ValueError as e:
            raise InvalidInputError(f"{flag}: {e}") from None
