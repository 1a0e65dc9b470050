"""Authentication, delegated to `gh auth`."""

from __future__ import annotations

import argparse

from gh_labels.client import run_gh_auth
from gh_labels.commands.base import Command, register_command

AUTH_SUBCOMMANDS = ("login", "status", "logout")


@register_command("auth")
class AuthCommand(Command):
    """Authenticate with GitHub (wrapper around `gh auth`)."""

    @staticmethod
    def add_arguments(parser: argparse.ArgumentParser) -> None:
        parser.add_argument(
            "auth_command",
            nargs="?",
            default="login",
            choices=AUTH_SUBCOMMANDS,
            help="gh auth subcommand (default: login)",
        )

    def run(self) -> int:
        returncode = run_gh_auth(self.args.auth_command, gh_path=self.gh_path)
        if returncode != 0:
            self.logger.error(f"gh auth {self.args.auth_command} failed (exit code {returncode})")
            return 1
        return 0
