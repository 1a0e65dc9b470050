"""Single-label commands: list, get, create, update, delete."""

from __future__ import annotations

import argparse
import json

from gh_labels.commands.base import Command, register_command
from gh_labels.errors import InvalidInputError
from gh_labels.models import Label


def format_label(label: Label) -> str:
    lines = [
        f"  Name:        {label.name}",
        f"  Color:       \u25a0 #{label.color}",
    ]
    if label.description:
        lines.append(f"  Description: {label.description}")
    if label.url:
        lines.append(f"  URL:         {label.url}")
    return "\n".join(lines) + "\n"


class _LabelCommand(Command):
    """Shared output helpers for commands that show labels on stdout."""

    def show(self, labels: list[Label]) -> None:
        if self.json_output:
            print(json.dumps([label.to_dict() for label in labels], indent=2))
            return
        for label in labels:
            print(format_label(label))


@register_command("list")
class ListCommand(_LabelCommand):
    """List all labels of the repository."""

    @staticmethod
    def add_arguments(parser: argparse.ArgumentParser) -> None:
        pass

    def run(self) -> int:
        repo = self.resolve_repo()
        gateway = self.make_gateway(repo)
        labels = gateway.list()
        self.logger.info(f"Repository: {repo}")

        if not labels and not self.json_output:
            print("No labels found.")
            return 0
        if not self.json_output:
            print(f"{len(labels)} labels found:\n")
        self.show(labels)
        return 0


@register_command("get")
class GetCommand(_LabelCommand):
    """Show a single label."""

    @staticmethod
    def add_arguments(parser: argparse.ArgumentParser) -> None:
        parser.add_argument("name", help="Label name")

    def run(self) -> int:
        repo = self.resolve_repo()
        gateway = self.make_gateway(repo)
        self.logger.info(f"Repository: {repo}")
        label = gateway.get(self.args.name)
        if self.json_output:
            print(json.dumps(label.to_dict(), indent=2))
        else:
            print(format_label(label))
        return 0


@register_command("create")
class CreateCommand(_LabelCommand):
    """Create a new label."""

    @staticmethod
    def add_arguments(parser: argparse.ArgumentParser) -> None:
        parser.add_argument("name", help="Label name")
        parser.add_argument("color", help="Label color (hex, with or without '#', e.g. ff0000)")
        parser.add_argument("--description", "-d", default=None, help="Optional description")

    def run(self) -> int:
        color = self.color_argument(self.args.color)
        repo = self.resolve_repo()
        gateway = self.make_gateway(repo)
        self.logger.info(f"Repository: {repo}")
        label = gateway.create(self.args.name, color, self.args.description)
        self.logger.info(f"\u2713 Label '{label.name}' created")
        self.show([label])
        return 0


@register_command("update")
class UpdateCommand(_LabelCommand):
    """Update (and optionally rename) an existing label."""

    @staticmethod
    def add_arguments(parser: argparse.ArgumentParser) -> None:
        parser.add_argument("name", help="Label name to update")
        parser.add_argument("--new-name", default=None, help="New label name")
        parser.add_argument("--color", default=None, help="New color (hex)")
        parser.add_argument("--description", "-d", default=None, help="New description")

    def run(self) -> int:
        color = self.color_argument(self.args.color, "--color")
        if self.args.new_name is None and color is None and self.args.description is None:
            raise InvalidInputError("Nothing to update: pass --new-name, --color and/or --description")

        repo = self.resolve_repo()
        gateway = self.make_gateway(repo)
        self.logger.info(f"Repository: {repo}")
        label = gateway.update(
            self.args.name,
            new_name=self.args.new_name,
            color=color,
            description=self.args.description,
        )
        self.logger.info(f"\u2713 Label '{self.args.name}' updated")
        self.show([label])
        return 0


@register_command("delete")
class DeleteCommand(Command):
    """Delete a label."""

    @staticmethod
    def add_arguments(parser: argparse.ArgumentParser) -> None:
        parser.add_argument("name", help="Label name to delete")
        parser.add_argument("--force", "-f", action="store_true", help="Skip the confirmation prompt")

    def run(self) -> int:
        repo = self.resolve_repo()
        gateway = self.make_gateway(repo)

        if not self.args.force and not self.confirm(f"Are you sure you want to delete '{self.args.name}' from {repo}?"):
            print("Cancelled.")
            return 0

        gateway.delete(self.args.name)
        self.logger.info(f"\u2713 Label '{self.args.name}' deleted from {repo}")
        return 0

    @staticmethod
    def confirm(question: str) -> bool:
        try:
            answer = input(f"{question} [y/N]: ")
        except EOFError:
            return False
        return answer.strip().lower() == "y"
