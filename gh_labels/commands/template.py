"""Template commands: list, show and apply named label sets."""

from __future__ import annotations

import argparse
import json
from dataclasses import asdict

from gh_labels.commands.apply import BatchCommand, add_batch_arguments
from gh_labels.commands.base import register_command
from gh_labels.config import parse_config
from gh_labels.templates import TemplateProvider


@register_command("template")
class TemplateCommand(BatchCommand):
    """Manage label templates."""

    @staticmethod
    def add_arguments(parser: argparse.ArgumentParser) -> None:
        sub = parser.add_subparsers(dest="template_command", required=True, help="Template action")
        sub.add_parser("list", help="List available templates")

        show = sub.add_parser("show", help="Show template content")
        show.add_argument("name", help="Template name")

        apply = sub.add_parser("apply", help="Apply a template to the current repository")
        apply.add_argument("name", help="Template name")
        add_batch_arguments(apply)

    def __init__(self, args: argparse.Namespace, provider: TemplateProvider | None = None):
        super().__init__(args)
        self.provider = provider or TemplateProvider.default()

    def run(self) -> int:
        handler = {
            "list": self.list_templates,
            "show": self.show_template,
            "apply": self.apply_template,
        }[self.args.template_command]
        return handler()

    def list_templates(self) -> int:
        templates = self.provider.list()
        if self.json_output:
            print(json.dumps([asdict(t) for t in templates], indent=2))
            return 0

        print("Available Templates:\n")
        if not templates:
            print("No templates found.")
            return 0
        for info in templates:
            source = "(built-in)" if info.source == "built-in" else info.source
            print(f"  {info.name} - {info.description}  [{source}]")
        print("\nUse 'gh-labels template apply <name>' to apply a template")
        return 0

    def show_template(self) -> int:
        content = self.provider.get(self.args.name)
        print(f"Template: {self.args.name}\n")
        print(content)
        return 0

    def apply_template(self) -> int:
        content = self.provider.get(self.args.name)
        self.logger.info(f"Template: {self.args.name}")
        config = parse_config(content, source=f"template '{self.args.name}'")
        return self.apply_batch(config)
