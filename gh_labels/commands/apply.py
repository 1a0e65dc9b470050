"""Apply a batch document to the repository."""

from __future__ import annotations

import argparse
from functools import partial

from gh_labels.commands.base import Command, register_command
from gh_labels.config import load_config
from gh_labels.engine import ReconciliationEngine
from gh_labels.logging_utils import log_result, log_summary
from gh_labels.models import DEFAULT_CONFIG_FILE, BatchConfig, RunOptions


def add_batch_arguments(parser: argparse.ArgumentParser) -> None:
    parser.add_argument(
        "--dry-run", "-n", action="store_true", help="Show what would be done without making changes"
    )
    parser.add_argument(
        "--skip-existing",
        "-s",
        action="store_true",
        help="Skip labels that already exist instead of failing (per-label flags take precedence)",
    )


class BatchCommand(Command):
    """Shared driver for commands that run the reconciliation engine."""

    def apply_batch(self, config: BatchConfig) -> int:
        # Config is already parsed and validated here: no remote call has been made yet
        repo = self.resolve_repo()
        if not config.has_actions:
            self.logger.info("No actions to perform. Config is empty.")
            return 0

        gateway = self.make_gateway(repo)
        options = RunOptions(dry_run=self.args.dry_run, skip_existing=self.args.skip_existing)

        self.logger.info(f"Repository: {repo}")
        if options.dry_run:
            self.logger.info("DRY-RUN MODE - no changes will be made")

        engine = ReconciliationEngine(gateway, options, on_result=partial(log_result, dry_run=options.dry_run))
        summary = engine.run(config)
        log_summary(summary)
        return summary.exit_code


@register_command("apply")
class ApplyCommand(BatchCommand):
    """Apply label changes from a TOML config file."""

    @staticmethod
    def add_arguments(parser: argparse.ArgumentParser) -> None:
        parser.add_argument(
            "file",
            nargs="?",
            default=DEFAULT_CONFIG_FILE,
            help=f"Path to TOML config file (default: {DEFAULT_CONFIG_FILE})",
        )
        add_batch_arguments(parser)

    def run(self) -> int:
        self.logger.info(f"Reading config from: {self.args.file}")
        config = load_config(self.args.file)
        return self.apply_batch(config)
