"""Logging utilities for gh-labels."""

from __future__ import annotations

import json
import logging
import sys

from gh_labels.models import OperationResult, ResultStatus, Summary

STATUS_ICONS = {
    ResultStatus.CREATED: "\u2713",
    ResultStatus.UPDATED: "\u2713",
    ResultStatus.DELETED: "\u2713",
    ResultStatus.SKIPPED: "\u2192",
    ResultStatus.FAILED: "\u2717",
    ResultStatus.DRY_RUN: "\u25cb",
}


class StructuredFormatter(logging.Formatter):
    """Formatter that can emit JSON lines when configured."""

    def __init__(self, json_mode: bool = False):
        super().__init__()
        self.json_mode = json_mode

    def format(self, record: logging.LogRecord) -> str:
        if self.json_mode and hasattr(record, "operation_result"):
            return json.dumps(record.operation_result.to_dict())
        if self.json_mode and hasattr(record, "summary"):
            return json.dumps({"summary": record.summary.to_dict()})
        if self.json_mode:
            return json.dumps({"level": record.levelname, "message": record.getMessage()})
        return f"[{record.levelname:<7}] {record.getMessage()}"


def setup_logging(json_mode: bool = False, verbose: bool = False) -> logging.Logger:
    logger = logging.getLogger("gh-labels")
    logger.setLevel(logging.DEBUG if verbose else logging.INFO)
    # main() may run more than once per process (tests); keep a single handler
    for handler in list(logger.handlers):
        logger.removeHandler(handler)
    handler = logging.StreamHandler(sys.stderr)
    handler.setFormatter(StructuredFormatter(json_mode=json_mode))
    logger.addHandler(handler)
    logger.propagate = False
    return logger


def log_result(result: OperationResult, dry_run: bool = False) -> None:
    """Log one batch item: a JSON object in --json mode, an icon line otherwise."""
    logger = logging.getLogger("gh-labels")
    icon = STATUS_ICONS.get(result.status, "?")
    prefix = "[DRY-RUN] " if dry_run else ""
    level = logging.ERROR if result.status is ResultStatus.FAILED else logging.INFO
    logger.log(
        level,
        f"{prefix}{icon} {result.action} \u2192 {result.status.value}"
        f"{' (' + result.detail + ')' if result.detail else ''}",
        extra={"operation_result": result},
    )


def log_summary(summary: Summary) -> None:
    logger = logging.getLogger("gh-labels")
    changed = "would change" if summary.dry_run else "changed"
    logger.info(
        f"Done: {summary.total} items, {summary.succeeded} {changed}, "
        f"{summary.skipped} skipped, {summary.failed} failed",
        extra={"summary": summary},
    )
    if summary.dry_run:
        logger.info("This was a dry run. No actual changes were made.")
