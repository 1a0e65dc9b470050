"""Batch apply: reconcile a BatchConfig against the live labels of a repository.

A run moves through four states:

    LOADED      fetch the live label set once (a failure aborts the run)
    PLANNING    turn every config entry into planned operations
    EXECUTING   run the plan in phase order: deletes, creates, updates
    SUMMARIZED  hand the per-item results back to the caller

The live snapshot is never re-fetched during a run. Planning advances it by
the deletes of the same batch, so a deleted name can be created again;
renames are not reflected in later decisions. A delete that fails at run
time leaves its name taken, and a create of that name then fails on the
remote. Changes made out-of-band while the batch runs can leave the
snapshot stale. Each remote call commits on its own; a failed item is
recorded and the batch continues, with no rollback of items that already
succeeded.
"""

from __future__ import annotations

import logging
from collections.abc import Callable, Iterable
from enum import Enum

from gh_labels.client import LabelGateway
from gh_labels.errors import GatewayError
from gh_labels.models import (
    BatchConfig,
    Created,
    Deleted,
    DryRun,
    Failed,
    Label,
    NewLabelSpec,
    OperationResult,
    OpKind,
    Phase,
    PlannedOperation,
    RunOptions,
    Skipped,
    Summary,
    TemplateLabelSpec,
    Updated,
    UpdateLabelSpec,
)

logger = logging.getLogger("gh-labels")

ALREADY_EXISTS = "already exists"


class EngineState(Enum):
    IDLE = "idle"
    LOADED = "loaded"
    PLANNING = "planning"
    EXECUTING = "executing"
    SUMMARIZED = "summarized"


class Conflict(Enum):
    """What to do with a create whose name already exists."""

    SKIP = "skip"
    UPDATE = "update"
    FAIL = "fail"
    AMBIGUOUS = "ambiguous"


# (skip_if_exists, update_if_exists, global --skip-existing) -> decision.
# Per-item flags always win over the global flag.
NEW_LABEL_CONFLICT_POLICY: dict[tuple[bool, bool, bool], Conflict] = {
    (True, False, False): Conflict.SKIP,
    (True, False, True): Conflict.SKIP,
    (False, True, False): Conflict.UPDATE,
    (False, True, True): Conflict.UPDATE,
    (False, False, True): Conflict.SKIP,
    (False, False, False): Conflict.FAIL,
    (True, True, False): Conflict.AMBIGUOUS,
    (True, True, True): Conflict.AMBIGUOUS,
}

# Template entries are create-or-update: with no flags an existing label is updated.
TEMPLATE_LABEL_CONFLICT_POLICY: dict[tuple[bool, bool, bool], Conflict] = {
    **NEW_LABEL_CONFLICT_POLICY,
    (False, False, False): Conflict.UPDATE,
}


# ---------------------------------------------------------------------------
# Action descriptions
# ---------------------------------------------------------------------------


def _changes(color: str | None, description: str | None) -> str:
    parts = []
    if color is not None:
        parts.append(f"color #{color}")
    if description is not None:
        parts.append(f'description "{description}"')
    return ", ".join(parts)


def describe_delete(name: str) -> str:
    return f"delete '{name}'"


def describe_create(name: str, color: str, description: str | None) -> str:
    return f"create '{name}' ({_changes(color, description)})"


def describe_update(name: str, new_name: str | None, color: str | None, description: str | None) -> str:
    text = f"update '{name}'"
    if new_name is not None and new_name != name:
        text += f" -> '{new_name}'"
    changes = _changes(color, description)
    if changes:
        text += f" ({changes})"
    return text


# ---------------------------------------------------------------------------
# Planning
# ---------------------------------------------------------------------------


def _delete(name: str) -> PlannedOperation:
    return PlannedOperation(kind=OpKind.DELETE, phase=Phase.DELETE, name=name, action=describe_delete(name))


def _create(name: str, color: str, description: str | None) -> PlannedOperation:
    return PlannedOperation(
        kind=OpKind.CREATE,
        phase=Phase.CREATE,
        name=name,
        action=describe_create(name, color, description),
        color=color,
        description=description,
    )


def _update(name: str, new_name: str | None, color: str | None, description: str | None) -> PlannedOperation:
    return PlannedOperation(
        kind=OpKind.UPDATE,
        phase=Phase.UPDATE,
        name=name,
        action=describe_update(name, new_name, color, description),
        new_name=new_name,
        color=color,
        description=description,
    )


def _skip(op: PlannedOperation, reason: str) -> PlannedOperation:
    return PlannedOperation(kind=OpKind.SKIP, phase=op.phase, name=op.name, action=op.action, reason=reason)


def _fail(op: PlannedOperation, reason: str) -> PlannedOperation:
    return PlannedOperation(kind=OpKind.FAIL, phase=op.phase, name=op.name, action=op.action, reason=reason)


def _resolve_conflict(
    op: PlannedOperation,
    policy: dict[tuple[bool, bool, bool], Conflict],
    spec: NewLabelSpec | TemplateLabelSpec,
    options: RunOptions,
) -> PlannedOperation:
    """Apply the conflict policy to a create whose name is already live."""
    decision = policy[(spec.skip_if_exists, spec.update_if_exists, options.skip_existing)]
    if decision is Conflict.SKIP:
        return _skip(op, ALREADY_EXISTS)
    if decision is Conflict.UPDATE:
        return _update(spec.name, None, spec.color, spec.description)
    if decision is Conflict.AMBIGUOUS:
        return _fail(op, f"label '{spec.name}' sets both skip_if_exists and update_if_exists")
    return _fail(
        op,
        f"label '{spec.name}' already exists "
        "(set skip_if_exists or update_if_exists, or pass --skip-existing)",
    )


def _plan_new(spec: NewLabelSpec, live: dict[str, Label], options: RunOptions) -> PlannedOperation:
    create = _create(spec.name, spec.color, spec.description)
    if spec.name not in live:
        if spec.skip_if_exists and spec.update_if_exists:
            return _fail(create, f"label '{spec.name}' sets both skip_if_exists and update_if_exists")
        return create
    return _resolve_conflict(create, NEW_LABEL_CONFLICT_POLICY, spec, options)


def _plan_update(spec: UpdateLabelSpec, live: dict[str, Label]) -> PlannedOperation:
    update = _update(spec.name, spec.new_name, spec.color, spec.description)
    if not spec.has_changes:
        return _fail(update, f"update of '{spec.name}' changes nothing")
    if spec.name not in live:
        return _fail(update, f"label '{spec.name}' not found")
    return update


def _plan_template(spec: TemplateLabelSpec, live: dict[str, Label], options: RunOptions) -> list[PlannedOperation]:
    legacy = [m for m in spec.update_if_match if m != spec.name and m in live]
    ops: list[PlannedOperation] = []

    if spec.name in live:
        if spec.color is not None:
            create = _create(spec.name, spec.color, spec.description)
            ops.append(_resolve_conflict(create, TEMPLATE_LABEL_CONFLICT_POLICY, spec, options))
        elif spec.description is not None:
            ops.append(_update(spec.name, None, None, spec.description))
    elif not legacy:
        if spec.color is not None:
            create = _create(spec.name, spec.color, spec.description)
            if spec.skip_if_exists and spec.update_if_exists:
                create = _fail(create, f"label '{spec.name}' sets both skip_if_exists and update_if_exists")
            ops.append(create)
        else:
            ops.append(_fail(_update(spec.name, None, None, spec.description), f"label '{spec.name}' not found"))

    # Consolidation: each live legacy name is renamed independently
    for old_name in legacy:
        ops.append(_update(old_name, spec.name, spec.color, spec.description))

    if not ops:
        ops.append(_skip(_update(spec.name, None, None, None), "nothing to change"))
    return ops


def plan_batch(config: BatchConfig, live_labels: Iterable[Label], options: RunOptions) -> list[PlannedOperation]:
    """Compute the ordered plan for ``config`` against a live snapshot.

    Pure function: no remote calls. The result is sorted by phase (delete,
    create, update); within a phase items keep document order, with [[new]]
    before [[labels]] for creates and [[update]] before [[labels]] for updates.
    """
    live = {label.name: label for label in live_labels}
    plan: list[PlannedOperation] = []

    for name in config.delete:
        op = _delete(name)
        plan.append(op if name in live else _fail(op, f"label '{name}' not found"))

    # Deletes run first, so later entries see the snapshot without the deleted names
    live = {name: label for name, label in live.items() if name not in config.delete}

    for spec in config.new:
        plan.append(_plan_new(spec, live, options))

    for spec in config.update:
        plan.append(_plan_update(spec, live))

    for spec in config.labels:
        plan.extend(_plan_template(spec, live, options))

    # sorted() is stable, so document order survives within each phase
    return sorted(plan, key=lambda op: op.phase)


# ---------------------------------------------------------------------------
# Engine
# ---------------------------------------------------------------------------


class ReconciliationEngine:
    """Load, plan, execute and summarize one batch against a gateway."""

    def __init__(
        self,
        gateway: LabelGateway,
        options: RunOptions | None = None,
        on_result: Callable[[OperationResult], None] | None = None,
    ):
        self.gateway = gateway
        self.options = options or RunOptions()
        self.on_result = on_result
        self.state = EngineState.IDLE
        self.live: list[Label] = []
        self.plan: list[PlannedOperation] = []

    def run(self, config: BatchConfig) -> Summary:
        self.load()
        self.build_plan(config)
        results = self.execute()
        return self.summarize(results)

    def load(self) -> list[Label]:
        # Any GatewayError here propagates: no execution without a baseline
        self.live = self.gateway.list()
        self.state = EngineState.LOADED
        logger.debug(f"Loaded {len(self.live)} live labels")
        return self.live

    def build_plan(self, config: BatchConfig) -> list[PlannedOperation]:
        self.state = EngineState.PLANNING
        self.plan = plan_batch(config, self.live, self.options)
        logger.debug(f"Planned {len(self.plan)} operations")
        return self.plan

    def execute(self) -> list[OperationResult]:
        self.state = EngineState.EXECUTING
        results: list[OperationResult] = []
        for op in self.plan:
            result = self._execute_one(op)
            results.append(result)
            if self.on_result is not None:
                self.on_result(result)
        return results

    def summarize(self, results: list[OperationResult]) -> Summary:
        self.state = EngineState.SUMMARIZED
        return Summary(results=results, dry_run=self.options.dry_run)

    def _execute_one(self, op: PlannedOperation) -> OperationResult:
        if op.kind is OpKind.FAIL:
            return Failed(name=op.name, action=op.action, error=op.reason)
        if op.kind is OpKind.SKIP:
            return Skipped(name=op.name, action=op.action, reason=op.reason)
        if self.options.dry_run:
            return DryRun(name=op.name, action=op.action)

        try:
            if op.kind is OpKind.DELETE:
                self.gateway.delete(op.name)
                return Deleted(name=op.name, action=op.action)
            if op.kind is OpKind.CREATE:
                label = self.gateway.create(op.name, op.color, op.description)
                return Created(name=op.name, action=op.action, label=label)
            label = self.gateway.update(op.name, new_name=op.new_name, color=op.color, description=op.description)
            return Updated(name=op.name, action=op.action, label=label)
        except GatewayError as e:
            logger.debug(f"{op.action} failed: {e}")
            return Failed(name=op.name, action=op.action, error=str(e))
