"""Data models and constants for gh-labels."""

from __future__ import annotations

import re
from dataclasses import dataclass, field
from enum import Enum, IntEnum
from typing import Any, ClassVar, Union

# ---------------------------------------------------------------------------
# Constants
# ---------------------------------------------------------------------------

DEFAULT_CONFIG_FILE = "labels.toml"
DEFAULT_GH_EXECUTABLE = "gh"
LABELS_PER_PAGE = 100

# Environment overrides
ENV_GH_EXECUTABLE = "GH_LABELS_GH"
ENV_USER_TEMPLATE_DIR = "GH_LABELS_TEMPLATE_DIR"
ENV_SYSTEM_TEMPLATE_DIR = "GH_LABELS_SYSTEM_TEMPLATE_DIR"

DEFAULT_SYSTEM_TEMPLATE_DIR = "/usr/local/share/gh-labels/templates"
USER_TEMPLATE_SUBDIR = "gh-labels/templates"

_HEX_COLOR = re.compile(r"[0-9a-fA-F]{6}")


def normalize_color(color: str) -> str:
    """Strip a leading '#', require six hex digits and lowercase the result."""
    value = color.strip().removeprefix("#")
    if not _HEX_COLOR.fullmatch(value):
        raise ValueError(f"invalid color {color!r}: must be 6 hex digits (e.g., ff0000)")
    return value.lower()


# ---------------------------------------------------------------------------
# Remote state
# ---------------------------------------------------------------------------


@dataclass(frozen=True)
class RepoId:
    """GitHub repository identifier."""

    owner: str
    name: str

    def __str__(self) -> str:
        return f"{self.owner}/{self.name}"

    @classmethod
    def parse(cls, value: str) -> RepoId:
        owner, sep, name = value.strip().strip("/").partition("/")
        if not sep or not owner or not name or "/" in name:
            raise ValueError(f"expected OWNER/REPO, got {value!r}")
        return cls(owner=owner, name=name)


@dataclass(frozen=True)
class Label:
    """A label as it exists on GitHub."""

    name: str
    color: str
    description: str | None = None
    url: str = ""
    default: bool = False

    @classmethod
    def from_api(cls, data: dict[str, Any]) -> Label:
        return cls(
            name=data["name"],
            color=str(data.get("color", "")).lower(),
            description=data.get("description") or None,
            url=data.get("url", "") or "",
            default=bool(data.get("default", False)),
        )

    def to_dict(self) -> dict:
        d = {"name": self.name, "color": self.color, "description": self.description}
        if self.url:
            d["url"] = self.url
        return d


# ---------------------------------------------------------------------------
# Desired state (batch documents)
# ---------------------------------------------------------------------------


@dataclass(frozen=True)
class NewLabelSpec:
    """A [[new]] entry: create the label, with an explicit policy when it exists."""

    name: str
    color: str
    description: str | None = None
    skip_if_exists: bool = False
    update_if_exists: bool = False


@dataclass(frozen=True)
class UpdateLabelSpec:
    """An [[update]] entry: find ``name`` and change whatever is given."""

    name: str
    new_name: str | None = None
    color: str | None = None
    description: str | None = None

    @property
    def has_changes(self) -> bool:
        return self.new_name is not None or self.color is not None or self.description is not None


@dataclass(frozen=True)
class TemplateLabelSpec:
    """A [[labels]] entry.

    With a color the label is created or updated; without one it is only
    updated. Live labels named in ``update_if_match`` are renamed to ``name``.
    """

    name: str
    color: str | None = None
    description: str | None = None
    update_if_match: tuple[str, ...] = ()
    skip_if_exists: bool = False
    update_if_exists: bool = False


@dataclass(frozen=True)
class BatchConfig:
    """A parsed batch document. Built once per run and never mutated."""

    new: tuple[NewLabelSpec, ...] = ()
    update: tuple[UpdateLabelSpec, ...] = ()
    labels: tuple[TemplateLabelSpec, ...] = ()
    delete: tuple[str, ...] = ()
    description: str | None = None

    @property
    def has_actions(self) -> bool:
        return bool(self.new or self.update or self.labels or self.delete)


@dataclass(frozen=True)
class RunOptions:
    """Per-run settings threaded into planning and execution."""

    dry_run: bool = False
    skip_existing: bool = False


# ---------------------------------------------------------------------------
# Plan
# ---------------------------------------------------------------------------


class OpKind(Enum):
    DELETE = "delete"
    CREATE = "create"
    UPDATE = "update"
    SKIP = "skip"
    FAIL = "fail"


class Phase(IntEnum):
    """Execution order of planned operations."""

    DELETE = 1
    CREATE = 2
    UPDATE = 3


@dataclass(frozen=True)
class PlannedOperation:
    """One item of the execution plan.

    ``name`` is the live label the operation targets (or the label to create).
    ``action`` is the human-readable description shared by the dry-run
    preview and the real result.
    """

    kind: OpKind
    phase: Phase
    name: str
    action: str
    new_name: str | None = None
    color: str | None = None
    description: str | None = None
    reason: str = ""


# ---------------------------------------------------------------------------
# Results
# ---------------------------------------------------------------------------


class ResultStatus(Enum):
    CREATED = "created"
    UPDATED = "updated"
    DELETED = "deleted"
    SKIPPED = "skipped"
    DRY_RUN = "dry_run"
    FAILED = "failed"


@dataclass(frozen=True)
class _Outcome:
    name: str
    action: str

    status: ClassVar[ResultStatus]

    @property
    def detail(self) -> str:
        return ""

    def to_dict(self) -> dict:
        d = {"status": self.status.value, "name": self.name, "action": self.action}
        if self.detail:
            d["detail"] = self.detail
        return d


@dataclass(frozen=True)
class Created(_Outcome):
    label: Label
    status: ClassVar[ResultStatus] = ResultStatus.CREATED


@dataclass(frozen=True)
class Updated(_Outcome):
    label: Label
    status: ClassVar[ResultStatus] = ResultStatus.UPDATED


@dataclass(frozen=True)
class Deleted(_Outcome):
    status: ClassVar[ResultStatus] = ResultStatus.DELETED


@dataclass(frozen=True)
class Skipped(_Outcome):
    reason: str
    status: ClassVar[ResultStatus] = ResultStatus.SKIPPED

    @property
    def detail(self) -> str:
        return self.reason


@dataclass(frozen=True)
class DryRun(_Outcome):
    status: ClassVar[ResultStatus] = ResultStatus.DRY_RUN


@dataclass(frozen=True)
class Failed(_Outcome):
    error: str
    status: ClassVar[ResultStatus] = ResultStatus.FAILED

    @property
    def detail(self) -> str:
        return self.error


OperationResult = Union[Created, Updated, Deleted, Skipped, DryRun, Failed]

_SUCCESS_STATUSES = {ResultStatus.CREATED, ResultStatus.UPDATED, ResultStatus.DELETED, ResultStatus.DRY_RUN}


@dataclass
class Summary:
    """Aggregate outcome of one batch run."""

    results: list[OperationResult] = field(default_factory=list)
    dry_run: bool = False

    @property
    def total(self) -> int:
        return len(self.results)

    @property
    def succeeded(self) -> int:
        return sum(1 for r in self.results if r.status in _SUCCESS_STATUSES)

    @property
    def skipped(self) -> int:
        return sum(1 for r in self.results if r.status is ResultStatus.SKIPPED)

    @property
    def failed(self) -> int:
        return sum(1 for r in self.results if r.status is ResultStatus.FAILED)

    @property
    def exit_code(self) -> int:
        return 1 if self.failed else 0

    def to_dict(self) -> dict:
        return {
            "total": self.total,
            "succeeded": self.succeeded,
            "skipped": self.skipped,
            "failed": self.failed,
            "dry_run": self.dry_run,
        }
