"""Shared test fixtures for gh-labels tests."""

import sys
from pathlib import Path

import pytest

# Add parent directory to path for imports
sys.path.insert(0, str(Path(__file__).parent.parent))

from gh_labels.client import LabelGateway
from gh_labels.errors import LabelAlreadyExistsError, LabelNotFoundError
from gh_labels.models import Label, RepoId

MOCK_REPO = RepoId(owner="acme", name="widgets")

MUTATING_METHODS = {"create", "update", "delete"}


class FakeGateway(LabelGateway):
    """In-memory gateway that behaves like the GitHub labels API and records every call."""

    def __init__(self, labels=None, failures=None):
        self.labels = {label.name: label for label in (labels or [])}
        self.failures = dict(failures or {})
        self.calls = []
        self.repo = MOCK_REPO

    @property
    def mutations(self):
        return [call for call in self.calls if call[0] in MUTATING_METHODS]

    def _maybe_fail(self, method, name):
        error = self.failures.get((method, name))
        if error is not None:
            raise error

    def list(self):
        self.calls.append(("list",))
        self._maybe_fail("list", None)
        return list(self.labels.values())

    def get(self, name):
        self.calls.append(("get", name))
        self._maybe_fail("get", name)
        if name not in self.labels:
            raise LabelNotFoundError(name)
        return self.labels[name]

    def create(self, name, color, description=None):
        self.calls.append(("create", name, color, description))
        self._maybe_fail("create", name)
        if name in self.labels:
            raise LabelAlreadyExistsError(name)
        label = Label(name=name, color=color, description=description)
        self.labels[name] = label
        return label

    def update(self, name, new_name=None, color=None, description=None):
        self.calls.append(("update", name, new_name, color, description))
        self._maybe_fail("update", name)
        if name not in self.labels:
            raise LabelNotFoundError(name)
        if new_name is not None and new_name != name and new_name in self.labels:
            raise LabelAlreadyExistsError(new_name)
        current = self.labels.pop(name)
        label = Label(
            name=new_name or name,
            color=color if color is not None else current.color,
            description=description if description is not None else current.description,
        )
        self.labels[label.name] = label
        return label

    def delete(self, name):
        self.calls.append(("delete", name))
        self._maybe_fail("delete", name)
        if name not in self.labels:
            raise LabelNotFoundError(name)
        del self.labels[name]


def make_label(name, color="ededed", description=None):
    return Label(name=name, color=color, description=description)


@pytest.fixture
def live_labels():
    """A typical repository: GitHub defaults plus a couple of legacy names."""
    return [
        make_label("bug", "d73a4a", "Something isn't working"),
        make_label("wontfix", "ffffff", "This will not be worked on"),
        make_label("help wanted", "008672"),
        make_label("help-wanted", "008672"),
        make_label("enhancement", "a2eeef", "New feature or request"),
    ]


@pytest.fixture
def gateway(live_labels):
    return FakeGateway(live_labels)


@pytest.fixture
def git_repo(tmp_path):
    """Create a checkout whose origin points at acme/widgets; returns a factory for other URLs."""

    def _make(url="git@github.com:acme/widgets.git", root=None):
        root = root or tmp_path / "checkout"
        git_dir = root / ".git"
        git_dir.mkdir(parents=True)
        (git_dir / "config").write_text(
            "[core]\n"
            "\trepositoryformatversion = 0\n"
            "\tbare = false\n"
            '[remote "origin"]\n'
            f"\turl = {url}\n"
            "\tfetch = +refs/heads/*:refs/remotes/origin/*\n"
            '[branch "main"]\n'
            "\tremote = origin\n"
            "\tmerge = refs/heads/main\n"
        )
        return root

    return _make
