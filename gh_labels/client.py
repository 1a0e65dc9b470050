"""Label gateway: the capability interface and its gh CLI implementation."""

from __future__ import annotations

import json
import logging
import shutil
import subprocess
import urllib.parse
from abc import ABC, abstractmethod
from collections.abc import Iterator
from typing import Any

from gh_labels.errors import (
    AuthRequiredError,
    GatewayError,
    GatewayUnavailableError,
    GhNotFoundError,
    InvalidColorError,
    LabelAlreadyExistsError,
    LabelNotFoundError,
    UnparseableResponseError,
)
from gh_labels.models import DEFAULT_GH_EXECUTABLE, LABELS_PER_PAGE, Label, RepoId


class LabelGateway(ABC):
    """Remote label operations for a single repository.

    Every call is one independent round trip: no retries, no batching.
    """

    @abstractmethod
    def list(self) -> list[Label]: ...

    @abstractmethod
    def get(self, name: str) -> Label: ...

    @abstractmethod
    def create(self, name: str, color: str, description: str | None = None) -> Label: ...

    @abstractmethod
    def update(
        self,
        name: str,
        new_name: str | None = None,
        color: str | None = None,
        description: str | None = None,
    ) -> Label: ...

    @abstractmethod
    def delete(self, name: str) -> None: ...


class GhClient(LabelGateway):
    """Thin wrapper around `gh api` for the labels endpoints of one repository."""

    def __init__(self, repo: RepoId, gh_path: str = DEFAULT_GH_EXECUTABLE):
        self.repo = repo
        self.gh_path = gh_path
        self.logger = logging.getLogger("gh-labels")

    @property
    def labels_endpoint(self) -> str:
        return f"repos/{self.repo.owner}/{self.repo.name}/labels"

    def label_endpoint(self, name: str) -> str:
        return f"{self.labels_endpoint}/{urllib.parse.quote(name, safe='')}"

    def _run(self, args: list[str], label_name: str | None = None, conflict_name: str | None = None) -> str:
        """Run `gh api <args>` and return stdout, mapping failures to gateway errors."""
        cmd = [self.gh_path, "api", *args]
        self.logger.debug(f"Running: {' '.join(cmd)}")
        try:
            proc = subprocess.run(cmd, capture_output=True, text=True, check=False)
        except FileNotFoundError:
            raise GhNotFoundError(self.gh_path) from None
        except OSError as e:
            raise GatewayUnavailableError(f"Failed to execute gh: {e}") from None

        if proc.returncode != 0:
            stderr = (proc.stderr or "").strip()
            self.logger.debug(f"gh exited with {proc.returncode}: {stderr[:500]}")
            # gh prints the API error body on stdout and a one-line summary on stderr
            raise classify_gh_error(stderr, proc.stdout or "", label_name, conflict_name)
        return proc.stdout

    def _decode(self, output: str, what: str) -> Any:
        try:
            return json.loads(output)
        except json.JSONDecodeError as e:
            raise UnparseableResponseError(f"Failed to parse {what}: {e}") from None

    # -- Label operations --

    def list(self) -> list[Label]:
        output = self._run(["--paginate", f"{self.labels_endpoint}?per_page={LABELS_PER_PAGE}"])
        labels: list[Label] = []
        try:
            for page in iter_json_documents(output):
                labels.extend(Label.from_api(item) for item in page)
        except (json.JSONDecodeError, TypeError, KeyError) as e:
            raise UnparseableResponseError(f"Failed to parse labels: {e}") from None
        return labels

    def get(self, name: str) -> Label:
        data = self._decode(self._run([self.label_endpoint(name)], label_name=name), "label")
        return _label_from(data, "label")

    def create(self, name: str, color: str, description: str | None = None) -> Label:
        args = ["-X", "POST", self.labels_endpoint, "-f", f"name={name}", "-f", f"color={color}"]
        if description is not None:
            args += ["-f", f"description={description}"]
        # A 404 here is the repository, not the label
        data = self._decode(self._run(args, conflict_name=name), "created label")
        return _label_from(data, "created label")

    def update(
        self,
        name: str,
        new_name: str | None = None,
        color: str | None = None,
        description: str | None = None,
    ) -> Label:
        args = ["-X", "PATCH", self.label_endpoint(name)]
        for key, value in (("new_name", new_name), ("color", color), ("description", description)):
            if value is not None:
                args += ["-f", f"{key}={value}"]
        output = self._run(args, label_name=name, conflict_name=new_name)
        data = self._decode(output, "updated label")
        return _label_from(data, "updated label")

    def delete(self, name: str) -> None:
        self._run(["-X", "DELETE", self.label_endpoint(name)], label_name=name)


def _label_from(data: Any, what: str) -> Label:
    try:
        return Label.from_api(data)
    except (TypeError, KeyError, AttributeError) as e:
        raise UnparseableResponseError(f"Failed to parse {what}: {e}") from None


def iter_json_documents(text: str) -> Iterator[Any]:
    """Yield each JSON value in ``text``; `gh api --paginate` prints one array per page."""
    decoder = json.JSONDecoder()
    text = text.strip()
    idx = 0
    while idx < len(text):
        value, idx = decoder.raw_decode(text, idx)
        yield value
        while idx < len(text) and text[idx].isspace():
            idx += 1


def classify_gh_error(
    stderr: str,
    body: str = "",
    label_name: str | None = None,
    conflict_name: str | None = None,
) -> GatewayError:
    """Map a failed gh invocation (stderr summary plus response body) to a typed gateway error."""
    lowered = f"{stderr}\n{body}".lower()
    if "http 404" in lowered or "not found" in lowered:
        if label_name is not None:
            return LabelNotFoundError(label_name, stderr)
        return GatewayUnavailableError(f"gh CLI error: {stderr}", stderr)
    if "already_exists" in lowered:
        return LabelAlreadyExistsError(conflict_name or label_name or "?", stderr)
    if "http 422" in lowered and "color" in lowered:
        return InvalidColorError(f"invalid color: {stderr}", stderr)
    if "http 401" in lowered or "gh auth login" in lowered or "not logged" in lowered:
        return AuthRequiredError(f"GitHub authentication required (run 'gh-labels auth login'): {stderr}", stderr)
    return GatewayUnavailableError(f"gh CLI error: {stderr or 'unknown error'}", stderr)


def ensure_gh(gh_path: str = DEFAULT_GH_EXECUTABLE) -> str:
    """Return the resolved gh executable path or raise GhNotFoundError."""
    resolved = shutil.which(gh_path)
    if resolved is None:
        raise GhNotFoundError(gh_path)
    return resolved


def run_gh_auth(subcommand: str, gh_path: str = DEFAULT_GH_EXECUTABLE) -> int:
    """Delegate to `gh auth <subcommand>` with the terminal attached."""
    try:
        proc = subprocess.run([gh_path, "auth", subcommand], check=False)
    except FileNotFoundError:
        raise GhNotFoundError(gh_path) from None
    return proc.returncode
