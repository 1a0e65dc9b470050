"""Named label templates, looked up across an ordered list of sources."""

from __future__ import annotations

import logging
import os
import tomllib
from abc import ABC, abstractmethod
from dataclasses import dataclass
from importlib import resources
from pathlib import Path

from gh_labels.errors import TemplateNotFoundError
from gh_labels.models import (
    DEFAULT_SYSTEM_TEMPLATE_DIR,
    ENV_SYSTEM_TEMPLATE_DIR,
    ENV_USER_TEMPLATE_DIR,
    USER_TEMPLATE_SUBDIR,
)

logger = logging.getLogger("gh-labels")

BUILTIN_SOURCE = "built-in"
TEMPLATE_SUFFIX = ".toml"

# name -> description, in display order
BUILTIN_TEMPLATES: dict[str, str] = {
    "standard": "Standard GitHub labels (bug, feature, documentation, etc.)",
    "semantic": "Semantic labels (breaking, feature, bugfix, docs, etc.)",
    "priority": "Priority-based labels (critical, high, medium, low)",
    "priority-prefixed": "Rust-style priority labels (P-critical, P-high, etc.)",
    "type": "Type-based labels (type/bug, type/feature, type/docs, etc.)",
    "area": "Area-based labels (A-api, A-cli, A-docs, etc.)",
    "operational": "Operational labels (O-hiring, O-roadmap, etc.)",
}


@dataclass(frozen=True)
class TemplateInfo:
    name: str
    description: str
    source: str


def is_valid_template_name(name: str) -> bool:
    return bool(name) and name not in (".", "..") and "/" not in name and "\\" not in name


class TemplateSource(ABC):
    """One place templates can come from."""

    @abstractmethod
    def find(self, name: str) -> str | None:
        """Return the template text, or None if this source does not have it."""

    @abstractmethod
    def entries(self) -> list[TemplateInfo]: ...


class BuiltinTemplateSource(TemplateSource):
    """Templates shipped as package data under gh_labels/builtin_templates."""

    def __init__(self, table: dict[str, str] | None = None):
        self.table = BUILTIN_TEMPLATES if table is None else table

    def find(self, name: str) -> str | None:
        if name not in self.table:
            return None
        resource = resources.files("gh_labels").joinpath("builtin_templates", f"{name}{TEMPLATE_SUFFIX}")
        return resource.read_text(encoding="utf-8")

    def entries(self) -> list[TemplateInfo]:
        return [TemplateInfo(name, description, BUILTIN_SOURCE) for name, description in self.table.items()]


class DirectoryTemplateSource(TemplateSource):
    """``<directory>/<name>.toml`` files; a missing directory is simply empty."""

    def __init__(self, directory: Path, fallback_description: str = "User template"):
        self.directory = Path(directory)
        self.fallback_description = fallback_description

    def path_for(self, name: str) -> Path:
        return self.directory / f"{name}{TEMPLATE_SUFFIX}"

    def find(self, name: str) -> str | None:
        path = self.path_for(name)
        if not path.is_file():
            return None
        logger.debug(f"Loading template '{name}' from {path}")
        return path.read_text(encoding="utf-8")

    def entries(self) -> list[TemplateInfo]:
        if not self.directory.is_dir():
            return []
        return [
            TemplateInfo(path.stem, self._description(path), str(path))
            for path in sorted(self.directory.glob(f"*{TEMPLATE_SUFFIX}"))
            if path.is_file()
        ]

    def _description(self, path: Path) -> str:
        try:
            data = tomllib.loads(path.read_text(encoding="utf-8"))
        except (OSError, tomllib.TOMLDecodeError) as e:
            logger.debug(f"Could not read description from {path}: {e}")
            return self.fallback_description
        description = data.get("description")
        return description if isinstance(description, str) and description else self.fallback_description


def user_template_dir() -> Path:
    override = os.environ.get(ENV_USER_TEMPLATE_DIR)
    if override:
        return Path(override).expanduser()
    config_home = os.environ.get("XDG_CONFIG_HOME") or str(Path.home() / ".config")
    return Path(config_home) / USER_TEMPLATE_SUBDIR


def system_template_dir() -> Path:
    return Path(os.environ.get(ENV_SYSTEM_TEMPLATE_DIR) or DEFAULT_SYSTEM_TEMPLATE_DIR)


class TemplateProvider:
    """Look templates up in order; the first source that has a name wins."""

    def __init__(self, sources: list[TemplateSource]):
        self.sources = sources

    @classmethod
    def default(cls) -> TemplateProvider:
        return cls(
            [
                BuiltinTemplateSource(),
                DirectoryTemplateSource(user_template_dir(), "User template"),
                DirectoryTemplateSource(system_template_dir(), "System template"),
            ]
        )

    def list(self) -> list[TemplateInfo]:
        found: dict[str, TemplateInfo] = {}
        for source in self.sources:
            for info in source.entries():
                found.setdefault(info.name, info)
        return sorted(found.values(), key=lambda info: info.name)

    def get(self, name: str) -> str:
        if not is_valid_template_name(name):
            raise TemplateNotFoundError(name)
        for source in self.sources:
            content = source.find(name)
            if content is not None:
                return content
        raise TemplateNotFoundError(name)
