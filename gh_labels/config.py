"""Parse TOML batch documents (user files and templates) into a BatchConfig."""

from __future__ import annotations

import logging
import tomllib
from pathlib import Path
from typing import Any

from gh_labels.errors import ConfigError
from gh_labels.models import BatchConfig, NewLabelSpec, TemplateLabelSpec, UpdateLabelSpec, normalize_color

logger = logging.getLogger("gh-labels")

TOP_LEVEL_KEYS = {"new", "update", "labels", "delete", "description"}
NEW_KEYS = {"name", "color", "description", "skip_if_exists", "update_if_exists"}
UPDATE_KEYS = {"name", "new_name", "color", "description"}
TEMPLATE_KEYS = {"name", "color", "description", "update_if_match", "skip_if_exists", "update_if_exists"}


def load_config(path: str | Path) -> BatchConfig:
    """Read and parse a batch document from disk."""
    path = Path(path)
    try:
        text = path.read_text(encoding="utf-8")
    except OSError as e:
        raise ConfigError(f"Failed to read config file {path}: {e}") from None
    return parse_config(text, source=str(path))


def parse_config(text: str, source: str = "<config>") -> BatchConfig:
    """Parse TOML text into a validated BatchConfig."""
    try:
        data = tomllib.loads(text)
    except tomllib.TOMLDecodeError as e:
        raise ConfigError(f"{source}: failed to parse TOML config: {e}") from None
    return _ConfigParser(source).parse(data)


class _ConfigParser:
    def __init__(self, source: str):
        self.source = source

    def error(self, where: str, message: str) -> ConfigError:
        return ConfigError(f"{self.source}: {where}: {message}")

    def parse(self, data: dict[str, Any]) -> BatchConfig:
        self._warn_unknown(data, TOP_LEVEL_KEYS, "top level")

        description = data.get("description")
        if description is not None and not isinstance(description, str):
            raise self.error("description", "must be a string")

        return BatchConfig(
            new=tuple(self._new_spec(entry, f"new[{i}]") for i, entry in enumerate(self._tables(data, "new"))),
            update=tuple(
                self._update_spec(entry, f"update[{i}]") for i, entry in enumerate(self._tables(data, "update"))
            ),
            labels=tuple(
                self._template_spec(entry, f"labels[{i}]") for i, entry in enumerate(self._tables(data, "labels"))
            ),
            delete=self._string_list(data.get("delete", []), "delete"),
            description=description,
        )

    # -- Entry parsers --

    def _new_spec(self, entry: dict[str, Any], where: str) -> NewLabelSpec:
        self._warn_unknown(entry, NEW_KEYS, where)
        name = self._name(entry, where)
        if entry.get("color") is None:
            raise self.error(where, f"label '{name}' is missing required field 'color' (required for [[new]])")
        skip, update = self._conflict_flags(entry, where, name)
        return NewLabelSpec(
            name=name,
            color=self._color(entry, where),
            description=self._optional_str(entry, "description", where),
            skip_if_exists=skip,
            update_if_exists=update,
        )

    def _update_spec(self, entry: dict[str, Any], where: str) -> UpdateLabelSpec:
        self._warn_unknown(entry, UPDATE_KEYS, where)
        spec = UpdateLabelSpec(
            name=self._name(entry, where),
            new_name=self._optional_str(entry, "new_name", where, allow_empty=False),
            color=self._color(entry, where),
            description=self._optional_str(entry, "description", where),
        )
        if not spec.has_changes:
            raise self.error(where, f"update of '{spec.name}' sets none of new_name, color or description")
        return spec

    def _template_spec(self, entry: dict[str, Any], where: str) -> TemplateLabelSpec:
        self._warn_unknown(entry, TEMPLATE_KEYS, where)
        name = self._name(entry, where)
        skip, update = self._conflict_flags(entry, where, name)
        matches = self._string_list(entry.get("update_if_match", []), f"{where}.update_if_match")
        spec = TemplateLabelSpec(
            name=name,
            color=self._color(entry, where),
            description=self._optional_str(entry, "description", where),
            update_if_match=matches,
            skip_if_exists=skip,
            update_if_exists=update,
        )
        if spec.color is None and spec.description is None and not any(m != name for m in matches):
            raise self.error(where, f"label '{name}' has no color, description or update_if_match: nothing to do")
        return spec

    # -- Field helpers --

    def _tables(self, data: dict[str, Any], key: str) -> list[dict[str, Any]]:
        value = data.get(key, [])
        if not isinstance(value, list) or not all(isinstance(item, dict) for item in value):
            raise self.error(key, f"expected an array of tables ([[{key}]])")
        return value

    def _name(self, entry: dict[str, Any], where: str) -> str:
        name = entry.get("name")
        if name is None:
            raise self.error(where, "missing required field 'name'")
        if not isinstance(name, str) or not name.strip():
            raise self.error(where, "'name' must be a non-empty string")
        return name

    def _optional_str(self, entry: dict[str, Any], key: str, where: str, allow_empty: bool = True) -> str | None:
        value = entry.get(key)
        if value is None:
            return None
        if not isinstance(value, str):
            raise self.error(where, f"'{key}' must be a string")
        if not allow_empty and not value.strip():
            raise self.error(where, f"'{key}' must not be empty")
        return value

    def _color(self, entry: dict[str, Any], where: str) -> str | None:
        value = self._optional_str(entry, "color", where)
        if value is None:
            return None
        try:
            return normalize_color(value)
        except ValueError as e:
            raise self.error(where, str(e)) from None

    def _bool(self, entry: dict[str, Any], key: str, where: str) -> bool:
        value = entry.get(key, False)
        if not isinstance(value, bool):
            raise self.error(where, f"'{key}' must be true or false")
        return value

    def _conflict_flags(self, entry: dict[str, Any], where: str, name: str) -> tuple[bool, bool]:
        skip = self._bool(entry, "skip_if_exists", where)
        update = self._bool(entry, "update_if_exists", where)
        if skip and update:
            raise self.error(where, f"label '{name}' sets both skip_if_exists and update_if_exists; choose one")
        return skip, update

    def _string_list(self, value: Any, where: str) -> tuple[str, ...]:
        if not isinstance(value, list) or not all(isinstance(item, str) and item for item in value):
            raise self.error(where, "expected a list of non-empty strings")
        # Order-preserving de-duplication
        return tuple(dict.fromkeys(value))

    def _warn_unknown(self, entry: dict[str, Any], known: set[str], where: str) -> None:
        for key in sorted(set(entry) - known):
            logger.warning(f"{self.source}: {where}: ignoring unknown key '{key}'")
