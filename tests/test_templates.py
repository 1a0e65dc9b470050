"""Tests for template lookup and the built-in templates."""

import pytest

from gh_labels.config import parse_config
from gh_labels.errors import TemplateNotFoundError
from gh_labels.templates import (
    BUILTIN_TEMPLATES,
    BuiltinTemplateSource,
    DirectoryTemplateSource,
    TemplateProvider,
    system_template_dir,
    user_template_dir,
)

CUSTOM = 'description = "Team labels"\n\n[[labels]]\nname = "triage"\ncolor = "fbca04"\n'


@pytest.fixture
def user_dir(tmp_path):
    directory = tmp_path / "user"
    directory.mkdir()
    return directory


class TestBuiltinTemplates:
    """Every shipped template is a valid batch document."""

    @pytest.mark.parametrize("name", sorted(BUILTIN_TEMPLATES))
    def test_builtin_parses(self, name):
        config = parse_config(BuiltinTemplateSource().find(name), source=f"template '{name}'")
        assert config.labels
        assert config.description == BUILTIN_TEMPLATES[name]

    def test_standard_has_bug_label(self):
        config = parse_config(BuiltinTemplateSource().find("standard"))
        bug = next(spec for spec in config.labels if spec.name == "bug")
        assert bug.color == "d73a49"
        assert "Bug" in bug.update_if_match

    def test_unknown_builtin(self):
        assert BuiltinTemplateSource().find("nope") is None


class TestTemplateProvider:
    """Lookup order and listing."""

    def test_builtin_wins_over_user_template(self, user_dir):
        (user_dir / "standard.toml").write_text(CUSTOM)
        provider = TemplateProvider([BuiltinTemplateSource(), DirectoryTemplateSource(user_dir)])
        assert "triage" not in provider.get("standard")

    def test_user_template_found(self, user_dir):
        (user_dir / "team.toml").write_text(CUSTOM)
        provider = TemplateProvider([BuiltinTemplateSource(), DirectoryTemplateSource(user_dir)])
        assert provider.get("team") == CUSTOM

    def test_not_found(self, user_dir):
        provider = TemplateProvider([BuiltinTemplateSource(), DirectoryTemplateSource(user_dir)])
        with pytest.raises(TemplateNotFoundError, match="template list"):
            provider.get("nope")

    @pytest.mark.parametrize("name", ["", "..", "../standard", "a\\b"])
    def test_path_like_names_rejected(self, name, user_dir):
        provider = TemplateProvider([DirectoryTemplateSource(user_dir)])
        with pytest.raises(TemplateNotFoundError):
            provider.get(name)

    def test_list_dedups_first_source_wins(self, tmp_path, user_dir):
        system_dir = tmp_path / "system"
        system_dir.mkdir()
        (user_dir / "team.toml").write_text(CUSTOM)
        (system_dir / "team.toml").write_text('description = "Org labels"\n')
        (system_dir / "org.toml").write_text("not = [valid toml")

        provider = TemplateProvider(
            [
                BuiltinTemplateSource(),
                DirectoryTemplateSource(user_dir, "User template"),
                DirectoryTemplateSource(system_dir, "System template"),
            ]
        )
        infos = {info.name: info for info in provider.list()}

        assert set(BUILTIN_TEMPLATES) <= set(infos)
        assert infos["standard"].source == "built-in"
        assert infos["team"].description == "Team labels"
        assert infos["team"].source == str(user_dir / "team.toml")
        assert infos["org"].description == "System template"
        assert [info.name for info in provider.list()] == sorted(infos)

    def test_missing_directory_is_empty(self, tmp_path):
        assert DirectoryTemplateSource(tmp_path / "absent").entries() == []


class TestTemplateDirectories:
    def test_user_dir_override(self, monkeypatch, tmp_path):
        monkeypatch.setenv("GH_LABELS_TEMPLATE_DIR", str(tmp_path))
        assert user_template_dir() == tmp_path

    def test_user_dir_follows_xdg(self, monkeypatch, tmp_path):
        monkeypatch.delenv("GH_LABELS_TEMPLATE_DIR", raising=False)
        monkeypatch.setenv("XDG_CONFIG_HOME", str(tmp_path))
        assert user_template_dir() == tmp_path / "gh-labels" / "templates"

    def test_system_dir_default(self, monkeypatch):
        monkeypatch.delenv("GH_LABELS_SYSTEM_TEMPLATE_DIR", raising=False)
        assert str(system_template_dir()) == "/usr/local/share/gh-labels/templates"

    def test_system_dir_override(self, monkeypatch, tmp_path):
        monkeypatch.setenv("GH_LABELS_SYSTEM_TEMPLATE_DIR", str(tmp_path))
        assert system_template_dir() == tmp_path
