"""Tests for repository discovery from local git metadata."""

import pytest

from gh_labels import git
from gh_labels.errors import NoOriginRemoteError, NotAGitRepositoryError, UnrecognizedRemoteError
from gh_labels.models import RepoId


class TestResolve:
    """Tests for git.resolve()."""

    def test_resolves_from_repository_root(self, git_repo):
        """The origin remote of the checkout is used."""
        root = git_repo()
        assert git.resolve(root) == RepoId("acme", "widgets")

    def test_walks_up_from_subdirectory(self, git_repo):
        """Running from a nested directory still finds the checkout."""
        root = git_repo("https://github.com/acme/gadgets.git")
        nested = root / "src" / "pkg"
        nested.mkdir(parents=True)
        assert git.resolve(nested) == RepoId("acme", "gadgets")

    def test_not_a_repository(self, tmp_path):
        """No .git anywhere upward is a precondition failure."""
        lonely = tmp_path / "not-a-repo"
        lonely.mkdir()
        with pytest.raises(NotAGitRepositoryError):
            git.resolve(lonely)

    def test_no_origin_remote(self, tmp_path):
        """A repository without an origin remote is rejected."""
        git_dir = tmp_path / "repo" / ".git"
        git_dir.mkdir(parents=True)
        (git_dir / "config").write_text('[core]\n\tbare = false\n[remote "upstream"]\n\turl = git@github.com:a/b.git\n')
        with pytest.raises(NoOriginRemoteError):
            git.resolve(tmp_path / "repo")

    def test_missing_config_file(self, tmp_path):
        """A .git directory without a config file has no origin."""
        (tmp_path / "repo" / ".git").mkdir(parents=True)
        with pytest.raises(NoOriginRemoteError):
            git.resolve(tmp_path / "repo")

    def test_unrecognized_origin(self, git_repo):
        """A local-path origin cannot be mapped to owner/repo."""
        root = git_repo("/srv/git/widgets.git")
        with pytest.raises(UnrecognizedRemoteError):
            git.resolve(root)


class TestGitdirFile:
    """Worktrees and submodules use a .git file instead of a directory."""

    def test_worktree_uses_common_config(self, git_repo, tmp_path):
        """A worktree's gitdir points at .git/worktrees/<name>, whose commondir holds the config."""
        main = git_repo("git@github.com:acme/widgets.git")
        worktree_meta = main / ".git" / "worktrees" / "feature"
        worktree_meta.mkdir(parents=True)
        (worktree_meta / "commondir").write_text("../..\n")

        worktree = tmp_path / "feature-checkout"
        worktree.mkdir()
        (worktree / ".git").write_text(f"gitdir: {worktree_meta}\n")

        assert git.resolve(worktree) == RepoId("acme", "widgets")

    def test_relative_gitdir(self, tmp_path):
        """A relative gitdir pointer is resolved against the checkout."""
        real_git = tmp_path / "modules" / "widgets"
        real_git.mkdir(parents=True)
        (real_git / "config").write_text('[remote "origin"]\n\turl = https://github.com/acme/widgets\n')
        checkout = tmp_path / "checkout"
        checkout.mkdir()
        (checkout / ".git").write_text("gitdir: ../modules/widgets\n")

        assert git.resolve(checkout) == RepoId("acme", "widgets")

    def test_malformed_gitdir_file(self, tmp_path):
        (tmp_path / ".git").write_text("garbage\n")
        with pytest.raises(NotAGitRepositoryError):
            git.find_git_dir(tmp_path)


class TestGitConfigParsing:
    """Git config syntax that is not plain INI."""

    def test_valueless_boolean_key(self, tmp_path):
        """A bare key is a boolean true in git config and must not break parsing."""
        git_dir = tmp_path / "repo" / ".git"
        git_dir.mkdir(parents=True)
        (git_dir / "config").write_text(
            '[core]\n\tfilemode\n\tbare = false\n[remote "origin"]\n\turl = git@github.com:acme/widgets.git\n'
        )
        assert git.resolve(tmp_path / "repo") == RepoId("acme", "widgets")
