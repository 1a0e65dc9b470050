"""Resolve the GitHub owner/repo of the current working copy."""

from __future__ import annotations

import configparser
import logging
import re
import urllib.parse
from pathlib import Path

from gh_labels.errors import NoOriginRemoteError, NotAGitRepositoryError, UnrecognizedRemoteError
from gh_labels.models import RepoId

logger = logging.getLogger("gh-labels")

_SCP_LIKE = re.compile(r"^(?:[\w.+-]+@)?(?P<host>[\w.-]+):(?P<path>[^/].*)$")
_URL_SCHEMES = {"http", "https", "ssh", "git", "git+ssh", "ssh+git"}


def find_git_dir(start: Path) -> Path:
    """Walk upward from ``start`` and return the git directory that holds ``config``."""
    start = start.resolve()
    for directory in (start, *start.parents):
        candidate = directory / ".git"
        if candidate.is_dir():
            return candidate
        if candidate.is_file():
            return _follow_gitdir_file(candidate)
    raise NotAGitRepositoryError(str(start))


def _follow_gitdir_file(dotgit: Path) -> Path:
    # Worktrees and submodules: ".git" is a file containing "gitdir: <path>"
    content = dotgit.read_text(encoding="utf-8").strip()
    if not content.startswith("gitdir:"):
        raise NotAGitRepositoryError(str(dotgit.parent))
    git_dir = Path(content.removeprefix("gitdir:").strip())
    if not git_dir.is_absolute():
        git_dir = (dotgit.parent / git_dir).resolve()

    commondir = git_dir / "commondir"
    if commondir.is_file():
        shared = Path(commondir.read_text(encoding="utf-8").strip())
        git_dir = shared if shared.is_absolute() else (git_dir / shared).resolve()
    return git_dir


def read_origin_url(git_dir: Path) -> str:
    config_path = git_dir / "config"
    parser = configparser.ConfigParser(strict=False, interpolation=None, delimiters=("=",), allow_no_value=True)
    try:
        parser.read_string(config_path.read_text(encoding="utf-8"), source=str(config_path))
    except FileNotFoundError:
        raise NoOriginRemoteError(f"{config_path} does not exist") from None
    except (OSError, configparser.Error) as e:
        raise NoOriginRemoteError(f"could not read {config_path}: {e}") from None

    section = 'remote "origin"'
    if not parser.has_option(section, "url"):
        raise NoOriginRemoteError()
    url = parser.get(section, "url").strip()
    if not url:
        raise NoOriginRemoteError("origin url is empty")
    return url


def parse_remote_url(url: str) -> RepoId:
    """
    Extract owner and repo from a git remote URL.

    Supports:
        https://github.com/owner/repo(.git)
        ssh://git@github.com(:22)/owner/repo(.git)
        git@github.com:owner/repo(.git)
    """
    url = url.strip()
    parsed = urllib.parse.urlparse(url)
    if parsed.scheme in _URL_SCHEMES and parsed.netloc:
        path = parsed.path
    else:
        match = _SCP_LIKE.match(url)
        if not match or "://" in url:
            raise UnrecognizedRemoteError(url)
        path = match.group("path")

    path = path.strip("/").removesuffix(".git").strip("/")
    parts = [p for p in path.split("/") if p]
    if len(parts) < 2:
        raise UnrecognizedRemoteError(url)
    return RepoId(owner=parts[0], name=parts[1])


def resolve(start: Path | None = None) -> RepoId:
    """Find the enclosing repository and return its origin as a RepoId."""
    git_dir = find_git_dir(start or Path.cwd())
    logger.debug(f"Found git directory: {git_dir}")
    url = read_origin_url(git_dir)
    repo = parse_remote_url(url)
    logger.debug(f"Origin {url} -> {repo}")
    return repo
