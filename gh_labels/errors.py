"""Exception hierarchy for gh-labels.

Precondition and config errors are fatal for the whole invocation and are
raised before any mutating call. Gateway errors are scoped to the label that
triggered them: the apply engine records them per item and carries on.
"""

from __future__ import annotations


class LabelToolError(Exception):
    """Base class for every error gh-labels reports to the user."""


# ---------------------------------------------------------------------------
# Precondition errors
# ---------------------------------------------------------------------------


class PreconditionError(LabelToolError):
    """The environment is not usable: no repository, no remote, no gh."""


class NotAGitRepositoryError(PreconditionError):
    def __init__(self, start: str):
        super().__init__(f"Not a git repository (searched upward from {start}). Run this command inside a repository.")


class NoOriginRemoteError(PreconditionError):
    def __init__(self, detail: str = ""):
        message = "Could not find remote.origin.url. Make sure the repository has an origin remote pointing to GitHub."
        if detail:
            message = f"{message} ({detail})"
        super().__init__(message)


class UnrecognizedRemoteError(PreconditionError):
    def __init__(self, url: str):
        self.url = url
        super().__init__(f"Unsupported remote URL: {url!r}. Only HTTPS and SSH remotes of the form owner/repo are supported.")


class GhNotFoundError(PreconditionError):
    def __init__(self, gh_path: str):
        super().__init__(
            f"gh CLI not found ({gh_path!r} is not on PATH). Please install GitHub CLI: https://cli.github.com/"
        )


class InvalidInputError(LabelToolError):
    """A command-line argument failed validation."""


# ---------------------------------------------------------------------------
# Config / template errors
# ---------------------------------------------------------------------------


class ConfigError(LabelToolError):
    """The batch document could not be read or failed validation."""


class TemplateNotFoundError(LabelToolError):
    def __init__(self, name: str):
        self.name = name
        super().__init__(f"Template '{name}' not found. Use 'gh-labels template list' to see available templates.")


# ---------------------------------------------------------------------------
# Gateway errors
# ---------------------------------------------------------------------------


class GatewayError(LabelToolError):
    """A single gh invocation failed."""

    def __init__(self, message: str, stderr: str = ""):
        super().__init__(message)
        self.stderr = stderr


class LabelNotFoundError(GatewayError):
    def __init__(self, name: str, stderr: str = ""):
        self.name = name
        super().__init__(f"label '{name}' not found", stderr)


class LabelAlreadyExistsError(GatewayError):
    def __init__(self, name: str, stderr: str = ""):
        self.name = name
        super().__init__(f"label '{name}' already exists", stderr)


class InvalidColorError(GatewayError):
    pass


class AuthRequiredError(GatewayError):
    pass


class GatewayUnavailableError(GatewayError):
    pass


class UnparseableResponseError(GatewayError):
    pass
