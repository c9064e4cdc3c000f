"""Exception hierarchy for release-frag.

All errors raised by release-frag derive from ReleaseFragError so the
CLI can catch them in one place and turn them into a diagnostic and a
non-zero exit code.
"""

from __future__ import annotations


class ReleaseFragError(Exception):
    """Base class for all release-frag errors."""


# Configuration


class ConfigError(ReleaseFragError):
    """Invalid or unreadable configuration."""


class ConfigNotFoundError(ConfigError):
    """No pyproject.toml could be located."""


class ConfigValidationError(ConfigError):
    """Configuration failed validation."""


# Project files


class ProjectError(ReleaseFragError):
    """A project file could not be read or updated."""


class VersionNotFoundError(ProjectError):
    """The manifest carries no version declaration."""


# User input


class InputError(ReleaseFragError):
    """Invalid user-supplied value."""


class VersionParseError(InputError):
    """A string is not a MAJOR.MINOR.PATCH version."""


class InvalidBumpTypeError(InputError):
    """A bump type outside of major, minor and patch."""


# External tools


class GitError(ReleaseFragError):
    """A git command failed."""

    def __init__(
        self,
        message: str,
        *,
        stderr: str | None = None,
        returncode: int | None = None,
    ) -> None:
        super().__init__(message)
        self.stderr = stderr
        self.returncode = returncode

    def __str__(self) -> str:
        message = super().__str__()
        if self.stderr:
            return f"{message}: {self.stderr.strip()}"
        return message


class NotAGitRepositoryError(GitError):
    """The project directory is not inside a git work tree."""


class GitHubError(ReleaseFragError):
    """The GitHub API rejected a request."""

    def __init__(
        self,
        message: str,
        *,
        status_code: int | None = None,
        response_text: str | None = None,
    ) -> None:
        super().__init__(message)
        self.status_code = status_code
        self.response_text = response_text
