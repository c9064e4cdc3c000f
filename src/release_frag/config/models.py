"""Pydantic models for the ``[tool.release-frag]`` configuration table."""

from __future__ import annotations

from pathlib import Path

from pydantic import BaseModel, ConfigDict, Field, field_validator

from release_frag.core.changelog import INSERT_MARKER
from release_frag.core.version import BumpType


class _Section(BaseModel):
    model_config = ConfigDict(extra="forbid", frozen=True)


class FragmentsConfig(_Section):
    """Where changelog fragments live and how unmarked ones are treated."""

    directory: Path = Path("changelog.d")
    suffix: str = ".md"
    reserved_name: str = "README.md"
    default_bump: BumpType = BumpType.PATCH


class ChangelogConfig(_Section):
    """Cumulative changelog document."""

    path: Path = Path("CHANGELOG.md")
    insert_marker: str = INSERT_MARKER

    @field_validator("insert_marker")
    @classmethod
    def _marker_is_single_line(cls, value: str) -> str:
        if not value.strip() or "\n" in value:
            raise ValueError("insert_marker must be a non-empty single line")
        return value


class VersionConfig(_Section):
    """Version declaration and release tags."""

    manifest: Path = Path("pyproject.toml")
    tag_prefix: str = "v"


class GitConfig(_Section):
    """Commit, tag and push behaviour."""

    remote: str = "origin"
    push: bool = True
    user_name: str | None = None
    user_email: str | None = None
    commit_message: str = "chore: release v{version}"
    tag_message: str = "Release v{version}"


class GitHubConfig(_Section):
    """Hosted release publishing."""

    repository: str | None = None
    api_url: str = "https://api.github.com"
    token_env: list[str] = Field(default_factory=lambda: ["GITHUB_TOKEN", "GH_TOKEN"])

    @field_validator("repository")
    @classmethod
    def _owner_and_name(cls, value: str | None) -> str | None:
        if value is not None and value.count("/") != 1:
            raise ValueError("repository must look like 'owner/name'")
        return value


class ReleaseFragConfig(_Section):
    """Root configuration."""

    fragments: FragmentsConfig = Field(default_factory=FragmentsConfig)
    changelog: ChangelogConfig = Field(default_factory=ChangelogConfig)
    version: VersionConfig = Field(default_factory=VersionConfig)
    git: GitConfig = Field(default_factory=GitConfig)
    github: GitHubConfig = Field(default_factory=GitHubConfig)

    @property
    def effective_tag_prefix(self) -> str:
        return self.version.tag_prefix
