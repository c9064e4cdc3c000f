"""Configuration management for release-frag."""

from __future__ import annotations

from release_frag.config.loader import load_config
from release_frag.config.models import (
    ChangelogConfig,
    FragmentsConfig,
    GitConfig,
    GitHubConfig,
    ReleaseFragConfig,
    VersionConfig,
)

__all__ = [
    "ChangelogConfig",
    "FragmentsConfig",
    "GitConfig",
    "GitHubConfig",
    "ReleaseFragConfig",
    "VersionConfig",
    "load_config",
]
