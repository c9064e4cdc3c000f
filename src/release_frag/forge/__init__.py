"""Release hosting integration."""

from __future__ import annotations

from release_frag.forge.github import GitHubClient, PublishResult, resolve_token

__all__ = ["GitHubClient", "PublishResult", "resolve_token"]
