"""Version control integration."""

from __future__ import annotations

from release_frag.vcs.git import GitRepository

__all__ = ["GitRepository"]
