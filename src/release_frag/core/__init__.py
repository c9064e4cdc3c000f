"""Core business logic for release-frag.

This module contains the fundamental building blocks:
- Version parsing and bump arithmetic
- Fragment frontmatter parsing and storage
- Bump resolution across fragments
- Changelog assembly
- Release orchestration
"""

from __future__ import annotations

from release_frag.core.bump import BumpResolution, resolve_bump
from release_frag.core.changelog import (
    INSERT_MARKER,
    assemble_changelog,
    build_entry,
    extract_release_notes,
    insert_entry,
)
from release_frag.core.fragments import ChangelogFragment, FragmentStore
from release_frag.core.frontmatter import Frontmatter, bump_from_metadata, parse_frontmatter
from release_frag.core.release import ReleaseState, ReleaseStateMachine, ReleaseTransition
from release_frag.core.version import BumpType, Version, next_version

__all__ = [
    # Version
    "BumpType",
    "Version",
    "next_version",
    # Fragments
    "ChangelogFragment",
    "FragmentStore",
    "Frontmatter",
    "bump_from_metadata",
    "parse_frontmatter",
    # Bump
    "BumpResolution",
    "resolve_bump",
    # Changelog
    "INSERT_MARKER",
    "assemble_changelog",
    "build_entry",
    "extract_release_notes",
    "insert_entry",
    # Release
    "ReleaseState",
    "ReleaseStateMachine",
    "ReleaseTransition",
]
