"""Project file access: manifest version and release store."""

from __future__ import annotations

from release_frag.project.manifest import get_manifest_version, update_manifest_version
from release_frag.project.store import FileReleaseStore, ReleaseStore

__all__ = [
    "FileReleaseStore",
    "ReleaseStore",
    "get_manifest_version",
    "update_manifest_version",
]
