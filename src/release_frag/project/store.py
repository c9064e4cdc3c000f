"""Persistent project state consumed and produced by a release run."""

from __future__ import annotations

import logging
from typing import TYPE_CHECKING, Protocol

from release_frag.core.fragments import FragmentStore
from release_frag.core.version import Version
from release_frag.project.manifest import get_manifest_version, update_manifest_version

if TYPE_CHECKING:
    from collections.abc import Iterable
    from pathlib import Path

    from release_frag.config.models import ReleaseFragConfig
    from release_frag.core.fragments import ChangelogFragment

logger = logging.getLogger(__name__)


class ReleaseStore(Protocol):
    """Storage seen by the release state machine."""

    def load_fragments(self) -> list[ChangelogFragment]: ...

    def remove_fragments(self, fragments: Iterable[ChangelogFragment]) -> list[Path]: ...

    def read_version(self) -> Version: ...

    def write_version(self, version: Version) -> bool: ...

    def read_changelog(self) -> str | None: ...

    def write_changelog(self, text: str) -> None: ...

    def tracked_paths(self) -> list[Path]: ...


class FileReleaseStore:
    """ReleaseStore backed by files under a project root."""

    def __init__(self, root: Path, config: ReleaseFragConfig) -> None:
        self.root = root
        self.config = config
        self.fragments = FragmentStore(
            root / config.fragments.directory,
            suffix=config.fragments.suffix,
            reserved_name=config.fragments.reserved_name,
        )

    @property
    def manifest_path(self) -> Path:
        return self.root / self.config.version.manifest

    @property
    def changelog_path(self) -> Path:
        return self.root / self.config.changelog.path

    def load_fragments(self) -> list[ChangelogFragment]:
        return self.fragments.load()

    def remove_fragments(self, fragments: Iterable[ChangelogFragment]) -> list[Path]:
        return self.fragments.remove(fragments)

    def read_version(self) -> Version:
        """Parse the manifest version.

        Raises:
            ProjectError: If the manifest is missing or has no version
            VersionParseError: If the declared version is not MAJOR.MINOR.PATCH
        """
        return Version.parse(get_manifest_version(self.manifest_path))

    def write_version(self, version: Version) -> bool:
        changed = update_manifest_version(self.manifest_path, str(version))
        if changed:
            logger.info("Updated %s to version %s", self.manifest_path, version)
        return changed

    def read_changelog(self) -> str | None:
        if not self.changelog_path.is_file():
            return None
        return self.changelog_path.read_text(encoding="utf-8")

    def write_changelog(self, text: str) -> None:
        self.changelog_path.write_text(text, encoding="utf-8")
        logger.info("Wrote %s", self.changelog_path)

    def tracked_paths(self) -> list[Path]:
        """Files a release commit should contain, including removed fragments."""
        paths = [self.manifest_path]
        if self.changelog_path.is_file():
            paths.append(self.changelog_path)
        if self.fragments.directory.is_dir():
            paths.append(self.fragments.directory)
        return paths
