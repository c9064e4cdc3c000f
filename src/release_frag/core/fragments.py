"""Changelog fragments stored as files in a directory."""

from __future__ import annotations

import logging
from dataclasses import dataclass, field
from pathlib import Path
from typing import TYPE_CHECKING

from release_frag.core.frontmatter import bump_from_metadata, parse_frontmatter
from release_frag.exceptions import ProjectError

if TYPE_CHECKING:
    from collections.abc import Iterable

    from release_frag.core.version import BumpType

logger = logging.getLogger(__name__)

DEFAULT_SUFFIX = ".md"
RESERVED_NAME = "README.md"


@dataclass(frozen=True)
class ChangelogFragment:
    """One pending release-note contribution."""

    name: str
    declared_bump: BumpType | None
    body: str
    metadata: dict[str, str] = field(default_factory=dict, compare=False)

    @classmethod
    def from_text(cls, name: str, text: str) -> ChangelogFragment:
        parsed = parse_frontmatter(text)
        return cls(
            name=name,
            declared_bump=bump_from_metadata(parsed.metadata),
            body=parsed.body,
            metadata=parsed.metadata,
        )

    @property
    def is_empty(self) -> bool:
        return not self.body


class FragmentStore:
    """Lists, reads and removes fragment files in a single directory.

    Files are picked up when they carry the configured suffix and are not
    the reserved directory README.
    """

    def __init__(
        self,
        directory: Path,
        *,
        suffix: str = DEFAULT_SUFFIX,
        reserved_name: str = RESERVED_NAME,
    ) -> None:
        self.directory = directory
        self.suffix = suffix
        self.reserved_name = reserved_name

    def list_names(self) -> list[str]:
        """Fragment file names in lexicographic order."""
        if not self.directory.is_dir():
            logger.debug("Fragment directory %s does not exist", self.directory)
            return []

        return sorted(
            entry.name
            for entry in self.directory.iterdir()
            if entry.is_file()
            and entry.name.endswith(self.suffix)
            and entry.name != self.reserved_name
        )

    def load(self) -> list[ChangelogFragment]:
        """Read and parse every fragment, ordered by name.

        Raises:
            ProjectError: If a fragment is not valid UTF-8
        """
        fragments = []
        for name in self.list_names():
            path = self.directory / name
            try:
                text = path.read_text(encoding="utf-8")
            except UnicodeDecodeError as e:
                raise ProjectError(
                    f"Fragment {name} is not valid UTF-8 (byte {e.start} in {self.directory})"
                ) from e
            fragment = ChangelogFragment.from_text(name, text)
            logger.debug(
                "Loaded fragment %s (bump=%s, %d chars)",
                name,
                fragment.declared_bump or "-",
                len(fragment.body),
            )
            fragments.append(fragment)
        return fragments

    def remove(self, fragments: Iterable[ChangelogFragment]) -> list[Path]:
        """Delete consumed fragments and return the removed paths."""
        removed = []
        for fragment in fragments:
            path = self.directory / fragment.name
            if not path.exists():
                continue
            path.unlink()
            logger.info("Removed %s", path)
            removed.append(path)
        return removed
