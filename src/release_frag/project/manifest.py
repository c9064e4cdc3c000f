"""Version declaration in the project manifest.

The manifest (pyproject.toml by default, but any file carrying a
``version = "X.Y.Z"`` line works, e.g. Cargo.toml) is edited with a
targeted regex replacement so formatting and comments survive.
"""

from __future__ import annotations

import re
from typing import TYPE_CHECKING

from release_frag.exceptions import ProjectError, VersionNotFoundError

if TYPE_CHECKING:
    from pathlib import Path

# First top-level `version = "..."` line in the file
_VERSION_LINE_RE = re.compile(r"""^(version\s*=\s*)(["'])([^"']*)\2""", re.MULTILINE)


def _read_manifest(path: Path) -> str:
    if not path.is_file():
        raise ProjectError(f"Manifest not found: {path}")
    return path.read_text(encoding="utf-8")


def get_manifest_version(path: Path) -> str:
    """Read the declared version string from the manifest.

    Args:
        path: Path to the manifest file

    Returns:
        Version string exactly as declared

    Raises:
        ProjectError: If the manifest does not exist
        VersionNotFoundError: If no version line is present
    """
    content = _read_manifest(path)
    match = _VERSION_LINE_RE.search(content)
    if not match:
        raise VersionNotFoundError(
            f"Could not find a version declaration in {path}. "
            'Expected a line like version = "1.2.3".'
        )
    return match.group(3)


def update_manifest_version(path: Path, new_version: str) -> bool:
    """Rewrite the version declaration in place.

    Only the first version line is touched. The file is not rewritten
    when it already declares ``new_version``.

    Args:
        path: Path to the manifest file
        new_version: Version string to write

    Returns:
        True if the file content changed

    Raises:
        ProjectError: If the manifest does not exist
        VersionNotFoundError: If no version line is present
    """
    content = _read_manifest(path)

    new_content, count = _VERSION_LINE_RE.subn(
        lambda m: f'{m.group(1)}"{new_version}"',
        content,
        count=1,
    )
    if count == 0:
        raise VersionNotFoundError(f"Could not find version to update in {path}")

    if new_content == content:
        return False

    path.write_text(new_content, encoding="utf-8")
    return True
