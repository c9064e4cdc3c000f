"""Changelog assembly from fragments.

Fragment bodies are merged into a dated release entry which is then
inserted into the cumulative CHANGELOG.md. Existing entries are never
rewritten or reordered; a new entry is placed:

1. right after the insertion marker, when the document carries one
2. otherwise right before the first version heading
3. otherwise at the end of the document

A missing document is created with a standard header and the marker.
"""

from __future__ import annotations

import re
from typing import TYPE_CHECKING

if TYPE_CHECKING:
    from collections.abc import Iterable
    from datetime import date

    from release_frag.core.fragments import ChangelogFragment
    from release_frag.core.version import Version

INSERT_MARKER = "<!-- changelog-insert-here -->"
VERSION_HEADING_PREFIX = "## ["

CHANGELOG_HEADER = """\
# Changelog

All notable changes to this project will be documented in this file.

The format is based on [Keep a Changelog](https://keepachangelog.com/en/1.0.0/),
and this project adheres to [Semantic Versioning](https://semver.org/spec/v2.0.0.html).
"""


def format_heading(version: Version, release_date: date) -> str:
    return f"{VERSION_HEADING_PREFIX}{version}] - {release_date.isoformat()}"


def build_entry(
    bodies: Iterable[str],
    version: Version,
    release_date: date,
) -> str | None:
    """Build a release entry from fragment bodies.

    Bodies that are empty after trimming are dropped. When nothing is
    left, None is returned to signal that there is nothing to release.

    Args:
        bodies: Fragment bodies in fragment name order
        version: Version being released
        release_date: Date shown in the heading

    Returns:
        Entry text, starting and ending with a newline, or None
    """
    kept = [body.strip() for body in bodies if body.strip()]
    if not kept:
        return None

    content = "\n\n".join(kept)
    return f"\n{format_heading(version, release_date)}\n\n{content}\n"


def insert_entry(
    document: str | None,
    entry: str,
    *,
    marker: str = INSERT_MARKER,
) -> str:
    """Insert ``entry`` into the changelog ``document``.

    Args:
        document: Current changelog text, or None if there is no changelog yet
        entry: Entry produced by build_entry
        marker: Sentinel line marking the insertion point

    Returns:
        The updated changelog text
    """
    if document is None:
        return f"{CHANGELOG_HEADER}\n{marker}\n{entry}"

    lines = document.split("\n")

    # The marker only counts on a line of its own.
    for index, line in enumerate(lines):
        if line.strip() == marker:
            lines[index] = line.replace(marker, f"{marker}{entry}", 1)
            return "\n".join(lines)

    for index, line in enumerate(lines):
        if line.startswith(VERSION_HEADING_PREFIX):
            lines.insert(index, entry)
            return "\n".join(lines)

    return document + entry


def assemble_changelog(
    document: str | None,
    fragments: Iterable[ChangelogFragment],
    version: Version,
    release_date: date,
    *,
    marker: str = INSERT_MARKER,
) -> str | None:
    """Merge ``fragments`` into ``document`` as the entry for ``version``.

    Returns:
        The updated changelog, or None when every fragment body is empty
    """
    ordered = sorted(fragments, key=lambda fragment: fragment.name)
    entry = build_entry((fragment.body for fragment in ordered), version, release_date)
    if entry is None:
        return None
    return insert_entry(document, entry, marker=marker)


def extract_release_notes(document: str, version: Version | str) -> str | None:
    """Return the body of the changelog entry for ``version``.

    The body runs from the line after the version heading up to the next
    version heading or the end of the document.
    """
    escaped = re.escape(str(version))
    pattern = re.compile(
        rf"^## \[{escaped}\][^\n]*\n(.*?)(?=^## \[|\Z)",
        re.MULTILINE | re.DOTALL,
    )
    match = pattern.search(document)
    if not match:
        return None
    return match.group(1).strip()
