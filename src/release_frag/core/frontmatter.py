"""Frontmatter parsing for changelog fragments.

A fragment may start with a small header block::

    ---
    bump: minor
    ---

    ### Added
    - Something new

The header is a flat list of ``key: value`` lines. There is no nesting,
no quoting and no multi-line values. A missing or unterminated header is
not an error: the whole document is then treated as body text.
"""

from __future__ import annotations

from dataclasses import dataclass, field

from release_frag.core.version import BumpType

DELIMITER = "---"
BUMP_KEY = "bump"


@dataclass(frozen=True)
class Frontmatter:
    """Parsed header metadata and the remaining body text."""

    metadata: dict[str, str] = field(default_factory=dict)
    body: str = ""


def _is_delimiter(line: str) -> bool:
    return line.rstrip() == DELIMITER


def _parse_header_line(line: str) -> tuple[str, str] | None:
    key, sep, value = line.partition(":")
    if not sep:
        return None
    key = key.strip()
    value = value.strip()
    if not key or not value or not key.isidentifier():
        return None
    return key, value


def parse_frontmatter(text: str) -> Frontmatter:
    """Split ``text`` into header metadata and body.

    Header lines that are not ``identifier: value`` are skipped. Without a
    closed, non-empty header on the first line no metadata is returned
    and the full text becomes the body. Otherwise the body is the text
    after the closing delimiter line with only surrounding whitespace
    trimmed.

    Args:
        text: Raw fragment contents

    Returns:
        Frontmatter with the parsed metadata and the trimmed body
    """
    lines = text.split("\n")
    if not _is_delimiter(lines[0]):
        return Frontmatter(body=text.strip())

    for end, line in enumerate(lines[1:], start=1):
        if _is_delimiter(line):
            break
    else:
        return Frontmatter(body=text.strip())

    header = [line for line in lines[1:end] if line.strip()]
    if not header:
        return Frontmatter(body=text.strip())

    metadata: dict[str, str] = {}
    for line in header:
        pair = _parse_header_line(line)
        if pair is not None:
            key, value = pair
            metadata[key] = value

    body = "\n".join(lines[end + 1 :]).strip()
    return Frontmatter(metadata=metadata, body=body)


def bump_from_metadata(metadata: dict[str, str]) -> BumpType | None:
    """Return the declared bump, or None when absent or unrecognised."""
    value = metadata.get(BUMP_KEY)
    if value is None:
        return None
    try:
        return BumpType(value)
    except ValueError:
        return None
