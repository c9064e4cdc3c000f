"""Semantic version values and bump arithmetic.

Versions are plain MAJOR.MINOR.PATCH triples. Pre-release and build
metadata are deliberately not supported.
"""

from __future__ import annotations

import re
from dataclasses import dataclass
from enum import StrEnum

from release_frag.exceptions import InvalidBumpTypeError, VersionParseError

_VERSION_RE = re.compile(r"^(0|[1-9]\d*)\.(0|[1-9]\d*)\.(0|[1-9]\d*)$")


class BumpType(StrEnum):
    """Magnitude of a version increment, ordered patch < minor < major."""

    PATCH = "patch"
    MINOR = "minor"
    MAJOR = "major"

    @property
    def priority(self) -> int:
        return _PRIORITY[self]

    @classmethod
    def parse(cls, value: str) -> BumpType:
        """Parse a bump type, rejecting anything outside the enumeration."""
        try:
            return cls(value)
        except ValueError as e:
            choices = ", ".join(member.value for member in cls)
            raise InvalidBumpTypeError(
                f"Invalid bump type {value!r}. Expected one of: {choices}"
            ) from e

    def __lt__(self, other: object) -> bool:
        if not isinstance(other, BumpType):
            return NotImplemented
        return self.priority < other.priority

    def __le__(self, other: object) -> bool:
        if not isinstance(other, BumpType):
            return NotImplemented
        return self.priority <= other.priority

    def __gt__(self, other: object) -> bool:
        if not isinstance(other, BumpType):
            return NotImplemented
        return self.priority > other.priority

    def __ge__(self, other: object) -> bool:
        if not isinstance(other, BumpType):
            return NotImplemented
        return self.priority >= other.priority


_PRIORITY = {BumpType.PATCH: 1, BumpType.MINOR: 2, BumpType.MAJOR: 3}


@dataclass(frozen=True, order=True)
class Version:
    """An immutable MAJOR.MINOR.PATCH version."""

    major: int
    minor: int
    patch: int

    def __post_init__(self) -> None:
        for part in (self.major, self.minor, self.patch):
            if not isinstance(part, int) or isinstance(part, bool) or part < 0:
                raise VersionParseError(
                    f"Version components must be non-negative integers, got "
                    f"({self.major!r}, {self.minor!r}, {self.patch!r})"
                )

    @classmethod
    def parse(cls, value: str) -> Version:
        """Parse a canonical ``MAJOR.MINOR.PATCH`` string.

        Raises:
            VersionParseError: If the string is not a plain semantic version
        """
        match = _VERSION_RE.match(value.strip())
        if not match:
            raise VersionParseError(
                f"Invalid version {value!r}. Expected MAJOR.MINOR.PATCH (e.g. 1.2.3)"
            )
        return cls(*(int(part) for part in match.groups()))

    def __str__(self) -> str:
        return f"{self.major}.{self.minor}.{self.patch}"

    def tag(self, prefix: str = "v") -> str:
        """Name of the git tag marking this version as released."""
        return f"{prefix}{self}"

    def bump(self, bump_type: BumpType) -> Version:
        """Return the next version for ``bump_type``.

        Passing anything but a BumpType is a programming error and raises
        TypeError rather than a user-facing error.
        """
        if not isinstance(bump_type, BumpType):
            raise TypeError(f"bump_type must be a BumpType, got {bump_type!r}")

        if bump_type is BumpType.MAJOR:
            return Version(self.major + 1, 0, 0)
        if bump_type is BumpType.MINOR:
            return Version(self.major, self.minor + 1, 0)
        return Version(self.major, self.minor, self.patch + 1)


def next_version(current: Version, bump_type: BumpType) -> Version:
    """Compute the version that follows ``current`` for ``bump_type``."""
    return current.bump(bump_type)
