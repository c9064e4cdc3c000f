"""Resolve the version bump required by a set of fragments."""

from __future__ import annotations

import logging
from dataclasses import dataclass
from typing import TYPE_CHECKING

from release_frag.core.version import BumpType

if TYPE_CHECKING:
    from collections.abc import Iterable

    from release_frag.core.fragments import ChangelogFragment

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class BumpResolution:
    """Outcome of bump resolution.

    Attributes:
        bump_type: The most significant bump among the fragments and the default
        fragment_count: Number of fragments considered, with or without a declaration
        declarations: ``(fragment name, declared bump or None)`` in name order
    """

    bump_type: BumpType
    fragment_count: int
    declarations: tuple[tuple[str, BumpType | None], ...] = ()

    @property
    def has_fragments(self) -> bool:
        return self.fragment_count > 0


def resolve_bump(
    fragments: Iterable[ChangelogFragment],
    default: BumpType = BumpType.PATCH,
) -> BumpResolution:
    """Reduce fragment declarations to a single bump type.

    The result is the maximum of every declared bump and ``default``, so
    it does not depend on the order in which fragments are supplied.
    Fragments without a (valid) declaration still count towards the total.

    Args:
        fragments: Parsed changelog fragments
        default: Bump used when nothing more significant is declared

    Returns:
        BumpResolution with the chosen bump and per-fragment diagnostics
    """
    ordered = sorted(fragments, key=lambda fragment: fragment.name)
    declarations = tuple((fragment.name, fragment.declared_bump) for fragment in ordered)

    candidates = [bump for _, bump in declarations if bump is not None]
    bump_type = max([default, *candidates])

    for name, bump in declarations:
        if bump is None:
            logger.info("Fragment %s: no bump specified, using default", name)
        else:
            logger.info("Fragment %s: bump=%s", name, bump)

    return BumpResolution(
        bump_type=bump_type,
        fragment_count=len(declarations),
        declarations=declarations,
    )
