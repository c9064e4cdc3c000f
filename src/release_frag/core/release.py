"""Idempotent release orchestration.

A release run moves from PENDING to exactly one terminal state:

- ALREADY_RELEASED: the tag for the target version exists, nothing is touched
- NO_CHANGES: files were updated but the index is identical to HEAD
- COMMITTED: the release commit and annotated tag were created and pushed

All three are successful outcomes. Failures propagate as exceptions from
the store or the version control adapter. No rollback is attempted: if a
run fails after the version and changelog have been written but before
the commit, those files are left modified in the work tree.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass, field
from datetime import UTC, date, datetime
from enum import StrEnum
from typing import TYPE_CHECKING, Protocol

from release_frag.core.bump import BumpResolution, resolve_bump
from release_frag.core.changelog import INSERT_MARKER, assemble_changelog
from release_frag.core.version import BumpType, Version

if TYPE_CHECKING:
    from collections.abc import Callable, Iterable
    from pathlib import Path

    from release_frag.core.fragments import ChangelogFragment
    from release_frag.project.store import ReleaseStore

logger = logging.getLogger(__name__)

DEFAULT_COMMIT_MESSAGE = "chore: release v{version}"
DEFAULT_TAG_MESSAGE = "Release v{version}"


class ReleaseState(StrEnum):
    PENDING = "pending"
    ALREADY_RELEASED = "already_released"
    NO_CHANGES = "no_changes"
    COMMITTED = "committed"


class VersionControl(Protocol):
    """Operations the state machine needs from version control."""

    def tag_exists(self, name: str) -> bool: ...

    def add(self, paths: Iterable[Path | str]) -> None: ...

    def has_staged_changes(self) -> bool: ...

    def commit(self, message: str) -> None: ...

    def create_tag(self, name: str, message: str) -> None: ...

    def push(self, remote: str = "origin") -> None: ...

    def push_tag(self, name: str, remote: str = "origin") -> None: ...

    def configure_user(self, name: str | None = None, email: str | None = None) -> None: ...


@dataclass
class ReleaseTransition:
    """The unit of work for a single release run."""

    current_version: Version
    bump_type: BumpType
    target_version: Version
    tag: str
    fragments: list[ChangelogFragment] = field(default_factory=list)
    resolution: BumpResolution | None = None
    state: ReleaseState = ReleaseState.PENDING
    dry_run: bool = False
    version_updated: bool = False
    changelog_updated: bool = False
    removed_fragments: list[Path] = field(default_factory=list)

    @property
    def is_finished(self) -> bool:
        return self.state is not ReleaseState.PENDING

    @property
    def already_released(self) -> bool:
        return self.state is ReleaseState.ALREADY_RELEASED

    @property
    def committed(self) -> bool:
        return self.state is ReleaseState.COMMITTED

    def finish(self, state: ReleaseState) -> None:
        if self.is_finished:
            raise RuntimeError(f"Release already finished as {self.state}, cannot move to {state}")
        logger.debug("Release %s: %s -> %s", self.target_version, self.state, state)
        self.state = state


def _with_description(message: str, description: str | None) -> str:
    if description and description.strip():
        return f"{message}\n\n{description.strip()}"
    return message


def utc_today() -> date:
    return datetime.now(UTC).date()


class ReleaseStateMachine:
    """Drive a release from fragments to a pushed tag.

    Args:
        store: Project files (fragments, manifest version, changelog)
        vcs: Version control adapter
        tag_prefix: Prefix of release tags
        remote: Remote to push to
        push: Whether to push the commit and tag
        commit_message: Commit message template, ``{version}`` is substituted
        tag_message: Tag annotation template, ``{version}`` is substituted
        user_name: Committer name set in the repository before committing
        user_email: Committer email set in the repository before committing
        insert_marker: Changelog insertion marker
        today: Provides the date used in changelog headings
    """

    def __init__(
        self,
        store: ReleaseStore,
        vcs: VersionControl,
        *,
        tag_prefix: str = "v",
        remote: str = "origin",
        push: bool = True,
        commit_message: str = DEFAULT_COMMIT_MESSAGE,
        tag_message: str = DEFAULT_TAG_MESSAGE,
        user_name: str | None = None,
        user_email: str | None = None,
        insert_marker: str = INSERT_MARKER,
        today: Callable[[], date] = utc_today,
    ) -> None:
        self.store = store
        self.vcs = vcs
        self.tag_prefix = tag_prefix
        self.remote = remote
        self.push = push
        self.commit_message = commit_message
        self.tag_message = tag_message
        self.user_name = user_name
        self.user_email = user_email
        self.insert_marker = insert_marker
        self.today = today

    def plan(
        self,
        bump_type: BumpType | None = None,
        *,
        default_bump: BumpType = BumpType.PATCH,
        target_version: Version | None = None,
    ) -> ReleaseTransition:
        """Compute the release without touching anything.

        An explicit ``bump_type`` wins over the fragments' declarations.
        An explicit ``target_version`` overrides the computed version.
        """
        current = self.store.read_version()
        fragments = self.store.load_fragments()
        resolution = resolve_bump(fragments, default_bump)

        effective_bump = bump_type or resolution.bump_type
        target = target_version or current.bump(effective_bump)

        logger.info(
            "Release plan: %s -> %s (%s bump, %d fragment(s))",
            current,
            target,
            effective_bump,
            resolution.fragment_count,
        )
        return ReleaseTransition(
            current_version=current,
            bump_type=effective_bump,
            target_version=target,
            tag=target.tag(self.tag_prefix),
            fragments=fragments,
            resolution=resolution,
        )

    def run(
        self,
        bump_type: BumpType | None = None,
        *,
        default_bump: BumpType = BumpType.PATCH,
        target_version: Version | None = None,
        description: str | None = None,
        dry_run: bool = False,
    ) -> ReleaseTransition:
        """Run the release and return the finished transition.

        With ``dry_run`` the run stops after the tag check; the transition
        is then either ALREADY_RELEASED or still PENDING.
        """
        transition = self.plan(bump_type, default_bump=default_bump, target_version=target_version)
        transition.dry_run = dry_run

        if self.check_released(transition) or dry_run:
            return transition

        self.update_files(transition)
        if not self.stage(transition):
            return transition

        self.commit_and_tag(transition, description)
        return transition

    def check_released(self, transition: ReleaseTransition) -> bool:
        """Finish as ALREADY_RELEASED when the target tag exists."""
        if self.vcs.tag_exists(transition.tag):
            logger.info("Tag %s already exists", transition.tag)
            transition.finish(ReleaseState.ALREADY_RELEASED)
            return True
        return False

    def update_files(self, transition: ReleaseTransition) -> None:
        """Write the new version, the changelog entry and consume fragments.

        The version is written even when the fragments hold no content.
        Fragments that existed are always removed, including empty ones,
        so they are not picked up again by the next run.
        """
        transition.version_updated = self.store.write_version(transition.target_version)

        updated = assemble_changelog(
            self.store.read_changelog(),
            transition.fragments,
            transition.target_version,
            self.today(),
            marker=self.insert_marker,
        )
        if updated is None:
            logger.info("No changelog content for %s", transition.target_version)
        else:
            self.store.write_changelog(updated)
            transition.changelog_updated = True

        if transition.fragments:
            transition.removed_fragments = self.store.remove_fragments(transition.fragments)

    def stage(self, transition: ReleaseTransition) -> bool:
        """Stage release files; finish as NO_CHANGES when nothing differs."""
        self.vcs.add(self.store.tracked_paths())
        if not self.vcs.has_staged_changes():
            logger.info("No changes to commit for %s", transition.target_version)
            transition.finish(ReleaseState.NO_CHANGES)
            return False
        return True

    def commit_and_tag(self, transition: ReleaseTransition, description: str | None = None) -> None:
        """Commit, tag and push; finish as COMMITTED."""
        version = str(transition.target_version)
        commit_message = _with_description(self.commit_message.format(version=version), description)
        tag_message = _with_description(self.tag_message.format(version=version), description)

        if self.user_name or self.user_email:
            self.vcs.configure_user(self.user_name, self.user_email)
        self.vcs.commit(commit_message)
        self.vcs.create_tag(transition.tag, tag_message)

        if self.push:
            self.vcs.push(self.remote)
            self.vcs.push_tag(transition.tag, self.remote)
        else:
            logger.info("Push disabled, leaving %s local", transition.tag)

        transition.finish(ReleaseState.COMMITTED)
