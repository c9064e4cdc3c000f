"""Tests for the release state machine."""

from __future__ import annotations

from datetime import date
from typing import TYPE_CHECKING

import pytest

from release_frag.core.changelog import INSERT_MARKER
from release_frag.core.release import ReleaseState, ReleaseStateMachine, ReleaseTransition
from release_frag.core.version import BumpType, Version
from release_frag.exceptions import GitError, VersionParseError

if TYPE_CHECKING:
    from pathlib import Path

    from release_frag.project.store import FileReleaseStore

RELEASE_DATE = date(2024, 5, 17)


@pytest.fixture
def machine(store: FileReleaseStore, fake_vcs) -> ReleaseStateMachine:
    return ReleaseStateMachine(store, fake_vcs, today=lambda: RELEASE_DATE)


def snapshot(root: Path) -> dict[str, str]:
    return {
        str(path.relative_to(root)): path.read_text()
        for path in sorted(root.rglob("*"))
        if path.is_file()
    }


class TestPlan:
    """Tests for ReleaseStateMachine.plan()."""

    def test_resolves_from_fragments(self, machine: ReleaseStateMachine, write_fragment):
        write_fragment("a.md", "Added X", bump="minor")
        write_fragment("b.md", "Fixed Y", bump="patch")

        transition = machine.plan()

        assert transition.current_version == Version(1, 2, 3)
        assert transition.bump_type is BumpType.MINOR
        assert transition.target_version == Version(1, 3, 0)
        assert transition.tag == "v1.3.0"
        assert transition.state is ReleaseState.PENDING
        assert transition.resolution is not None
        assert transition.resolution.fragment_count == 2

    def test_explicit_bump_wins(self, machine: ReleaseStateMachine, write_fragment):
        write_fragment("a.md", "Breaking", bump="major")

        transition = machine.plan(BumpType.PATCH)

        assert transition.target_version == Version(1, 2, 4)

    def test_default_bump(self, machine: ReleaseStateMachine, write_fragment):
        write_fragment("a.md", "Something")

        transition = machine.plan(default_bump=BumpType.MINOR)

        assert transition.target_version == Version(1, 3, 0)

    def test_target_version_override(self, machine: ReleaseStateMachine):
        transition = machine.plan(target_version=Version(2, 0, 0))

        assert transition.target_version == Version(2, 0, 0)
        assert transition.tag == "v2.0.0"

    def test_plan_does_not_mutate(
        self, machine: ReleaseStateMachine, project: Path, write_fragment
    ):
        write_fragment("a.md", "Added X", bump="minor")
        before = snapshot(project)

        machine.plan()

        assert snapshot(project) == before


class TestRunCommitted:
    """A normal release ends in COMMITTED."""

    def test_full_release(
        self, machine: ReleaseStateMachine, fake_vcs, project: Path, write_fragment
    ):
        write_fragment("20240101_a.md", "### Added\n- Feature X", bump="minor")
        write_fragment("20240102_b.md", "### Fixed\n- Bug Y", bump="patch")

        transition = machine.run()

        assert transition.state is ReleaseState.COMMITTED
        assert transition.committed
        assert transition.target_version == Version(1, 3, 0)
        assert transition.version_updated
        assert transition.changelog_updated
        assert sorted(p.name for p in transition.removed_fragments) == [
            "20240101_a.md",
            "20240102_b.md",
        ]

        assert 'version = "1.3.0"' in (project / "pyproject.toml").read_text()
        changelog = (project / "CHANGELOG.md").read_text()
        assert INSERT_MARKER in changelog
        expected = "## [1.3.0] - 2024-05-17\n\n### Added\n- Feature X\n\n### Fixed\n- Bug Y\n"
        assert expected in changelog
        assert sorted(p.name for p in (project / "changelog.d").iterdir()) == ["README.md"]

        assert fake_vcs.commits == ["chore: release v1.3.0"]
        assert fake_vcs.tags == {"v1.3.0"}
        assert fake_vcs.pushes == ["origin"]
        assert fake_vcs.pushed_tags == ["v1.3.0"]

    def test_description_in_messages(self, store: FileReleaseStore, fake_vcs, write_fragment):
        write_fragment("a.md", "Fixed Y")
        created = {}
        fake_vcs.create_tag = lambda name, message: created.update({name: message})
        machine = ReleaseStateMachine(store, fake_vcs, today=lambda: RELEASE_DATE)

        machine.run(description="Hotfix for the parser")

        assert fake_vcs.commits == ["chore: release v1.2.4\n\nHotfix for the parser"]
        assert created == {"v1.2.4": "Release v1.2.4\n\nHotfix for the parser"}

    def test_no_push(self, store: FileReleaseStore, fake_vcs, write_fragment):
        write_fragment("a.md", "Fixed Y")
        machine = ReleaseStateMachine(store, fake_vcs, push=False, today=lambda: RELEASE_DATE)

        transition = machine.run()

        assert transition.committed
        assert fake_vcs.tags == {"v1.2.4"}
        assert fake_vcs.pushes == []
        assert fake_vcs.pushed_tags == []

    def test_committer_configured_before_commit(
        self, store: FileReleaseStore, fake_vcs, project: Path, write_fragment
    ):
        write_fragment("a.md", "Fixed Y")
        machine = ReleaseStateMachine(
            store,
            fake_vcs,
            user_name="release-bot",
            user_email="bot@example.com",
            today=lambda: RELEASE_DATE,
        )

        machine.run()

        assert fake_vcs.users == [("release-bot", "bot@example.com")]

    def test_committer_untouched_on_bad_version(
        self, store: FileReleaseStore, fake_vcs, project: Path
    ):
        """Input errors leave the repository configuration alone."""
        (project / "pyproject.toml").write_text('[project]\nversion = "1.x"\n')
        machine = ReleaseStateMachine(store, fake_vcs, user_name="release-bot")

        with pytest.raises(VersionParseError):
            machine.run()

        assert fake_vcs.users == []
        assert fake_vcs.added == []

    def test_custom_tag_prefix(self, store: FileReleaseStore, fake_vcs, write_fragment):
        write_fragment("a.md", "Fixed Y")
        machine = ReleaseStateMachine(
            store, fake_vcs, tag_prefix="release-", today=lambda: RELEASE_DATE
        )

        transition = machine.run()

        assert transition.tag == "release-1.2.4"
        assert fake_vcs.tags == {"release-1.2.4"}

    def test_existing_changelog_marker(
        self, machine: ReleaseStateMachine, project: Path, write_fragment
    ):
        (project / "CHANGELOG.md").write_text(
            f"# Changelog\n\n{INSERT_MARKER}\n\n## [1.2.3] - 2024-01-01\n\n- Old\n"
        )
        write_fragment("a.md", "New", bump="minor")

        machine.run()

        changelog = (project / "CHANGELOG.md").read_text()
        marker_at = changelog.index(INSERT_MARKER)
        assert marker_at < changelog.index("## [1.3.0]") < changelog.index("## [1.2.3]")
        assert changelog.endswith("## [1.2.3] - 2024-01-01\n\n- Old\n")

    def test_no_fragments_forced_bump(self, machine: ReleaseStateMachine, fake_vcs, project: Path):
        """A version bump goes ahead without any changelog content."""
        transition = machine.run(BumpType.MAJOR)

        assert transition.committed
        assert transition.target_version == Version(2, 0, 0)
        assert not transition.changelog_updated
        assert transition.removed_fragments == []
        assert not (project / "CHANGELOG.md").exists()
        assert (project / "changelog.d" / "README.md").exists()

    def test_empty_fragments_are_consumed(
        self, machine: ReleaseStateMachine, project: Path, write_fragment
    ):
        """Fragments without content leave the changelog alone but are removed."""
        write_fragment("a.md", "", bump="minor")

        transition = machine.run()

        assert transition.committed
        assert transition.target_version == Version(1, 3, 0)
        assert not transition.changelog_updated
        assert not (project / "CHANGELOG.md").exists()
        assert [p.name for p in transition.removed_fragments] == ["a.md"]
        assert not (project / "changelog.d" / "a.md").exists()


class TestRunAlreadyReleased:
    """An existing tag makes the run a no-op."""

    def test_existing_tag(
        self, machine: ReleaseStateMachine, fake_vcs, project: Path, write_fragment
    ):
        write_fragment("a.md", "Added X", bump="minor")
        fake_vcs.tags.add("v1.3.0")
        before = snapshot(project)

        transition = machine.run()

        assert transition.state is ReleaseState.ALREADY_RELEASED
        assert transition.already_released
        assert transition.target_version == Version(1, 3, 0)
        assert snapshot(project) == before
        assert fake_vcs.added == []
        assert fake_vcs.commits == []

    def test_second_run_is_idempotent(
        self, machine: ReleaseStateMachine, fake_vcs, project: Path, write_fragment
    ):
        """Retrying from the same checkout never commits or tags twice."""
        write_fragment("a.md", "Added X", bump="minor")
        checkout = snapshot(project)

        first = machine.run()

        for name, content in checkout.items():
            (project / name).write_text(content)

        second = machine.run()

        assert first.state is ReleaseState.COMMITTED
        assert second.state is ReleaseState.ALREADY_RELEASED
        assert first.target_version == second.target_version == Version(1, 3, 0)
        assert fake_vcs.commits == ["chore: release v1.3.0"]
        assert fake_vcs.tags == {"v1.3.0"}
        assert (project / "changelog.d" / "a.md").exists()

    def test_tag_check_failure_aborts(
        self, machine: ReleaseStateMachine, fake_vcs, project: Path, write_fragment
    ):
        """A failing tag check aborts instead of releasing."""
        write_fragment("a.md", "Added X", bump="minor")
        before = snapshot(project)

        def failing_tag_check(name: str) -> bool:
            raise GitError("Could not check for tag", stderr="fatal: bad object", returncode=128)

        fake_vcs.tag_exists = failing_tag_check

        with pytest.raises(GitError):
            machine.run()

        assert snapshot(project) == before
        assert fake_vcs.commits == []


class TestRunNoChanges:
    """Nothing staged ends in NO_CHANGES."""

    def test_target_equals_current(self, machine: ReleaseStateMachine, fake_vcs):
        transition = machine.run(target_version=Version(1, 2, 3))

        assert transition.state is ReleaseState.NO_CHANGES
        assert not transition.version_updated
        assert transition.target_version == Version(1, 2, 3)
        assert fake_vcs.commits == []
        assert fake_vcs.tags == set()
        assert fake_vcs.pushes == []


class TestDryRun:
    """Dry runs compute everything but change nothing."""

    def test_dry_run(self, machine: ReleaseStateMachine, fake_vcs, project: Path, write_fragment):
        write_fragment("a.md", "Added X", bump="minor")
        before = snapshot(project)

        transition = machine.run(dry_run=True)

        assert transition.state is ReleaseState.PENDING
        assert transition.dry_run
        assert transition.target_version == Version(1, 3, 0)
        assert snapshot(project) == before
        assert fake_vcs.added == []

    def test_dry_run_reports_already_released(
        self, machine: ReleaseStateMachine, fake_vcs, write_fragment
    ):
        write_fragment("a.md", "Added X", bump="minor")
        fake_vcs.tags.add("v1.3.0")

        transition = machine.run(dry_run=True)

        assert transition.state is ReleaseState.ALREADY_RELEASED


class TestReleaseTransition:
    """Tests for ReleaseTransition state changes."""

    def test_finish_only_once(self):
        transition = ReleaseTransition(
            current_version=Version(1, 0, 0),
            bump_type=BumpType.PATCH,
            target_version=Version(1, 0, 1),
            tag="v1.0.1",
        )

        transition.finish(ReleaseState.NO_CHANGES)

        with pytest.raises(RuntimeError):
            transition.finish(ReleaseState.COMMITTED)
