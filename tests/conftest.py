"""Shared fixtures for release-frag tests."""

from __future__ import annotations

import shutil
import subprocess
from pathlib import Path

import pytest

from release_frag.config.models import ReleaseFragConfig
from release_frag.project.store import FileReleaseStore

PYPROJECT = """\
[project]
name = "test-project"
version = "1.2.3"
description = "A test project"

[tool.release-frag]
fragments = { directory = "changelog.d" }
"""

FRAGMENT_README = """\
# Changelog fragments

Add one Markdown file per change. Declare the bump in the frontmatter.
"""


class FakeVersionControl:
    """In-memory stand-in for GitRepository.

    Staging snapshots every file under ``root``; committing makes that
    snapshot the new HEAD. ``has_staged_changes`` compares the two.
    """

    def __init__(self, root: Path, tags: set[str] | None = None) -> None:
        self.root = root
        self.tags = set(tags or ())
        self.commits: list[str] = []
        self.pushes: list[str] = []
        self.pushed_tags: list[str] = []
        self.added: list[list[Path]] = []
        self.users: list[tuple[str | None, str | None]] = []
        self.head = self._snapshot()
        self.index = dict(self.head)

    def _snapshot(self) -> dict[str, str]:
        return {
            str(path.relative_to(self.root)): path.read_text(encoding="utf-8")
            for path in sorted(self.root.rglob("*"))
            if path.is_file()
        }

    def tag_exists(self, name: str) -> bool:
        return name in self.tags

    def add(self, paths) -> None:
        self.added.append(list(paths))
        self.index = self._snapshot()

    def has_staged_changes(self) -> bool:
        return self.index != self.head

    def commit(self, message: str) -> None:
        self.commits.append(message)
        self.head = dict(self.index)

    def create_tag(self, name: str, message: str) -> None:
        if name in self.tags:
            raise AssertionError(f"duplicate tag {name}")
        self.tags.add(name)

    def push(self, remote: str = "origin") -> None:
        self.pushes.append(remote)

    def push_tag(self, name: str, remote: str = "origin") -> None:
        self.pushed_tags.append(name)

    def configure_user(self, name: str | None = None, email: str | None = None) -> None:
        self.users.append((name, email))


@pytest.fixture
def project(tmp_path: Path) -> Path:
    """A project directory with a pyproject.toml and an empty fragment dir."""
    (tmp_path / "pyproject.toml").write_text(PYPROJECT)
    fragments = tmp_path / "changelog.d"
    fragments.mkdir()
    (fragments / "README.md").write_text(FRAGMENT_README)
    return tmp_path


@pytest.fixture
def write_fragment(project: Path):
    """Factory writing a fragment file into the project's changelog.d."""

    def _write(name: str, body: str, bump: str | None = None) -> Path:
        text = f"---\nbump: {bump}\n---\n\n{body}\n" if bump else f"{body}\n"
        path = project / "changelog.d" / name
        path.write_text(text)
        return path

    return _write


@pytest.fixture
def store(project: Path) -> FileReleaseStore:
    return FileReleaseStore(project, ReleaseFragConfig())


@pytest.fixture
def fake_vcs(project: Path) -> FakeVersionControl:
    return FakeVersionControl(project)


def _git(cwd: Path, *args: str) -> None:
    subprocess.run(["git", *args], cwd=cwd, check=True, capture_output=True, text=True)


@pytest.fixture
def temp_git_repo(project: Path, tmp_path_factory: pytest.TempPathFactory) -> Path:
    """The project as a git repository with one commit and a bare origin."""
    if shutil.which("git") is None:
        pytest.skip("git is not installed")

    remote = tmp_path_factory.mktemp("remote") / "origin.git"
    _git(remote.parent, "init", "--bare", remote.name)

    _git(project, "init")
    _git(project, "config", "user.name", "Test User")
    _git(project, "config", "user.email", "test@example.com")
    _git(project, "config", "commit.gpgsign", "false")
    _git(project, "config", "tag.gpgsign", "false")
    _git(project, "add", "-A")
    _git(project, "commit", "-m", "initial commit")
    _git(project, "remote", "add", "origin", str(remote))
    _git(project, "push", "-u", "origin", "HEAD")
    return project
