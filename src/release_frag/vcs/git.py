"""Git operations via the git binary.

Every command runs through subprocess with captured output. Exit codes
that carry meaning (a missing tag, an empty index diff) are interpreted
explicitly; every other non-zero exit raises GitError with stderr
preserved.
"""

from __future__ import annotations

import logging
import subprocess
from pathlib import Path
from typing import TYPE_CHECKING

from release_frag.exceptions import GitError, NotAGitRepositoryError

if TYPE_CHECKING:
    from collections.abc import Iterable

logger = logging.getLogger(__name__)


class GitRepository:
    """A git work tree rooted at ``path``."""

    def __init__(self, path: Path | None = None, *, verify: bool = True) -> None:
        self.path = (path or Path.cwd()).resolve()
        if verify:
            self._verify()

    def _verify(self) -> None:
        try:
            result = self._run("rev-parse", "--is-inside-work-tree", check=False)
        except GitError as e:
            raise NotAGitRepositoryError(str(e)) from e
        if result.returncode != 0 or result.stdout.strip() != "true":
            raise NotAGitRepositoryError(
                f"Not a git repository: {self.path}",
                stderr=result.stderr,
                returncode=result.returncode,
            )

    def _run(self, *args: str, check: bool = True) -> subprocess.CompletedProcess[str]:
        command = ["git", *args]
        logger.debug("Running %s", " ".join(command))
        try:
            result = subprocess.run(
                command,
                cwd=self.path,
                capture_output=True,
                text=True,
                check=False,
            )
        except FileNotFoundError as e:
            raise GitError("git executable not found") from e

        if check and result.returncode != 0:
            raise GitError(
                f"git {args[0]} failed with exit code {result.returncode}",
                stderr=result.stderr,
                returncode=result.returncode,
            )
        return result

    def tag_exists(self, name: str) -> bool:
        """Check whether tag ``name`` exists.

        ``git rev-parse --verify --quiet`` exits with 1 for an unknown ref.
        Any other failure is an error, not an absent tag.
        """
        result = self._run("rev-parse", "--verify", "--quiet", f"refs/tags/{name}", check=False)
        if result.returncode == 0:
            return True
        if result.returncode == 1:
            return False
        raise GitError(
            f"Could not check for tag {name}",
            stderr=result.stderr,
            returncode=result.returncode,
        )

    def add(self, paths: Iterable[Path | str]) -> None:
        """Stage ``paths``, including deletions beneath them."""
        args = [str(p) for p in paths]
        if not args:
            return
        self._run("add", "-A", "--", *args)

    def has_staged_changes(self) -> bool:
        """Whether the index differs from HEAD."""
        result = self._run("diff", "--cached", "--quiet", check=False)
        if result.returncode == 0:
            return False
        if result.returncode == 1:
            return True
        raise GitError(
            "Could not inspect staged changes",
            stderr=result.stderr,
            returncode=result.returncode,
        )

    def commit(self, message: str) -> None:
        self._run("commit", "-m", message)
        logger.info("Committed: %s", message.splitlines()[0])

    def create_tag(self, name: str, message: str) -> None:
        """Create an annotated tag at HEAD."""
        self._run("tag", "-a", name, "-m", message)
        logger.info("Created tag %s", name)

    def push(self, remote: str = "origin") -> None:
        self._run("push", remote)

    def push_tag(self, name: str, remote: str = "origin") -> None:
        self._run("push", remote, f"refs/tags/{name}")
        logger.info("Pushed tag %s to %s", name, remote)

    def configure_user(self, name: str | None = None, email: str | None = None) -> None:
        """Set the committer identity for this repository."""
        if name:
            self._run("config", "user.name", name)
        if email:
            self._run("config", "user.email", email)
