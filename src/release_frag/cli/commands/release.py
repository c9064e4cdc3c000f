"""Implementation of the 'release' command.

Bumps the version, collects fragments into the changelog, then commits,
tags and pushes. Running it again for a version that is already tagged
is a no-op, so CI pipelines can retry it freely.
"""

from __future__ import annotations

from pathlib import Path
from typing import TYPE_CHECKING

from rich.panel import Panel

from release_frag.cli.output import set_output
from release_frag.config import load_config
from release_frag.core.release import ReleaseState, ReleaseStateMachine
from release_frag.core.version import Version
from release_frag.exceptions import ReleaseFragError
from release_frag.project.store import FileReleaseStore
from release_frag.vcs import GitRepository

if TYPE_CHECKING:
    from rich.console import Console

    from release_frag.core.release import ReleaseTransition
    from release_frag.core.version import BumpType

_STATE_STYLES = {
    ReleaseState.PENDING: ("yellow", "Dry Run Preview"),
    ReleaseState.ALREADY_RELEASED: ("yellow", "Already Released"),
    ReleaseState.NO_CHANGES: ("yellow", "No Changes"),
    ReleaseState.COMMITTED: ("green", "Release Committed"),
}


def run_release(
    path: str | None,
    bump_type: BumpType | None,
    default_bump: BumpType | None,
    version_override: str | None,
    description: str | None,
    push: bool,
    dry_run: bool,
    console: Console,
    err_console: Console,
) -> None:
    """Run the release command.

    Args:
        path: Optional path to project directory
        bump_type: Explicit bump, otherwise resolved from fragments
        default_bump: Default used when resolving from fragments
        version_override: Manual target version (e.g., "2.0.0")
        description: Extra text for the commit and tag messages
        push: Whether to push the commit and tag
        dry_run: Compute and report without changing anything
        console: Console for standard output
        err_console: Console for error output
    """
    project_path = Path(path) if path else Path.cwd()

    try:
        config = load_config(project_path)
    except ReleaseFragError as e:
        err_console.print(f"[red]Error loading config:[/] {e}")
        raise SystemExit(1) from e

    target_version = None
    if version_override:
        try:
            target_version = Version.parse(version_override)
        except ReleaseFragError as e:
            err_console.print(f"[red]Invalid version format:[/] {e}")
            raise SystemExit(1) from e

    try:
        repo = GitRepository(project_path)
    except ReleaseFragError as e:
        err_console.print(f"[red]Error:[/] {e}")
        raise SystemExit(1) from e

    machine = ReleaseStateMachine(
        FileReleaseStore(project_path, config),
        repo,
        tag_prefix=config.effective_tag_prefix,
        remote=config.git.remote,
        push=push and config.git.push,
        commit_message=config.git.commit_message,
        tag_message=config.git.tag_message,
        user_name=config.git.user_name,
        user_email=config.git.user_email,
        insert_marker=config.changelog.insert_marker,
    )

    try:
        transition = machine.run(
            bump_type,
            default_bump=default_bump or config.fragments.default_bump,
            target_version=target_version,
            description=description,
            dry_run=dry_run,
        )
    except ReleaseFragError as e:
        err_console.print(f"[red]Release failed:[/] {e}")
        raise SystemExit(1) from e
    except OSError as e:
        err_console.print(f"[red]Error updating project files:[/] {e}")
        raise SystemExit(1) from e

    _print_summary(transition, config.changelog.path, console)

    set_output("already_released", transition.already_released, console)
    set_output("version_committed", transition.committed, console)
    set_output("new_version", str(transition.target_version), console)


def _print_summary(transition: ReleaseTransition, changelog: Path, console: Console) -> None:
    style, title = _STATE_STYLES[transition.state]
    lines = [
        f"[bold]State:[/] {transition.state}",
        f"[bold]Version:[/] {transition.current_version} → [green]{transition.target_version}[/]",
        f"[bold]Bump:[/] {transition.bump_type}",
        f"[bold]Tag:[/] {transition.tag}",
        f"[bold]Fragments:[/] {len(transition.fragments)}",
    ]

    if transition.state is ReleaseState.ALREADY_RELEASED:
        lines.append(f"\nTag [cyan]{transition.tag}[/] already exists, nothing to do.")
    elif transition.state is ReleaseState.PENDING:
        if transition.fragments:
            notes = f"collect fragments into {changelog}"
        else:
            notes = "leave the changelog as is"
        lines.append(f"\nWould update the version, {notes}, then commit and tag.")
    elif transition.state is ReleaseState.NO_CHANGES:
        lines.append("\nNothing to commit.")
    else:
        if transition.changelog_updated:
            lines.append(f"[bold]Changelog:[/] updated {changelog}")
        lines.append(f"\n[green]Released {transition.tag}[/]")

    console.print(Panel("\n".join(lines), title=f"[{style}]{title}[/]", border_style=style))
