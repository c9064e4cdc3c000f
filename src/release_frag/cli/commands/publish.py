"""Implementation of the 'publish' command.

Creates a GitHub release for an existing tag, using the matching
changelog entry as release notes.
"""

from __future__ import annotations

import os
from pathlib import Path
from typing import TYPE_CHECKING

from rich.panel import Panel
from rich.text import Text

from release_frag.config import load_config
from release_frag.core.changelog import extract_release_notes
from release_frag.core.version import Version
from release_frag.exceptions import ReleaseFragError
from release_frag.forge import GitHubClient, PublishResult, resolve_token

if TYPE_CHECKING:
    from rich.console import Console


def run_publish(
    path: str | None,
    release_version: str,
    repository: str | None,
    dry_run: bool,
    console: Console,
    err_console: Console,
) -> None:
    """Run the publish command.

    Args:
        path: Optional path to project directory
        release_version: Version to publish (e.g., "1.2.0")
        repository: ``owner/name``, defaults to config then GITHUB_REPOSITORY
        dry_run: Show the release payload without calling the API
        console: Console for standard output
        err_console: Console for error output
    """
    project_path = Path(path) if path else Path.cwd()

    try:
        config = load_config(project_path)
        version = Version.parse(release_version)
    except ReleaseFragError as e:
        err_console.print(f"[red]Error:[/] {e}")
        raise SystemExit(1) from e

    repository = repository or config.github.repository or os.environ.get("GITHUB_REPOSITORY")
    if not repository:
        err_console.print(
            "[red]Error:[/] No repository given. "
            "Use [cyan]--repository owner/name[/] or set [cyan]GITHUB_REPOSITORY[/]."
        )
        raise SystemExit(1)

    tag = version.tag(config.effective_tag_prefix)
    changelog_path = project_path / config.changelog.path
    notes = None
    if changelog_path.is_file():
        notes = extract_release_notes(changelog_path.read_text(encoding="utf-8"), version)
    body = notes or f"Release {tag}"

    console.print(f"Creating GitHub release for [cyan]{tag}[/] in {repository}...")

    if dry_run:
        console.print(
            Panel(Text(body), title=f"[yellow]Dry Run Preview: {tag}[/]", border_style="yellow")
        )
        return

    try:
        token = resolve_token(env_names=config.github.token_env)
        with GitHubClient(repository, token, api_url=config.github.api_url) as client:
            result = client.create_release(tag=tag, title=tag, body=body)
    except ReleaseFragError as e:
        err_console.print(f"[red]Error creating release:[/] {e}")
        raise SystemExit(1) from e

    if result is PublishResult.ALREADY_EXISTS:
        console.print(f"[yellow]Release {tag} already exists, skipping[/]")
    else:
        console.print(f"  [green]✓[/] Created GitHub release: {tag}")
