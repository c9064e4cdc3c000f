"""Implementation of the 'bump' command.

Rewrites the version declaration in the manifest and nothing else.
"""

from __future__ import annotations

from pathlib import Path
from typing import TYPE_CHECKING

from release_frag.config import load_config
from release_frag.core.version import Version
from release_frag.exceptions import ReleaseFragError
from release_frag.project.manifest import get_manifest_version, update_manifest_version

if TYPE_CHECKING:
    from rich.console import Console

    from release_frag.core.version import BumpType


def run_bump(
    path: str | None,
    bump_type: BumpType,
    dry_run: bool,
    console: Console,
    err_console: Console,
) -> None:
    """Run the bump command.

    Args:
        path: Optional path to project directory
        bump_type: Which component to increment
        dry_run: Only report the new version
        console: Console for standard output
        err_console: Console for error output
    """
    project_path = Path(path) if path else Path.cwd()

    try:
        config = load_config(project_path)
        manifest = project_path / config.version.manifest
        current = Version.parse(get_manifest_version(manifest))
    except ReleaseFragError as e:
        err_console.print(f"[red]Error getting version:[/] {e}")
        raise SystemExit(1) from e

    new_version = current.bump(bump_type)

    console.print(f"Current version: [cyan]{current}[/]")
    console.print(f"New version: [green]{new_version}[/]")

    if dry_run:
        console.print("[yellow]Dry run - no changes made[/]")
        return

    try:
        update_manifest_version(manifest, str(new_version))
    except ReleaseFragError as e:
        err_console.print(f"[red]Error updating {config.version.manifest}:[/] {e}")
        raise SystemExit(1) from e

    console.print(f"  [green]✓[/] Updated version in {config.version.manifest}")
