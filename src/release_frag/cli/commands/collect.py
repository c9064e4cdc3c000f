"""Implementation of the 'collect' command.

Aggregates pending fragments into the changelog under the version that
the manifest currently declares, then removes the fragments.
"""

from __future__ import annotations

from pathlib import Path
from typing import TYPE_CHECKING

from rich.panel import Panel
from rich.text import Text

from release_frag.config import load_config
from release_frag.core.changelog import build_entry, insert_entry
from release_frag.core.release import utc_today
from release_frag.exceptions import ReleaseFragError
from release_frag.project.store import FileReleaseStore

if TYPE_CHECKING:
    from rich.console import Console


def run_collect(
    path: str | None,
    dry_run: bool,
    console: Console,
    err_console: Console,
) -> None:
    """Run the collect command.

    Args:
        path: Optional path to project directory
        dry_run: Show the entry without writing anything
        console: Console for standard output
        err_console: Console for error output
    """
    project_path = Path(path) if path else Path.cwd()

    try:
        config = load_config(project_path)
        store = FileReleaseStore(project_path, config)
        version = store.read_version()
        fragments = store.load_fragments()
    except ReleaseFragError as e:
        err_console.print(f"[red]Error:[/] {e}")
        raise SystemExit(1) from e

    console.print(f"Collecting changelog fragments for version [cyan]{version}[/]")

    entry = build_entry((fragment.body for fragment in fragments), version, utc_today())
    if entry is None:
        console.print("[yellow]No changelog fragments found[/]")
        return

    if dry_run:
        console.print(
            Panel(
                Text(entry.strip()),
                title=f"[yellow]Dry Run Preview: {config.changelog.path}[/]",
                border_style="yellow",
            )
        )
        console.print(f"\n[dim]Would remove {len(fragments)} fragment(s).[/]")
        return

    try:
        updated = insert_entry(store.read_changelog(), entry, marker=config.changelog.insert_marker)
        store.write_changelog(updated)
        removed = store.remove_fragments(fragments)
    except OSError as e:
        err_console.print(f"[red]Error writing changelog:[/] {e}")
        raise SystemExit(1) from e

    console.print(f"  [green]✓[/] Updated {config.changelog.path} with version {version}")
    for removed_path in removed:
        console.print(f"  [green]✓[/] Removed {removed_path.relative_to(project_path)}")
    console.print("[green]Changelog collection complete[/]")
