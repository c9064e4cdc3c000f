"""Implementation of the 'bump-type' command.

Reports the bump required by the pending fragments without changing
anything.
"""

from __future__ import annotations

from pathlib import Path
from typing import TYPE_CHECKING

from rich.table import Table

from release_frag.cli.output import set_output
from release_frag.config import load_config
from release_frag.core.bump import resolve_bump
from release_frag.core.fragments import FragmentStore
from release_frag.exceptions import ReleaseFragError

if TYPE_CHECKING:
    from rich.console import Console

    from release_frag.core.version import BumpType


def run_bump_type(
    path: str | None,
    default: BumpType | None,
    console: Console,
    err_console: Console,
) -> None:
    """Run the bump-type command.

    Args:
        path: Optional path to project directory
        default: Default bump override, falls back to the configured default
        console: Console for standard output
        err_console: Console for error output
    """
    project_path = Path(path) if path else Path.cwd()

    try:
        config = load_config(project_path)
        store = FragmentStore(
            project_path / config.fragments.directory,
            suffix=config.fragments.suffix,
            reserved_name=config.fragments.reserved_name,
        )
        fragments = store.load()
    except ReleaseFragError as e:
        err_console.print(f"[red]Error:[/] {e}")
        raise SystemExit(1) from e
    except OSError as e:
        err_console.print(f"[red]Error reading fragments:[/] {e}")
        raise SystemExit(1) from e

    resolution = resolve_bump(fragments, default or config.fragments.default_bump)

    if not resolution.has_fragments:
        console.print(f"[yellow]No changelog fragments found in {config.fragments.directory}[/]")
    else:
        table = Table(title="Changelog fragments", show_lines=False)
        table.add_column("Fragment", style="cyan")
        table.add_column("Bump")
        for name, bump in resolution.declarations:
            table.add_row(name, str(bump) if bump else "[dim]default[/]")
        console.print(table)

    console.print(
        f"\nDetermined bump type: [green]{resolution.bump_type}[/] "
        f"(from {resolution.fragment_count} fragment(s))"
    )

    set_output("bump_type", str(resolution.bump_type), console)
    set_output("fragment_count", resolution.fragment_count, console)
    set_output("has_fragments", resolution.has_fragments, console)
