"""Shared console helpers and CI step outputs."""

from __future__ import annotations

import logging
import os
from pathlib import Path
from typing import TYPE_CHECKING

from rich.logging import RichHandler

if TYPE_CHECKING:
    from rich.console import Console

GITHUB_OUTPUT_ENV = "GITHUB_OUTPUT"


def configure_logging(verbose: bool, console: Console) -> None:
    """Route library logging through rich on the error console."""
    logging.basicConfig(
        level=logging.DEBUG if verbose else logging.WARNING,
        format="%(message)s",
        datefmt="[%X]",
        handlers=[RichHandler(console=console, show_path=verbose, rich_tracebacks=True)],
        force=True,
    )


def set_output(key: str, value: str | int | bool, console: Console) -> None:
    """Record a step output.

    The pair is appended to the file named by GITHUB_OUTPUT when running
    under GitHub Actions and always echoed for visibility.
    """
    if isinstance(value, bool):
        value = "true" if value else "false"

    output_file = os.environ.get(GITHUB_OUTPUT_ENV)
    if output_file:
        with Path(output_file).open("a", encoding="utf-8") as f:
            f.write(f"{key}={value}\n")

    console.print(f"[dim]Output:[/] {key}={value}", highlight=False)
