"""Command-line interface for release-frag."""

from __future__ import annotations

from release_frag.cli.app import app, main

__all__ = ["app", "main"]
