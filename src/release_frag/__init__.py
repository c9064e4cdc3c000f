"""release-frag: semantic-version releases from changelog fragments."""

from __future__ import annotations

__version__ = "0.1.0"
