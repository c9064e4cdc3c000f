"""Allow ``python -m release_frag``."""

from __future__ import annotations

from release_frag.cli.app import main

if __name__ == "__main__":
    main()
