#!/usr/bin/env python3
"""Local entrypoint to run locktree from a source checkout.

Usage:
  python scripts/scan.py --root . [--format markdown] [--fail-on-duplicates]

This calls the same main() as the installed ``locktree`` command.
"""

from __future__ import annotations

from locktree.cli import main

if __name__ == "__main__":
    raise SystemExit(main())
