"""Command-line entry point for the comfygen client."""

from __future__ import annotations

from comfygen.cli import main

if __name__ == "__main__":
    raise SystemExit(main())
