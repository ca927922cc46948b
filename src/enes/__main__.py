"""Module entrypoint for ``python -m enes``."""

from __future__ import annotations

from enes.main import cli_entrypoint

if __name__ == "__main__":
    raise SystemExit(cli_entrypoint())
