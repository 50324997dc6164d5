"""``python -m ytd_resolve`` runs the same entry point as the console script."""

from __future__ import annotations

from ytd_resolve.cli.app import cli

if __name__ == "__main__":
    cli()
