"""Outcome rendering for the CLI layer.

* ``--json`` writes the wire-shape dict to stdout (for scripting).
* Otherwise a Rich table is printed to stderr, with a plain-text
  fallback when Rich is not installed.

All display-related logic lives here — no business logic.
"""

from __future__ import annotations

import json
import sys
from typing import Any

from ytd_resolve.cli.console import console
from ytd_resolve.core.models import Provenance, ResolutionOutcome

_REASON_TEXT: dict[str, str] = {
    "invalid_url": "The URL is empty or not a supported video link.",
    "identifier_not_found": "No video ID could be found in the URL.",
}

_SYNTHETIC_WARNING = "No backend answered; these links were fabricated and may not play."


def _import_rich_table() -> type[Any] | None:
    """Import rich table lazily; ``None`` when Rich is missing."""
    try:
        from rich.table import Table
    except ModuleNotFoundError:
        return None
    return Table


def _provenance_label(outcome: ResolutionOutcome) -> str:
    if outcome.provenance is Provenance.SYNTHETIC:
        return "synthetic (unverified)"
    if outcome.backend:
        return f"backend ({outcome.backend})"
    return "backend"


def _rows(outcome: ResolutionOutcome) -> list[tuple[str, str]]:
    rows = [
        ("Video ID", outcome.video_id or ""),
        ("Format code", outcome.format_code or ""),
        ("Source", _provenance_label(outcome)),
    ]
    if outcome.title:
        rows.append(("Title", outcome.title))
    if outcome.author:
        rows.append(("Author", outcome.author))
    rows.append(("Link", outcome.primary_link or ""))
    for index, link in enumerate(outcome.alternative_links, start=1):
        rows.append((f"Alternative {index}", link))
    return rows


def render_json(outcome: ResolutionOutcome) -> None:
    """Write the outcome's wire shape to stdout."""
    sys.stdout.write(json.dumps(outcome.to_dict(), indent=2) + "\n")


def render_outcome(outcome: ResolutionOutcome) -> None:
    """Print a human-readable summary of *outcome*."""
    if not outcome.ok:
        reason = outcome.reason or "unknown"
        console.print(f"[bold red]Error:[/bold red] {_REASON_TEXT.get(reason, reason)}")
        return

    table_class = _import_rich_table()
    rows = _rows(outcome)

    if table_class is None:
        for label, value in rows:
            print(f"{label:<14} {value}", file=sys.stderr)
        if outcome.provenance is Provenance.SYNTHETIC:
            print(f"Warning: {_SYNTHETIC_WARNING}", file=sys.stderr)
        return

    table = table_class(
        title="Resolved link",
        show_header=False,
        border_style="dim",
    )
    table.add_column("Field", style="bold cyan", no_wrap=True)
    table.add_column("Value", overflow="fold")
    for label, value in rows:
        table.add_row(label, value)

    console.print()
    console.print(table)
    if outcome.provenance is Provenance.SYNTHETIC:
        console.print(f"[yellow]{_SYNTHETIC_WARNING}[/yellow]")
    console.print()
