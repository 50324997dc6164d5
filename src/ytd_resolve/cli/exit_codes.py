"""Process exit codes for ``ytd-resolve``.

Every return path in :mod:`ytd_resolve.cli.app` maps to one of these
constants; scripts can rely on them.
"""

from __future__ import annotations

from typing import TYPE_CHECKING

if TYPE_CHECKING:
    from ytd_resolve.core.models import ResolutionOutcome

SUCCESS: int = 0
"""A link was resolved (backend or synthetic), or a command completed."""

GENERAL_ERROR: int = 1
"""The URL was rejected, a doctor check failed, or a ResolverError was caught."""

UNEXPECTED_ERROR: int = 2
"""An unhandled exception escaped all known error boundaries."""

KEYBOARD_INTERRUPT: int = 130
"""Ctrl+C; 128 + SIGINT."""


def for_outcome(outcome: ResolutionOutcome) -> int:
    """Map a resolution outcome to the process exit code."""
    return SUCCESS if outcome.ok else GENERAL_ERROR
