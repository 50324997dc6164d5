"""``ytd-resolve doctor`` — environment diagnostics command.

Gathers runtime information and renders a Rich table summarising
whether the environment can resolve links, followed by the configured
backend order.

This module lives in the CLI layer — it may import from ``infra``
and ``core``, and it renders via Rich.
"""

from __future__ import annotations

import platform
import sys

from ytd_resolve.cli import exit_codes
from ytd_resolve.cli.console import console
from ytd_resolve.infra.config import ResolverConfig
from ytd_resolve.version import __version__


# ---------------------------------------------------------------------------
# Diagnostic collectors
# ---------------------------------------------------------------------------

def _python_version_check() -> tuple[str, str, str]:
    """Return (label, value, status) for the Python version row."""
    version = platform.python_version()
    major, minor = sys.version_info[:2]
    ok = (major, minor) >= (3, 10)
    status = "[green]OK[/green]" if ok else "[red]FAIL (>=3.10 required)[/red]"
    return "Python", version, status


def _httpx_version_check() -> tuple[str, str, str]:
    """Return (label, value, status) for the httpx row."""
    try:
        import httpx
    except ImportError:
        return "httpx", "NOT INSTALLED", "[red]FAIL[/red]"
    return "httpx", getattr(httpx, "__version__", "unknown"), "[green]OK[/green]"


def _ytdlp_version_check() -> tuple[str, str, str]:
    """Return (label, value, status) for the optional yt-dlp row."""
    try:
        from yt_dlp.version import __version__ as ydl_ver

        return "yt-dlp", ydl_ver, "[green]OK[/green]"
    except ImportError:
        return "yt-dlp", "not installed (backend skipped)", "[yellow]WARN[/yellow]"


def _backends_check(config: ResolverConfig) -> tuple[str, str, str]:
    """Return (label, value, status) for the configured backend order."""
    if not config.backends:
        return "Backends", "none (synthetic links only)", "[yellow]WARN[/yellow]"
    order = " → ".join(backend.name for backend in config.backends)
    return "Backends", order, "[green]OK[/green]"


def _ytdresolve_version_check() -> tuple[str, str, str]:
    """Return (label, value, status) for the ytd-resolve version row."""
    return "ytd-resolve", __version__, "[green]OK[/green]"


def _status_plain(status: str) -> str:
    """Convert rich-markup status to plain text."""
    for word in ("FAIL", "WARN", "OK"):
        if word in status:
            return word
    return status


def _print_plain_doctor_table(checks: list[tuple[str, str, str]]) -> None:
    """Render doctor output without Rich."""
    print("\nytd-resolve doctor", file=sys.stderr)
    print("=" * 64, file=sys.stderr)
    print(f"{'Component':<12} {'Value':<40} {'Status':<8}", file=sys.stderr)
    print("-" * 64, file=sys.stderr)
    for label, value, status in checks:
        print(f"{label:<12} {value:<40} {_status_plain(status):<8}", file=sys.stderr)
    print(file=sys.stderr)


# ---------------------------------------------------------------------------
# Public entry point
# ---------------------------------------------------------------------------

def run_doctor(config: ResolverConfig | None = None) -> int:
    """Execute all diagnostic checks and render a summary table.

    Returns
    -------
    int
        :data:`exit_codes.SUCCESS` when all critical checks pass,
        :data:`exit_codes.GENERAL_ERROR` if a critical check fails.
    """
    config = config if config is not None else ResolverConfig()
    checks = [
        _ytdresolve_version_check(),
        _python_version_check(),
        _httpx_version_check(),
        _ytdlp_version_check(),
        _backends_check(config),
    ]
    has_failure = any("FAIL" in status for _, _, status in checks)

    try:
        from rich.table import Table
    except ModuleNotFoundError:
        _print_plain_doctor_table(checks)
        print("Some checks failed." if has_failure else "All checks passed.", file=sys.stderr)
        return exit_codes.GENERAL_ERROR if has_failure else exit_codes.SUCCESS

    table = Table(
        title="ytd-resolve doctor",
        show_header=True,
        header_style="bold cyan",
        border_style="dim",
    )
    table.add_column("Component", style="bold", min_width=12)
    table.add_column("Value", min_width=20)
    table.add_column("Status", justify="center", min_width=8)
    for label, value, status in checks:
        table.add_row(label, value, status)

    console.print()
    console.print(table)
    console.print()

    if has_failure:
        console.print("[bold red]Some checks failed.[/bold red]")
        return exit_codes.GENERAL_ERROR

    console.print("[bold green]All checks passed.[/bold green]")
    return exit_codes.SUCCESS
