"""CLI application entry point and command routing for ytd-resolve.

This module is the **sole error boundary** for the entire application.
It catches :class:`~ytd_resolve.exceptions.ResolverError`,
``KeyboardInterrupt``, and any unexpected ``Exception``, rendering
user-friendly messages via Rich and returning well-defined exit codes.

Architecture notes
------------------
* No business logic lives here — all work is delegated to the core
  service and the infrastructure layer.
* This module is the only place that translates between the domain world
  and the OS process exit code.
"""

from __future__ import annotations

import argparse
import dataclasses
import sys
import time

from ytd_resolve.cli import exit_codes
from ytd_resolve.cli.console import configure_logging, console
from ytd_resolve.exceptions import ResolverError
from ytd_resolve.version import __version__


# ---------------------------------------------------------------------------
# Argument parser
# ---------------------------------------------------------------------------

def _positive_float(value: str) -> float:
    try:
        number = float(value)
    except ValueError:
        raise argparse.ArgumentTypeError(f"not a number: {value!r}") from None
    if number <= 0:
        raise argparse.ArgumentTypeError("must be greater than zero")
    return number


def _positive_int(value: str) -> int:
    try:
        number = int(value)
    except ValueError:
        raise argparse.ArgumentTypeError(f"not an integer: {value!r}") from None
    if number <= 0:
        raise argparse.ArgumentTypeError("must be greater than zero")
    return number


def _build_parser() -> argparse.ArgumentParser:
    """Construct the top-level argument parser.

    The CLI supports:
    * ``ytd-resolve <url> [-f FORMAT]`` — resolve a direct link
    * ``ytd-resolve doctor``            — environment diagnostics
    * ``ytd-resolve --version``
    """
    parser = argparse.ArgumentParser(
        prog="ytd-resolve",
        description="Resolve a YouTube URL into a direct media link.",
    )
    parser.add_argument(
        "-V",
        "--version",
        action="version",
        version=f"%(prog)s {__version__}",
    )
    parser.add_argument(
        "target",
        nargs="?",
        default=None,
        help="YouTube URL to resolve, or 'doctor' to run diagnostics.",
    )
    parser.add_argument(
        "-f",
        "--format",
        default=None,
        help="Format label such as mp3, mp4, 720p or 1080p (default: mp4).",
    )
    parser.add_argument(
        "--json",
        action="store_true",
        help="Print the result as JSON on stdout.",
    )
    parser.add_argument(
        "--config",
        default=None,
        help="Path to a YAML configuration file.",
    )
    parser.add_argument(
        "--timeout",
        type=_positive_float,
        default=None,
        help="Overall deadline in seconds for all backend attempts.",
    )
    parser.add_argument(
        "--concurrency",
        type=_positive_int,
        default=None,
        help="Number of backends queried at once (priority order is kept).",
    )
    parser.add_argument(
        "-v",
        "--verbose",
        action="store_true",
        help="Log every backend attempt.",
    )
    return parser


# ---------------------------------------------------------------------------
# Command dispatch
# ---------------------------------------------------------------------------

def _handle_resolve(url: str, args: argparse.Namespace) -> int:
    """Resolve *url* and render the outcome.

    Flow:
    1. Load configuration and wire the service.
    2. Query backends in priority order (synthetic fallback last).
    3. Render as a Rich table or JSON.
    """
    from ytd_resolve.cli.render import render_json, render_outcome
    from ytd_resolve.infra.config import load_config
    from ytd_resolve.infra.registry import open_service

    config = load_config(args.config)
    if args.concurrency is not None:
        config = dataclasses.replace(config, max_concurrency=args.concurrency)

    deadline = time.monotonic() + args.timeout if args.timeout is not None else None

    if not args.json:
        console.print(f"\n[bold]Resolving…[/bold]  {url}")

    with open_service(config) as service:
        outcome = service.resolve(url, args.format, deadline=deadline)

    if args.json:
        render_json(outcome)
    else:
        render_outcome(outcome)

    return exit_codes.for_outcome(outcome)


def _handle_doctor(args: argparse.Namespace) -> int:
    """Dispatch the ``doctor`` diagnostics command."""
    from ytd_resolve.cli.doctor import run_doctor
    from ytd_resolve.infra.config import load_config

    return run_doctor(load_config(args.config))


# ---------------------------------------------------------------------------
# Main entry point
# ---------------------------------------------------------------------------

def main(argv: list[str] | None = None) -> int:
    """Run the ytd-resolve CLI.

    Parameters
    ----------
    argv:
        Explicit argument list.  When ``None`` (default), ``sys.argv[1:]``
        is used.  Accepting *argv* enables deterministic testing without
        monkeypatching.

    Returns
    -------
    int
        OS process exit code.
    """
    parser = _build_parser()
    args = parser.parse_args(argv)

    if args.target is None:
        parser.print_help()
        return exit_codes.SUCCESS

    configure_logging(args.verbose)
    target: str = args.target

    if target.lower() == "doctor":
        return _handle_doctor(args)

    return _handle_resolve(target, args)


# ---------------------------------------------------------------------------
# Script-level error boundary
# ---------------------------------------------------------------------------

def cli() -> None:
    """Top-level error boundary invoked by the console-script entry point.

    This function wraps :func:`main` and guarantees the process never
    exits with a raw stack trace during normal usage.
    """
    try:
        code = main()
        sys.exit(code)
    except ResolverError as exc:
        console.print(f"[bold red]Error:[/bold red] {exc}")
        if exc.hint:
            console.print(f"[yellow]Hint:[/yellow] {exc.hint}")
        sys.exit(exit_codes.GENERAL_ERROR)
    except KeyboardInterrupt:
        console.print("\n[yellow]Aborted by user.[/yellow]")
        sys.exit(exit_codes.KEYBOARD_INTERRUPT)
    except Exception as exc:  # noqa: BLE001
        console.print(
            "[bold red]Unexpected error.[/bold red] "
            "Please report this issue.\n"
            f"  {type(exc).__name__}: {exc}"
        )
        sys.exit(exit_codes.UNEXPECTED_ERROR)
