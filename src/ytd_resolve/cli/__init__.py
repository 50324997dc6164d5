"""Command-line surface: argparse routing, Rich rendering, exit codes.

Nothing in ``core`` or ``infra`` imports from here.
"""
