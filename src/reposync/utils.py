"""Utility helpers for sync-repos."""

import logging
import sys
from importlib.metadata import PackageNotFoundError, version


def setup_logging(verbose: bool = False):
    """Configure root logging for the CLI.

    Diagnostics go to stderr so they never interleave with the per-repository
    status lines on stdout.
    """
    level = logging.DEBUG if verbose else logging.WARNING
    logging.basicConfig(
        level=level,
        format="%(asctime)s - %(name)s - %(levelname)s - %(message)s",
        handlers=[logging.StreamHandler(sys.stderr)],
    )


def get_version() -> str:
    """Get the installed package version."""
    try:
        return version("sync-repos")
    except PackageNotFoundError:
        return "(development)"
