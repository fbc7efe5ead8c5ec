"""CLI package for PackageSearch command orchestration."""

from __future__ import annotations

__all__ = ["CommandRunner", "main"]

from PackageSearch.cli.runner import CommandRunner
from PackageSearch.cli.ui import cli


def main() -> None:
    """Run PackageSearch CLI.

    Entry point referenced by console script in pyproject.toml.
    """
    cli()
