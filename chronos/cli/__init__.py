"""CLI commands for Chronos.

This package provides the command-line interface for logging trades,
browsing the journal and reviewing statistics.
"""

from chronos.cli.main import cli, main

__all__ = ["cli", "main"]
