"""Command-line interface for catbreeds."""

from catbreeds.cli.main import cli, main

__all__ = ["cli", "main"]
