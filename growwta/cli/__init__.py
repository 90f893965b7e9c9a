"""CLI package for groww-ta."""

from growwta.cli.main import cli, main

__all__ = ["cli", "main"]
