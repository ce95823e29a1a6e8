"""Command line interface for mailwright."""

from mailwright.cli.app import app, main

__all__ = ["app", "main"]
