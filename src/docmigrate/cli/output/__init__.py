"""CLI output helpers."""

from docmigrate.cli.output.formatters import OutputFormatter

__all__ = ["OutputFormatter"]
