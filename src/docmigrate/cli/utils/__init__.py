"""CLI utilities."""

from docmigrate.cli.utils.loaders import CLIDataLoader

__all__ = ["CLIDataLoader"]
