"""CLI decorators for common options and error handling."""

from docmigrate.cli.decorators.error_handling import handle_errors
from docmigrate.cli.decorators.options import with_output_file, with_tables

__all__ = [
    "handle_errors",
    "with_output_file",
    "with_tables",
]
