"""Source schema entities."""

from docmigrate.core.schema.schema import SourceSchema, format_bytes
from docmigrate.core.schema.types import Column, ForeignKey, Index, PrimaryKey, Table

__all__ = [
    "Column",
    "ForeignKey",
    "Index",
    "PrimaryKey",
    "SourceSchema",
    "Table",
    "format_bytes",
]
