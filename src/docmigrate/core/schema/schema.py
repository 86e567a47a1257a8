"""Source schema container."""

from __future__ import annotations

from dataclasses import dataclass, field
from pathlib import Path
from typing import Dict, List, Optional

from docmigrate.core.schema.types import Table
from docmigrate.utils.files import read_document, write_document
from docmigrate.utils.logging import get_logger

logger = get_logger(__name__)


def format_bytes(n: int) -> str:
    """Human readable byte count (binary units)."""
    if n < 1024:
        return f"{n} B"
    size = float(n)
    for unit in ("KB", "MB", "GB"):
        size /= 1024
        if size < 1024:
            return f"{size:.1f} {unit}"
    return f"{size / 1024:.1f} TB"


@dataclass
class SourceSchema:
    """The discovered tables of a source database."""

    tables: List[Table] = field(default_factory=list)
    database_type: str = ""
    database: str = ""
    schema_name: str = ""

    def __post_init__(self):
        self._by_name: Dict[str, Table] = {t.name: t for t in self.tables}

    def __repr__(self) -> str:
        return f"SourceSchema(tables={len(self.tables)}, database={self.database!r})"

    def table(self, name: str) -> Optional[Table]:
        """Look up a table by name (None when absent)."""
        return self._by_name.get(name)

    def table_map(self) -> Dict[str, Table]:
        return dict(self._by_name)

    @property
    def table_names(self) -> List[str]:
        return [t.name for t in self.tables]

    def select(self, names: List[str]) -> List[Table]:
        """Tables whose names are in ``names``, in schema order."""
        wanted = set(names)
        return [t for t in self.tables if t.name in wanted]

    def summary(self) -> str:
        """Short human-readable summary of the schema."""
        total_rows = sum(t.row_count for t in self.tables)
        total_size = sum(t.size_bytes for t in self.tables)
        total_cols = sum(len(t.columns) for t in self.tables)
        total_fks = sum(len(t.foreign_keys) for t in self.tables)
        return (
            f"Found {len(self.tables)} tables, {total_cols} columns, "
            f"{total_fks} foreign keys\n"
            f"Total rows: {total_rows}, Total size: {format_bytes(total_size)}"
        )

    def to_dict(self) -> Dict:
        data: Dict = {}
        if self.database_type:
            data["database_type"] = self.database_type
        if self.database:
            data["database"] = self.database
        if self.schema_name:
            data["schema_name"] = self.schema_name
        data["tables"] = [t.to_dict() for t in self.tables]
        return data

    @classmethod
    def from_dict(cls, data: Dict) -> SourceSchema:
        tables = data.get("tables")
        if tables is None:
            raise ValueError("Schema document has no 'tables' entry")
        return cls(
            tables=[Table.from_dict(t) for t in tables],
            database_type=data.get("database_type", ""),
            database=data.get("database", ""),
            schema_name=data.get("schema_name", ""),
        )

    def save(self, path: str | Path) -> None:
        """Save schema to a YAML or JSON file.

        Args:
            path: Destination path
        """
        path = write_document(path, self.to_dict())
        logger.info(f"Saved source schema to {path}")

    @classmethod
    def load(cls, path: str | Path) -> SourceSchema:
        """Load schema from a YAML or JSON file.

        Args:
            path: Source path

        Returns:
            SourceSchema instance
        """
        schema = cls.from_dict(read_document(path))
        logger.info(f"Loaded {len(schema.tables)} tables from {path}")
        return schema
