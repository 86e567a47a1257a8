"""Common data loading utilities for CLI commands."""

from __future__ import annotations

from typing import List, Optional, Sequence

from docmigrate.core.mapping import Mapping
from docmigrate.core.schema import SourceSchema, Table
from docmigrate.utils.logging import get_logger

logger = get_logger(__name__)


class CLIDataLoader:
    """Loads schema and mapping documents for CLI commands.

    Example:
        >>> loader = CLIDataLoader()
        >>> tables = loader.load_tables("schema.yaml", ["orders", "customers"])
    """

    def load_schema(self, schema_file: str) -> SourceSchema:
        return SourceSchema.load(schema_file)

    def load_tables(
        self, schema_file: str, selected: Optional[Sequence[str]] = None
    ) -> List[Table]:
        """Load a schema and return the selected tables (all when none given).

        Raises:
            ValueError: If a selected table is not part of the schema
        """
        return self.select_tables(self.load_schema(schema_file), selected)

    def select_tables(
        self, schema: SourceSchema, selected: Optional[Sequence[str]] = None
    ) -> List[Table]:
        """Tables of ``schema`` named in ``selected``, in schema order."""
        if not selected:
            return list(schema.tables)

        missing = [name for name in selected if schema.table(name) is None]
        if missing:
            raise ValueError(f"Tables not found in schema: {', '.join(missing)}")

        tables = schema.select(list(selected))
        logger.info(f"Selected {len(tables)} of {len(schema.tables)} tables")
        return tables

    def load_mapping(self, mapping_file: str) -> Mapping:
        mapping = Mapping.load(mapping_file)
        logger.info(f"Loaded mapping with {len(mapping.collections)} collections")
        return mapping
