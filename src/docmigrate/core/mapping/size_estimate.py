"""Per-collection document size estimates from source statistics."""

from __future__ import annotations

from dataclasses import asdict, dataclass
from typing import Dict, Iterable, List, Optional, Tuple

from docmigrate.core.mapping.types import Collection, Embedded, Mapping
from docmigrate.core.schema.types import Table
from docmigrate.utils.config import get_config
from docmigrate.utils.logging import get_logger
from docmigrate.utils.timing import timed

logger = get_logger(__name__)

DOCUMENT_LIMIT_BYTES = 16 * 1024 * 1024

# Fixed-width guesses used when a table has no byte statistics.
COLUMN_TYPE_SIZES = {
    "boolean": 1,
    "bool": 1,
    "smallint": 2,
    "int2": 2,
    "integer": 4,
    "int": 4,
    "int4": 4,
    "serial": 4,
    "bigint": 8,
    "int8": 8,
    "bigserial": 8,
    "real": 4,
    "float4": 4,
    "double precision": 8,
    "float8": 8,
    "numeric": 16,
    "decimal": 16,
    "number": 16,
    "date": 4,
    "timestamp": 8,
    "timestamp without time zone": 8,
    "timestamp with time zone": 8,
    "uuid": 16,
    "text": 100,
    "varchar": 100,
    "character varying": 100,
    "varchar2": 100,
    "clob": 100,
    "bytea": 256,
    "blob": 256,
    "raw": 256,
    "json": 200,
    "jsonb": 200,
}


@dataclass
class CollectionSizeEstimate:
    """Estimated document size for one collection."""

    collection: str
    source_table: str
    avg_doc_size_bytes: int = 0
    max_doc_size_bytes: int = 0
    avg_row_count: int = 0
    exceeds_limit: bool = False
    warning: Optional[str] = None

    def to_dict(self) -> Dict:
        return asdict(self)


class DocumentSizeEstimator:
    """Estimates average and worst-case document sizes for a mapping."""

    def __init__(self, config: Optional[Dict] = None):
        """Initialize estimator.

        Args:
            config: ``sizing`` config section (uses global config if None)
        """
        self.config = config or get_config().get("sizing", {})
        self.document_limit = self.config.get("document_limit_bytes", DOCUMENT_LIMIT_BYTES)
        self.avg_overhead = self.config.get("avg_overhead", 1.3)
        self.max_overhead = self.config.get("max_overhead", 1.5)
        self.skew_factor = self.config.get("skew_factor", 10)
        self.fallback_row_bytes = self.config.get("fallback_row_bytes", 100)
        self.unknown_column_bytes = self.config.get("unknown_column_bytes", 32)

    @timed("size_estimate.estimate")
    def estimate(
        self, tables: Iterable[Table], mapping: Mapping
    ) -> List[CollectionSizeEstimate]:
        """Estimate sizes for every collection of ``mapping``, in order.

        Args:
            tables: Source tables with row/byte statistics
            mapping: Finalized mapping

        Returns:
            One CollectionSizeEstimate per collection
        """
        table_map = {t.name: t for t in tables}
        estimates = [self.estimate_collection(c, table_map) for c in mapping.collections]

        oversized = [e.collection for e in estimates if e.exceeds_limit]
        if oversized:
            logger.warning(
                f"{len(oversized)} collection(s) may exceed the document size limit: "
                f"{', '.join(oversized)}"
            )
        return estimates

    def estimate_collection(
        self, collection: Collection, table_map: Dict[str, Table]
    ) -> CollectionSizeEstimate:
        source = table_map.get(collection.source_table)
        if source is None:
            # statistics unavailable, not a failure
            logger.debug(f"No source table for collection {collection.name}")
            return CollectionSizeEstimate(
                collection=collection.name, source_table=collection.source_table
            )

        base_row = self.row_size(source)
        parent_rows = source.row_count if source.row_count > 0 else 1

        avg_embedded = 0
        max_embedded = 0
        for emb in collection.embedded:
            avg_bytes, max_bytes = self._embedded_size(emb, table_map, parent_rows)
            avg_embedded += avg_bytes
            max_embedded += max_bytes

        avg_size = int((base_row + avg_embedded) * self.avg_overhead)
        max_size = int((base_row + max_embedded) * self.max_overhead)

        estimate = CollectionSizeEstimate(
            collection=collection.name,
            source_table=collection.source_table,
            avg_doc_size_bytes=avg_size,
            max_doc_size_bytes=max_size,
            avg_row_count=parent_rows,
        )
        if max_size > self.document_limit:
            estimate.exceeds_limit = True
            estimate.warning = (
                f"Estimated maximum document size exceeds the "
                f"{self.document_limit // (1024 * 1024)}MB document limit. "
                "Consider reducing embedding depth or splitting into references."
            )
        return estimate

    def _children_per_parent(self, child_rows: int, parent_rows: int) -> int:
        if parent_rows > 0 and child_rows > 0:
            return max(child_rows // parent_rows, 1)
        return 1

    def _embedded_size(
        self, emb: Embedded, table_map: Dict[str, Table], parent_rows: int
    ) -> Tuple[int, int]:
        child = table_map.get(emb.source_table)
        if child is None:
            return 0, 0

        child_row = self.row_size(child)
        if emb.is_array:
            per_parent = self._children_per_parent(child.row_count, parent_rows)
            avg_mult = per_parent
            # skewed distribution: some parents hold far more than average
            max_mult = per_parent * self.skew_factor
        else:
            avg_mult = max_mult = 1

        avg_bytes = child_row * avg_mult
        max_bytes = child_row * max_mult

        for nested in emb.embedded:
            nested_avg, nested_max = self._embedded_size(nested, table_map, child.row_count)
            avg_bytes += nested_avg * avg_mult
            max_bytes += nested_max * max_mult

        return avg_bytes, max_bytes

    def row_size(self, table: Table) -> int:
        """Average bytes per row: statistics first, column type widths otherwise."""
        if table.size_bytes > 0 and table.row_count > 0:
            return table.size_bytes // table.row_count

        size = sum(self.column_size(col.data_type) for col in table.columns)
        return size if size > 0 else self.fallback_row_bytes

    def column_size(self, data_type: str) -> int:
        return COLUMN_TYPE_SIZES.get(
            (data_type or "").strip().lower(), self.unknown_column_bytes
        )
