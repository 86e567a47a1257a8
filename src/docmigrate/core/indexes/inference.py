"""Translate source indexing into an equivalent target index plan."""

from __future__ import annotations

from typing import Dict, Iterable, List, Optional

from docmigrate.core.indexes.types import IndexDefinition, IndexKey, IndexPlan
from docmigrate.core.mapping.types import Collection, Embedded, Mapping
from docmigrate.core.schema.types import Table
from docmigrate.utils.config import get_config
from docmigrate.utils.logging import get_logger
from docmigrate.utils.timing import timed

logger = get_logger(__name__)


def _index_name(*parts: str) -> str:
    return "_".join(parts).replace(".", "_")


class IndexInferenceEngine:
    """Infers target indexes from primary keys, references and source indexes.

    Field paths of embedded tables are rewritten with dot notation at any
    nesting depth.
    """

    def __init__(self, config: Optional[Dict] = None):
        """Initialize engine.

        Args:
            config: ``indexes`` config section (uses global config if None)
        """
        self.config = config or get_config().get("indexes", {})
        self.identity_columns = set(self.config.get("identity_columns", ["_id", "id"]))

    @timed("indexes.infer")
    def infer(self, tables: Iterable[Table], mapping: Mapping) -> IndexPlan:
        """Build the index plan for every collection, in mapping order.

        Args:
            tables: Source tables
            mapping: Finalized mapping

        Returns:
            IndexPlan
        """
        table_map = {t.name: t for t in tables}
        plan = IndexPlan()

        for collection in mapping.collections:
            source = table_map.get(collection.source_table)
            if source is None:
                logger.debug(f"No source table for collection {collection.name}, skipping")
                continue
            self._infer_collection(plan, collection, source, table_map)

        logger.info(
            f"Inferred {len(plan.indexes)} indexes for {len(mapping.collections)} collections"
        )
        return plan

    def _maps_to_identity(self, columns: List[str]) -> bool:
        return len(columns) == 1 and columns[0] in self.identity_columns

    def _infer_collection(
        self,
        plan: IndexPlan,
        collection: Collection,
        source: Table,
        table_map: Dict[str, Table],
    ) -> None:
        name = collection.name
        pk_columns = list(source.primary_key.columns) if source.primary_key else []

        # 1. Primary key -> unique index, unless it maps onto the identity field
        if pk_columns and not self._maps_to_identity(pk_columns):
            plan.add_if_new(
                name,
                IndexDefinition(
                    keys=[IndexKey(c) for c in pk_columns],
                    name=f"pk_{name}",
                    unique=True,
                ),
                f"Unique index on {name}({', '.join(pk_columns)}) from primary key",
            )

        # 2. References -> single-field index
        for ref in collection.references:
            plan.add_if_new(
                name,
                IndexDefinition(
                    keys=[IndexKey(ref.field_name)],
                    name=_index_name("ref", name, ref.field_name),
                ),
                f"Index on {name}.{ref.field_name} from reference to {ref.source_table}",
            )

        # 3. Source indexes, except the one covering the primary key
        for src_index in source.indexes:
            if not src_index.columns:
                continue
            if pk_columns and list(src_index.columns) == pk_columns:
                continue
            plan.add_if_new(
                name,
                IndexDefinition(
                    keys=[IndexKey(c) for c in src_index.columns],
                    name=_index_name("idx", name, *src_index.columns),
                    unique=src_index.unique,
                ),
                f"Index on {name}({', '.join(src_index.columns)}) "
                f"from source index {src_index.name}",
            )

        # 4. Embedded tables -> dot-notation indexes
        self._infer_embedded(plan, name, collection.embedded, table_map, "")

    def _infer_embedded(
        self,
        plan: IndexPlan,
        collection: str,
        embedded: List[Embedded],
        table_map: Dict[str, Table],
        prefix: str,
    ) -> None:
        for emb in embedded:
            path = f"{prefix}.{emb.field_name}" if prefix else emb.field_name

            source = table_map.get(emb.source_table)
            if source is None:
                continue

            join_path = f"{path}.{emb.join_column}"
            plan.add_if_new(
                collection,
                IndexDefinition(
                    keys=[IndexKey(join_path)],
                    name=_index_name("idx", collection, path, emb.join_column),
                ),
                f"Index on {collection}.{join_path} from embedded join",
            )

            for src_index in source.indexes:
                if not src_index.columns:
                    continue
                paths = [f"{path}.{c}" for c in src_index.columns]
                plan.add_if_new(
                    collection,
                    IndexDefinition(
                        keys=[IndexKey(p) for p in paths],
                        name=_index_name("idx", collection, *paths),
                        unique=src_index.unique,
                    ),
                    f"Index on {collection}({', '.join(paths)}) from embedded table "
                    f"{emb.source_table} index {src_index.name}",
                )

            self._infer_embedded(plan, collection, emb.embedded, table_map, path)
