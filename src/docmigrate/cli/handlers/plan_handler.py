"""Business logic for planning commands."""

from __future__ import annotations

from typing import Dict, List, Optional

from docmigrate.core.indexes import IndexInferenceEngine, IndexPlan
from docmigrate.core.mapping import (
    CollectionSizeEstimate,
    DenormalizationEngine,
    DenormalizationResult,
    DocumentSizeEstimator,
    Mapping,
    RelationshipGraph,
    relationship_edges,
)
from docmigrate.core.schema import Table
from docmigrate.utils.config import Config


class PlanHandler:
    """Wires the core engines to configuration for the CLI.

    Example:
        >>> handler = PlanHandler(config)
        >>> result = handler.design(tables)
    """

    def __init__(self, config: Config):
        """Initialize handler.

        Args:
            config: Configuration instance
        """
        self.config = config

    def analyze(self, tables: List[Table]) -> Dict[str, list]:
        """Structural facts about the FK graph of ``tables``."""
        graph = RelationshipGraph(tables)
        return {
            "relationships": relationship_edges(graph),
            "self_references": graph.self_references(),
            "cycles": graph.detect_cycles(),
            "join_tables": graph.join_tables(),
        }

    def design(
        self, tables: List[Table], root_tables: Optional[List[str]] = None
    ) -> DenormalizationResult:
        engine = DenormalizationEngine(self.config.section("denormalization"))
        return engine.suggest(tables, root_tables=root_tables or None)

    def preview(self, mapping: Mapping) -> List[str]:
        return DenormalizationEngine.preview(mapping)

    def estimate(
        self, tables: List[Table], mapping: Mapping
    ) -> List[CollectionSizeEstimate]:
        return DocumentSizeEstimator(self.config.section("sizing")).estimate(
            tables, mapping
        )

    def indexes(self, tables: List[Table], mapping: Mapping) -> IndexPlan:
        return IndexInferenceEngine(self.config.section("indexes")).infer(tables, mapping)
