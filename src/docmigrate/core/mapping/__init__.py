"""Relationship analysis, denormalization and document sizing."""

from docmigrate.core.mapping.denormalize import (
    DenormalizationEngine,
    DenormalizationResult,
    enforce_cycle_constraints,
)
from docmigrate.core.mapping.graph import (
    EmbeddingCycleError,
    ForeignKeyEdge,
    JoinTableInfo,
    RelationshipGraph,
)
from docmigrate.core.mapping.heuristics import (
    RelationshipChoice,
    RelationshipInfo,
    classify_relationship,
    relationship_edges,
    suggest_choices,
)
from docmigrate.core.mapping.size_estimate import (
    CollectionSizeEstimate,
    DocumentSizeEstimator,
)
from docmigrate.core.mapping.types import (
    RELATIONSHIP_ARRAY,
    RELATIONSHIP_SINGLE,
    Collection,
    Embedded,
    Mapping,
    Reference,
    Transformation,
)

__all__ = [
    "RELATIONSHIP_ARRAY",
    "RELATIONSHIP_SINGLE",
    "Collection",
    "CollectionSizeEstimate",
    "DenormalizationEngine",
    "DenormalizationResult",
    "DocumentSizeEstimator",
    "Embedded",
    "EmbeddingCycleError",
    "ForeignKeyEdge",
    "JoinTableInfo",
    "Mapping",
    "Reference",
    "RelationshipChoice",
    "RelationshipGraph",
    "RelationshipInfo",
    "Transformation",
    "classify_relationship",
    "enforce_cycle_constraints",
    "relationship_edges",
    "suggest_choices",
]
