"""Core modules for docmigrate."""

# Re-export all public APIs
from docmigrate.core.indexes import (
    CollectionIndex,
    IndexDefinition,
    IndexInferenceEngine,
    IndexKey,
    IndexPlan,
)
from docmigrate.core.mapping import (
    Collection,
    CollectionSizeEstimate,
    DenormalizationEngine,
    DenormalizationResult,
    DocumentSizeEstimator,
    Embedded,
    EmbeddingCycleError,
    ForeignKeyEdge,
    JoinTableInfo,
    Mapping,
    Reference,
    RelationshipChoice,
    RelationshipGraph,
    Transformation,
)
from docmigrate.core.schema import (
    Column,
    ForeignKey,
    Index,
    PrimaryKey,
    SourceSchema,
    Table,
)

__all__ = [
    # Schema
    "Column",
    "ForeignKey",
    "Index",
    "PrimaryKey",
    "SourceSchema",
    "Table",
    # Mapping
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
    "Transformation",
    # Indexes
    "CollectionIndex",
    "IndexDefinition",
    "IndexInferenceEngine",
    "IndexKey",
    "IndexPlan",
]
