"""Target index planning."""

from docmigrate.core.indexes.inference import IndexInferenceEngine
from docmigrate.core.indexes.types import (
    ASCENDING,
    DESCENDING,
    CollectionIndex,
    IndexDefinition,
    IndexKey,
    IndexPlan,
)

__all__ = [
    "ASCENDING",
    "DESCENDING",
    "CollectionIndex",
    "IndexDefinition",
    "IndexInferenceEngine",
    "IndexKey",
    "IndexPlan",
]
