"""docmigrate - plan relational to document schema migrations."""

__version__ = "0.1.0"

from docmigrate.core import (
    Collection,
    CollectionSizeEstimate,
    DenormalizationEngine,
    DocumentSizeEstimator,
    Embedded,
    IndexInferenceEngine,
    IndexPlan,
    Mapping,
    Reference,
    RelationshipChoice,
    RelationshipGraph,
    SourceSchema,
    Table,
)
from docmigrate.utils.config import Config, get_config, load_config

__all__ = [
    "__version__",
    # Core
    "Collection",
    "CollectionSizeEstimate",
    "DenormalizationEngine",
    "DocumentSizeEstimator",
    "Embedded",
    "IndexInferenceEngine",
    "IndexPlan",
    "Mapping",
    "Reference",
    "RelationshipChoice",
    "RelationshipGraph",
    "SourceSchema",
    "Table",
    # Config
    "Config",
    "get_config",
    "load_config",
]
