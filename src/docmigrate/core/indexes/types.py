"""Target index plan data types."""

from __future__ import annotations

from dataclasses import dataclass, field
from pathlib import Path
from typing import Any, Dict, List, Tuple

from docmigrate.utils.files import read_document, write_document
from docmigrate.utils.logging import get_logger

logger = get_logger(__name__)

ASCENDING = 1
DESCENDING = -1


@dataclass(frozen=True)
class IndexKey:
    """One (field path, sort order) pair of an index."""

    field: str
    order: int = ASCENDING

    def to_dict(self) -> Dict[str, Any]:
        return {"field": self.field, "order": self.order}

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> IndexKey:
        return cls(field=data["field"], order=data.get("order", ASCENDING))


@dataclass
class IndexDefinition:
    """A single target index."""

    keys: List[IndexKey]
    name: str
    unique: bool = False

    @property
    def signature(self) -> Tuple[Tuple[str, int], ...]:
        """Ordered (field, order) pairs identifying the index within a collection."""
        return tuple((k.field, k.order) for k in self.keys)

    @property
    def fields(self) -> List[str]:
        return [k.field for k in self.keys]

    def to_dict(self) -> Dict[str, Any]:
        return {
            "keys": [k.to_dict() for k in self.keys],
            "name": self.name,
            "unique": self.unique,
        }

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> IndexDefinition:
        return cls(
            keys=[IndexKey.from_dict(k) for k in data.get("keys") or []],
            name=data.get("name", ""),
            unique=data.get("unique", False),
        )


@dataclass
class CollectionIndex:
    """An index definition bound to a collection."""

    collection: str
    index: IndexDefinition

    def __repr__(self) -> str:
        fields = ", ".join(self.index.fields)
        unique = ", unique" if self.index.unique else ""
        return f"CollectionIndex({self.collection}: {self.index.name}({fields}){unique})"

    def to_dict(self) -> Dict[str, Any]:
        return {"collection": self.collection, "index": self.index.to_dict()}

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> CollectionIndex:
        return cls(
            collection=data["collection"],
            index=IndexDefinition.from_dict(data["index"]),
        )


@dataclass
class IndexPlan:
    """Indexes to create on the target, with one explanation per index."""

    indexes: List[CollectionIndex] = field(default_factory=list)
    explanations: List[str] = field(default_factory=list)

    def for_collection(self, collection: str) -> List[IndexDefinition]:
        return [ci.index for ci in self.indexes if ci.collection == collection]

    def add_if_new(self, collection: str, index: IndexDefinition, explanation: str) -> bool:
        """Record ``index`` unless it is redundant.

        An index whose only key is ``_id`` is never recorded, and neither is
        one whose key signature already exists on the same collection.

        Returns:
            True when the index was added
        """
        if len(index.keys) == 1 and index.keys[0].field == "_id":
            return False

        signature = index.signature
        for existing in self.indexes:
            if existing.collection == collection and existing.index.signature == signature:
                logger.debug(f"Skipping duplicate index {index.name} on {collection}")
                return False

        self.indexes.append(CollectionIndex(collection=collection, index=index))
        self.explanations.append(explanation)
        return True

    def to_dict(self) -> Dict[str, Any]:
        return {
            "indexes": [ci.to_dict() for ci in self.indexes],
            "explanations": list(self.explanations),
        }

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> IndexPlan:
        return cls(
            indexes=[CollectionIndex.from_dict(ci) for ci in data.get("indexes") or []],
            explanations=list(data.get("explanations") or []),
        )

    def save(self, path: str | Path) -> None:
        """Write the plan to a YAML or JSON file."""
        path = write_document(path, self.to_dict())
        logger.info(f"Saved index plan ({len(self.indexes)} indexes) to {path}")

    @classmethod
    def load(cls, path: str | Path) -> IndexPlan:
        """Read a plan from a YAML or JSON file."""
        return cls.from_dict(read_document(path))
