"""Target document mapping data types."""

from __future__ import annotations

from dataclasses import dataclass, field
from pathlib import Path
from typing import Any, Dict, Iterator, List, Tuple

from docmigrate.utils.files import read_document, write_document
from docmigrate.utils.logging import get_logger

logger = get_logger(__name__)

RELATIONSHIP_SINGLE = "single"
RELATIONSHIP_ARRAY = "array"

TRANSFORMATION_OPERATIONS = ("rename", "compute", "cast", "filter", "default", "exclude")


@dataclass
class Transformation:
    """Per-field transformation rule. Passed through to code generation untouched."""

    source_field: str
    operation: str  # rename, compute, cast, filter, default, exclude
    value: str = ""
    target_field: str = ""
    target_type: str = ""
    expression: str = ""

    def to_dict(self) -> Dict[str, Any]:
        data = {"source_field": self.source_field, "operation": self.operation}
        for key in ("value", "target_field", "target_type", "expression"):
            if getattr(self, key):
                data[key] = getattr(self, key)
        return data

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> Transformation:
        return cls(
            source_field=data.get("source_field", ""),
            operation=data.get("operation", ""),
            value=data.get("value", ""),
            target_field=data.get("target_field", ""),
            target_type=data.get("target_type", ""),
            expression=data.get("expression", ""),
        )


@dataclass
class Reference:
    """A table kept as its own collection, linked by a field."""

    source_table: str
    field_name: str
    join_column: str
    parent_column: str

    def to_dict(self) -> Dict[str, Any]:
        return {
            "source_table": self.source_table,
            "field_name": self.field_name,
            "join_column": self.join_column,
            "parent_column": self.parent_column,
        }

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> Reference:
        return cls(
            source_table=data["source_table"],
            field_name=data.get("field_name", data["source_table"]),
            join_column=data.get("join_column", ""),
            parent_column=data.get("parent_column", ""),
        )


@dataclass
class Embedded:
    """A table whose rows are nested as sub-documents of the parent.

    ``embedded`` holds further nesting levels; the tree has no back-pointers.
    """

    source_table: str
    field_name: str
    relationship: str  # "array" or "single"
    join_column: str
    parent_column: str
    embedded: List[Embedded] = field(default_factory=list)
    transformations: List[Transformation] = field(default_factory=list)

    @property
    def is_array(self) -> bool:
        return self.relationship != RELATIONSHIP_SINGLE

    def walk(self, prefix: str = "") -> Iterator[Tuple[str, Embedded]]:
        """Yield ``(dot_path, entry)`` for this entry and every nested entry."""
        path = f"{prefix}.{self.field_name}" if prefix else self.field_name
        yield path, self
        for child in self.embedded:
            yield from child.walk(path)

    def to_dict(self) -> Dict[str, Any]:
        data: Dict[str, Any] = {
            "source_table": self.source_table,
            "field_name": self.field_name,
            "relationship": self.relationship,
            "join_column": self.join_column,
            "parent_column": self.parent_column,
        }
        if self.embedded:
            data["embedded"] = [e.to_dict() for e in self.embedded]
        if self.transformations:
            data["transformations"] = [t.to_dict() for t in self.transformations]
        return data

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> Embedded:
        return cls(
            source_table=data["source_table"],
            field_name=data.get("field_name", data["source_table"]),
            relationship=data.get("relationship", RELATIONSHIP_ARRAY),
            join_column=data.get("join_column", ""),
            parent_column=data.get("parent_column", ""),
            embedded=[cls.from_dict(e) for e in data.get("embedded") or []],
            transformations=[
                Transformation.from_dict(t) for t in data.get("transformations") or []
            ],
        )


@dataclass
class Collection:
    """A target collection rooted at one source table."""

    name: str
    source_table: str
    embedded: List[Embedded] = field(default_factory=list)
    references: List[Reference] = field(default_factory=list)
    transformations: List[Transformation] = field(default_factory=list)

    def __repr__(self) -> str:
        return (
            f"Collection({self.name}, embedded={len(self.embedded)}, "
            f"references={len(self.references)})"
        )

    def walk_embedded(self) -> Iterator[Tuple[str, Embedded]]:
        """Yield ``(dot_path, entry)`` for every embedded entry at any depth."""
        for emb in self.embedded:
            yield from emb.walk()

    def to_dict(self) -> Dict[str, Any]:
        data: Dict[str, Any] = {"name": self.name, "source_table": self.source_table}
        if self.embedded:
            data["embedded"] = [e.to_dict() for e in self.embedded]
        if self.references:
            data["references"] = [r.to_dict() for r in self.references]
        if self.transformations:
            data["transformations"] = [t.to_dict() for t in self.transformations]
        return data

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> Collection:
        return cls(
            name=data["name"],
            source_table=data.get("source_table", data["name"]),
            embedded=[Embedded.from_dict(e) for e in data.get("embedded") or []],
            references=[Reference.from_dict(r) for r in data.get("references") or []],
            transformations=[
                Transformation.from_dict(t) for t in data.get("transformations") or []
            ],
        )


@dataclass
class Mapping:
    """How source tables map onto target collections."""

    collections: List[Collection] = field(default_factory=list)

    def __repr__(self) -> str:
        return f"Mapping(collections={[c.name for c in self.collections]})"

    def collection(self, name: str) -> Collection | None:
        for coll in self.collections:
            if coll.name == name:
                return coll
        return None

    def placed_tables(self) -> List[str]:
        """Source tables placed as collection roots or embedded entries, in order.

        A well-formed mapping never lists a table twice.
        """
        placed = []
        for coll in self.collections:
            placed.append(coll.source_table)
            placed.extend(emb.source_table for _, emb in coll.walk_embedded())
        return placed

    def embed_edges(self) -> List[Tuple[str, str]]:
        """``(child_table, parent_table)`` for every Embedded entry."""
        edges: List[Tuple[str, str]] = []

        def visit(parent: str, entries: List[Embedded]) -> None:
            for emb in entries:
                edges.append((emb.source_table, parent))
                visit(emb.source_table, emb.embedded)

        for coll in self.collections:
            visit(coll.source_table, coll.embedded)
        return edges

    def to_dict(self) -> Dict[str, Any]:
        return {"collections": [c.to_dict() for c in self.collections]}

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> Mapping:
        return cls(
            collections=[Collection.from_dict(c) for c in data.get("collections") or []]
        )

    def save(self, path: str | Path) -> None:
        """Write the mapping to a YAML or JSON file."""
        path = write_document(path, self.to_dict())
        logger.info(f"Saved mapping ({len(self.collections)} collections) to {path}")

    @classmethod
    def load(cls, path: str | Path) -> Mapping:
        """Read a mapping from a YAML or JSON file."""
        return cls.from_dict(read_document(path))
