"""Relationship choices and the heuristics behind the automatic path.

The predicates here are approximations over row statistics and FK shape,
not guarantees. Callers that know better pass explicit choices instead.
"""

from __future__ import annotations

from dataclasses import dataclass
from enum import Enum
from typing import Dict, List

from docmigrate.core.mapping.graph import ForeignKeyEdge, RelationshipGraph
from docmigrate.core.mapping.types import RELATIONSHIP_ARRAY, RELATIONSHIP_SINGLE
from docmigrate.utils.logging import get_logger

logger = get_logger(__name__)


class RelationshipChoice(Enum):
    """How one foreign key edge is realised in the target model."""

    REFERENCE = "reference"  # keep child as a separate collection
    EMBED_ARRAY = "embed_array"  # child rows nested as an array in the parent
    EMBED_SINGLE = "embed_single"  # one child sub-document in the parent

    @property
    def is_embed(self) -> bool:
        return self is not RelationshipChoice.REFERENCE

    @property
    def relationship(self) -> str:
        """Embedded relationship kind ("single" / "array") for embed choices."""
        if self is RelationshipChoice.EMBED_SINGLE:
            return RELATIONSHIP_SINGLE
        return RELATIONSHIP_ARRAY

    @classmethod
    def parse(cls, value: str) -> RelationshipChoice:
        """Accept enum values as well as the display labels ("embed array")."""
        normalized = str(value).strip().lower().replace(" ", "_").replace("-", "_")
        return cls(normalized)


ChoiceMap = Dict[ForeignKeyEdge, RelationshipChoice]


@dataclass(frozen=True)
class RelationshipInfo:
    """An edge as shown to the decision step, with its structural labels."""

    edge: ForeignKeyEdge
    is_self_reference: bool
    is_join_table: bool


def classify_relationship(child_rows: int, parent_rows: int) -> RelationshipChoice:
    """1:1 versus 1:N from row counts.

    Assumes rows are spread evenly: a child/parent ratio of at most 1.0 is
    read as one child per parent (embed single), anything above as many
    (embed array). Missing statistics (a zero on either side) default to
    an array, the shape that is safe for either cardinality.
    """
    if child_rows > 0 and parent_rows > 0:
        if child_rows / parent_rows <= 1.0:
            return RelationshipChoice.EMBED_SINGLE
    return RelationshipChoice.EMBED_ARRAY


def relationship_edges(graph: RelationshipGraph) -> List[RelationshipInfo]:
    """All FK edges between the graph's tables, ordered by parent then child."""
    join_tables = {jt.join_table for jt in graph.join_tables()}
    infos = [
        RelationshipInfo(
            edge=edge,
            is_self_reference=edge.is_self_reference,
            is_join_table=edge.child_table in join_tables,
        )
        for edge in graph.edges()
    ]
    infos.sort(key=lambda info: (info.edge.parent_table, info.edge.child_table))
    return infos


def suggest_choices(graph: RelationshipGraph) -> ChoiceMap:
    """Automatic choices for every edge in the graph.

    Self-references, and any edge whose child table carries a
    self-reference, stay references; everything else is embedded as single
    or array according to :func:`classify_relationship`.
    """
    self_referencing = graph.self_referencing_tables()
    choices: ChoiceMap = {}

    for edge in graph.edges():
        if edge.is_self_reference or edge.child_table in self_referencing:
            choices[edge] = RelationshipChoice.REFERENCE
            continue
        child = graph.table(edge.child_table)
        parent = graph.table(edge.parent_table)
        choice = classify_relationship(child.row_count, parent.row_count)
        choices[edge] = choice
        logger.debug(f"Suggested {choice.value} for {edge}")

    return choices
