"""Denormalization engine: relationship choices -> validated document mapping."""

from __future__ import annotations

from collections import defaultdict, deque
from dataclasses import dataclass, field
from typing import Dict, Iterable, List, Optional, Set, Tuple, Union

from docmigrate.core.mapping.graph import ForeignKeyEdge, RelationshipGraph
from docmigrate.core.mapping.heuristics import (
    ChoiceMap,
    RelationshipChoice,
    suggest_choices,
)
from docmigrate.core.mapping.types import Collection, Embedded, Mapping, Reference
from docmigrate.core.schema.types import Table
from docmigrate.utils.config import get_config
from docmigrate.utils.logging import get_logger
from docmigrate.utils.timing import timed

logger = get_logger(__name__)

# Callers may key choices by edge or by (child_table, parent_table).
ChoiceKey = Union[ForeignKeyEdge, Tuple[str, str]]


@dataclass
class DenormalizationResult:
    """Mapping plus the choices actually applied after cycle breaking."""

    mapping: Mapping
    choices: ChoiceMap
    warnings: List[str] = field(default_factory=list)


def enforce_cycle_constraints(choices: ChoiceMap) -> Tuple[ChoiceMap, List[str]]:
    """Downgrade embed choices until the embed-only graph is acyclic.

    Walks forward (child -> parent) from every child over embed edges,
    excluding self-references. When the walk reaches a table already on the
    current path, the edge between the two most recently visited tables is
    forced to REFERENCE and the search restarts.

    Args:
        choices: Edge -> choice. Not modified.

    Returns:
        ``(new_choices, warnings)``
    """
    result: ChoiceMap = dict(choices)
    warnings: List[str] = []

    while True:
        offending = _find_embed_cycle_edge(result)
        if offending is None:
            break
        result[offending] = RelationshipChoice.REFERENCE
        message = (
            f"Cycle detected: {offending.child_table}→{offending.parent_table} "
            "forced to reference"
        )
        warnings.append(message)
        logger.warning(message)

    return result, warnings


def _find_embed_cycle_edge(choices: ChoiceMap) -> Optional[ForeignKeyEdge]:
    adjacency: Dict[str, List[ForeignKeyEdge]] = defaultdict(list)
    for edge, choice in choices.items():
        if choice.is_embed and not edge.is_self_reference:
            adjacency[edge.child_table].append(edge)

    visited: Set[str] = set()
    on_path: Set[str] = set()

    def walk(node: str) -> Optional[ForeignKeyEdge]:
        visited.add(node)
        on_path.add(node)
        for edge in adjacency.get(node, []):
            parent = edge.parent_table
            if parent in on_path:
                return edge
            if parent not in visited:
                found = walk(parent)
                if found is not None:
                    return found
        on_path.discard(node)
        return None

    for child in list(adjacency):
        if child not in visited:
            found = walk(child)
            if found is not None:
                return found
    return None


class DenormalizationEngine:
    """Builds a Mapping from a table set and per-edge relationship choices."""

    def __init__(self, config: Optional[Dict] = None):
        """Initialize engine.

        Args:
            config: ``denormalization`` config section (uses global config if None)
        """
        self.config = config or get_config().get("denormalization", {})
        self.reference_suffix = self.config.get("reference_suffix", "_ref")

    def suggest(
        self,
        tables: Iterable[Table],
        root_tables: Optional[List[str]] = None,
    ) -> DenormalizationResult:
        """Fully automatic path: heuristic choices, then :meth:`build`."""
        return self.build(tables, choices=None, root_tables=root_tables)

    @timed("denormalize.build")
    def build(
        self,
        tables: Iterable[Table],
        choices: Optional[Dict[ChoiceKey, RelationshipChoice]] = None,
        root_tables: Optional[List[str]] = None,
    ) -> DenormalizationResult:
        """Turn relationship choices into a mapping with no embedding cycle.

        Args:
            tables: Selected source tables
            choices: Choice per edge, keyed by ForeignKeyEdge or by
                (child_table, parent_table). Edges without a choice stay
                references. None means "suggest automatically".
            root_tables: Explicit collection roots. When given, only these
                become collections and unplaced tables are left out.

        Returns:
            DenormalizationResult
        """
        graph = RelationshipGraph(list(tables))

        if choices is None:
            logger.info("No relationship choices supplied, suggesting automatically")
            requested: Dict[ChoiceKey, RelationshipChoice] = dict(suggest_choices(graph))
        else:
            requested = dict(choices)

        effective = self._resolve_choices(graph, requested)
        effective, warnings = enforce_cycle_constraints(effective)

        roots, explicit = self._select_roots(graph, root_tables)
        mapping = self._build_mapping(graph, effective, roots, explicit)

        logger.info(
            f"Built mapping: {len(mapping.collections)} collections from "
            f"{len(graph.tables())} tables ({len(warnings)} cycle downgrades)"
        )
        return DenormalizationResult(mapping=mapping, choices=effective, warnings=warnings)

    # ------------------------------------------------------------------
    # Choices and roots
    # ------------------------------------------------------------------

    @staticmethod
    def _resolve_choices(
        graph: RelationshipGraph, requested: Dict[ChoiceKey, RelationshipChoice]
    ) -> ChoiceMap:
        resolved: ChoiceMap = {}
        self_referencing = graph.self_referencing_tables()
        for edge in graph.edges():
            choice = requested.get(edge)
            if choice is None:
                choice = requested.get((edge.child_table, edge.parent_table))
            if choice is None:
                choice = RelationshipChoice.REFERENCE
            elif not isinstance(choice, RelationshipChoice):
                try:
                    choice = RelationshipChoice.parse(choice)
                except ValueError:
                    logger.warning(
                        f"Unrecognized choice {choice!r} for {edge.child_table}→"
                        f"{edge.parent_table}, keeping it as a reference"
                    )
                    choice = RelationshipChoice.REFERENCE

            # a self-referencing table is never owned by another table
            if choice.is_embed and (
                edge.is_self_reference or edge.child_table in self_referencing
            ):
                logger.debug(f"Ignoring {choice.value} on {edge}, child is self-referencing")
                choice = RelationshipChoice.REFERENCE
            resolved[edge] = choice
        return resolved

    @staticmethod
    def _select_roots(
        graph: RelationshipGraph, root_tables: Optional[List[str]]
    ) -> Tuple[List[str], bool]:
        if root_tables:
            known = set(graph.tables())
            roots = []
            for name in root_tables:
                if name not in known:
                    logger.warning(f"Root table '{name}' is not in the table set, skipping")
                elif name not in roots:
                    roots.append(name)
            return roots, True

        self_referencing = graph.self_referencing_tables()
        roots = [
            name
            for name in graph.tables()
            if name in self_referencing
            or all(e.is_self_reference for e in graph.outgoing(name))
        ]
        if not roots:
            logger.info("Every table has a foreign key; using all tables as roots")
            roots = graph.tables()
        return roots, False

    # ------------------------------------------------------------------
    # Mapping construction
    # ------------------------------------------------------------------

    def _build_mapping(
        self,
        graph: RelationshipGraph,
        choices: ChoiceMap,
        roots: List[str],
        explicit_roots: bool,
    ) -> Mapping:
        used: Set[str] = set()
        collections: List[Collection] = []

        for root in roots:
            if root in used:
                continue
            collections.append(self._build_collection(graph, choices, root, used))

        if not explicit_roots:
            while True:
                leftover = self._next_leftover(graph, choices, used)
                if leftover is None:
                    break
                logger.debug(f"Unplaced table {leftover} becomes its own collection")
                collections.append(self._build_collection(graph, choices, leftover, used))

        return Mapping(collections=collections)

    @staticmethod
    def _next_leftover(
        graph: RelationshipGraph, choices: ChoiceMap, used: Set[str]
    ) -> Optional[str]:
        unplaced = [name for name in graph.tables() if name not in used]
        if not unplaced:
            return None
        self_referencing = graph.self_referencing_tables()
        # prefer a table that no unplaced parent wants to embed
        for name in unplaced:
            if name in self_referencing:
                return name
            waiting_parent = any(
                choices[edge].is_embed
                and not edge.is_self_reference
                and edge.parent_table not in used
                for edge in graph.outgoing(name)
            )
            if not waiting_parent:
                return name
        return unplaced[0]

    def _build_collection(
        self,
        graph: RelationshipGraph,
        choices: ChoiceMap,
        root: str,
        used: Set[str],
    ) -> Collection:
        collection = Collection(name=root, source_table=root)
        self_referencing = graph.self_referencing_tables()
        seen_refs: Set[Tuple[str, str, str]] = set()
        used.add(root)

        def add_reference(edge: ForeignKeyEdge, field_name: str) -> None:
            key = (edge.child_table, field_name, edge.join_column)
            if key in seen_refs:
                return
            seen_refs.add(key)
            collection.references.append(
                Reference(
                    source_table=edge.child_table,
                    field_name=field_name,
                    join_column=edge.join_column,
                    parent_column=edge.parent_column,
                )
            )

        # breadth-first: (frontier table, list its embedded children go into)
        queue = deque([(root, collection.embedded)])
        while queue:
            parent, target = queue.popleft()

            for edge in graph.incoming(parent):
                child = edge.child_table

                # a self-referencing table is never owned by another table
                if edge.is_self_reference or child in self_referencing:
                    add_reference(edge, child + self.reference_suffix)
                    continue

                if not choices[edge].is_embed:
                    add_reference(edge, child)
                    continue

                if child in used:
                    continue
                embedded = Embedded(
                    source_table=child,
                    field_name=child,
                    relationship=choices[edge].relationship,
                    join_column=edge.join_column,
                    parent_column=edge.parent_column,
                )
                target.append(embedded)
                used.add(child)
                logger.debug(f"Embedded {child} into {parent} as {embedded.relationship}")
                queue.append((child, embedded.embedded))

        return collection

    # ------------------------------------------------------------------
    # Display
    # ------------------------------------------------------------------

    @staticmethod
    def preview(mapping: Mapping) -> List[str]:
        """Tree-like text rendering of a mapping's collections."""
        lines: List[str] = []

        def render(entries: List[Embedded], indent: str) -> None:
            for emb in entries:
                if emb.is_array:
                    lines.append(f"{indent}└─ {emb.field_name}[] (embedded array)")
                else:
                    lines.append(f"{indent}└─ {emb.field_name} (embedded single)")
                render(emb.embedded, indent + "   ")

        for coll in mapping.collections:
            lines.append(f"{coll.name} (collection)")
            render(coll.embedded, "")
            for ref in coll.references:
                lines.append(f"   → {ref.field_name} (reference to {ref.source_table})")
        return lines
