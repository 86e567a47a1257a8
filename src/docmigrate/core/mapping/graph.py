"""Foreign key relationship graph over a set of source tables."""

from __future__ import annotations

from collections import defaultdict, deque
from dataclasses import dataclass
from typing import Dict, Iterable, List, Optional, Set, Tuple

from docmigrate.core.schema.types import Table
from docmigrate.utils.logging import get_logger

logger = get_logger(__name__)


@dataclass(frozen=True)
class ForeignKeyEdge:
    """A foreign key relationship: child columns -> parent columns.

    Hashable, so it can key a caller's choice assignment.
    """

    child_table: str
    child_columns: Tuple[str, ...]
    parent_table: str
    parent_columns: Tuple[str, ...]
    fk_name: str = ""

    def __repr__(self) -> str:
        return (
            f"Edge({self.child_table}.{','.join(self.child_columns)} -> "
            f"{self.parent_table}.{','.join(self.parent_columns)})"
        )

    @property
    def is_self_reference(self) -> bool:
        return self.child_table == self.parent_table

    @property
    def join_column(self) -> str:
        return ",".join(self.child_columns)

    @property
    def parent_column(self) -> str:
        return ",".join(self.parent_columns)


@dataclass(frozen=True)
class JoinTableInfo:
    """A table that looks like a many-to-many association."""

    join_table: str
    left_table: str
    left_columns: Tuple[str, ...]
    right_table: str
    right_columns: Tuple[str, ...]


class EmbeddingCycleError(ValueError):
    """Raised/returned when an embedding map cannot be ordered bottom-up."""

    def __init__(self, resolved: List[str], unresolved: List[str]):
        self.resolved = list(resolved)
        self.unresolved = list(unresolved)
        super().__init__(
            "cycle detected in embedding graph; unresolved tables: "
            + ", ".join(self.unresolved)
        )


class RelationshipGraph:
    """Read-only view of the foreign keys between a set of tables.

    Foreign keys that point outside the table set are dropped. Build a new
    graph whenever the table set changes.
    """

    def __init__(self, tables: Iterable[Table]):
        self._tables: Dict[str, Table] = {}
        for table in tables:
            self._tables[table.name] = table

        self._edges: List[ForeignKeyEdge] = []
        # referenced (parent) table -> incoming edges
        self._incoming: Dict[str, List[ForeignKeyEdge]] = defaultdict(list)
        # child table -> outgoing edges
        self._outgoing: Dict[str, List[ForeignKeyEdge]] = defaultdict(list)

        dropped = 0
        for table in self._tables.values():
            for fk in table.foreign_keys:
                if fk.referenced_table not in self._tables:
                    dropped += 1
                    continue
                edge = ForeignKeyEdge(
                    child_table=table.name,
                    child_columns=tuple(fk.columns),
                    parent_table=fk.referenced_table,
                    parent_columns=tuple(fk.referenced_columns),
                    fk_name=fk.name,
                )
                self._edges.append(edge)
                self._incoming[edge.parent_table].append(edge)
                self._outgoing[edge.child_table].append(edge)

        logger.debug(
            f"Built relationship graph: {len(self._tables)} tables, "
            f"{len(self._edges)} edges, {dropped} external FKs dropped"
        )

    def __repr__(self) -> str:
        return f"RelationshipGraph(tables={len(self._tables)}, edges={len(self._edges)})"

    # ------------------------------------------------------------------
    # Accessors
    # ------------------------------------------------------------------

    def tables(self) -> List[str]:
        return list(self._tables)

    def table(self, name: str) -> Optional[Table]:
        return self._tables.get(name)

    def edges(self) -> List[ForeignKeyEdge]:
        return list(self._edges)

    def incoming(self, table_name: str) -> List[ForeignKeyEdge]:
        """Edges whose parent is ``table_name`` (tables referencing it)."""
        return list(self._incoming.get(table_name, []))

    def outgoing(self, table_name: str) -> List[ForeignKeyEdge]:
        """Edges whose child is ``table_name`` (tables it references)."""
        return list(self._outgoing.get(table_name, []))

    def edge_between(self, child_table: str, parent_table: str) -> Optional[ForeignKeyEdge]:
        """First edge from ``child_table`` to ``parent_table``, if any."""
        for edge in self._outgoing.get(child_table, []):
            if edge.parent_table == parent_table:
                return edge
        return None

    # ------------------------------------------------------------------
    # Structural queries
    # ------------------------------------------------------------------

    def self_references(self) -> List[ForeignKeyEdge]:
        """Edges where a table references itself, in edge order."""
        return [e for e in self._edges if e.is_self_reference]

    def self_referencing_tables(self) -> Set[str]:
        return {e.child_table for e in self._edges if e.is_self_reference}

    def detect_cycles(self) -> List[List[str]]:
        """Find cycles along FK direction (child -> parent), ignoring self-references.

        Depth-first search with an on-path marker set. When a neighbour that is
        still on the current path is reached, the path slice starting at that
        neighbour is reported as one cycle. Every table is tried as a root once.

        Returns:
            List of cycles, each an ordered list of table names
        """
        adjacency: Dict[str, List[str]] = defaultdict(list)
        for edge in self._edges:
            if edge.is_self_reference:
                continue
            adjacency[edge.child_table].append(edge.parent_table)

        cycles: List[List[str]] = []
        visited: Set[str] = set()
        on_path: Set[str] = set()
        path: List[str] = []

        def dfs(node: str) -> None:
            visited.add(node)
            on_path.add(node)
            path.append(node)

            for neighbor in adjacency.get(node, []):
                if neighbor not in visited:
                    dfs(neighbor)
                elif neighbor in on_path:
                    start = path.index(neighbor)
                    cycles.append(list(path[start:]))

            path.pop()
            on_path.discard(node)

        for name in self._tables:
            if name not in visited:
                dfs(name)

        if cycles:
            logger.debug(f"Detected {len(cycles)} FK cycle(s): {cycles}")
        return cycles

    def join_tables(self) -> List[JoinTableInfo]:
        """Detect many-to-many join tables.

        Heuristic, not a guarantee. A table qualifies when:
        - it has exactly two outgoing foreign keys,
        - no table references it,
        - at most two of its columns are outside both foreign keys
          (e.g. a surrogate id and a created_at timestamp).
        Nothing else is checked, so both false negatives and false positives
        are possible.
        """
        referenced = {e.parent_table for e in self._edges}

        result: List[JoinTableInfo] = []
        for name, table in self._tables.items():
            fks = self._outgoing.get(name, [])
            if len(fks) != 2:
                continue
            if name in referenced:
                continue

            fk_columns = {c for fk in fks for c in fk.child_columns}
            non_fk_count = sum(1 for col in table.columns if col.name not in fk_columns)
            if non_fk_count > 2:
                continue

            result.append(
                JoinTableInfo(
                    join_table=name,
                    left_table=fks[0].parent_table,
                    left_columns=fks[0].child_columns,
                    right_table=fks[1].parent_table,
                    right_columns=fks[1].child_columns,
                )
            )
        return result

    # ------------------------------------------------------------------
    # Embedding maps (child table -> parent table)
    # ------------------------------------------------------------------

    @staticmethod
    def nesting_depth(embeds: Dict[str, str]) -> int:
        """Longest embedding chain in a child -> parent map.

        1 means a single level (child inside parent), 2 a grandchild, etc.
        Chains are measured from root parents, i.e. parents that are not
        themselves embedded; tables caught in a cycle have no such root and
        are not counted.
        """
        if not embeds:
            return 0

        children: Dict[str, List[str]] = defaultdict(list)
        for child, parent in embeds.items():
            children[parent].append(child)

        roots = []
        for parent in embeds.values():
            if parent not in embeds and parent not in roots:
                roots.append(parent)

        def max_depth(node: str) -> int:
            best = 0
            for kid in children.get(node, []):
                best = max(best, 1 + max_depth(kid))
            return best

        return max((max_depth(root) for root in roots), default=0)

    @staticmethod
    def topological_sort(
        embeds: Dict[str, str],
    ) -> Tuple[List[str], Optional[EmbeddingCycleError]]:
        """Order tables bottom-up: every child precedes the table it is embedded into.

        Kahn's algorithm, where a table's in-degree is the number of children
        that must be finalized before it.

        Args:
            embeds: child table -> parent table

        Returns:
            ``(order, None)`` on success; ``(partial_order, EmbeddingCycleError)``
            when some tables could not be ordered because of a cycle.
        """
        all_tables: List[str] = []
        seen: Set[str] = set()
        in_degree: Dict[str, int] = defaultdict(int)
        dependents: Dict[str, List[str]] = defaultdict(list)

        for child, parent in embeds.items():
            for name in (child, parent):
                if name not in seen:
                    seen.add(name)
                    all_tables.append(name)
            in_degree[parent] += 1
            dependents[child].append(parent)

        queue = deque(t for t in all_tables if in_degree[t] == 0)
        ordered: List[str] = []
        while queue:
            node = queue.popleft()
            ordered.append(node)
            for parent in dependents[node]:
                in_degree[parent] -= 1
                if in_degree[parent] == 0:
                    queue.append(parent)

        if len(ordered) != len(all_tables):
            done = set(ordered)
            error = EmbeddingCycleError(ordered, [t for t in all_tables if t not in done])
            logger.warning(str(error))
            return ordered, error

        return ordered, None
