"""Graph resolver: rows visible at a node, computed by walking edges backward.

Every call re-walks the relevant subgraph from scratch; nothing is cached
and no state outlives the call. Cycles (and paths already walked in the
same call) contribute no rows instead of raising, because mid-edit graphs
are routinely malformed.

The visited set is an explicit argument threaded through every recursive
step. It is local to one top-level call and never stored on a module or
shared object, so concurrent resolutions cannot interfere.
"""

from __future__ import annotations

from collections.abc import Callable, Iterable

import structlog

from rowflow.contracts import (
    BatchSource,
    Edge,
    FilterHandle,
    FilterNode,
    JoinFieldSummary,
    JoinHandle,
    JoinNode,
    Node,
    RecordSource,
    Row,
    SinkNode,
    collect_field_names,
)
from rowflow.engine.extraction import extract_rows
from rowflow.engine.join import join
from rowflow.engine.projection import project

slog = structlog.get_logger(__name__)


class _GraphWalk:
    """Read-only view over one graph snapshot, with the recursive steps.

    Holds only the node index and edge list; the visited set is always
    passed in by the caller.
    """

    def __init__(self, nodes: Iterable[Node], edges: Iterable[Edge]) -> None:
        # First node wins on duplicate ids, matching GraphSnapshot.node()
        self._nodes: dict[str, Node] = {}
        for node in nodes:
            self._nodes.setdefault(node.node_id, node)
        self._edges: tuple[Edge, ...] = tuple(edges)

    def node(self, node_id: str) -> Node | None:
        return self._nodes.get(node_id)

    def incoming(self, node_id: str) -> list[Edge]:
        """Edges targeting node_id, in snapshot order."""
        return [edge for edge in self._edges if edge.target == node_id]

    def _enter(self, node_id: str, visited: set[str]) -> bool:
        """Mark node_id visited. False if it was already visited."""
        if node_id in visited:
            slog.debug("resolution_cycle_break", node_id=node_id)
            return False
        visited.add(node_id)
        return True

    def rows_for(self, target_node_id: str, visited: set[str]) -> list[Row]:
        """Concatenate the contributions of every edge into target_node_id."""
        if isinstance(self.node(target_node_id), JoinNode):
            return self.join_rows(target_node_id, visited)

        if not self._enter(target_node_id, visited):
            return []

        rows: list[Row] = []
        for edge in self.incoming(target_node_id):
            rows.extend(self.edge_rows(edge, visited))
        return rows

    def edge_rows(self, edge: Edge, visited: set[str]) -> list[Row]:
        """Rows one edge carries, dispatched on the kind of its source node."""
        source = self.node(edge.source)
        match source:
            case RecordSource() | BatchSource():
                return extract_rows(source)
            case FilterNode():
                upstream = self.rows_for(source.node_id, visited)
                if edge.source_handle == FilterHandle.FILTERED:
                    return project(upstream, source.selected_fields, source.aliases)
                return upstream
            case JoinNode():
                return self.join_rows(source.node_id, visited)
            case SinkNode() | None:
                return []

    def join_sides(
        self,
        join_node_id: str,
        visited_for_edge: Callable[[], set[str]],
    ) -> tuple[list[Row], list[Row]]:
        """Resolve a join node's inputs, split by target handle.

        Edges without an A/B handle belong to neither side and are not
        resolved at all.

        Args:
            join_node_id: Join node whose inputs to resolve
            visited_for_edge: Supplies the visited set for each input edge
        """
        side_a: list[Row] = []
        side_b: list[Row] = []
        for edge in self.incoming(join_node_id):
            if edge.target_handle == JoinHandle.A:
                side_a.extend(self.edge_rows(edge, visited_for_edge()))
            elif edge.target_handle == JoinHandle.B:
                side_b.extend(self.edge_rows(edge, visited_for_edge()))
        return side_a, side_b

    def join_rows(self, join_node_id: str, visited: set[str]) -> list[Row]:
        """Resolve both sides of a join node, then join them."""
        if not self._enter(join_node_id, visited):
            return []

        join_node = self.node(join_node_id)
        if not isinstance(join_node, JoinNode):
            return []

        # Same set for every input; it already holds join_node_id
        side_a, side_b = self.join_sides(join_node_id, lambda: visited)
        return join(
            side_a,
            side_b,
            join_node.join_key,
            join_node.mode,
            join_node.node_id,
            join_node.label,
        )


def resolve_rows(
    target_node_id: str,
    nodes: Iterable[Node],
    edges: Iterable[Edge],
    visited: set[str] | None = None,
) -> list[Row]:
    """Resolve the rows flowing into a node.

    Walks incoming edges backward and dispatches on each upstream node:
    sources extract their own rows, filter nodes project (on the
    "filtered" handle) or pass through (on "all" or no handle), and join
    nodes join their two sides. Sinks and unknown nodes contribute nothing.
    When the target is itself a join node, its joined output is returned.

    Args:
        target_node_id: Node to resolve
        nodes: Immutable node snapshot
        edges: Immutable edge snapshot; edge order decides row order
        visited: Node ids already entered in this resolution. Mutated.
            Leave as None for a top-level call.

    Returns:
        Fresh rows. An already-visited target yields an empty list.
    """
    if visited is None:
        visited = set()
    return _GraphWalk(nodes, edges).rows_for(target_node_id, visited)


def resolve_join_rows(
    join_node_id: str,
    nodes: Iterable[Node],
    edges: Iterable[Edge],
    visited: set[str] | None = None,
) -> list[Row]:
    """Resolve the joined output of a join node."""
    if visited is None:
        visited = set()
    return _GraphWalk(nodes, edges).join_rows(join_node_id, visited)


def derive_join_fields(
    join_node_id: str,
    nodes: Iterable[Node],
    edges: Iterable[Edge],
) -> JoinFieldSummary:
    """Compute the fields on each side of a join node, for editor previews.

    Each input edge is resolved with its own visited set containing only
    the join node, so the sides can be walked independently. Never modifies
    the graph or the node's configuration.

    Returns:
        An empty summary when join_node_id is not a join node.
    """
    walk = _GraphWalk(nodes, edges)
    join_node = walk.node(join_node_id)
    if not isinstance(join_node, JoinNode):
        return JoinFieldSummary()

    side_a, side_b = walk.join_sides(join_node_id, lambda: {join_node_id})
    fields_a = collect_field_names(side_a)
    fields_b = collect_field_names(side_b)
    common = sorted(set(fields_a) & set(fields_b))

    matched_count = 0
    if join_node.join_key and join_node.join_key in common:
        matched_count = len(
            join(
                side_a,
                side_b,
                join_node.join_key,
                join_node.mode,
                join_node.node_id,
                join_node.label,
            )
        )

    return JoinFieldSummary(
        fields_a=tuple(fields_a),
        fields_b=tuple(fields_b),
        common_fields=tuple(common),
        matched_count=matched_count,
    )


def derive_filter_fields(
    filter_node_id: str,
    nodes: Iterable[Node],
    edges: Iterable[Edge],
) -> list[str]:
    """Sorted field names arriving at a node; a filter's available fields."""
    return collect_field_names(resolve_rows(filter_node_id, nodes, edges))
