"""PipelineGraph: NetworkX view of an editor snapshot for diagnostics.

Wraps a MultiDiGraph so that two edges between the same pair of nodes
(e.g. a filter's "filtered" and "all" outputs feeding one table) are both
kept. Edges whose endpoints are missing from the snapshot are not added to
the graph; they are retained separately and reported by validate().
"""

from __future__ import annotations

from typing import cast

import networkx as nx
from networkx import MultiDiGraph

from rowflow.contracts import Edge, FilterNode, GraphSnapshot, JoinNode, Node, SinkNode
from rowflow.core.dag.models import (
    CYCLE,
    DANGLING_EDGE,
    JOIN_KEY_UNSET,
    MISPLACED_FILTER_HANDLE,
    UNASSIGNED_JOIN_INPUT,
    GraphValidationError,
    GraphValidationWarning,
)


class PipelineGraph:
    """Directed multigraph of snapshot nodes, keyed by node id."""

    def __init__(self) -> None:
        self._graph: MultiDiGraph[str] = nx.MultiDiGraph()
        self._dangling: list[Edge] = []

    @classmethod
    def from_snapshot(cls, snapshot: GraphSnapshot) -> PipelineGraph:
        """Build a graph from a snapshot.

        Raises:
            GraphValidationError: If two nodes share an id
        """
        graph = cls()
        for node in snapshot.nodes:
            if graph.has_node(node.node_id):
                raise GraphValidationError(f"Duplicate node id: '{node.node_id}'")
            graph._graph.add_node(node.node_id, info=node)

        for index, edge in enumerate(snapshot.edges):
            if not (graph.has_node(edge.source) and graph.has_node(edge.target)):
                graph._dangling.append(edge)
                continue
            graph._graph.add_edge(edge.source, edge.target, key=index, edge=edge)
        return graph

    @property
    def node_count(self) -> int:
        """Number of nodes in the graph."""
        return self._graph.number_of_nodes()

    @property
    def edge_count(self) -> int:
        """Number of wired edges (dangling edges excluded)."""
        return self._graph.number_of_edges()

    def has_node(self, node_id: str) -> bool:
        """Check if node exists."""
        return self._graph.has_node(node_id)

    def get_node(self, node_id: str) -> Node:
        """Get the snapshot node for an id.

        Raises:
            KeyError: If node doesn't exist
        """
        if not self._graph.has_node(node_id):
            raise KeyError(f"Node not found: {node_id}")
        return cast(Node, self._graph.nodes[node_id]["info"])

    def get_edges(self) -> list[Edge]:
        """Wired edges in snapshot order."""
        keyed = [(key, data["edge"]) for _, _, key, data in self._graph.edges(keys=True, data=True)]
        return [edge for _, edge in sorted(keyed, key=lambda item: item[0])]

    def sinks(self) -> list[str]:
        """Ids of sink (table) nodes."""
        return [node_id for node_id, data in self._graph.nodes(data=True) if isinstance(data["info"], SinkNode)]

    def upstream_of(self, node_id: str) -> set[str]:
        """All node ids with a path into node_id.

        Raises:
            KeyError: If node doesn't exist
        """
        if not self._graph.has_node(node_id):
            raise KeyError(f"Node not found: {node_id}")
        return set(nx.ancestors(self._graph, node_id))

    def find_cycle(self) -> list[str] | None:
        """Node ids along one cycle, or None if the graph is acyclic."""
        try:
            cycle = nx.find_cycle(self._graph)
        except nx.NetworkXNoCycle:
            return None
        # MultiDiGraph returns (u, v, key) tuples
        return [edge[0] for edge in cycle]

    def validate(self) -> list[GraphValidationWarning]:
        """Report wiring the resolver will silently ignore or cut short.

        Checks:
        1. Edges referencing nodes missing from the snapshot
        2. Cycles (resolution breaks them by returning no rows)
        3. Join inputs without an A/B side
        4. Filter handles on edges leaving non-filter nodes
        5. Wired join nodes without a join key (concatenate instead of join)
        """
        warnings: list[GraphValidationWarning] = []

        for edge in self._dangling:
            missing = [n for n in (edge.source, edge.target) if not self.has_node(n)]
            warnings.append(
                GraphValidationWarning(
                    code=DANGLING_EDGE,
                    message=f"Edge {edge.source} -> {edge.target} references unknown node(s): {', '.join(missing)}",
                    node_ids=tuple(missing),
                )
            )

        cycle = self.find_cycle()
        if cycle is not None:
            warnings.append(
                GraphValidationWarning(
                    code=CYCLE,
                    message=f"Graph contains a cycle: {' -> '.join([*cycle, cycle[0]])}",
                    node_ids=tuple(cycle),
                )
            )

        for edge in self.get_edges():
            source = self.get_node(edge.source)
            target = self.get_node(edge.target)
            if isinstance(target, JoinNode) and edge.target_handle is None:
                warnings.append(
                    GraphValidationWarning(
                        code=UNASSIGNED_JOIN_INPUT,
                        message=f"Edge {edge.source} -> {edge.target} is not attached to side A or B; its rows are ignored",
                        node_ids=(edge.source, edge.target),
                    )
                )
            if edge.source_handle is not None and not isinstance(source, FilterNode):
                warnings.append(
                    GraphValidationWarning(
                        code=MISPLACED_FILTER_HANDLE,
                        message=f"Edge {edge.source} -> {edge.target} names handle '{edge.source_handle}' but its source is not a filter",
                        node_ids=(edge.source,),
                    )
                )

        for node_id, data in self._graph.nodes(data=True):
            node = data["info"]
            if isinstance(node, JoinNode) and not node.join_key and self._graph.in_degree(node_id) > 0:
                warnings.append(
                    GraphValidationWarning(
                        code=JOIN_KEY_UNSET,
                        message=f"Join '{node.label}' has no join key; its inputs are concatenated",
                        node_ids=(node_id,),
                    )
                )

        return warnings
