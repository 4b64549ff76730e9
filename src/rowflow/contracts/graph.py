"""Graph vertices and edges as handed over by the editor.

Nodes are immutable snapshots: the editor owns their lifecycle and the
resolution engine only reads them. ``Node`` is a closed union, so the
resolver can match on it exhaustively.
"""

from __future__ import annotations

from collections.abc import Mapping, Sequence
from dataclasses import dataclass, field
from types import MappingProxyType

from rowflow.contracts.enums import FilterHandle, JoinHandle, JoinMode, NodeKind
from rowflow.contracts.types import NodeID, Scalar


def _freeze(mapping: Mapping[str, Scalar]) -> MappingProxyType[str, Scalar]:
    return MappingProxyType(dict(mapping))


@dataclass(frozen=True, slots=True)
class RecordSource:
    """Source node carrying one configuration record (e.g. a pipeline stage).

    attributes holds the node's user-visible scalar attributes (label,
    type, status, description, records, lastRun) exactly as the editor
    stores them. Optional attributes the user never set are absent.
    """

    node_id: NodeID
    label: str
    attributes: Mapping[str, Scalar] = field(default_factory=dict)

    def __post_init__(self) -> None:
        object.__setattr__(self, "attributes", _freeze(self.attributes))

    @property
    def kind(self) -> NodeKind:
        return NodeKind.SOURCE


@dataclass(frozen=True, slots=True)
class BatchSource:
    """Source node wrapping many dated records (e.g. daily ad metrics).

    Record values are passed through as the upstream integration delivered
    them. Type coercion happens where values are consumed, not here.
    """

    node_id: NodeID
    label: str
    records: Sequence[Mapping[str, Scalar]] = ()

    def __post_init__(self) -> None:
        object.__setattr__(self, "records", tuple(_freeze(r) for r in self.records))

    @property
    def kind(self) -> NodeKind:
        return NodeKind.SOURCE


@dataclass(frozen=True, slots=True)
class FilterNode:
    """Field projection node with "filtered" and "all" outputs.

    Attributes:
        available_fields: Fields arriving from upstream (derived, not user-set)
        selected_fields: Fields kept on the "filtered" output
        aliases: Original field name -> output name
    """

    node_id: NodeID
    label: str
    selected_fields: Sequence[str] = ()
    aliases: Mapping[str, str] = field(default_factory=dict)
    available_fields: Sequence[str] = ()

    def __post_init__(self) -> None:
        object.__setattr__(self, "selected_fields", tuple(self.selected_fields))
        object.__setattr__(self, "available_fields", tuple(self.available_fields))
        object.__setattr__(self, "aliases", MappingProxyType(dict(self.aliases)))

    @property
    def kind(self) -> NodeKind:
        return NodeKind.FILTER


@dataclass(frozen=True, slots=True)
class JoinNode:
    """Two-input relational join.

    An empty join_key means "not configured yet"; the node then
    concatenates both sides instead of joining them.
    """

    node_id: NodeID
    label: str
    join_key: str = ""
    mode: JoinMode = JoinMode.INNER

    @property
    def kind(self) -> NodeKind:
        return NodeKind.JOIN


@dataclass(frozen=True, slots=True)
class SinkNode:
    """Table node. Consumes rows; never produces any."""

    node_id: NodeID
    label: str

    @property
    def kind(self) -> NodeKind:
        return NodeKind.SINK


type Node = RecordSource | BatchSource | FilterNode | JoinNode | SinkNode


@dataclass(frozen=True, slots=True)
class Edge:
    """Directed connection between two nodes.

    source_handle names the output port when the source is a filter node;
    target_handle names the input side when the target is a join node.
    """

    source: NodeID
    target: NodeID
    source_handle: FilterHandle | None = None
    target_handle: JoinHandle | None = None
    edge_id: str | None = None


@dataclass(frozen=True, slots=True)
class GraphSnapshot:
    """Immutable node and edge collections for one resolution request."""

    nodes: tuple[Node, ...] = ()
    edges: tuple[Edge, ...] = ()

    def node(self, node_id: str) -> Node | None:
        """Look up a node by id (first match wins)."""
        for node in self.nodes:
            if node.node_id == node_id:
                return node
        return None
