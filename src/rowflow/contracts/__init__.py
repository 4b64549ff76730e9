"""Shared contracts for cross-boundary data types.

All dataclasses, enums and exceptions that cross subsystem boundaries
(editor snapshot -> engine -> CLI) are defined here.

Import pattern:
    from rowflow.contracts import Row, JoinNode, JoinMode
"""

from rowflow.contracts.enums import FilterHandle, JoinHandle, JoinMode, NodeKind
from rowflow.contracts.errors import AliasConflictError, FilterConfigError, SnapshotError
from rowflow.contracts.graph import (
    BatchSource,
    Edge,
    FilterNode,
    GraphSnapshot,
    JoinNode,
    Node,
    RecordSource,
    SinkNode,
)
from rowflow.contracts.results import JoinFieldSummary
from rowflow.contracts.row import Row, collect_field_names, is_reserved_field
from rowflow.contracts.types import NodeID, Scalar

__all__ = [
    # enums
    "FilterHandle",
    "JoinHandle",
    "JoinMode",
    "NodeKind",
    # errors
    "AliasConflictError",
    "FilterConfigError",
    "SnapshotError",
    # graph
    "BatchSource",
    "Edge",
    "FilterNode",
    "GraphSnapshot",
    "JoinNode",
    "Node",
    "RecordSource",
    "SinkNode",
    # results
    "JoinFieldSummary",
    # row
    "Row",
    "collect_field_names",
    "is_reserved_field",
    # types
    "NodeID",
    "Scalar",
]
