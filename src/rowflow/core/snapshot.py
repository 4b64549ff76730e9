"""Editor graph documents -> immutable GraphSnapshot.

The editor serialises its canvas as ``{"nodes": [...], "edges": [...]}``
using its own node type names. Parsing happens once at this boundary; past
it, the engine only ever sees typed contracts.

Editor type       -> contract
  dataNode        -> RecordSource
  facebookAdNode  -> BatchSource
  schemaNode      -> FilterNode
  joinNode        -> JoinNode
  tableNode       -> SinkNode

Other editor node types (e.g. formula nodes) carry no rows across the graph
and are dropped with a warning. Edges pointing at them then reference an
unknown node and contribute nothing.
"""

from __future__ import annotations

import json
from collections.abc import Mapping
from pathlib import Path
from typing import Any

import structlog
import yaml
from pydantic import BaseModel, ConfigDict, Field, ValidationError

from rowflow.contracts import (
    BatchSource,
    Edge,
    FilterHandle,
    FilterNode,
    GraphSnapshot,
    JoinHandle,
    JoinMode,
    JoinNode,
    Node,
    NodeID,
    RecordSource,
    Scalar,
    SinkNode,
    SnapshotError,
    is_reserved_field,
)
from rowflow.core.config import SnapshotSettings

slog = structlog.get_logger(__name__)

# Attributes of a dataNode row that become row fields, in editor order.
RECORD_SOURCE_ATTRIBUTES: tuple[str, ...] = (
    "label",
    "type",
    "status",
    "description",
    "records",
    "lastRun",
)


class FlowNodeDocument(BaseModel):
    """One node as stored by the editor. Canvas position is ignored."""

    model_config = ConfigDict(extra="ignore")

    id: str = Field(min_length=1)
    type: str
    data: dict[str, Any] = Field(default_factory=dict)


class FlowEdgeDocument(BaseModel):
    """One edge as stored by the editor."""

    model_config = ConfigDict(extra="ignore", populate_by_name=True)

    id: str | None = None
    source: str = Field(min_length=1)
    target: str = Field(min_length=1)
    source_handle: str | None = Field(default=None, alias="sourceHandle")
    target_handle: str | None = Field(default=None, alias="targetHandle")


class FlowDocument(BaseModel):
    """Whole editor document; metadata beyond nodes and edges is ignored."""

    model_config = ConfigDict(extra="ignore")

    nodes: list[FlowNodeDocument] = Field(default_factory=list)
    edges: list[FlowEdgeDocument] = Field(default_factory=list)


def _scalar_fields(record: Mapping[str, Any]) -> dict[str, Scalar]:
    """Keep scalar data values.

    Nested structures never become row fields, and neither do the editor's
    metadata keys ("id" and anything starting with "_").
    """
    return {
        k: v
        for k, v in record.items()
        if not is_reserved_field(k) and (v is None or isinstance(v, str | int | float | bool))
    }


def _label(data: Mapping[str, Any], fallback: str) -> str:
    label = data.get("label")
    return label if isinstance(label, str) and label else fallback


def _record_source(doc: FlowNodeDocument) -> RecordSource:
    row = doc.data.get("row")
    if not isinstance(row, Mapping):
        raise SnapshotError(f"dataNode '{doc.id}' has no 'row' object")
    attributes = {name: row[name] for name in RECORD_SOURCE_ATTRIBUTES if row.get(name) is not None}
    return RecordSource(
        node_id=NodeID(doc.id),
        label=_label(row, doc.id),
        attributes=_scalar_fields(attributes),
    )


def _batch_source(doc: FlowNodeDocument) -> BatchSource:
    records = doc.data.get("rows", [])
    if not isinstance(records, list) or not all(isinstance(r, Mapping) for r in records):
        raise SnapshotError(f"facebookAdNode '{doc.id}' has malformed 'rows'")
    return BatchSource(
        node_id=NodeID(doc.id),
        label=_label(doc.data, doc.id),
        records=[_scalar_fields(r) for r in records],
    )


def _filter_node(doc: FlowNodeDocument) -> FilterNode:
    data = doc.data
    aliases = data.get("fieldAliases") or {}
    if not isinstance(aliases, Mapping):
        raise SnapshotError(f"schemaNode '{doc.id}' has malformed 'fieldAliases'")
    return FilterNode(
        node_id=NodeID(doc.id),
        label=_label(data, doc.id),
        selected_fields=[str(f) for f in data.get("selectedFields") or []],
        aliases={str(k): str(v) for k, v in aliases.items() if v},
        available_fields=[str(f) for f in data.get("availableFields") or []],
    )


def _join_node(doc: FlowNodeDocument, settings: SnapshotSettings) -> JoinNode:
    data = doc.data
    raw_mode = data.get("joinType")
    try:
        mode = JoinMode(raw_mode) if raw_mode else settings.default_join_mode
    except ValueError:
        raise SnapshotError(f"joinNode '{doc.id}' has unknown joinType '{raw_mode}'") from None
    return JoinNode(
        node_id=NodeID(doc.id),
        label=_label(data, doc.id),
        join_key=str(data.get("joinKey") or ""),
        mode=mode,
    )


def _node_from_document(doc: FlowNodeDocument, settings: SnapshotSettings) -> Node | None:
    match doc.type:
        case "dataNode":
            return _record_source(doc)
        case "facebookAdNode":
            return _batch_source(doc)
        case "schemaNode":
            return _filter_node(doc)
        case "joinNode":
            return _join_node(doc, settings)
        case "tableNode":
            return SinkNode(node_id=NodeID(doc.id), label=_label(doc.data, doc.id))
        case _:
            slog.warning("snapshot_node_type_unsupported", node_id=doc.id, node_type=doc.type)
            return None


def _as_handle[H: (FilterHandle, JoinHandle)](handle_type: type[H], handle: str | None) -> H | None:
    """Parse a canonical handle id; ids of other port kinds map to None."""
    if handle is None:
        return None
    try:
        return handle_type(handle)
    except ValueError:
        return None


def _edge_from_document(doc: FlowEdgeDocument, settings: SnapshotSettings) -> Edge:
    return Edge(
        source=NodeID(doc.source),
        target=NodeID(doc.target),
        source_handle=_as_handle(FilterHandle, settings.canonical_handle(doc.source_handle)),
        target_handle=_as_handle(JoinHandle, settings.canonical_handle(doc.target_handle)),
        edge_id=doc.id,
    )


def snapshot_from_document(
    document: Mapping[str, Any],
    settings: SnapshotSettings | None = None,
) -> GraphSnapshot:
    """Build a GraphSnapshot from a parsed editor document.

    Raises:
        SnapshotError: If the document shape is invalid
    """
    settings = settings or SnapshotSettings()
    try:
        parsed = FlowDocument.model_validate(document)
    except ValidationError as e:
        raise SnapshotError(f"Invalid graph document: {e}") from e

    nodes = [node for doc in parsed.nodes if (node := _node_from_document(doc, settings)) is not None]
    edges = [_edge_from_document(doc, settings) for doc in parsed.edges]
    return GraphSnapshot(nodes=tuple(nodes), edges=tuple(edges))


def load_snapshot(path: Path, settings: SnapshotSettings | None = None) -> GraphSnapshot:
    """Read an editor document from a JSON or YAML file.

    Raises:
        FileNotFoundError: If path doesn't exist
        SnapshotError: If the file can't be parsed or has an invalid shape
    """
    if not path.exists():
        raise FileNotFoundError(f"Snapshot file not found: {path}")

    text = path.read_text(encoding="utf-8")
    try:
        if path.suffix.lower() in (".yaml", ".yml"):
            document = yaml.safe_load(text)
        else:
            document = json.loads(text)
    except (json.JSONDecodeError, yaml.YAMLError) as e:
        raise SnapshotError(f"Failed to parse {path.name}: {e}") from e

    if not isinstance(document, Mapping):
        raise SnapshotError(f"{path.name} must contain an object with 'nodes' and 'edges'")
    return snapshot_from_document(document, settings)
