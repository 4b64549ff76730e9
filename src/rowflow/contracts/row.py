"""Row: the record flowing between graph nodes.

A row is a flat mapping of field name to scalar value plus provenance (the
node that produced it). Provenance is held in attributes rather than in the
field mapping, so every key of ``fields`` is a user-visible field.
"""

from __future__ import annotations

from collections.abc import Iterable, Mapping
from dataclasses import dataclass, field
from types import MappingProxyType
from typing import Any

from rowflow.contracts.types import NodeID, Scalar

# Keys used for provenance when a row is rendered in the editor's flat shape.
ROW_ID_KEY = "id"
NODE_ID_KEY = "_nodeId"
NODE_LABEL_KEY = "_nodeLabel"

# Field names starting with this prefix are editor metadata, never data.
RESERVED_PREFIX = "_"


def is_reserved_field(name: str) -> bool:
    """True for names the editor reserves for row metadata ("id", "_*")."""
    return name == ROW_ID_KEY or name.startswith(RESERVED_PREFIX)


@dataclass(frozen=True, slots=True)
class Row:
    """Immutable record produced by a single resolution pass.

    row_id is unique within one pass but not stable across passes.
    Transformations never modify a row; they build new ones.

    Reserved metadata names in ``fields`` are dropped on construction, so
    a source record carrying its own "id" or "_nodeId" cannot masquerade
    as provenance.
    """

    row_id: str
    node_id: NodeID
    node_label: str
    fields: Mapping[str, Scalar] = field(default_factory=dict)

    def __post_init__(self) -> None:
        # Copy then freeze so callers keeping the original dict can't mutate us
        data = {name: value for name, value in self.fields.items() if not is_reserved_field(name)}
        object.__setattr__(self, "fields", MappingProxyType(data))

    def field_names(self) -> list[str]:
        """Field names in insertion order."""
        return list(self.fields)

    def get(self, name: str) -> Scalar:
        """Value of a field, or None when the field is absent."""
        return self.fields.get(name)

    def to_dict(self) -> dict[str, Any]:
        """Render in the editor's flat shape.

        Provenance keys are written last, so they always describe the row.
        """
        return {
            **self.fields,
            ROW_ID_KEY: self.row_id,
            NODE_ID_KEY: self.node_id,
            NODE_LABEL_KEY: self.node_label,
        }


def collect_field_names(rows: Iterable[Row]) -> list[str]:
    """Sorted, de-duplicated union of field names across rows."""
    names: set[str] = set()
    for row in rows:
        names.update(row.fields)
    return sorted(names)
