"""Row extraction from source nodes.

Only source nodes produce rows from their own data. Filter, join and sink
nodes depend on upstream connectivity and are handled by the resolver.
"""

from __future__ import annotations

from rowflow.contracts import BatchSource, Node, RecordSource, Row


def extract_rows(node: Node) -> list[Row]:
    """Convert a source node's own data into rows.

    - RecordSource: exactly one row whose id is the node id
    - BatchSource: one row per record, ids are ``{node_id}-{index}``
    - anything else: no rows

    Pure function of the node; values are passed through unconverted.
    """
    match node:
        case RecordSource():
            return [
                Row(
                    row_id=node.node_id,
                    node_id=node.node_id,
                    node_label=node.label,
                    fields=node.attributes,
                )
            ]
        case BatchSource():
            return [
                Row(
                    row_id=f"{node.node_id}-{index}",
                    node_id=node.node_id,
                    node_label=node.label,
                    fields=record,
                )
                for index, record in enumerate(node.records)
            ]
        case _:
            return []
