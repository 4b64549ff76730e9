"""Types and exceptions for graph diagnostics.

Leaf module: no intra-package imports beyond contracts.
"""

from __future__ import annotations

from dataclasses import dataclass


class GraphValidationError(ValueError):
    """Raised when a snapshot cannot be turned into a graph at all."""

    pass


@dataclass(frozen=True, slots=True)
class GraphValidationWarning:
    """Non-fatal finding about a snapshot.

    Unlike GraphValidationError, warnings never block resolution. They
    point the operator at wiring the resolver will quietly ignore (rows
    silently missing from a table).
    """

    code: str
    message: str
    node_ids: tuple[str, ...]


# Warning codes
DANGLING_EDGE = "dangling_edge"
CYCLE = "cycle"
UNASSIGNED_JOIN_INPUT = "unassigned_join_input"
MISPLACED_FILTER_HANDLE = "misplaced_filter_handle"
JOIN_KEY_UNSET = "join_key_unset"
