"""Node kinds, join modes, and port identifiers used across subsystem boundaries.

Handles are modelled per node kind so an edge can only name a port that the
node it touches actually has.
"""

from enum import StrEnum


class NodeKind(StrEnum):
    """Discriminant for graph vertices."""

    SOURCE = "source"
    FILTER = "filter"
    JOIN = "join"
    SINK = "sink"


class JoinMode(StrEnum):
    """How a join node treats rows without a partner on the other side.

    INNER drops unmatched rows; FULL keeps them from both sides.
    """

    INNER = "inner"
    FULL = "full"


class FilterHandle(StrEnum):
    """Output ports of a filter node.

    An edge leaving a filter node with no handle reads ALL.
    """

    FILTERED = "filtered"
    ALL = "all"


class JoinHandle(StrEnum):
    """Input ports of a join node.

    Edges into a join node without a handle are not assigned to either side.
    """

    A = "a"
    B = "b"
