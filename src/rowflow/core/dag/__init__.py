"""Graph diagnostics over editor snapshots, backed by NetworkX.

Resolution never depends on this package; it exists to explain why a
table shows fewer rows than expected.
"""

from rowflow.core.dag.graph import PipelineGraph
from rowflow.core.dag.models import GraphValidationError, GraphValidationWarning

__all__ = [
    "GraphValidationError",
    "GraphValidationWarning",
    "PipelineGraph",
]
