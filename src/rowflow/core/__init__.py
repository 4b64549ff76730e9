"""Core infrastructure: configuration, logging, snapshot loading, graph diagnostics."""

from rowflow.core.config import (
    LoggingSettings,
    RowflowSettings,
    SnapshotSettings,
    load_settings,
)
from rowflow.core.dag import (
    GraphValidationError,
    GraphValidationWarning,
    PipelineGraph,
)
from rowflow.core.logging import (
    configure_logging,
)
from rowflow.core.snapshot import (
    load_snapshot,
    snapshot_from_document,
)

__all__ = [
    "GraphValidationError",
    "GraphValidationWarning",
    "LoggingSettings",
    "PipelineGraph",
    "RowflowSettings",
    "SnapshotSettings",
    "configure_logging",
    "load_settings",
    "load_snapshot",
    "snapshot_from_document",
]
