"""Exceptions raised at configuration and document boundaries.

The resolution engine itself does not raise for mid-edit states (unset join
keys, cycles, missing fields). These exceptions cover precondition violations
and unreadable inputs only.
"""


class FilterConfigError(ValueError):
    """Raised when a filter node configuration is internally inconsistent."""

    pass


class AliasConflictError(FilterConfigError):
    """Raised when two selected fields would share an effective output name.

    Attributes:
        conflicts: Output name -> selected fields that produce it
    """

    def __init__(self, conflicts: dict[str, list[str]]) -> None:
        self.conflicts = conflicts
        detail = "; ".join(f"'{name}' <- {', '.join(sources)}" for name, sources in sorted(conflicts.items()))
        super().__init__(f"Alias conflict: {detail}")


class SnapshotError(ValueError):
    """Raised when an editor graph document cannot be parsed."""

    pass
