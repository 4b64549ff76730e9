"""Resolution engine: extraction, projection, join, and graph resolution."""

from rowflow.engine.extraction import extract_rows
from rowflow.engine.join import join, join_key_text
from rowflow.engine.projection import (
    commit_alias,
    deselect_field,
    effective_output_names,
    find_alias_conflicts,
    project,
)
from rowflow.engine.resolver import (
    derive_filter_fields,
    derive_join_fields,
    resolve_join_rows,
    resolve_rows,
)

__all__ = [
    "commit_alias",
    "derive_filter_fields",
    "derive_join_fields",
    "deselect_field",
    "effective_output_names",
    "extract_rows",
    "find_alias_conflicts",
    "join",
    "join_key_text",
    "project",
    "resolve_join_rows",
    "resolve_rows",
]
