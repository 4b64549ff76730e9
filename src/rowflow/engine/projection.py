"""Field projection for filter nodes.

A filter node keeps a subset of fields and may rename some of them. Two
selected fields must never end up under the same output name; the editor
enforces this through commit_alias() before a config reaches project().
"""

from __future__ import annotations

from collections.abc import Iterable, Mapping, Sequence

from rowflow.contracts import AliasConflictError, FilterConfigError, Row


def _output_name(field: str, aliases: Mapping[str, str] | None) -> str:
    # An empty alias means "not renamed"
    if aliases is None:
        return field
    return aliases.get(field) or field


def effective_output_names(
    selected_fields: Iterable[str],
    aliases: Mapping[str, str] | None = None,
) -> list[str]:
    """Alias-or-original name for each selected field, in selection order."""
    return [_output_name(field, aliases) for field in selected_fields]


def find_alias_conflicts(
    selected_fields: Iterable[str],
    aliases: Mapping[str, str] | None = None,
) -> dict[str, list[str]]:
    """Find output names produced by more than one selected field.

    Returns:
        Output name -> selected fields producing it. Empty when conflict-free.
    """
    producers: dict[str, list[str]] = {}
    for field in selected_fields:
        producers.setdefault(_output_name(field, aliases), []).append(field)
    return {name: sources for name, sources in producers.items() if len(sources) > 1}


def commit_alias(
    selected_fields: Sequence[str],
    aliases: Mapping[str, str],
    field: str,
    alias: str,
) -> dict[str, str]:
    """Return a new alias map with ``field`` renamed to ``alias``.

    The alias is trimmed. An empty alias, or one equal to the field name,
    removes the rename. The input mapping is left untouched.

    Raises:
        FilterConfigError: If field is not currently selected
        AliasConflictError: If the rename would collide with another field's
            output name. Nothing is committed in that case.
    """
    if field not in selected_fields:
        raise FilterConfigError(f"Cannot alias '{field}': field is not selected")

    trimmed = alias.strip()
    updated = dict(aliases)
    if not trimmed or trimmed == field:
        updated.pop(field, None)
    else:
        updated[field] = trimmed

    conflicts = find_alias_conflicts(selected_fields, updated)
    if conflicts:
        raise AliasConflictError(conflicts)
    return updated


def deselect_field(
    selected_fields: Sequence[str],
    aliases: Mapping[str, str],
    field: str,
) -> tuple[list[str], dict[str, str]]:
    """Drop a field from the selection together with its alias."""
    remaining = [f for f in selected_fields if f != field]
    updated = {f: a for f, a in aliases.items() if f != field}
    return remaining, updated


def project(
    rows: Iterable[Row],
    selected_fields: Iterable[str],
    aliases: Mapping[str, str] | None = None,
) -> list[Row]:
    """Keep only selected fields on each row, renaming aliased ones.

    Provenance (id, node id, node label) is carried over unchanged. A
    selected field missing from a row is omitted rather than padded. Field
    order follows the upstream row.

    Raises:
        AliasConflictError: If two selected fields share an output name.
    """
    selected = list(dict.fromkeys(selected_fields))
    conflicts = find_alias_conflicts(selected, aliases)
    if conflicts:
        raise AliasConflictError(conflicts)

    allow = set(selected)
    projected: list[Row] = []
    for row in rows:
        fields = {_output_name(name, aliases): value for name, value in row.fields.items() if name in allow}
        projected.append(
            Row(
                row_id=row.row_id,
                node_id=row.node_id,
                node_label=row.node_label,
                fields=fields,
            )
        )
    return projected
