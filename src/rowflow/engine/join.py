"""Relational join of two row sets on a single key field.

Side A is the primary side: on a field name collision between the two
sides, A's value wins. One key value may match several B rows, producing
one merged row per match.
"""

from __future__ import annotations

import math
from collections.abc import Sequence

import structlog

from rowflow.contracts import JoinMode, NodeID, Row, Scalar

slog = structlog.get_logger(__name__)


def _float_text(value: float) -> str:
    """ECMAScript Number-to-String for a float.

    Python's repr already yields the shortest round-tripping digits; only
    the placement of the decimal point and the exponent form differ.
    """
    if math.isnan(value):
        return "NaN"
    if math.isinf(value):
        return "Infinity" if value > 0 else "-Infinity"
    if value == 0:
        return "0"

    sign = "-" if value < 0 else ""
    mantissa, _, exponent = repr(abs(value)).partition("e")
    whole, _, fraction = mantissa.partition(".")
    digits = whole + fraction
    point = len(whole) + int(exponent or 0)
    stripped = digits.lstrip("0")
    point -= len(digits) - len(stripped)
    digits = stripped.rstrip("0")

    # point is the decimal exponent n: value == 0.<digits> * 10**point
    k = len(digits)
    if k <= point <= 21:
        text = digits + "0" * (point - k)
    elif 0 < point <= 21:
        text = f"{digits[:point]}.{digits[point:]}"
    elif -6 < point <= 0:
        text = "0." + "0" * -point + digits
    else:
        e = point - 1
        head = digits if k == 1 else f"{digits[0]}.{digits[1:]}"
        text = f"{head}e{'+' if e >= 0 else '-'}{abs(e)}"
    return sign + text


def join_key_text(value: Scalar) -> str:
    """Render a key value the way the editor compares keys.

    Missing and None become the empty string, so all key-less rows share a
    bucket. Booleans are lowercase. Floats follow ECMAScript String(), so
    10.0 matches 10, 1e21 renders as "1e+21" and NaN as "NaN". Integers
    render in full digits at any size.
    """
    if value is None:
        return ""
    if isinstance(value, bool):
        return "true" if value else "false"
    if isinstance(value, float):
        return _float_text(value)
    return str(value)


class _MergedRowFactory:
    """Builds output rows attributed to the join node with sequential ids."""

    def __init__(self, node_id: NodeID, label: str) -> None:
        self._node_id = node_id
        self._label = label
        self._counter = 0

    def build(self, *layers: Row) -> Row:
        """Merge field layers in order; later layers overwrite earlier ones."""
        fields: dict[str, Scalar] = {}
        for layer in layers:
            fields.update(layer.fields)
        row = Row(
            row_id=f"{self._node_id}-{self._counter}",
            node_id=self._node_id,
            node_label=self._label,
            fields=fields,
        )
        self._counter += 1
        return row


def join(
    side_a: Sequence[Row],
    side_b: Sequence[Row],
    join_key: str,
    mode: JoinMode,
    result_node_id: NodeID,
    result_label: str,
) -> list[Row]:
    """Join side A to side B on ``join_key``.

    Output order: rows derived from A in A's order (each A row followed by
    its matches in B's order), then in FULL mode the B rows whose key no A
    row matched.

    An empty join_key means the join is not configured yet. Both sides are
    then concatenated unchanged (A first) instead of joined.

    Args:
        side_a: Primary rows; their fields win on collision
        side_b: Secondary rows, indexed by key
        join_key: Field name to match on
        mode: INNER drops unmatched rows, FULL keeps them
        result_node_id: Join node id, used for provenance and row ids
        result_label: Join node label, used for provenance

    Returns:
        New rows; input rows are never modified.
    """
    if not join_key:
        slog.debug(
            "join_unconfigured_concat",
            node_id=result_node_id,
            side_a=len(side_a),
            side_b=len(side_b),
        )
        return [*side_a, *side_b]

    b_by_key: dict[str, list[Row]] = {}
    for b_row in side_b:
        b_by_key.setdefault(join_key_text(b_row.get(join_key)), []).append(b_row)

    factory = _MergedRowFactory(result_node_id, result_label)
    matched_keys: set[str] = set()
    result: list[Row] = []

    for a_row in side_a:
        key = join_key_text(a_row.get(join_key))
        matches = b_by_key.get(key)
        if matches:
            matched_keys.add(key)
            # B first, then A on top: A wins on collision
            result.extend(factory.build(b_row, a_row) for b_row in matches)
        elif mode == JoinMode.FULL:
            result.append(factory.build(a_row))

    if mode == JoinMode.FULL:
        for b_row in side_b:
            if join_key_text(b_row.get(join_key)) not in matched_keys:
                result.append(factory.build(b_row))

    slog.debug(
        "join_completed",
        node_id=result_node_id,
        join_key=join_key,
        mode=str(mode),
        side_a=len(side_a),
        side_b=len(side_b),
        output=len(result),
    )
    return result
