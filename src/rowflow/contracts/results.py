"""Result types returned by read-only graph analyses."""

from __future__ import annotations

from dataclasses import dataclass
from typing import Any


@dataclass(frozen=True, slots=True)
class JoinFieldSummary:
    """Fields available on each side of a join node.

    Attributes:
        fields_a: Sorted field names seen on side A
        fields_b: Sorted field names seen on side B
        common_fields: Sorted intersection; the only valid join keys
        matched_count: Rows the join currently produces, or 0 when the
            configured key is unset or not a common field
    """

    fields_a: tuple[str, ...] = ()
    fields_b: tuple[str, ...] = ()
    common_fields: tuple[str, ...] = ()
    matched_count: int = 0

    def to_dict(self) -> dict[str, Any]:
        return {
            "fieldsA": list(self.fields_a),
            "fieldsB": list(self.fields_b),
            "commonFields": list(self.common_fields),
            "matchedCount": self.matched_count,
        }
