# tests/property/engine/test_join_properties.py
"""Property-based tests for the two-way join.

These tests verify:
- INNER output size is the number of (A, B) pairs with equal key text
- FULL output adds exactly the unmatched rows of both sides
- Every output row is attributed to the join node with sequential ids
- An unconfigured key concatenates both sides unchanged
"""

from __future__ import annotations

from collections import Counter

from hypothesis import given

from rowflow.contracts import JoinMode, NodeID, Row
from rowflow.engine.join import join, join_key_text
from tests.property.conftest import row_lists
from tests.property.settings import STANDARD_SETTINGS

JOIN_ID = NodeID("join")
KEY = "sku"


def _key_counts(rows: list[Row]) -> Counter[str]:
    return Counter(join_key_text(row.get(KEY)) for row in rows)


class TestJoinSizeProperties:
    @given(side_a=row_lists("A"), side_b=row_lists("B"))
    @STANDARD_SETTINGS
    def test_inner_size_counts_matching_pairs(self, side_a: list[Row], side_b: list[Row]) -> None:
        b_counts = _key_counts(side_b)

        result = join(side_a, side_b, KEY, JoinMode.INNER, JOIN_ID, "Join")

        assert len(result) == sum(b_counts[join_key_text(row.get(KEY))] for row in side_a)

    @given(side_a=row_lists("A"), side_b=row_lists("B"))
    @STANDARD_SETTINGS
    def test_full_adds_unmatched_rows_of_both_sides(self, side_a: list[Row], side_b: list[Row]) -> None:
        a_keys = set(_key_counts(side_a))
        b_keys = set(_key_counts(side_b))
        inner = join(side_a, side_b, KEY, JoinMode.INNER, JOIN_ID, "Join")

        result = join(side_a, side_b, KEY, JoinMode.FULL, JOIN_ID, "Join")

        unmatched_a = sum(1 for row in side_a if join_key_text(row.get(KEY)) not in b_keys)
        unmatched_b = sum(1 for row in side_b if join_key_text(row.get(KEY)) not in a_keys)
        assert len(result) == len(inner) + unmatched_a + unmatched_b

    @given(side_a=row_lists("A"), side_b=row_lists("B"))
    @STANDARD_SETTINGS
    def test_inner_rows_carry_a_shared_key(self, side_a: list[Row], side_b: list[Row]) -> None:
        shared = set(_key_counts(side_a)) & set(_key_counts(side_b))

        result = join(side_a, side_b, KEY, JoinMode.INNER, JOIN_ID, "Join")

        assert all(join_key_text(row.get(KEY)) in shared for row in result)


class TestJoinAttributionProperties:
    @given(side_a=row_lists("A"), side_b=row_lists("B"))
    @STANDARD_SETTINGS
    def test_rows_are_attributed_to_join(self, side_a: list[Row], side_b: list[Row]) -> None:
        result = join(side_a, side_b, KEY, JoinMode.FULL, JOIN_ID, "Join")

        assert [row.row_id for row in result] == [f"join-{i}" for i in range(len(result))]
        assert all(row.node_id == JOIN_ID and row.node_label == "Join" for row in result)

    @given(side_a=row_lists("A"), side_b=row_lists("B"))
    @STANDARD_SETTINGS
    def test_empty_key_concatenates(self, side_a: list[Row], side_b: list[Row]) -> None:
        result = join(side_a, side_b, "", JoinMode.INNER, JOIN_ID, "Join")

        assert result == [*side_a, *side_b]
