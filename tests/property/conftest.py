# tests/property/conftest.py
"""Shared Hypothesis strategies for property-based tests.

Strategy Categories:
- Scalar field values (what editor rows carry)
- Rows and row lists with small, colliding field and key alphabets
- Random wiring over a fixed node set (for cycle and determinism tests)

Usage:
    from tests.property.conftest import row_lists

    @given(rows=row_lists())
    def test_projection_is_subset(rows: list[Row]) -> None:
        ...
"""

# =============================================================================
# Hypothesis Settings
# =============================================================================
#
# For standardized @settings decorators, import from tests.property.settings:
#   from tests.property.settings import STANDARD_SETTINGS, DETERMINISM_SETTINGS
#
# Tiers: DETERMINISM (500), STANDARD (100)
# =============================================================================

from __future__ import annotations

from hypothesis import strategies as st

from rowflow.contracts import (
    BatchSource,
    Edge,
    FilterHandle,
    FilterNode,
    JoinHandle,
    JoinMode,
    JoinNode,
    Node,
    NodeID,
    Row,
    SinkNode,
)

# Small alphabets so that generated rows actually share fields and keys
FIELD_NAMES = ("ad_id", "sku", "name", "qty", "price")
KEY_VALUES = ("a", "b", "c", "d")

scalar_values = (
    st.none()
    | st.booleans()
    | st.integers(min_value=-1000, max_value=1000)
    | st.floats(allow_nan=False, allow_infinity=False, width=32)
    | st.text(max_size=10)
)

field_names = st.sampled_from(FIELD_NAMES)

# Key values drawn from a tiny pool, so joins find matches
key_values = st.sampled_from(KEY_VALUES) | st.none()


@st.composite
def rows(draw: st.DrawFn, node_id: str = "src", key_field: str = "sku") -> Row:
    """A row whose key field, when present, comes from KEY_VALUES."""
    fields = draw(st.dictionaries(field_names, scalar_values, max_size=len(FIELD_NAMES)))
    if draw(st.booleans()):
        fields[key_field] = draw(key_values)
    row_id = draw(st.text(alphabet="0123456789", min_size=1, max_size=4))
    return Row(row_id=f"{node_id}-{row_id}", node_id=NodeID(node_id), node_label=node_id.upper(), fields=fields)


def row_lists(node_id: str = "src", max_size: int = 8) -> st.SearchStrategy[list[Row]]:
    return st.lists(rows(node_id=node_id), max_size=max_size)


selections = st.lists(field_names, unique=True, max_size=len(FIELD_NAMES))


@st.composite
def conflict_free_aliases(draw: st.DrawFn, selected: list[str]) -> dict[str, str]:
    """Aliases over selected fields that never collide with another output name."""
    targets = iter(draw(st.permutations(["alias_1", "alias_2", "alias_3", "alias_4", "alias_5"])))
    return {name: next(targets) for name in selected if draw(st.booleans())}


# =============================================================================
# Random wiring
# =============================================================================

# Fixed node set; edges between them are generated, including cycles
WIRING_NODES: tuple[Node, ...] = (
    BatchSource(node_id=NodeID("left"), label="Left", records=[{"sku": "a", "qty": 1}, {"sku": "b", "qty": 2}]),
    BatchSource(node_id=NodeID("right"), label="Right", records=[{"sku": "a", "price": 5}, {"sku": "c", "price": 7}]),
    FilterNode(node_id=NodeID("f1"), label="F1", selected_fields=["sku"]),
    FilterNode(node_id=NodeID("f2"), label="F2", selected_fields=["sku", "qty"], aliases={"qty": "n"}),
    JoinNode(node_id=NodeID("j1"), label="J1", join_key="sku", mode=JoinMode.FULL),
    JoinNode(node_id=NodeID("j2"), label="J2"),
    SinkNode(node_id=NodeID("t"), label="T"),
)
WIRING_IDS = tuple(node.node_id for node in WIRING_NODES)

wiring_edges = st.builds(
    Edge,
    source=st.sampled_from(WIRING_IDS),
    target=st.sampled_from(WIRING_IDS),
    source_handle=st.none() | st.sampled_from(FilterHandle),
    target_handle=st.none() | st.sampled_from(JoinHandle),
)

wirings = st.lists(wiring_edges, max_size=15)
