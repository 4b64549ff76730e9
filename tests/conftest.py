# tests/conftest.py
"""Shared test fixtures and graph builders.

Hypothesis Configuration:
- "ci" profile: Fast tests for CI (100 examples) - default
- "nightly" profile: Thorough tests (1000 examples)
- "debug" profile: Minimal tests with verbose output (10 examples)

Set profile via environment variable:
    HYPOTHESIS_PROFILE=nightly pytest tests/property/
"""

from __future__ import annotations

import logging
import os
from collections.abc import Iterator

import pytest
import structlog
from hypothesis import Verbosity, settings

from rowflow.contracts import (
    BatchSource,
    Edge,
    FilterHandle,
    FilterNode,
    GraphSnapshot,
    JoinHandle,
    JoinMode,
    JoinNode,
    NodeID,
    RecordSource,
    Row,
    SinkNode,
)

settings.register_profile("ci", max_examples=100, deadline=None)
settings.register_profile("nightly", max_examples=1000, deadline=None)
settings.register_profile("debug", max_examples=10, verbosity=Verbosity.verbose, deadline=None)
settings.load_profile(os.environ.get("HYPOTHESIS_PROFILE", "ci"))


@pytest.fixture(autouse=True)
def _reset_structlog() -> Iterator[None]:
    """Undo configure_logging() calls so tests don't leak handlers."""
    root = logging.getLogger()
    handlers, level = root.handlers[:], root.level
    yield
    structlog.reset_defaults()
    root.handlers = handlers
    root.setLevel(level)


def make_row(row_id: str, node_id: str = "src", label: str = "Source", **fields: object) -> Row:
    """Build a row with provenance defaults."""
    return Row(row_id=row_id, node_id=NodeID(node_id), node_label=label, fields=fields)  # type: ignore[arg-type]


def edge(
    source: str,
    target: str,
    *,
    source_handle: FilterHandle | None = None,
    target_handle: JoinHandle | None = None,
) -> Edge:
    """Build an edge between two node ids."""
    return Edge(
        source=NodeID(source),
        target=NodeID(target),
        source_handle=source_handle,
        target_handle=target_handle,
    )


def pipeline_stage(node_id: str, label: str, **attributes: object) -> RecordSource:
    """Single-record source node."""
    return RecordSource(node_id=NodeID(node_id), label=label, attributes={"label": label, **attributes})  # type: ignore[dict-item]


@pytest.fixture
def orders_and_stock() -> GraphSnapshot:
    """Two batch sources joined on sku, feeding a table.

        orders --a--> join(sku, inner) --> table
        stock  --b-->
    """
    orders = BatchSource(
        node_id=NodeID("orders"),
        label="Orders",
        records=[
            {"sku": "X", "price": 10},
            {"sku": "Y", "price": 20},
            {"sku": "Z", "price": 30},
        ],
    )
    stock = BatchSource(
        node_id=NodeID("stock"),
        label="Stock",
        records=[
            {"sku": "X", "qty": 2},
            {"sku": "X", "qty": 5},
            {"sku": "Y", "qty": 1},
            {"sku": "W", "qty": 9},
        ],
    )
    join_node = JoinNode(node_id=NodeID("join"), label="Orders x Stock", join_key="sku", mode=JoinMode.INNER)
    table = SinkNode(node_id=NodeID("table"), label="Table")
    return GraphSnapshot(
        nodes=(orders, stock, join_node, table),
        edges=(
            edge("orders", "join", target_handle=JoinHandle.A),
            edge("stock", "join", target_handle=JoinHandle.B),
            edge("join", "table"),
        ),
    )


@pytest.fixture
def stage_filter_table() -> GraphSnapshot:
    """Pipeline stage projected through a filter into two tables.

        db --> filter --filtered--> filtered_table
                      --all-------> all_table
    """
    db = pipeline_stage("s1", "DB", type="source", status="active", records=100)
    flt = FilterNode(
        node_id=NodeID("filter"),
        label="Only counts",
        selected_fields=["records"],
        aliases={"records": "count"},
    )
    return GraphSnapshot(
        nodes=(
            db,
            flt,
            SinkNode(node_id=NodeID("filtered_table"), label="Filtered"),
            SinkNode(node_id=NodeID("all_table"), label="All"),
        ),
        edges=(
            edge("s1", "filter"),
            edge("filter", "filtered_table", source_handle=FilterHandle.FILTERED),
            edge("filter", "all_table", source_handle=FilterHandle.ALL),
        ),
    )
