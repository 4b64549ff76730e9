"""Tests for row extraction from source nodes."""

from __future__ import annotations

from rowflow.contracts import BatchSource, FilterNode, JoinNode, NodeID, RecordSource, SinkNode
from rowflow.engine.extraction import extract_rows


class TestRecordSource:
    """A single-record source yields exactly one row named after the node."""

    def test_one_row_with_node_id(self) -> None:
        node = RecordSource(
            node_id=NodeID("s1"),
            label="DB",
            attributes={
                "label": "DB",
                "type": "source",
                "status": "active",
                "description": "Main database",
                "records": 100,
                "lastRun": "2026-01-02T03:04:05Z",
            },
        )

        rows = extract_rows(node)

        assert len(rows) == 1
        row = rows[0]
        assert row.row_id == "s1"
        assert row.node_id == "s1"
        assert row.node_label == "DB"
        assert dict(row.fields) == {
            "label": "DB",
            "type": "source",
            "status": "active",
            "description": "Main database",
            "records": 100,
            "lastRun": "2026-01-02T03:04:05Z",
        }

    def test_optional_attributes_stay_absent(self) -> None:
        node = RecordSource(node_id=NodeID("s1"), label="DB", attributes={"label": "DB"})

        (row,) = extract_rows(node)

        assert "records" not in row.fields


class TestBatchSource:
    """A batch source yields one row per record."""

    def test_row_per_record_with_indexed_ids(self) -> None:
        node = BatchSource(
            node_id=NodeID("fb"),
            label="Ads",
            records=[
                {"date_start": "2026-01-01", "clicks": 3, "spend": "1.50"},
                {"date_start": "2026-01-02", "clicks": 7, "spend": "2.25"},
            ],
        )

        rows = extract_rows(node)

        assert [r.row_id for r in rows] == ["fb-0", "fb-1"]
        assert all(r.node_id == "fb" and r.node_label == "Ads" for r in rows)
        assert rows[1].fields["clicks"] == 7

    def test_values_pass_through_without_coercion(self) -> None:
        """Currency arrives as a string and stays a string."""
        node = BatchSource(node_id=NodeID("fb"), label="Ads", records=[{"spend": "1.50"}])

        (row,) = extract_rows(node)

        assert row.fields["spend"] == "1.50"

    def test_empty_batch(self) -> None:
        assert extract_rows(BatchSource(node_id=NodeID("fb"), label="Ads")) == []


class TestNonSourceNodes:
    """Filter, join and sink nodes never produce rows on their own."""

    def test_no_rows(self) -> None:
        for node in (
            FilterNode(node_id=NodeID("f"), label="F", selected_fields=["a"]),
            JoinNode(node_id=NodeID("j"), label="J", join_key="a"),
            SinkNode(node_id=NodeID("t"), label="T"),
        ):
            assert extract_rows(node) == []

    def test_extraction_is_repeatable(self) -> None:
        node = BatchSource(node_id=NodeID("fb"), label="Ads", records=[{"clicks": 1}])

        assert extract_rows(node) == extract_rows(node)
