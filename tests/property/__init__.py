# tests/property/__init__.py
"""Property-based tests for rowflow.

Property-based testing validates invariants that must hold for ALL inputs,
not just the specific examples we think of. Graphs in the editor are often
half-wired, so resolution has to behave on arbitrary wiring, not only on
the tidy pipelines unit tests build.

Test categories:
- engine/: Join sizing, projection subsets, resolution termination and determinism
"""
