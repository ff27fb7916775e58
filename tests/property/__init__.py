# tests/property/__init__.py
"""Property-based tests for jobweave.

Property-based testing validates invariants that must hold for ALL job
pools, not just the scenarios we think of.

Test categories:
- core/: partitioning, wiring, levels and socket ordering
"""
