# tests/fixtures/__init__.py
"""Shared test helpers for jobweave tests."""
