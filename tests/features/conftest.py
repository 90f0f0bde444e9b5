"""Shared fixtures for BDD feature tests.

The ``session_factory`` fixture comes from ``tests/conftest.py``.
"""
