"""Quayside: container registry push-event ingestion and reconciliation."""

from __future__ import annotations

__version__ = "0.1.0"
