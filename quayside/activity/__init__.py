"""Append-only activity trail for registry operations."""

from __future__ import annotations

from .recorder import ActivityInfo, ActivityKey, ActivityRecorder
from .storage import Activity, init_activity_storage

__all__ = [
    "Activity",
    "ActivityInfo",
    "ActivityKey",
    "ActivityRecorder",
    "init_activity_storage",
]
