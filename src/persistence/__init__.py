"""
Persistence - Learner snapshot files.
"""

from src.persistence.snapshot_store import SNAPSHOT_DIR, SnapshotStore

__all__ = ["SNAPSHOT_DIR", "SnapshotStore"]
