"""
Learner snapshot persistence.

Snapshots are stored as JSON files in the configured data directory
(~/.pusula by default), one file per learner: {learner_id}.json

The engine itself never touches disk. The CLI (or any other owner of a
LearnerStore) loads a snapshot, dispatches commands, and saves the result.
"""

from __future__ import annotations

from pathlib import Path

from loguru import logger
from pydantic import ValidationError

from src.core.errors import SnapshotError
from src.core.state import LearnerState

# Default snapshot directory
SNAPSHOT_DIR = Path.home() / ".pusula"


class SnapshotStore:
    """
    Manages learner snapshot files.

    Files are written whole with `model_dump_json` and read back with
    `model_validate_json`, so a snapshot on disk always passes the same
    validation as one built in memory.
    """

    def __init__(self, data_dir: Path | None = None):
        self.data_dir = Path(data_dir) if data_dir is not None else SNAPSHOT_DIR
        self.data_dir.mkdir(parents=True, exist_ok=True)

    def _path(self, learner_id: str) -> Path:
        if not learner_id or "/" in learner_id or "\\" in learner_id or learner_id.startswith("."):
            raise SnapshotError(f"Invalid learner id for a snapshot file: {learner_id!r}")
        return self.data_dir / f"{learner_id}.json"

    def save(self, state: LearnerState) -> Path:
        """Write a snapshot, replacing any previous one for the learner."""
        filepath = self._path(state.learner_id)
        tmp_path = filepath.with_suffix(".json.tmp")

        tmp_path.write_text(state.model_dump_json(indent=2), encoding="utf-8")
        tmp_path.replace(filepath)

        logger.info(f"Saved learner {state.learner_id} ({state.xp} XP) to {filepath}")
        return filepath

    def load(self, learner_id: str) -> LearnerState | None:
        """
        Load a learner snapshot.

        Returns:
            The snapshot, or None when the learner has no file

        Raises:
            SnapshotError: if the file exists but cannot be parsed
        """
        filepath = self._path(learner_id)
        if not filepath.exists():
            return None

        try:
            return LearnerState.model_validate_json(filepath.read_text(encoding="utf-8"))
        except ValidationError as e:
            logger.error(f"Corrupt snapshot {filepath}: {e.error_count()} validation error(s)")
            raise SnapshotError(f"Corrupt snapshot for learner {learner_id!r}: {filepath}") from e

    def exists(self, learner_id: str) -> bool:
        return self._path(learner_id).exists()

    def delete(self, learner_id: str) -> bool:
        """Delete a learner's snapshot file."""
        filepath = self._path(learner_id)
        if filepath.exists():
            filepath.unlink()
            logger.info(f"Deleted snapshot for learner {learner_id}")
            return True
        return False

    def list_learners(self) -> list[str]:
        """Ids of all learners with a snapshot, sorted."""
        return sorted(filepath.stem for filepath in self.data_dir.glob("*.json"))
