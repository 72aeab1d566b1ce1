"""Snapshot store: file layout and lifecycle of expected/actual artifacts."""

from __future__ import annotations

import logging
from pathlib import Path
from typing import Any, Optional, Protocol

from snapassert.errors import SnapshotKeyCollisionError, SnapshotReadError
from snapassert.models.snapshot import SnapshotId

logger = logging.getLogger(__name__)

EXPECTED = "expected"
ACTUAL = "actual"
IGNORE_FILE = ".gitignore"
IGNORE_PATTERN = "*.actual*\n"


class Codec(Protocol):
    extension: str

    def encode(self, value: Any) -> bytes: ...

    def decode(self, raw: bytes) -> Any: ...


class SnapshotStore:
    """Manages the snapshot directory.

    Expected artifacts are durable and meant to be committed. Actual artifacts
    are written only on mismatch and ignored by version control.
    """

    def __init__(self, snapshot_dir: Path):
        self.snapshot_dir = Path(snapshot_dir)
        self.baselines_written: list[Path] = []
        self._claimed: dict[str, SnapshotId] = {}

    def ensure_directory(self) -> Path:
        """Create the directory and its ignore file on first use."""
        if not self.snapshot_dir.exists():
            self.snapshot_dir.mkdir(parents=True, exist_ok=True)
            (self.snapshot_dir / IGNORE_FILE).write_text(IGNORE_PATTERN)
            logger.debug("Created snapshot directory %s", self.snapshot_dir)
        return self.snapshot_dir

    def claim_key(self, snapshot_id: SnapshotId) -> str:
        """Reserve the file key for this id, refusing a different id with the same key."""
        key = snapshot_id.file_key
        owner = self._claimed.setdefault(key, snapshot_id)
        if owner != snapshot_id:
            logger.warning("Snapshot key collision on '%s': %s vs %s", key, owner, snapshot_id)
            raise SnapshotKeyCollisionError(key, owner, snapshot_id)
        return key

    def _path(self, snapshot_id: SnapshotId, role: str, ext: str) -> Path:
        return self.snapshot_dir / f"{snapshot_id.file_key}.{role}.{ext}"

    def expected_path(self, snapshot_id: SnapshotId, ext: str) -> Path:
        return self._path(snapshot_id, EXPECTED, ext)

    def actual_path(self, snapshot_id: SnapshotId, ext: str) -> Path:
        return self._path(snapshot_id, ACTUAL, ext)

    def read_existing(self, path: Path, codec: Codec) -> Optional[Any]:
        """Decode the artifact at path, or return None if there is none."""
        if not path.exists():
            return None
        try:
            return codec.decode(path.read_bytes())
        except (ValueError, OSError) as e:
            raise SnapshotReadError(path, str(e)) from e

    def write(self, path: Path, value: Any, codec: Codec) -> None:
        path.parent.mkdir(parents=True, exist_ok=True)
        path.write_bytes(codec.encode(value))
        logger.debug("Wrote snapshot artifact %s", path)

    def record_baseline(self, path: Path) -> None:
        self.baselines_written.append(path)
        logger.info("Snapshot written: %s", path.resolve())

    def delete_if_exists(self, path: Path) -> bool:
        if path.exists():
            path.unlink()
            logger.debug("Removed stale artifact %s", path)
            return True
        return False

    # ------------------------------------------------------------------
    # Review helpers

    def expected_artifacts(self) -> list[Path]:
        if not self.snapshot_dir.exists():
            return []
        return sorted(self.snapshot_dir.glob(f"*.{EXPECTED}.*"))

    def pending_actuals(self) -> list[Path]:
        if not self.snapshot_dir.exists():
            return []
        return sorted(self.snapshot_dir.glob(f"*.{ACTUAL}.*"))

    def approve(self, key: str) -> list[Path]:
        """Promote the actual artifacts of a file key to expected."""
        prefix = f"{key}.{ACTUAL}."
        promoted = []
        for actual in self.pending_actuals():
            if not actual.name.startswith(prefix):
                continue
            ext = actual.name[len(prefix):]
            expected = self.snapshot_dir / f"{key}.{EXPECTED}.{ext}"
            actual.replace(expected)
            promoted.append(expected)
            logger.info("Approved %s", expected)
        return promoted

    def clean_actuals(self) -> int:
        removed = 0
        for path in self.pending_actuals():
            path.unlink()
            removed += 1
        return removed
