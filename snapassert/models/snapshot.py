"""Snapshot identifiers and comparison results."""

from __future__ import annotations

import re
from pathlib import Path
from typing import Any, Optional

from pydantic import BaseModel, ConfigDict

from snapassert.errors import InvalidSnapshotIdError

NAMESPACE_SEPARATOR = "___"
_NON_WORD = re.compile(r"[^\w]+", re.ASCII)


def _sanitize(text: str) -> str:
    return _NON_WORD.sub("", text.replace("-", "_"))


class SnapshotId(BaseModel):
    """A namespaced snapshot name, e.g. ``checkout/summary-table``."""

    model_config = ConfigDict(frozen=True)

    namespace: Optional[str] = None
    name: str

    @classmethod
    def parse(cls, value: "str | SnapshotId") -> "SnapshotId":
        if isinstance(value, SnapshotId):
            return value
        if not isinstance(value, str):
            raise TypeError(f"Snapshot id must be a string, got {type(value).__name__}")
        namespace, sep, name = value.rpartition("/")
        parts = [namespace, name] if sep else [name]
        if not all(_sanitize(part) for part in parts):
            raise InvalidSnapshotIdError(f"Malformed snapshot id: {value!r}")
        return cls(namespace=namespace if sep else None, name=name)

    @property
    def file_key(self) -> str:
        """Filesystem-safe key. Distinct ids differing only in punctuation can collide."""
        fq = f"{self.namespace}{NAMESPACE_SEPARATOR}{self.name}" if self.namespace else self.name
        return _sanitize(fq)

    def __str__(self) -> str:
        return f"{self.namespace}/{self.name}" if self.namespace else self.name


class ComparisonResult(BaseModel):
    """Outcome of a single snapshot check, kept for reporting."""

    model_config = ConfigDict(arbitrary_types_allowed=True)

    snapshot_id: SnapshotId
    matched: bool
    baselined: bool = False
    expected: Any = None
    actual: Any = None
    expected_path: Path
    actual_path: Path
    distance: Optional[int] = None  # image snapshots only
