"""Exception types raised by assertions and the snapshot store."""

from __future__ import annotations


class NotYetSatisfied(Exception):
    """The asserted condition is not met yet; the check may be retried.

    Drivers raise this (optionally ``from`` an underlying error) when a value
    is not available yet, e.g. an element that has not rendered.
    """


class SnapshotError(Exception):
    """Base class for snapshot problems. Never retried."""


class SnapshotReadError(SnapshotError):
    def __init__(self, path, reason: str):
        self.path = path
        super().__init__(f"Cannot read snapshot {path}: {reason}")


class SnapshotKeyCollisionError(SnapshotError):
    def __init__(self, key: str, first, second):
        self.key = key
        self.first = first
        self.second = second
        super().__init__(
            f"Snapshot ids {first} and {second} both map to file key '{key}'"
        )


class InvalidSnapshotIdError(ValueError):
    pass
