"""Assertion descriptions evaluated by the checker.

Each variant carries everything needed to evaluate one attempt and to render
the "expected" expression of its report. Values may be given directly or as
zero-argument callables that are re-evaluated on every attempt.
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import Any, Callable, Optional, Union

from snapassert.models.snapshot import SnapshotId


def _render_source(value: Any) -> str:
    if callable(value):
        return f"{getattr(value, '__qualname__', repr(value))}()"
    return repr(value)


def resolve(value: Any) -> Any:
    """Evaluate a deferred value."""
    return value() if callable(value) else value


@dataclass(frozen=True)
class GenericAssertion:
    predicate: Callable[[], Any]
    description: str


@dataclass(frozen=True)
class DataSnapshotAssertion:
    snapshot_id: SnapshotId
    actual: Any

    @property
    def description(self) -> str:
        return f"matches_snapshot('{self.snapshot_id}', {_render_source(self.actual)})"


@dataclass(frozen=True)
class ImageSnapshotAssertion:
    snapshot_id: SnapshotId
    image: Any  # PIL image, or a callable returning one

    @property
    def description(self) -> str:
        return f"matches_screenshot('{self.snapshot_id}', {_render_source(self.image)})"


Assertion = Union[GenericAssertion, DataSnapshotAssertion, ImageSnapshotAssertion]


def that(predicate: Callable[[], Any], description: Optional[str] = None) -> GenericAssertion:
    """Build a generic assertion from a zero-argument predicate."""
    if not callable(predicate):
        raise TypeError("predicate must be callable")
    return GenericAssertion(
        predicate=predicate,
        description=description or _render_source(predicate),
    )


def snapshot(snapshot_id: str | SnapshotId, actual: Any) -> DataSnapshotAssertion:
    return DataSnapshotAssertion(snapshot_id=SnapshotId.parse(snapshot_id), actual=actual)


def screenshot(snapshot_id: str | SnapshotId, image: Any) -> ImageSnapshotAssertion:
    return ImageSnapshotAssertion(snapshot_id=SnapshotId.parse(snapshot_id), image=image)
