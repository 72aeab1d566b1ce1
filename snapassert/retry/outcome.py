"""Result types exchanged between an attempt and the retry loop."""

from __future__ import annotations

from dataclasses import dataclass
from typing import Any, Optional, Union


@dataclass(frozen=True)
class Passed:
    value: Any


@dataclass(frozen=True)
class RetryableFailure:
    """Condition not met yet. ``cause`` is set when a not-yet-satisfied error was raised."""

    value: Any = None
    cause: Optional[BaseException] = None


@dataclass(frozen=True)
class TerminalFailure:
    cause: BaseException


AttemptResult = Union[Passed, RetryableFailure, TerminalFailure]


@dataclass(frozen=True)
class Succeeded:
    value: Any
    attempts: int


@dataclass(frozen=True)
class Exhausted:
    last_failure: RetryableFailure
    attempts: int

    def resolve(self) -> Any:
        """Re-raise the captured cause, or degrade to the last observed value."""
        if self.last_failure.cause is not None:
            raise self.last_failure.cause
        return self.last_failure.value


RetryOutcome = Union[Succeeded, Exhausted]
