"""Retrying assertion: polls an attempt until it passes or the timeout elapses."""

from __future__ import annotations

import logging
import time
from typing import Any, Callable

from snapassert.models.config import AssertConfig
from snapassert.reporter.sinks import ReportBuffer
from snapassert.retry.outcome import (
    AttemptResult,
    Exhausted,
    Passed,
    RetryableFailure,
    RetryOutcome,
    Succeeded,
    TerminalFailure,
)

logger = logging.getLogger(__name__)

Attempt = Callable[[ReportBuffer], AttemptResult]


class RetryingAssertion:
    """Bounded poll loop around a single assertion.

    Attempts run strictly one after another on the calling thread. Only the
    last retryable failure is kept; a terminal failure is raised at once.
    """

    def __init__(
        self,
        timeout_seconds: float,
        poll_interval_seconds: float = 0.1,
        clock: Callable[[], float] = time.monotonic,
        sleep: Callable[[float], None] = time.sleep,
    ):
        self.timeout_seconds = timeout_seconds
        self.poll_interval_seconds = poll_interval_seconds
        self.clock = clock
        self.sleep = sleep

    @classmethod
    def from_config(cls, config: AssertConfig, **kwargs) -> "RetryingAssertion":
        return cls(config.timeout_seconds, config.poll_interval_seconds, **kwargs)

    def outcome(self, attempt: Attempt, buffer: ReportBuffer) -> RetryOutcome:
        """Run attempts until success or exhaustion. Terminal failures propagate."""
        deadline = self.clock() + self.timeout_seconds
        attempts = 0
        while True:
            attempts += 1
            buffer.clear()
            result = attempt(buffer)
            match result:
                case Passed(value=value):
                    logger.debug("Assertion passed on attempt %d", attempts)
                    return Succeeded(value=value, attempts=attempts)
                case TerminalFailure(cause=cause):
                    logger.debug("Attempt %d failed terminally: %r", attempts, cause)
                    raise cause
                case RetryableFailure():
                    remaining = deadline - self.clock()
                    if remaining <= 0:
                        logger.warning(
                            "Assertion still failing after %d attempts (timeout %.2fs)",
                            attempts, self.timeout_seconds,
                        )
                        return Exhausted(last_failure=result, attempts=attempts)
                    logger.debug("Attempt %d not satisfied, retrying", attempts)
                    self.sleep(min(self.poll_interval_seconds, remaining))
                case _:
                    raise TypeError(f"Unexpected attempt result: {result!r}")

    def run(self, attempt: Attempt, buffer: ReportBuffer | None = None) -> Any:
        """Return the passing value, or resolve exhaustion (raise cause / last value)."""
        outcome = self.outcome(attempt, buffer or ReportBuffer())
        if isinstance(outcome, Succeeded):
            return outcome.value
        return outcome.resolve()
