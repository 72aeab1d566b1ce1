"""Checker: the entry point tests call to run retrying assertions."""

from __future__ import annotations

import logging
import time
from typing import Any, Callable, Optional

from snapassert.evaluation import evaluate
from snapassert.models.assertion import Assertion, screenshot, snapshot, that
from snapassert.models.config import AssertConfig
from snapassert.models.report import Report
from snapassert.models.snapshot import SnapshotId
from snapassert.reporter.bridge import ReportBridge
from snapassert.reporter.sinks import LoggingSink, ReportBuffer, ReportSink
from snapassert.retry.loop import RetryingAssertion
from snapassert.retry.outcome import Succeeded
from snapassert.snapshot.assertion import SnapshotAssertion
from snapassert.snapshot.store import SnapshotStore

logger = logging.getLogger(__name__)


class Checker:
    """Runs assertions with retry and emits exactly one report per check."""

    # Builders, re-exported for convenience: checker.that(...), checker.snapshot(...)
    that = staticmethod(that)
    snapshot = staticmethod(snapshot)
    screenshot = staticmethod(screenshot)

    def __init__(
        self,
        config: AssertConfig | None = None,
        sink: ReportSink | None = None,
        clock: Callable[[], float] = time.monotonic,
        sleep: Callable[[float], None] = time.sleep,
        store: SnapshotStore | None = None,
    ):
        self.config = config or AssertConfig()
        self.sink = sink or LoggingSink()
        self.store = store or SnapshotStore(self.config.snapshot_path)
        self.snapshots = SnapshotAssertion(self.config, self.store)
        self.bridge = ReportBridge(self.config.image_match.threshold)
        self.retrying = RetryingAssertion.from_config(self.config, clock=clock, sleep=sleep)

    def check(self, assertion: Assertion, message: Optional[str] = None) -> Any:
        """Retry ``assertion`` until it passes or times out, then report the final attempt.

        Returns the passing value, the last falsy value after a timeout, or
        None when the assertion errored.
        """
        buffer = ReportBuffer()
        attempts = 0

        def attempt(buf: ReportBuffer):
            nonlocal attempts
            attempts += 1
            return evaluate(assertion, self.snapshots, self.bridge, buf)

        try:
            outcome = self.retrying.outcome(attempt, buffer)
            value = outcome.value if isinstance(outcome, Succeeded) else outcome.resolve()
        except Exception as e:
            logger.debug("Assertion %s errored: %r", getattr(assertion, "description", assertion), e)
            self._emit(self.bridge.error(assertion, e), message, attempts)
            return None

        report = buffer.last or self.bridge.generic(that(lambda: value, assertion.description), value)
        self._emit(report, message, attempts)
        return value

    def matches_snapshot(self, snapshot_id: str | SnapshotId, value: Any) -> bool:
        """Compare once against the stored data snapshot. No retry, no report."""
        return self.snapshots.matches_snapshot(snapshot_id, value)

    def matches_screenshot(self, snapshot_id: str | SnapshotId, image: Any) -> bool:
        return self.snapshots.matches_screenshot(snapshot_id, image)

    def _emit(self, report: Report, message: Optional[str], attempts: int) -> None:
        self.sink.emit(self.bridge.finalize(report, message, attempts))
