"""Single-attempt evaluation of each assertion variant."""

from __future__ import annotations

import logging

from snapassert.errors import NotYetSatisfied
from snapassert.models.assertion import (
    Assertion,
    DataSnapshotAssertion,
    GenericAssertion,
    ImageSnapshotAssertion,
    resolve,
)
from snapassert.reporter.bridge import ReportBridge
from snapassert.reporter.sinks import ReportSink
from snapassert.retry.outcome import AttemptResult, Passed, RetryableFailure, TerminalFailure
from snapassert.snapshot.assertion import SnapshotAssertion

logger = logging.getLogger(__name__)


def evaluate(
    assertion: Assertion,
    snapshots: SnapshotAssertion,
    bridge: ReportBridge,
    sink: ReportSink,
) -> AttemptResult:
    """Evaluate one attempt and emit its report into ``sink``.

    A falsy result or ``NotYetSatisfied`` is retryable; any other exception,
    snapshot I/O errors included, is terminal.
    """
    try:
        match assertion:
            case GenericAssertion():
                value = assertion.predicate()
                sink.emit(bridge.generic(assertion, value))
                return Passed(value) if value else RetryableFailure(value=value)

            case DataSnapshotAssertion():
                result = snapshots.check_data(assertion.snapshot_id, resolve(assertion.actual))
                sink.emit(bridge.data_snapshot(assertion, result))
                return Passed(True) if result.matched else RetryableFailure(value=False)

            case ImageSnapshotAssertion():
                result = snapshots.check_image(assertion.snapshot_id, resolve(assertion.image))
                sink.emit(bridge.image_snapshot(assertion, result))
                return Passed(True) if result.matched else RetryableFailure(value=False)

            case _:
                return TerminalFailure(TypeError(f"Not an assertion: {assertion!r}"))
    except NotYetSatisfied as e:
        logger.debug("Not yet satisfied: %s", e)
        return RetryableFailure(cause=e)
    except Exception as e:
        return TerminalFailure(cause=e)
