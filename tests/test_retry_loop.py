"""Tests for the retry loop state machine."""

import pytest

from snapassert.errors import NotYetSatisfied
from snapassert.models.config import AssertConfig
from snapassert.models.report import Report
from snapassert.reporter.sinks import ReportBuffer
from snapassert.retry.loop import RetryingAssertion
from snapassert.retry.outcome import (
    Exhausted,
    Passed,
    RetryableFailure,
    Succeeded,
    TerminalFailure,
)


def _scripted(results):
    """Attempt function returning the given results in order, recording calls."""
    calls = []

    def attempt(buffer):
        calls.append(buffer)
        result = results[min(len(calls) - 1, len(results) - 1)]
        buffer.emit(Report(kind="pass" if isinstance(result, Passed) else "fail",
                           expected="attempt", actual=len(calls)))
        return result

    return attempt, calls


@pytest.fixture
def retrying(clock):
    return RetryingAssertion(timeout_seconds=1.0, poll_interval_seconds=0.1,
                             clock=clock, sleep=clock.sleep)


class TestSuccess:
    def test_first_attempt(self, retrying, clock):
        attempt, calls = _scripted([Passed("ok")])
        outcome = retrying.outcome(attempt, ReportBuffer())
        assert outcome == Succeeded(value="ok", attempts=1)
        assert clock.sleeps == []

    def test_eventually_passes(self, retrying, clock):
        attempt, calls = _scripted([RetryableFailure(False)] * 3 + [Passed(42)])
        buffer = ReportBuffer()
        assert retrying.run(attempt, buffer) == 42
        assert len(calls) == 4
        assert clock.sleeps == [0.1, 0.1, 0.1]
        # only the final attempt's report survives
        assert buffer.last.kind == "pass"
        assert buffer.last.actual == 4

    def test_buffer_is_shared_and_cleared(self, retrying):
        attempt, calls = _scripted([RetryableFailure(False), Passed(True)])
        buffer = ReportBuffer()
        retrying.run(attempt, buffer)
        assert all(b is buffer for b in calls)


class TestExhaustion:
    def test_without_cause_returns_last_value(self, retrying, clock):
        attempt, calls = _scripted([RetryableFailure(0), RetryableFailure("")])
        buffer = ReportBuffer()
        assert retrying.run(attempt, buffer) == ""
        assert clock.now >= 1.0
        assert buffer.last.kind == "fail"
        assert buffer.last.actual == len(calls)

    def test_outcome_keeps_only_last_failure(self, retrying):
        attempt, calls = _scripted([RetryableFailure(None, NotYetSatisfied("first")),
                                    RetryableFailure([])])
        outcome = retrying.outcome(attempt, ReportBuffer())
        assert isinstance(outcome, Exhausted)
        assert outcome.last_failure == RetryableFailure([])
        assert outcome.attempts == len(calls)

    def test_with_cause_reraises_it(self, retrying, clock):
        cause = NotYetSatisfied("element #cart not found")
        attempt, calls = _scripted([RetryableFailure(None, cause)])
        with pytest.raises(NotYetSatisfied) as exc_info:
            retrying.run(attempt)
        assert exc_info.value is cause
        assert len(calls) > 1

    def test_sleep_never_overshoots_deadline(self, clock):
        retrying = RetryingAssertion(timeout_seconds=0.625, poll_interval_seconds=0.25,
                                     clock=clock, sleep=clock.sleep)
        attempt, calls = _scripted([RetryableFailure(False)])
        retrying.run(attempt)
        assert clock.sleeps == [0.25, 0.25, 0.125]
        assert len(calls) == 4

    def test_zero_timeout_runs_once(self, clock):
        retrying = RetryingAssertion(timeout_seconds=0, clock=clock, sleep=clock.sleep)
        attempt, calls = _scripted([RetryableFailure(False), Passed(True)])
        assert retrying.run(attempt) is False
        assert len(calls) == 1
        assert clock.sleeps == []


class TestTerminal:
    def test_short_circuits(self, retrying, clock):
        boom = RuntimeError("driver crashed")
        attempt, calls = _scripted([TerminalFailure(boom)])
        with pytest.raises(RuntimeError) as exc_info:
            retrying.run(attempt)
        assert exc_info.value is boom
        assert len(calls) == 1
        assert clock.sleeps == []

    def test_after_retryable_failures(self, retrying, clock):
        attempt, calls = _scripted([RetryableFailure(False), TerminalFailure(KeyError("x"))])
        with pytest.raises(KeyError):
            retrying.run(attempt)
        assert len(calls) == 2


class TestFromConfig:
    def test_uses_config_values(self):
        retrying = RetryingAssertion.from_config(
            AssertConfig(timeout_seconds=3.0, poll_interval_seconds=0.5)
        )
        assert retrying.timeout_seconds == 3.0
        assert retrying.poll_interval_seconds == 0.5

    def test_unknown_result_type(self, retrying):
        with pytest.raises(TypeError):
            retrying.run(lambda buffer: "not a result")
