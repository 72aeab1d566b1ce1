"""Report bridge: turns assertion outcomes into pass/fail/error records."""

from __future__ import annotations

from typing import Any, Optional

from PIL import Image

from snapassert.models.assertion import (
    Assertion,
    DataSnapshotAssertion,
    GenericAssertion,
    ImageSnapshotAssertion,
)
from snapassert.models.report import Report
from snapassert.models.snapshot import ComparisonResult


def describe_image(image: Any) -> str:
    if isinstance(image, Image.Image):
        return f"<{image.format or 'image'} {image.mode} {image.width}x{image.height}>"
    return repr(image)


class ReportBridge:
    """Builds the report records emitted for each assertion variant."""

    def __init__(self, threshold: int):
        self.threshold = threshold

    def generic(self, assertion: GenericAssertion, value: Any) -> Report:
        if value:
            return Report(kind="pass", expected=assertion.description, actual=repr(value))
        return Report(kind="fail", expected=assertion.description, actual=f"not {value!r}")

    def data_snapshot(self, assertion: DataSnapshotAssertion, result: ComparisonResult) -> Report:
        comparison = f"{result.expected!r} == {result.actual!r}"
        return Report(
            kind="pass" if result.matched else "fail",
            message=self._baseline_message(result),
            expected=assertion.description,
            actual=comparison if result.matched else f"not ({comparison})",
            snapshot_id=str(result.snapshot_id),
        )

    def image_snapshot(self, assertion: ImageSnapshotAssertion, result: ComparisonResult) -> Report:
        if result.baselined:
            actual = f"{describe_image(result.actual)} recorded as baseline"
        else:
            op = "<" if result.matched else ">="
            actual = (
                f"distance({describe_image(result.expected)}, {describe_image(result.actual)})"
                f" = {result.distance} {op} {self.threshold}"
            )
        return Report(
            kind="pass" if result.matched else "fail",
            message=self._baseline_message(result),
            expected=assertion.description,
            actual=actual,
            snapshot_id=str(result.snapshot_id),
        )

    def error(self, assertion: Assertion, exc: BaseException) -> Report:
        snapshot_id = None
        if isinstance(assertion, (DataSnapshotAssertion, ImageSnapshotAssertion)):
            snapshot_id = str(assertion.snapshot_id)
        return Report(
            kind="error",
            expected=getattr(assertion, "description", repr(assertion)),
            actual=exc,
            snapshot_id=snapshot_id,
        )

    def finalize(self, report: Report, message: Optional[str], attempts: int) -> Report:
        """Attach the caller's message and attempt count to the final report."""
        update: dict[str, Any] = {"attempts": attempts}
        if message:
            update["message"] = f"{message} ({report.message})" if report.message else message
        return report.model_copy(update=update)

    @staticmethod
    def _baseline_message(result: ComparisonResult) -> Optional[str]:
        if result.baselined:
            return f"Snapshot written: {result.expected_path}"
        if not result.matched:
            return f"Actual snapshot written: {result.actual_path}"
        return None
