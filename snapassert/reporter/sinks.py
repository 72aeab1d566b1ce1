"""Report sinks: where finished assertion reports go."""

from __future__ import annotations

import json
import logging
from pathlib import Path
from typing import Optional, Protocol

from snapassert.models.report import Report

logger = logging.getLogger(__name__)


class ReportSink(Protocol):
    def emit(self, report: Report) -> None: ...


class ReportBuffer:
    """Keeps only the most recent report of a single retry loop."""

    def __init__(self):
        self.last: Optional[Report] = None

    def emit(self, report: Report) -> None:
        self.last = report

    def clear(self) -> None:
        self.last = None


class CollectingSink:
    """Collects reports in memory."""

    def __init__(self):
        self.reports: list[Report] = []

    def emit(self, report: Report) -> None:
        self.reports.append(report)

    @property
    def failures(self) -> list[Report]:
        return [r for r in self.reports if r.kind in ("fail", "error")]

    def clear(self) -> None:
        self.reports.clear()


class LoggingSink:
    """Logs each report; failures at WARNING, errors at ERROR."""

    def __init__(self, log: logging.Logger | None = None):
        self.log = log or logger

    def emit(self, report: Report) -> None:
        match report.kind:
            case "pass":
                self.log.debug("%s", report.render())
            case "fail":
                self.log.warning("%s", report.render())
            case _:
                self.log.error("%s", report.render())


class FanOutSink:
    def __init__(self, *sinks: ReportSink):
        self.sinks = list(sinks)

    def emit(self, report: Report) -> None:
        for sink in self.sinks:
            sink.emit(report)


def write_json_report(reports: list[Report], output_path: Path) -> None:
    """Write a machine-readable JSON report of all assertions."""
    data = {
        "total": len(reports),
        "passed": sum(1 for r in reports if r.kind == "pass"),
        "failed": sum(1 for r in reports if r.kind == "fail"),
        "errors": sum(1 for r in reports if r.kind == "error"),
        "reports": [r.model_dump() for r in reports],
    }
    output_path.parent.mkdir(parents=True, exist_ok=True)
    with open(output_path, "w") as f:
        json.dump(data, f, indent=2, default=str)
    logger.info("JSON assertion report: %s", output_path)
