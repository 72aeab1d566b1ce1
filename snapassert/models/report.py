"""Report records handed to the reporting sink."""

from __future__ import annotations

from typing import Any, Literal, Optional

from pydantic import BaseModel, ConfigDict

ReportKind = Literal["pass", "fail", "error"]


class Report(BaseModel):
    """One pass/fail/error record per top-level assertion."""

    model_config = ConfigDict(arbitrary_types_allowed=True)

    kind: ReportKind
    message: Optional[str] = None
    expected: Any = None  # rendered assertion expression
    actual: Any = None  # rendered result, or the exception for errors
    snapshot_id: Optional[str] = None
    attempts: int = 0

    @property
    def passed(self) -> bool:
        return self.kind == "pass"

    def render(self) -> str:
        lines = [f"{self.kind.upper()}: {self.message}" if self.message else self.kind.upper()]
        lines.append(f"expected: {self.expected}")
        if isinstance(self.actual, BaseException):
            lines.append(f"  actual: {type(self.actual).__name__}: {self.actual}")
        else:
            lines.append(f"  actual: {self.actual}")
        return "\n".join(lines)
