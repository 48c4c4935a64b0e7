"""Models for per-test results extracted from test artifacts."""

from collections.abc import Sequence
from typing import Literal

from pydantic import Field

from trace_reports.models.base import Model

TestStatus = Literal["passed", "failed", "skipped", "timedOut", "interrupted"]
ReportStatus = Literal["passed", "failed", "skipped"]
Outcome = Literal["pass", "fail", "skip"]
ExpectedOutcome = Literal["pass", "fail"]


class ErrorLocation(Model):
    """Source location of an error."""

    file: str = "unknown"
    line: int = 0
    column: int = 0


class TestError(Model):
    """Error recorded in a trace bundle."""

    __test__ = False

    message: str = "Unknown error"
    stack: str = ""
    location: ErrorLocation = Field(default_factory=ErrorLocation)


class TestStep(Model):
    """Action performed during a test."""

    __test__ = False

    id: str
    title: str
    duration: float = 0


class Screenshot(Model):
    """Screenshot captured during a test."""

    id: str
    timestamp: float = Field(..., description="Modification time in milliseconds")
    file_path: str
    width: int = 0
    height: int = 0
    action_before: str | None = None


class Video(Model):
    """Video recording of a test."""

    id: str
    file_path: str
    duration: float = 0
    size: int = 0


class TestResult(Model):
    """Result of a single test as derived from its artifact directory."""

    __test__ = False

    title: str
    file: str
    browser: str
    device: str | None = None
    status: TestStatus
    duration: float = 0
    retries: int = 0
    errors: Sequence[TestError] = Field(default_factory=list)
    steps: Sequence[TestStep] = Field(default_factory=list)
    screenshots: Sequence[Screenshot] = Field(default_factory=list)
    videos: Sequence[Video] = Field(default_factory=list)
    trace_file: str | None = None


class Reconciliation(Model):
    """Verdict of comparing an actual outcome against the declared intent."""

    actual_outcome: Outcome
    expected_outcome: ExpectedOutcome
    outcome_match: bool


class ReportedResult(Model):
    """Test result as exposed in a report.

    Status is normalized to passed, failed or skipped and the reconciliation
    verdict is flattened in.
    """

    title: str
    file: str
    browser: str
    device: str | None = None
    status: ReportStatus
    duration: float = 0
    retries: int = 0
    error: str | None = None
    errors: Sequence[TestError] = Field(default_factory=list)
    steps: Sequence[TestStep] = Field(default_factory=list)
    screenshots: Sequence[Screenshot] = Field(default_factory=list)
    videos: Sequence[Video] = Field(default_factory=list)
    trace_file: str | None = None
    actual_outcome: Outcome
    expected_outcome: ExpectedOutcome
    outcome_match: bool
