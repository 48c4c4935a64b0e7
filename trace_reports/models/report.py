"""Models for assembled reports and the reports index."""

from collections.abc import Sequence
from datetime import datetime

from pydantic import Field

from trace_reports.models.base import Model
from trace_reports.models.intent import (
    ExecutionInsights,
    ExecutionIntent,
    ExecutionMetadata,
)
from trace_reports.models.result import ReportedResult

INDEX_VERSION = "1.0.0"


class ReportSummary(Model):
    """Outcome counts of a report.

    passed + failed + skipped == total
    expected_fails + unexpected_fails == failed
    expected_passes + unexpected_passes == passed
    """

    total: int = 0
    passed: int = 0
    failed: int = 0
    skipped: int = 0
    expected_fails: int = 0
    unexpected_fails: int = 0
    expected_passes: int = 0
    unexpected_passes: int = 0


class ReportTimestamps(Model):
    """Start and end of the processing run."""

    start: datetime
    end: datetime


class Report(Model):
    """Canonical report of one test run; the unit of persistence."""

    execution_id: str = Field(..., description="Globally unique report identity")
    sequence_number: int = Field(..., description="Monotonic per counter file")
    developer: str
    timestamps: ReportTimestamps
    branch: str | None = None
    environment: str = "local"
    intent: ExecutionIntent
    insights: ExecutionInsights
    metadata: ExecutionMetadata = Field(default_factory=ExecutionMetadata)
    results: Sequence[ReportedResult] = Field(default_factory=list)
    summary: ReportSummary


class ReportIndexEntry(Model):
    """Projection of a report kept in the index."""

    id: str
    timestamp: datetime
    developer: str
    branch: str | None = None
    summary: ReportSummary
    url: str = Field(..., description="Locator of report.json relative to the root")


class ReportIndex(Model):
    """Bounded, newest-first list of uploaded reports."""

    version: str = INDEX_VERSION
    last_updated: datetime
    reports: Sequence[ReportIndexEntry] = Field(default_factory=list)
