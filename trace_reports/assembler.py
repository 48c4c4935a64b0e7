"""Assemble reconciled results into a canonical report."""

import json
import logging
import time
import uuid
from collections.abc import Callable, Sequence
from dataclasses import dataclass
from datetime import datetime
from pathlib import Path

from trace_reports.models.intent import (
    ExecutionInsights,
    ExecutionIntent,
    ExecutionMetadata,
)
from trace_reports.models.report import Report, ReportSummary, ReportTimestamps
from trace_reports.models.result import (
    Reconciliation,
    ReportedResult,
    ReportStatus,
    TestResult,
    TestStatus,
)

log = logging.getLogger(__name__)

COUNTER_FILE_NAME = "report-counter.json"


@dataclass(frozen=True, kw_only=True)
class ReportContext:
    """Local state shared by the runs of one project.

    The counter file is read and rewritten without locking: two runs that
    overlap may hand out the same sequence number, the last writer wins.
    """

    state_dir: Path

    @property
    def counter_path(self) -> Path:
        return self.state_dir / COUNTER_FILE_NAME

    @property
    def reports_dir(self) -> Path:
        """Directory holding local copies of assembled reports."""
        return self.state_dir / "reports"


def generate_execution_id(moment: datetime) -> str:
    """Create a report id that is unique across runs and machines."""
    return f"{moment.strftime('%Y-%m-%dT%H-%M-%S')}-{uuid.uuid4().hex}"


def next_sequence_number(
    counter_path: Path, clock: Callable[[], float] = time.time
) -> int:
    """Increment the persisted counter and return the new value.

    Falls back to a millisecond timestamp when the counter cannot be read or
    written.
    """
    try:
        if counter_path.exists():
            data = json.loads(counter_path.read_text())
            next_number = int(data.get("lastNumber") or 0) + 1
            data["lastNumber"] = next_number
        else:
            next_number = 1
            data = {"lastNumber": next_number}

        counter_path.parent.mkdir(parents=True, exist_ok=True)
        counter_path.write_text(json.dumps(data, indent=2))
        return next_number
    except (OSError, ValueError, TypeError, AttributeError) as e:
        log.warning("Failed to get report number, using timestamp: %s", e)
        return int(clock() * 1000)


def normalize_status(status: TestStatus) -> ReportStatus:
    """Fold timedOut and interrupted into failed."""
    if status in ("timedOut", "interrupted"):
        return "failed"
    return status


def build_reported_result(
    result: TestResult, reconciliation: Reconciliation
) -> ReportedResult:
    """Flatten a result and its reconciliation into the report shape."""
    return ReportedResult(
        title=result.title,
        file=result.file,
        browser=result.browser,
        device=result.device,
        status=normalize_status(result.status),
        duration=result.duration,
        retries=result.retries,
        error=result.errors[0].message if result.errors else None,
        errors=result.errors,
        steps=result.steps,
        screenshots=result.screenshots,
        videos=result.videos,
        trace_file=result.trace_file,
        actual_outcome=reconciliation.actual_outcome,
        expected_outcome=reconciliation.expected_outcome,
        outcome_match=reconciliation.outcome_match,
    )


def summarize(results: Sequence[ReportedResult]) -> ReportSummary:
    """Count statuses and reconciliation verdicts."""

    def count(predicate: Callable[[ReportedResult], bool]) -> int:
        return sum(1 for r in results if predicate(r))

    return ReportSummary(
        total=len(results),
        passed=count(lambda r: r.status == "passed"),
        failed=count(lambda r: r.status == "failed"),
        skipped=count(lambda r: r.status == "skipped"),
        expected_fails=count(
            lambda r: r.expected_outcome == "fail" and r.actual_outcome == "fail"
        ),
        unexpected_fails=count(
            lambda r: r.expected_outcome == "pass" and r.actual_outcome == "fail"
        ),
        expected_passes=count(
            lambda r: r.expected_outcome == "pass" and r.actual_outcome == "pass"
        ),
        unexpected_passes=count(
            lambda r: r.expected_outcome == "fail" and r.actual_outcome == "pass"
        ),
    )


def assemble_report(
    results: Sequence[ReportedResult],
    *,
    context: ReportContext,
    intent: ExecutionIntent,
    insights: ExecutionInsights,
    metadata: ExecutionMetadata,
    developer: str,
    branch: str | None,
    environment: str,
    started_at: datetime,
    ended_at: datetime,
) -> Report:
    """Assign identity and sequence number and compute the summary."""
    report = Report(
        execution_id=generate_execution_id(started_at),
        sequence_number=next_sequence_number(context.counter_path),
        developer=developer,
        timestamps=ReportTimestamps(start=started_at, end=ended_at),
        branch=branch,
        environment=environment,
        intent=intent,
        insights=insights,
        metadata=metadata,
        results=list(results),
        summary=summarize(results),
    )
    log.info(
        "Assembled report %s (#%d) with %d result(s)",
        report.execution_id,
        report.sequence_number,
        report.summary.total,
    )
    return report
