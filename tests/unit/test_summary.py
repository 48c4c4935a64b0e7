"""Tests for markdown summary rendering."""

from datetime import datetime, timedelta, timezone

from trace_reports.models.intent import ExecutionInsights, ExecutionIntent
from trace_reports.models.report import ReportSummary, ReportTimestamps
from trace_reports.summary import render_markdown
from trace_reports.testing.factories import ReportedResultFactory, ReportFactory

START = datetime(2024, 3, 1, 12, 0, 0, tzinfo=timezone.utc)
GENERATED = datetime(2024, 3, 1, 12, 5, 0, tzinfo=timezone.utc)


def test_render_markdown() -> None:
    """Renders summary, intent, failures and insights."""
    failed = ReportedResultFactory.build(
        title="user login", browser="webkit", status="failed", error="Timeout"
    ).model_copy(update={"outcome_match": False})
    report = ReportFactory.build(
        developer="dev",
        branch="main",
        environment="local",
        timestamps=ReportTimestamps(start=START, end=START + timedelta(seconds=3)),
        intent=ExecutionIntent(purpose="debugging", goals=["fix login"]),
        insights=ExecutionInsights(
            reasoning="Login broke",
            expected_behavior="Tests to pass",
            actual_behavior="1 failed",
            surprises=["webkit only"],
            confidence=6,
        ),
        results=[failed],
        summary=ReportSummary(total=2, passed=1, failed=1, unexpected_fails=1),
    )

    markdown = render_markdown(report, generated_at=GENERATED)

    assert f"- **Report ID**: {report.execution_id}" in markdown
    assert "- **Duration**: 3.00s" in markdown
    assert "- **Pass Rate**: 50.0%" in markdown
    assert "- **Purpose**: debugging" in markdown
    assert "- **Goals**: fix login" in markdown
    assert "### user login (webkit, unexpected)" in markdown
    assert "**Error**: Timeout" in markdown
    assert "**Surprises**:\n- webkit only" in markdown
    assert "**Learnings**" not in markdown
    assert "**Confidence**: 6/10" in markdown
    assert markdown.rstrip().endswith(f"*Generated at {GENERATED.isoformat()}*")


def test_render_markdown_empty_run() -> None:
    """An empty run has a zero pass rate and no failures section."""
    report = ReportFactory.build(
        summary=ReportSummary(),
        timestamps=ReportTimestamps(start=START, end=START),
    )

    markdown = render_markdown(report)

    assert "- **Pass Rate**: 0%" in markdown
    assert "## Failed Tests" not in markdown
