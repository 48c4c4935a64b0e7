"""Render a human-readable markdown summary of a report."""

from collections.abc import Sequence
from datetime import datetime, timezone

from trace_reports.models.report import Report


def _bullets(title: str, items: Sequence[str]) -> list[str]:
    if not items:
        return []
    return [f"**{title}**:", *(f"- {item}" for item in items), ""]


def render_markdown(report: Report, generated_at: datetime | None = None) -> str:
    """Render report.json as the summary.md stored next to it."""
    generated_at = generated_at or datetime.now(timezone.utc)
    summary = report.summary
    pass_rate = f"{summary.passed / summary.total * 100:.1f}" if summary.total else "0"
    duration = (report.timestamps.end - report.timestamps.start).total_seconds()

    lines = [
        f"# Test Report #{report.sequence_number}",
        "",
        "## Summary",
        "",
        f"- **Report ID**: {report.execution_id}",
        f"- **Developer**: {report.developer}",
        f"- **Timestamp**: {report.timestamps.start.isoformat()}",
        f"- **Duration**: {duration:.2f}s",
        f"- **Branch**: {report.branch or 'unknown'}",
        f"- **Environment**: {report.environment}",
        "",
        "## Test Results",
        "",
        f"- **Total Tests**: {summary.total}",
        f"- **Passed**: {summary.passed}",
        f"- **Failed**: {summary.failed}",
        f"- **Skipped**: {summary.skipped}",
        f"- **Expected Failures**: {summary.expected_fails}",
        f"- **Unexpected Failures**: {summary.unexpected_fails}",
        f"- **Pass Rate**: {pass_rate}%",
        "",
        "## Test Intent",
        "",
        f"- **Purpose**: {report.intent.purpose}",
        f"- **Expected Failures**: {'Yes' if report.intent.expect_failures else 'No'}",
    ]
    if report.intent.description:
        lines.append(f"- **Description**: {report.intent.description}")
    if report.intent.goals:
        lines.append(f"- **Goals**: {', '.join(report.intent.goals)}")
    lines.append("")

    failed = [r for r in report.results if r.status == "failed"]
    if failed:
        lines.extend(["## Failed Tests", ""])
        for result in failed:
            verdict = "expected" if result.outcome_match else "unexpected"
            lines.extend([f"### {result.title} ({result.browser}, {verdict})", ""])
            if result.error:
                lines.extend([f"**Error**: {result.error}", ""])
            if result.screenshots:
                lines.extend(
                    [f"**Screenshots**: {len(result.screenshots)} available", ""]
                )

    insights = report.insights
    lines.extend(
        [
            "## Execution Insights",
            "",
            f"**Reasoning**: {insights.reasoning}",
            "",
            f"**Expected**: {insights.expected_behavior}",
            "",
            f"**Actual**: {insights.actual_behavior}",
            "",
            *_bullets("Surprises", insights.surprises),
            *_bullets("Learnings", insights.learnings),
            *_bullets("Next Steps", insights.next_steps),
            f"**Confidence**: {insights.confidence}/10",
            "",
            "---",
            f"*Generated at {generated_at.isoformat()}*",
            "",
        ]
    )
    return "\n".join(lines)
