"""Compare actual test outcomes against the operator's declared intent."""

from trace_reports.models.intent import ExecutionIntent
from trace_reports.models.result import (
    ExpectedOutcome,
    Outcome,
    Reconciliation,
    TestResult,
    TestStatus,
)


def actual_outcome(status: TestStatus) -> Outcome:
    """Map a test status to its outcome."""
    if status == "passed":
        return "pass"
    if status == "skipped":
        return "skip"
    return "fail"


def expected_outcome(title: str, intent: ExecutionIntent) -> ExpectedOutcome:
    """Expect a failure only for targeted tests of a run that expects failures."""
    if intent.expect_failures and any(
        target in title for target in intent.target_tests
    ):
        return "fail"
    return "pass"


def reconcile(result: TestResult, intent: ExecutionIntent) -> Reconciliation:
    """Reconcile one result against the intent."""
    actual = actual_outcome(result.status)
    expected = expected_outcome(result.title, intent)
    return Reconciliation(
        actual_outcome=actual,
        expected_outcome=expected,
        outcome_match=actual == expected,
    )
