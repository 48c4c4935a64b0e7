"""Capture execution intent and derive insights without prompting."""

import logging
from collections.abc import Mapping, Sequence
from typing import Any

from trace_reports.models.intent import ExecutionInsights, ExecutionIntent, Purpose
from trace_reports.models.result import ReportedResult

log = logging.getLogger(__name__)

PURPOSE_ALIASES: Mapping[str, Purpose] = {
    "dev": "development",
    "development": "development",
    "debug": "debugging",
    "debugging": "debugging",
    "regression": "regression",
    "validate": "validation",
    "validation": "validation",
    "explore": "exploration",
    "exploration": "exploration",
    "ci": "ci-cd",
    "ci-cd": "ci-cd",
    "manual": "manual",
}

DEFAULT_CONFIDENCE = 5


def normalize_purpose(value: str | None) -> Purpose:
    """Map a free-form purpose to a known one, defaulting to development."""
    if not value:
        return "development"
    return PURPOSE_ALIASES.get(value.strip().lower(), "development")


def parse_intent(payload: Mapping[str, Any] | None) -> ExecutionIntent:
    """Build an intent from a caller payload, or the default intent."""
    if not payload:
        return ExecutionIntent()

    data = dict(payload)
    data["purpose"] = normalize_purpose(data.get("purpose") or data.get("intent"))
    data.pop("intent", None)
    if "reasoning" in data and "description" not in data:
        data["description"] = data.pop("reasoning")
    return ExecutionIntent.model_validate(data)


def describe_outcomes(results: Sequence[ReportedResult]) -> str:
    """One-sentence description of how a run went."""
    total = len(results)
    passed = sum(1 for r in results if r.status == "passed")
    failed = sum(1 for r in results if r.status == "failed")
    skipped = sum(1 for r in results if r.status == "skipped")

    if passed == total:
        return f"All {total} tests passed"
    return f"{passed} passed, {failed} failed, {skipped} skipped out of {total} tests"


def derive_insights(
    intent: ExecutionIntent,
    results: Sequence[ReportedResult],
    confidence: int | None = None,
) -> ExecutionInsights:
    """Fill in insights automatically when the operator gave none."""
    failed = [r for r in results if r.status == "failed"]
    unexpected = [r for r in results if not r.outcome_match]

    return ExecutionInsights(
        reasoning=intent.description or "Local test execution",
        expected_behavior="Tests to pass",
        actual_behavior=describe_outcomes(results),
        surprises=(
            [f"{len(unexpected)} tests had unexpected outcomes"] if unexpected else []
        ),
        learnings=[],
        next_steps=["Investigate test failures"] if failed else [],
        confidence=confidence or DEFAULT_CONFIDENCE,
    )
