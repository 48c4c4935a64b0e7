"""Models describing why a test run happened and what was learned from it."""

from collections.abc import Sequence
from typing import Literal

from pydantic import Field

from trace_reports.models.base import Model

Purpose = Literal[
    "development",
    "debugging",
    "regression",
    "validation",
    "exploration",
    "ci-cd",
    "manual",
]


class ExecutionIntent(Model):
    """Operator's declared purpose and expectations for a test run."""

    purpose: Purpose = "development"
    description: str | None = None
    expect_failures: bool = False
    target_tests: Sequence[str] = Field(
        default_factory=list,
        description="Title substrings of tests expected to fail",
    )
    goals: Sequence[str] = Field(default_factory=list)
    context: str | None = None


class ExecutionInsights(Model):
    """Operator's reflection on a completed test run."""

    reasoning: str
    expected_behavior: str
    actual_behavior: str
    surprises: Sequence[str] = Field(default_factory=list)
    learnings: Sequence[str] = Field(default_factory=list)
    next_steps: Sequence[str] = Field(default_factory=list)
    confidence: int = Field(default=5, ge=1, le=10)


class ExecutionMetadata(Model):
    """Environment facts captured alongside a run.

    Git values are opaque strings supplied by the caller.
    """

    git_commit: str | None = None
    git_diff: str | None = None
    code_changes: Sequence[str] = Field(default_factory=list)
    test_run_reason: str = "local-execution"
    tags: Sequence[str] = Field(default_factory=list)
    ci: bool = False
    ci_provider: str | None = None
