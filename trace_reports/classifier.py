"""Derive a test status from the artifacts a test left behind.

The test runner's own status file is not always available, so the status is
inferred: traces are only retained on failure, and failure screenshots carry
``error`` or ``failure`` in their name. This is a heuristic with known
precision limits, not ground truth. A trace bundle always wins over
passing-looking screenshots.
"""

from typing import Literal

from trace_reports.models.artifacts import ArtifactDirectory

FAILURE_MARKERS = ("error", "failure")


def classify(directory: ArtifactDirectory) -> Literal["passed", "failed"]:
    """Classify a test directory as passed or failed."""
    if directory.trace_file is not None:
        return "failed"

    if any(is_failure_screenshot(p.name) for p in directory.screenshot_files):
        return "failed"

    return "passed"


def is_failure_screenshot(file_name: str) -> bool:
    """Whether a screenshot name marks a failure."""
    lowered = file_name.lower()
    return any(marker in lowered for marker in FAILURE_MARKERS)
