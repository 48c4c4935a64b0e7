"""Run the ingestion pipeline over a results directory."""

import logging
import struct
import uuid
from collections.abc import Sequence
from dataclasses import dataclass
from datetime import datetime, timezone
from pathlib import Path

from trace_reports.assembler import (
    ReportContext,
    assemble_report,
    build_reported_result,
)
from trace_reports.classifier import classify
from trace_reports.insights import derive_insights
from trace_reports.models.artifacts import ArtifactDirectory
from trace_reports.models.intent import (
    ExecutionInsights,
    ExecutionIntent,
    ExecutionMetadata,
)
from trace_reports.models.report import Report
from trace_reports.models.result import ReportedResult, Screenshot, TestResult, Video
from trace_reports.reconciler import reconcile
from trace_reports.scanner import scan_artifacts
from trace_reports.trace_reader import extract

log = logging.getLogger(__name__)

PNG_SIGNATURE = b"\x89PNG\r\n\x1a\n"

ACTION_KEYWORDS: Sequence[tuple[tuple[str, ...], str]] = (
    (("click",), "click"),
    (("fill", "type"), "fill"),
    (("goto", "navigate"), "goto"),
    (("wait",), "wait"),
    (("error", "failure"), "error"),
)


@dataclass(frozen=True, kw_only=True)
class ProcessedRun:
    """Assembled report and the local files to publish with it."""

    report: Report
    asset_paths: Sequence[Path]


def process_results(
    results_path: Path,
    *,
    context: ReportContext,
    intent: ExecutionIntent,
    metadata: ExecutionMetadata,
    developer: str,
    branch: str | None = None,
    environment: str = "local",
    insights: ExecutionInsights | None = None,
    failures_only: bool = False,
) -> ProcessedRun:
    """Scan, classify, reconcile and assemble one run.

    Directories that cannot be processed are logged and left out; they never
    fail the run.
    """
    started_at = datetime.now(timezone.utc)

    test_results: list[TestResult] = []
    for directory in scan_artifacts(results_path):
        try:
            test_results.append(build_test_result(directory))
        except (OSError, ValueError) as e:
            log.warning("Failed to process test directory %s: %s", directory.path, e)

    reported = [build_reported_result(r, reconcile(r, intent)) for r in test_results]

    if insights is None:
        insights = derive_insights(intent, reported)

    report = assemble_report(
        reported,
        context=context,
        intent=intent,
        insights=insights,
        metadata=metadata,
        developer=developer,
        branch=branch,
        environment=environment,
        started_at=started_at,
        ended_at=datetime.now(timezone.utc),
    )

    return ProcessedRun(
        report=report,
        asset_paths=collect_asset_paths(report.results, failures_only=failures_only),
    )


def build_test_result(directory: ArtifactDirectory) -> TestResult:
    """Turn one artifact directory into a test result."""
    trace_file = directory.trace_file
    trace = extract(trace_file) if trace_file is not None else None

    return TestResult(
        title=directory.test_name,
        file=f"{directory.name}.spec.ts",
        browser=directory.browser,
        status=classify(directory),
        retries=directory.retry,
        errors=list(trace.errors) if trace else [],
        steps=list(trace.steps) if trace else [],
        screenshots=[collect_screenshot(p) for p in directory.screenshot_files],
        videos=[collect_video(p) for p in directory.video_files],
        trace_file=str(trace_file) if trace_file is not None else None,
    )


def collect_screenshot(path: Path) -> Screenshot:
    width, height = read_image_size(path)
    return Screenshot(
        id=str(uuid.uuid4()),
        timestamp=path.stat().st_mtime * 1000,
        file_path=str(path),
        width=width,
        height=height,
        action_before=infer_action(path.stem),
    )


def collect_video(path: Path) -> Video:
    return Video(id=str(uuid.uuid4()), file_path=str(path), size=path.stat().st_size)


def read_image_size(path: Path) -> tuple[int, int]:
    """Width and height from a PNG header; (0, 0) when unknown."""
    try:
        with path.open("rb") as f:
            header = f.read(24)
    except OSError as e:
        log.warning("Could not read screenshot %s: %s", path, e)
        return 0, 0

    if len(header) < 24 or not header.startswith(PNG_SIGNATURE):
        return 0, 0
    width, height = struct.unpack(">II", header[16:24])
    return width, height


def infer_action(stem: str) -> str | None:
    """Guess the action preceding a screenshot from its name."""
    name = stem.lower()
    for keywords, action in ACTION_KEYWORDS:
        if any(keyword in name for keyword in keywords):
            return action
    return None


def collect_asset_paths(
    results: Sequence[ReportedResult], *, failures_only: bool = False
) -> Sequence[Path]:
    """List screenshots, videos and traces referenced by the results."""
    paths: list[Path] = []
    for result in results:
        if failures_only and result.status != "failed":
            continue
        paths.extend(Path(s.file_path) for s in result.screenshots)
        paths.extend(Path(v.file_path) for v in result.videos)
        if result.trace_file:
            paths.append(Path(result.trace_file))
    return paths


def save_local_copy(report: Report, context: ReportContext) -> Path:
    """Write the report next to the counter so it survives failed uploads."""
    context.reports_dir.mkdir(parents=True, exist_ok=True)
    path = context.reports_dir / f"{report.execution_id}.json"
    path.write_text(report.model_dump_json(by_alias=True, indent=2))
    log.info("Saved report %s to %s", report.execution_id, path)
    return path
