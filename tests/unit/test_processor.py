"""Tests for results processor."""

import json
import zipfile
from pathlib import Path

from trace_reports.assembler import ReportContext
from trace_reports.models.intent import ExecutionIntent, ExecutionMetadata
from trace_reports.processor import (
    build_test_result,
    collect_asset_paths,
    infer_action,
    process_results,
    read_image_size,
    save_local_copy,
)
from trace_reports.scanner import scan_artifacts
from trace_reports.testing.artifacts import (
    corrupt_entry,
    create_test_directory,
    png_bytes,
    trace_record,
    write_trace_bundle,
)
from trace_reports.testing.factories import ReportFactory, ReportedResultFactory

FAILED_DIR = "login-chromium-retry1-20231120-123456"
PASSED_DIR = "home-firefox-retry0-20231120-123456"


def make_failed_test(results_dir: Path) -> Path:
    directory = create_test_directory(
        results_dir, FAILED_DIR, {"test-failure-1.png": png_bytes(800, 600)}
    )
    write_trace_bundle(
        directory / "trace.zip",
        {"trace.trace": trace_record(errors=[{"message": "Locator not found"}])},
    )
    return directory


def make_passed_test(results_dir: Path) -> Path:
    return create_test_directory(
        results_dir, PASSED_DIR, {"video.webm": b"\x1a\x45\xdf\xa3"}
    )


class TestBuildTestResult:
    """Tests for build_test_result."""

    def test_failed_directory(self, results_dir: Path) -> None:
        """Builds a failed result with errors, screenshots and trace."""
        make_failed_test(results_dir)
        (directory,) = scan_artifacts(results_dir)

        result = build_test_result(directory)

        assert result.title == "login"
        assert result.file == f"{FAILED_DIR}.spec.ts"
        assert result.browser == "chromium"
        assert result.retries == 1
        assert result.status == "failed"
        assert [e.message for e in result.errors] == ["Locator not found"]
        assert result.trace_file == str(results_dir / FAILED_DIR / "trace.zip")
        (screenshot,) = result.screenshots
        assert (screenshot.width, screenshot.height) == (800, 600)
        assert screenshot.action_before == "error"

    def test_passed_directory(self, results_dir: Path) -> None:
        """Builds a passed result with its video."""
        make_passed_test(results_dir)
        (directory,) = scan_artifacts(results_dir)

        result = build_test_result(directory)

        assert result.status == "passed"
        assert result.trace_file is None
        assert list(result.errors) == []
        (video,) = result.videos
        assert video.size == 4


class TestReadImageSize:
    """Tests for read_image_size."""

    def test_png(self, tmp_path: Path) -> None:
        """Reads dimensions from the PNG header."""
        path = tmp_path / "shot.png"
        path.write_bytes(png_bytes(1280, 720))

        assert read_image_size(path) == (1280, 720)

    def test_not_png(self, tmp_path: Path) -> None:
        """Unknown formats report zero size."""
        path = tmp_path / "shot.jpg"
        path.write_bytes(b"\xff\xd8\xff\xe0")

        assert read_image_size(path) == (0, 0)

    def test_missing(self, tmp_path: Path) -> None:
        """Missing files report zero size."""
        assert read_image_size(tmp_path / "missing.png") == (0, 0)


def test_infer_action() -> None:
    """Guesses the preceding action from screenshot names."""
    assert infer_action("after-click-submit") == "click"
    assert infer_action("fill-form") == "fill"
    assert infer_action("navigate-home") == "goto"
    assert infer_action("test-failure-1") == "error"
    assert infer_action("homepage") is None


def test_collect_asset_paths_failures_only() -> None:
    """Only failed results contribute assets when failures_only is set."""
    failed = ReportedResultFactory.build(status="failed").model_copy(
        update={"trace_file": "results/a/trace.zip"}
    )
    passed = ReportedResultFactory.build(status="passed").model_copy(
        update={"trace_file": "results/b/trace.zip"}
    )

    assert collect_asset_paths([failed, passed], failures_only=True) == [
        Path("results/a/trace.zip")
    ]
    assert len(collect_asset_paths([failed, passed])) == 2


class TestProcessResults:
    """Tests for process_results."""

    def test_processes_run(self, results_dir: Path, tmp_path: Path) -> None:
        """Builds a report from every test directory."""
        make_failed_test(results_dir)
        make_passed_test(results_dir)

        run = process_results(
            results_dir,
            context=ReportContext(state_dir=tmp_path / "state"),
            intent=ExecutionIntent(expect_failures=True, target_tests=["login"]),
            metadata=ExecutionMetadata(),
            developer="dev",
            branch="main",
        )

        report = run.report
        assert report.summary.total == 2
        assert report.summary.failed == 1
        assert report.summary.expected_fails == 1
        assert report.summary.expected_passes == 1
        assert report.results[0].title == "home"
        assert report.insights.actual_behavior == (
            "1 passed, 1 failed, 0 skipped out of 2 tests"
        )
        assert len(run.asset_paths) == 3

    def test_missing_results_dir(self, tmp_path: Path) -> None:
        """A missing results directory yields an empty report."""
        run = process_results(
            tmp_path / "missing",
            context=ReportContext(state_dir=tmp_path / "state"),
            intent=ExecutionIntent(),
            metadata=ExecutionMetadata(),
            developer="dev",
        )

        assert run.report.summary.total == 0
        assert list(run.asset_paths) == []

    def test_failures_only_assets(self, results_dir: Path, tmp_path: Path) -> None:
        """Only assets of failed tests are listed with failures_only."""
        make_failed_test(results_dir)
        make_passed_test(results_dir)

        run = process_results(
            results_dir,
            context=ReportContext(state_dir=tmp_path / "state"),
            intent=ExecutionIntent(),
            metadata=ExecutionMetadata(),
            developer="dev",
            failures_only=True,
        )

        assert {p.name for p in run.asset_paths} == {"test-failure-1.png", "trace.zip"}


def test_save_local_copy(tmp_path: Path) -> None:
    """Writes the report under the state directory with camelCase keys."""
    report = ReportFactory.build()
    context = ReportContext(state_dir=tmp_path)

    path = save_local_copy(report, context)

    assert path == tmp_path / "reports" / f"{report.execution_id}.json"
    data = json.loads(path.read_text())
    assert data["executionId"] == report.execution_id
    assert "sequenceNumber" in data


def test_process_results_survives_damaged_trace(
    results_dir: Path, tmp_path: Path
) -> None:
    """A trace bundle with a damaged entry does not abort the run."""
    make_passed_test(results_dir)
    directory = create_test_directory(results_dir, FAILED_DIR)
    bundle = write_trace_bundle(
        directory / "trace.zip",
        {
            "a.json": trace_record(errors=[{"message": "boom"}]),
            "b.json": trace_record(errors=[{"message": "lost"}] * 50),
        },
        compression=zipfile.ZIP_DEFLATED,
    )
    corrupt_entry(bundle, "b.json")

    run = process_results(
        results_dir,
        context=ReportContext(state_dir=tmp_path / "state"),
        intent=ExecutionIntent(),
        metadata=ExecutionMetadata(),
        developer="dev",
    )

    assert run.report.summary.total == 2
    failed = next(r for r in run.report.results if r.status == "failed")
    assert failed.error == "boom"
