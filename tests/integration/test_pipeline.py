"""End-to-end tests from a results directory to published reports."""

import json
from collections.abc import Iterator
from pathlib import Path
from unittest.mock import AsyncMock, patch

import pytest

from trace_reports.cli import build_parser, run
from trace_reports.testing.artifacts import (
    create_test_directory,
    png_bytes,
    trace_record,
    write_trace_bundle,
)


@pytest.fixture
def results(results_dir: Path) -> Path:
    """A run with one failed and one passed test."""
    failed = create_test_directory(
        results_dir,
        "auth-login-chromium-retry0-20231120-123456",
        {"test-failure-1.png": png_bytes()},
    )
    write_trace_bundle(
        failed / "trace.zip",
        {
            "trace.trace": trace_record(
                errors=[{"message": "Expected dashboard to be visible"}],
                actions=[{"callId": "c1", "apiName": "page.goto"}],
            )
        },
    )
    create_test_directory(
        results_dir,
        "cart-checkout-firefox-retry0-20231120-123456",
        {"video.webm": b"\x1a\x45\xdf\xa3"},
    )
    return results_dir


@pytest.fixture
def config_file(tmp_path: Path, results: Path) -> Path:
    path = tmp_path / "config.yaml"
    path.write_text(
        "developer: alice\n"
        f"results_path: {results}\n"
        f"state_dir: {tmp_path / 'state'}\n"
        "storage:\n"
        "  type: local-folder\n"
        f"  base_path: {tmp_path / 'published'}\n"
    )
    (tmp_path / "published").mkdir()
    return path


@pytest.fixture(autouse=True)
def no_git() -> Iterator[None]:
    with patch("trace_reports.git.git_output", AsyncMock(return_value=None)):
        yield


async def upload(config_file: Path, *extra: str) -> int:
    args = build_parser().parse_args(
        [
            "--config",
            str(config_file),
            "upload",
            "--branch",
            "feature/login",
            "--intent",
            json.dumps(
                {"purpose": "debug", "expectFailures": True, "targetTests": ["login"]}
            ),
            *extra,
        ]
    )
    return await run(args)


async def test_upload_publishes_report(
    config_file: Path, tmp_path: Path, capsys: pytest.CaptureFixture[str]
) -> None:
    """A run is processed, published and indexed."""
    assert await upload(config_file) == 0

    output = json.loads(capsys.readouterr().out)
    assert output["success"]
    assert output["index_updated"]
    report_id = output["report_id"]

    folder = tmp_path / "published" / "reports" / report_id
    report = json.loads((folder / "report.json").read_text())
    assert report["developer"] == "alice"
    assert report["branch"] == "feature/login"
    assert report["sequenceNumber"] == 1
    assert report["summary"] == {
        "total": 2,
        "passed": 1,
        "failed": 1,
        "skipped": 0,
        "expectedFails": 1,
        "unexpectedFails": 0,
        "expectedPasses": 1,
        "unexpectedPasses": 0,
    }
    failed = next(r for r in report["results"] if r["status"] == "failed")
    assert failed["title"] == "auth-login"
    assert failed["error"] == "Expected dashboard to be visible"
    assert failed["steps"][0]["title"] == "page.goto"
    assert failed["outcomeMatch"]

    assets = sorted(p.name for p in (folder / "assets").iterdir())
    assert assets == ["test-failure-1.png", "trace.zip", "video.webm"]
    assert (folder / "summary.md").exists()

    index = json.loads((tmp_path / "published" / "reports" / "index.json").read_text())
    assert [e["id"] for e in index["reports"]] == [report_id]

    local_copy = tmp_path / "state" / "reports" / f"{report_id}.json"
    assert json.loads(local_copy.read_text())["executionId"] == report_id


async def test_failures_only(
    config_file: Path, tmp_path: Path, capsys: pytest.CaptureFixture[str]
) -> None:
    """Only assets of failed tests are published with --failures-only."""
    assert await upload(config_file, "--failures-only") == 0

    report_id = json.loads(capsys.readouterr().out)["report_id"]
    assets = tmp_path / "published" / "reports" / report_id / "assets"
    assert sorted(p.name for p in assets.iterdir()) == [
        "test-failure-1.png",
        "trace.zip",
    ]


async def test_sequence_numbers_across_runs(
    config_file: Path, tmp_path: Path, capsys: pytest.CaptureFixture[str]
) -> None:
    """Consecutive runs get consecutive numbers and both are listed."""
    assert await upload(config_file) == 0
    first = json.loads(capsys.readouterr().out)["report_id"]
    assert await upload(config_file) == 0
    second = json.loads(capsys.readouterr().out)["report_id"]

    args = build_parser().parse_args(["--config", str(config_file), "list"])
    assert await run(args) == 0
    listed = json.loads(capsys.readouterr().out)

    assert [e["id"] for e in listed] == [second, first]
    report = json.loads(
        (tmp_path / "published" / "reports" / second / "report.json").read_text()
    )
    assert report["sequenceNumber"] == 2


async def test_unhealthy_backend(
    tmp_path: Path, config_file: Path, capsys: pytest.CaptureFixture[str]
) -> None:
    """A missing storage folder fails the upload with exit code 1."""
    args = build_parser().parse_args(
        [
            "--config",
            str(config_file),
            "--storage",
            "local-folder",
            "--storage-config",
            json.dumps({"base_path": str(tmp_path / "missing")}),
            "upload",
        ]
    )

    assert await run(args) == 1
    assert not (tmp_path / "missing").exists()


async def test_stub_backend_health(
    config_file: Path, capsys: pytest.CaptureFixture[str]
) -> None:
    """Stub backends report themselves unhealthy."""
    args = build_parser().parse_args(
        [
            "--config",
            str(config_file),
            "--storage",
            "google-drive",
            "--storage-config",
            json.dumps({"service_account_key": "{}", "folder_id": "f"}),
            "health",
        ]
    )

    assert await run(args) == 1
    assert json.loads(capsys.readouterr().out)["healthy"] is False
