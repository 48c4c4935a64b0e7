"""Tests for artifact scanner."""

import logging
from pathlib import Path

import pytest

from trace_reports.scanner import parse_directory_name, scan_artifacts
from trace_reports.testing.artifacts import create_test_directory


class TestParseDirectoryName:
    """Tests for parse_directory_name."""

    def test_splits_name_browser_and_retry(self) -> None:
        """Strips browser, retry and timestamp parts from the test name."""
        assert parse_directory_name("auth-login-chromium-retry0-20231120-123456") == (
            "auth-login",
            "chromium",
            0,
        )

    def test_reads_retry_count(self) -> None:
        """Parses the digits after retry."""
        _, browser, retry = parse_directory_name("checkout-firefox-retry2-20231120-1")

        assert browser == "firefox"
        assert retry == 2

    def test_defaults_for_unrecognized_name(self) -> None:
        """Short names keep their full name with default browser and retry."""
        assert parse_directory_name("smoke") == ("smoke", "chromium", 0)

    def test_unknown_browser_defaults_to_chromium(self) -> None:
        """Browser falls back to chromium when no known browser appears."""
        _, browser, _ = parse_directory_name("login-edge-retry1-20231120-123456")

        assert browser == "chromium"

    def test_retry_without_digits_ignored(self) -> None:
        """A part that merely starts with retry is not a retry count."""
        _, _, retry = parse_directory_name("retryflow-webkit-retryx-20231120-1")

        assert retry == 0


class TestScanArtifacts:
    """Tests for scan_artifacts."""

    def test_missing_root_yields_nothing(self, tmp_path: Path) -> None:
        """Returns no directories for a missing results path."""
        assert list(scan_artifacts(tmp_path / "missing")) == []

    def test_yields_directories_in_name_order(self, results_dir: Path) -> None:
        """Yields one entry per subdirectory, sorted by name."""
        create_test_directory(results_dir, "b-test-webkit-retry0-20231120-1")
        create_test_directory(results_dir, "a-test-firefox-retry1-20231120-1")

        directories = list(scan_artifacts(results_dir))

        assert [d.test_name for d in directories] == ["a-test", "b-test"]
        assert [d.browser for d in directories] == ["firefox", "webkit"]
        assert [d.retry for d in directories] == [1, 0]

    def test_lists_files(self, results_dir: Path) -> None:
        """Records file names of the directory, sorted."""
        create_test_directory(
            results_dir,
            "login-chromium-retry0-20231120-1",
            {"video.webm": b"", "trace.zip": b"", "test-failed-1.png": b""},
        )

        (directory,) = scan_artifacts(results_dir)

        assert directory.files == ("test-failed-1.png", "trace.zip", "video.webm")

    def test_skips_loose_files(
        self, results_dir: Path, caplog: pytest.LogCaptureFixture
    ) -> None:
        """Loose files at the top level are skipped with a warning."""
        (results_dir / ".last-run.json").write_text("{}")
        create_test_directory(results_dir, "login-chromium-retry0-20231120-1")

        with caplog.at_level(logging.WARNING):
            directories = list(scan_artifacts(results_dir))

        assert len(directories) == 1
        assert "Skipping non-directory entry" in caplog.text

    def test_ignores_nested_directories(self, results_dir: Path) -> None:
        """Only files directly inside a test directory are listed."""
        directory = create_test_directory(
            results_dir, "login-chromium-retry0-20231120-1", {"a.png": b""}
        )
        (directory / "nested").mkdir()

        (scanned,) = scan_artifacts(results_dir)

        assert scanned.files == ("a.png",)
