"""Enumerate per-test artifact directories of a test run."""

import logging
from collections.abc import Iterator
from pathlib import Path

from trace_reports.models.artifacts import ArtifactDirectory

log = logging.getLogger(__name__)

KNOWN_BROWSERS = frozenset(["chromium", "firefox", "webkit"])
DEFAULT_BROWSER = "chromium"


def scan_artifacts(root: Path) -> Iterator[ArtifactDirectory]:
    """Yield one ArtifactDirectory per test subdirectory of root.

    A missing root yields nothing. Loose files and unreadable entries are
    skipped with a warning. Entries are visited in name order.
    """
    if not root.exists():
        log.info("Results directory %s does not exist", root)
        return

    try:
        entries = sorted(root.iterdir(), key=lambda p: p.name)
    except OSError as e:
        log.warning("Could not read results directory %s: %s", root, e)
        return

    for entry in entries:
        if not entry.is_dir():
            log.warning("Skipping non-directory entry %s", entry)
            continue

        try:
            files = sorted(p.name for p in entry.iterdir() if p.is_file())
        except OSError as e:
            log.warning("Skipping unreadable test directory %s: %s", entry, e)
            continue

        test_name, browser, retry = parse_directory_name(entry.name)
        yield ArtifactDirectory(
            path=entry,
            test_name=test_name,
            browser=browser,
            retry=retry,
            files=tuple(files),
        )


def parse_directory_name(dir_name: str) -> tuple[str, str, int]:
    """Split a directory name into test name, browser and retry count.

    Names look like ``auth-login-chromium-retry0-20231120-123456``: the last
    four dash-separated parts are browser, retry and timestamp.
    """
    parts = dir_name.split("-")
    test_name = "-".join(parts[:-4]) or dir_name
    browser = next((p for p in parts if p in KNOWN_BROWSERS), DEFAULT_BROWSER)
    retry = 0
    for part in parts:
        if part.startswith("retry") and part[len("retry") :].isdigit():
            retry = int(part[len("retry") :])
            break
    return test_name, browser, retry
