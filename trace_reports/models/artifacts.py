"""Transient values produced while reading a results directory."""

from collections.abc import Sequence
from dataclasses import dataclass, field
from fnmatch import fnmatch
from pathlib import Path

from trace_reports.models.result import TestError, TestStep

TRACE_PATTERNS = ("trace.zip", "*.trace", "*.zip")
SCREENSHOT_PATTERNS = ("*.png", "*.jpg", "*.jpeg")
VIDEO_PATTERNS = ("*.webm", "*.mp4")


def _matching(files: Sequence[str], patterns: Sequence[str]) -> Sequence[str]:
    return [name for name in files if any(fnmatch(name, p) for p in patterns)]


@dataclass(frozen=True, kw_only=True)
class ArtifactDirectory:
    """Per-test output directory of a test run."""

    path: Path
    test_name: str
    browser: str
    retry: int
    files: Sequence[str] = field(default_factory=tuple)

    @property
    def name(self) -> str:
        """Directory name."""
        return self.path.name

    @property
    def trace_file(self) -> Path | None:
        """First trace bundle in the directory, if any."""
        for pattern in TRACE_PATTERNS:
            for name in self.files:
                if fnmatch(name, pattern):
                    return self.path / name
        return None

    @property
    def screenshot_files(self) -> Sequence[Path]:
        return [self.path / name for name in _matching(self.files, SCREENSHOT_PATTERNS)]

    @property
    def video_files(self) -> Sequence[Path]:
        return [self.path / name for name in _matching(self.files, VIDEO_PATTERNS)]


@dataclass(frozen=True, kw_only=True)
class TraceData:
    """Records extracted from a trace bundle."""

    errors: Sequence[TestError] = field(default_factory=tuple)
    steps: Sequence[TestStep] = field(default_factory=tuple)
