"""Shared fixtures."""

from collections.abc import Iterator
from pathlib import Path

import pytest
from aioresponses import aioresponses as aioresponses_cls


@pytest.fixture
def aioresponses() -> Iterator[aioresponses_cls]:
    """Mock all aiohttp requests made during a test."""
    with aioresponses_cls() as mock:
        yield mock


@pytest.fixture
def results_dir(tmp_path: Path) -> Path:
    """Empty directory standing in for a test run's output."""
    path = tmp_path / "test-results"
    path.mkdir()
    return path
