"""Fixtures for integration tests."""

import subprocess
from pathlib import Path

import pytest


@pytest.fixture
def git_repo(tmp_path: Path) -> Path:
    """Create an initialized git repository with one commit."""
    repo = tmp_path / "repo"
    repo.mkdir()
    for command in (
        ["git", "init", "--initial-branch", "main"],
        ["git", "config", "user.email", "test@example.com"],
        ["git", "config", "user.name", "Test Developer"],
        ["git", "commit", "--allow-empty", "-m", "initial"],
    ):
        subprocess.run(command, cwd=repo, check=True, capture_output=True)
    return repo
