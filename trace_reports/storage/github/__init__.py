"""GitHub repository storage module."""

from trace_reports.storage.github.adapter import GitHubStorageAdapter
from trace_reports.storage.github.config import GitHubStorageConfig
from trace_reports.storage.github.manifest import github_manifest

__all__ = ["GitHubStorageAdapter", "GitHubStorageConfig", "github_manifest"]
