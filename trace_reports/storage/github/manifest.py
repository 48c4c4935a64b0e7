"""GitHub storage manifest."""

from trace_reports.storage.github.adapter import GitHubStorageAdapter
from trace_reports.storage.github.config import GitHubStorageConfig
from trace_reports.storage.manifest import StorageManifest

github_manifest = StorageManifest(
    config_cls=GitHubStorageConfig,
    adapter_factory=GitHubStorageAdapter.from_config,
)
