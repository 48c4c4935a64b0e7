"""Azure Files storage manifest."""

from trace_reports.storage.azure_files.adapter import AzureFilesStorageAdapter
from trace_reports.storage.azure_files.config import AzureFilesConfig
from trace_reports.storage.manifest import StorageManifest

azure_files_manifest = StorageManifest(
    config_cls=AzureFilesConfig,
    adapter_factory=AzureFilesStorageAdapter.from_config,
)
