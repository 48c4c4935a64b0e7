"""Local folder storage manifest."""

from trace_reports.storage.local_folder.adapter import LocalFolderStorageAdapter
from trace_reports.storage.local_folder.config import LocalFolderConfig
from trace_reports.storage.manifest import StorageManifest

local_folder_manifest = StorageManifest(
    config_cls=LocalFolderConfig,
    adapter_factory=LocalFolderStorageAdapter.from_config,
)
