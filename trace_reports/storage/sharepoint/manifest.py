"""SharePoint storage manifest."""

from trace_reports.storage.manifest import StorageManifest
from trace_reports.storage.sharepoint.adapter import SharePointStorageAdapter
from trace_reports.storage.sharepoint.config import SharePointConfig

sharepoint_manifest = StorageManifest(
    config_cls=SharePointConfig,
    adapter_factory=SharePointStorageAdapter.from_config,
)
