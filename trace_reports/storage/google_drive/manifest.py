"""Google Drive storage manifest."""

from trace_reports.storage.google_drive.adapter import GoogleDriveStorageAdapter
from trace_reports.storage.google_drive.config import GoogleDriveConfig
from trace_reports.storage.manifest import StorageManifest

google_drive_manifest = StorageManifest(
    config_cls=GoogleDriveConfig,
    adapter_factory=GoogleDriveStorageAdapter.from_config,
)
