"""Google Drive storage module."""

from trace_reports.storage.google_drive.adapter import GoogleDriveStorageAdapter
from trace_reports.storage.google_drive.config import GoogleDriveConfig
from trace_reports.storage.google_drive.manifest import google_drive_manifest

__all__ = ["GoogleDriveConfig", "GoogleDriveStorageAdapter", "google_drive_manifest"]
