"""Local folder storage module."""

from trace_reports.storage.local_folder.adapter import LocalFolderStorageAdapter
from trace_reports.storage.local_folder.config import LocalFolderConfig
from trace_reports.storage.local_folder.manifest import local_folder_manifest

__all__ = ["LocalFolderConfig", "LocalFolderStorageAdapter", "local_folder_manifest"]
