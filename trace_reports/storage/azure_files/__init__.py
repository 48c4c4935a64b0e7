"""Azure Files storage module."""

from trace_reports.storage.azure_files.adapter import AzureFilesStorageAdapter
from trace_reports.storage.azure_files.config import AzureFilesConfig
from trace_reports.storage.azure_files.manifest import azure_files_manifest

__all__ = ["AzureFilesConfig", "AzureFilesStorageAdapter", "azure_files_manifest"]
