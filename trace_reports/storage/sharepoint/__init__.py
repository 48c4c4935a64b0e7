"""SharePoint storage module."""

from trace_reports.storage.sharepoint.adapter import SharePointStorageAdapter
from trace_reports.storage.sharepoint.config import SharePointConfig
from trace_reports.storage.sharepoint.manifest import sharepoint_manifest

__all__ = ["SharePointConfig", "SharePointStorageAdapter", "sharepoint_manifest"]
