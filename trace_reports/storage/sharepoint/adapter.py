"""SharePoint storage adapter."""

from collections.abc import AsyncGenerator
from contextlib import asynccontextmanager
from dataclasses import dataclass

from trace_reports.storage.sharepoint.config import SharePointConfig
from trace_reports.storage.unimplemented import UnimplementedStorageAdapter


@dataclass(frozen=True, kw_only=True)
class SharePointStorageAdapter(UnimplementedStorageAdapter):
    """Stores reports in a SharePoint document library.

    The Graph API upload flow is not implemented; see UnimplementedStorageAdapter.
    """

    backend_name = "SharePoint"

    config: SharePointConfig

    @classmethod
    @asynccontextmanager
    async def from_config(
        cls, config: SharePointConfig
    ) -> AsyncGenerator["SharePointStorageAdapter", None]:
        yield cls(config=config)
