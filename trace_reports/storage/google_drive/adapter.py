"""Google Drive storage adapter."""

from collections.abc import AsyncGenerator
from contextlib import asynccontextmanager
from dataclasses import dataclass

from trace_reports.storage.google_drive.config import GoogleDriveConfig
from trace_reports.storage.unimplemented import UnimplementedStorageAdapter


@dataclass(frozen=True, kw_only=True)
class GoogleDriveStorageAdapter(UnimplementedStorageAdapter):
    """Stores reports in a Google Drive folder. Not implemented."""

    backend_name = "Google Drive"

    config: GoogleDriveConfig

    @classmethod
    @asynccontextmanager
    async def from_config(
        cls, config: GoogleDriveConfig
    ) -> AsyncGenerator["GoogleDriveStorageAdapter", None]:
        yield cls(config=config)
