"""Azure Files storage adapter."""

from collections.abc import AsyncGenerator
from contextlib import asynccontextmanager
from dataclasses import dataclass

from trace_reports.storage.azure_files.config import AzureFilesConfig
from trace_reports.storage.unimplemented import UnimplementedStorageAdapter


@dataclass(frozen=True, kw_only=True)
class AzureFilesStorageAdapter(UnimplementedStorageAdapter):
    """Stores reports in an Azure Files share. Not implemented."""

    backend_name = "Azure Files"

    config: AzureFilesConfig

    @classmethod
    @asynccontextmanager
    async def from_config(
        cls, config: AzureFilesConfig
    ) -> AsyncGenerator["AzureFilesStorageAdapter", None]:
        yield cls(config=config)
