"""Base for backends whose wire protocol is not implemented yet.

Mutating operations raise StorageNotImplementedError immediately, the
connection test reports False and read-only operations return empty results
so browsing degrades gracefully.
"""

import asyncio
import logging
from collections.abc import Sequence
from dataclasses import dataclass
from pathlib import Path
from typing import ClassVar, NoReturn

from trace_reports.models.report import Report, ReportIndexEntry
from trace_reports.storage.base import (
    StorageAdapter,
    StorageNotImplementedError,
    UploadResult,
)

log = logging.getLogger(__name__)


@dataclass(frozen=True, kw_only=True)
class UnimplementedStorageAdapter(StorageAdapter):
    """Adapter that fails loudly on every write."""

    backend_name: ClassVar[str] = "unknown"

    def _not_implemented(self) -> NoReturn:
        raise StorageNotImplementedError(
            f"{self.backend_name} storage adapter not yet implemented"
        )

    async def test_connection(self) -> bool:
        log.warning("%s storage adapter not yet implemented", self.backend_name)
        return False

    async def ensure_storage_structure(self) -> None:
        self._not_implemented()

    async def write_report(self, report: Report) -> Sequence[str]:
        self._not_implemented()

    async def write_asset(self, report_id: str, local_path: Path, name: str) -> str:
        self._not_implemented()

    async def upload_report(
        self,
        report: Report,
        asset_paths: Sequence[Path],
        *,
        cancel: asyncio.Event | None = None,
    ) -> UploadResult:
        self._not_implemented()

    async def upload_assets(
        self,
        report_id: str,
        asset_paths: Sequence[Path],
        *,
        cancel: asyncio.Event | None = None,
    ) -> Sequence[str]:
        self._not_implemented()

    async def update_reports_index(self, report: Report) -> None:
        self._not_implemented()

    async def delete_report(self, report_id: str) -> bool:
        self._not_implemented()

    def get_report_url(self, report_id: str) -> str:
        return ""

    def get_dashboard_url(self) -> str:
        return ""

    async def list_reports(self) -> Sequence[ReportIndexEntry]:
        return []

    async def download_report(self, report_id: str) -> Report | None:
        return None

    async def get_asset_url(self, report_id: str, asset_path: str) -> str:
        return ""
