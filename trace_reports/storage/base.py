"""Abstract base class for report storage backends."""

import asyncio
import logging
from abc import ABC, abstractmethod
from collections.abc import Sequence
from dataclasses import dataclass
from pathlib import Path

import aiohttp

from trace_reports.models.report import Report, ReportIndexEntry

log = logging.getLogger(__name__)


class StorageError(Exception):
    """Raised when a backend rejects or fails an operation."""


class StorageAuthenticationError(StorageError):
    """Raised when a backend refuses the configured credentials."""


class StorageConflictError(StorageError):
    """Raised when a conditional write lost against a concurrent writer."""


class StorageNotImplementedError(StorageError, NotImplementedError):
    """Raised by mutating operations of backends without an implementation."""


# Failures a caller can recover from by retrying or by giving up on one item.
RECOVERABLE_ERRORS: tuple[type[BaseException], ...] = (
    StorageError,
    aiohttp.ClientError,
    TimeoutError,
    OSError,
)


@dataclass(frozen=True, kw_only=True)
class UploadResult:
    """Outcome of publishing one report."""

    report_id: str
    success: bool
    uploaded_files: Sequence[str] = ()
    report_url: str = ""
    dashboard_url: str = ""
    index_updated: bool = False
    error: str | None = None

    @property
    def files_uploaded(self) -> int:
        return len(self.uploaded_files)


@dataclass(frozen=True, kw_only=True)
class HealthStatus:
    """Result of a backend health check."""

    healthy: bool
    latency: float
    error: str | None = None


def plan_asset_names(asset_paths: Sequence[Path]) -> Sequence[tuple[Path, str]]:
    """Pair each asset with the file name it is stored under.

    Assets keep their original file name; a name already taken in the same
    upload gets its parent directory name as prefix.
    """
    planned: list[tuple[Path, str]] = []
    taken: set[str] = set()
    for path in asset_paths:
        name = path.name
        if name in taken:
            name = f"{path.parent.name}-{path.name}"
        taken.add(name)
        planned.append((path, name))
    return planned


def describe_error(error: BaseException) -> str:
    return str(error) or type(error).__name__


@dataclass(frozen=True, kw_only=True)
class StorageAdapter(ABC):
    """Abstract base for report storage backends.

    Backends provide the primitive reads and writes; publishing a report
    (body, then assets, then index) is shared.
    """

    @abstractmethod
    async def test_connection(self) -> bool:
        """Check that the backend is reachable with the configured credentials."""

    @abstractmethod
    async def ensure_storage_structure(self) -> None:
        """Create base folders and an empty index if absent.

        Idempotent; called before every upload.
        """

    @abstractmethod
    async def write_report(self, report: Report) -> Sequence[str]:
        """Store report.json and summary.md, returning the stored paths."""

    @abstractmethod
    async def write_asset(self, report_id: str, local_path: Path, name: str) -> str:
        """Store one asset under the report's assets folder and return its path."""

    @abstractmethod
    async def update_reports_index(self, report: Report) -> None:
        """Merge the report's entry into the index."""

    @abstractmethod
    def get_report_url(self, report_id: str) -> str:
        """URL for viewing a report."""

    @abstractmethod
    def get_dashboard_url(self) -> str:
        """URL of the dashboard."""

    @abstractmethod
    async def list_reports(self) -> Sequence[ReportIndexEntry]:
        """Index entries, newest first."""

    @abstractmethod
    async def download_report(self, report_id: str) -> Report | None:
        """Fetch a report, or None if it does not exist."""

    @abstractmethod
    async def delete_report(self, report_id: str) -> bool:
        """Delete a report with its assets and index entry.

        Returns False if the report does not exist.
        """

    @abstractmethod
    async def get_asset_url(self, report_id: str, asset_path: str) -> str:
        """Direct download URL of an asset."""

    async def upload_report(
        self,
        report: Report,
        asset_paths: Sequence[Path],
        *,
        cancel: asyncio.Event | None = None,
    ) -> UploadResult:
        """Publish a report body, its assets and its index entry.

        Fails only when the body cannot be written. Assets are best effort and
        an index failure is reported through index_updated.
        """
        report_id = report.execution_id
        try:
            await self.ensure_storage_structure()
            written = await self.write_report(report)
        except RECOVERABLE_ERRORS as e:
            log.error("Failed to upload report %s: %s", report_id, describe_error(e))
            return UploadResult(
                report_id=report_id, success=False, error=describe_error(e)
            )

        uploaded_assets = await self.upload_assets(
            report_id, asset_paths, cancel=cancel
        )

        index_updated = True
        try:
            await self.update_reports_index(report)
        except RECOVERABLE_ERRORS as e:
            log.warning("Failed to update reports index: %s", describe_error(e))
            index_updated = False

        return UploadResult(
            report_id=report_id,
            success=True,
            uploaded_files=[*written, *uploaded_assets],
            report_url=self.get_report_url(report_id),
            dashboard_url=self.get_dashboard_url(),
            index_updated=index_updated,
        )

    async def upload_assets(
        self,
        report_id: str,
        asset_paths: Sequence[Path],
        *,
        cancel: asyncio.Event | None = None,
    ) -> Sequence[str]:
        """Upload assets one by one, skipping those that fail.

        Setting cancel stops scheduling further assets; assets already stored
        stay stored.
        """
        uploaded: list[str] = []
        planned = plan_asset_names(asset_paths)

        for local_path, name in planned:
            if cancel is not None and cancel.is_set():
                log.info(
                    "Asset upload cancelled after %d of %d asset(s)",
                    len(uploaded),
                    len(planned),
                )
                break

            if not local_path.is_file():
                log.warning("Skipping missing asset %s", local_path)
                continue

            try:
                uploaded.append(await self.write_asset(report_id, local_path, name))
            except RECOVERABLE_ERRORS as e:
                log.warning(
                    "Failed to upload asset %s: %s", local_path, describe_error(e)
                )

        return uploaded

    async def health_check(self) -> HealthStatus:
        """Time test_connection; never raises."""
        loop = asyncio.get_running_loop()
        start = loop.time()
        try:
            connected = await self.test_connection()
        except Exception as e:
            return HealthStatus(
                healthy=False,
                latency=loop.time() - start,
                error=describe_error(e),
            )
        return HealthStatus(healthy=connected, latency=loop.time() - start)
