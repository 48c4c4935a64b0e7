"""Local folder storage adapter.

Writes the report layout straight to a directory. The index is rewritten
atomically (temp file and rename) but without locking: concurrent uploads
to the same folder are last-writer-wins and may drop each other's entries.
"""

import asyncio
import logging
import os
import shlex
import shutil
from collections.abc import AsyncGenerator, Sequence
from contextlib import asynccontextmanager
from dataclasses import dataclass
from pathlib import Path

from pydantic import ValidationError

from trace_reports.models.report import Report, ReportIndex, ReportIndexEntry
from trace_reports.storage.base import StorageAdapter, StorageError, UploadResult
from trace_reports.storage.index import (
    INDEX_PATH,
    empty_index,
    index_entry_for,
    remove_from_index,
    report_path,
    update_index,
)
from trace_reports.storage.local_folder.config import LocalFolderConfig
from trace_reports.summary import render_markdown

log = logging.getLogger(__name__)


@dataclass(frozen=True, kw_only=True)
class LocalFolderStorageAdapter(StorageAdapter):
    """Stores reports in a folder on the local filesystem."""

    config: LocalFolderConfig

    @classmethod
    @asynccontextmanager
    async def from_config(
        cls, config: LocalFolderConfig
    ) -> AsyncGenerator["LocalFolderStorageAdapter", None]:
        yield cls(config=config)

    @property
    def root(self) -> Path:
        return self.config.base_path

    @property
    def index_file(self) -> Path:
        return self.root / INDEX_PATH

    def report_dir(self, report_id: str) -> Path:
        return self.root / report_path(report_id)

    async def test_connection(self) -> bool:
        return self.root.is_dir() and os.access(self.root, os.W_OK)

    async def ensure_storage_structure(self) -> None:
        self.index_file.parent.mkdir(parents=True, exist_ok=True)
        if not self.index_file.exists():
            log.info("Initializing reports index at %s", self.index_file)
            self.write_index(empty_index())

    async def write_report(self, report: Report) -> Sequence[str]:
        folder = report_path(report.execution_id)
        self.report_dir(report.execution_id).mkdir(parents=True, exist_ok=True)

        (self.root / folder / "report.json").write_text(
            report.model_dump_json(by_alias=True, indent=2)
        )
        (self.root / folder / "summary.md").write_text(render_markdown(report))

        return [f"{folder}/report.json", f"{folder}/summary.md"]

    async def write_asset(self, report_id: str, local_path: Path, name: str) -> str:
        target = f"{report_path(report_id)}/assets/{name}"
        destination = self.root / target
        destination.parent.mkdir(parents=True, exist_ok=True)
        await asyncio.to_thread(shutil.copyfile, local_path, destination)
        return target

    def read_index(self) -> ReportIndex | None:
        """Current index, or None if there is none yet."""
        if not self.index_file.exists():
            return None
        try:
            return ReportIndex.model_validate_json(self.index_file.read_text())
        except ValidationError as e:
            raise StorageError(f"Corrupt reports index {self.index_file}: {e}") from e

    def write_index(self, index: ReportIndex) -> None:
        self.index_file.parent.mkdir(parents=True, exist_ok=True)
        tmp = self.index_file.with_name(f"{self.index_file.name}.tmp")
        tmp.write_text(index.model_dump_json(by_alias=True, indent=2))
        os.replace(tmp, self.index_file)

    async def update_reports_index(self, report: Report) -> None:
        index = update_index(self.read_index(), index_entry_for(report))
        self.write_index(index)
        log.info("Reports index now holds %d report(s)", len(index.reports))

    def get_report_url(self, report_id: str) -> str:
        return (self.report_dir(report_id) / "report.json").resolve().as_uri()

    def get_dashboard_url(self) -> str:
        return self.config.dashboard_url or self.root.resolve().as_uri()

    async def list_reports(self) -> Sequence[ReportIndexEntry]:
        try:
            index = self.read_index()
        except StorageError as e:
            log.warning("%s", e)
            return []
        return list(index.reports) if index else []

    async def download_report(self, report_id: str) -> Report | None:
        path = self.report_dir(report_id) / "report.json"
        if not path.is_file():
            return None
        try:
            return Report.model_validate_json(path.read_text())
        except ValidationError as e:
            log.warning("Corrupt report %s: %s", path, e)
            return None

    async def delete_report(self, report_id: str) -> bool:
        folder = self.report_dir(report_id)
        if not folder.is_dir():
            return False

        await asyncio.to_thread(shutil.rmtree, folder)
        self.write_index(remove_from_index(self.read_index(), report_id))
        log.info("Deleted report %s", report_id)
        return True

    async def get_asset_url(self, report_id: str, asset_path: str) -> str:
        return (self.report_dir(report_id) / "assets" / asset_path).resolve().as_uri()

    async def upload_report(
        self,
        report: Report,
        asset_paths: Sequence[Path],
        *,
        cancel: asyncio.Event | None = None,
    ) -> UploadResult:
        """Upload, then run the configured sync command."""
        result = await super().upload_report(report, asset_paths, cancel=cancel)
        if result.success and self.config.sync_command:
            await self.sync()
        return result

    async def sync(self) -> None:
        """Run the sync command; failures are logged, never raised."""
        command = shlex.split(self.config.sync_command or "")
        if not command:
            return

        log.info("Running sync command: %s", self.config.sync_command)
        try:
            process = await asyncio.create_subprocess_exec(
                *command,
                cwd=self.root,
                stdout=asyncio.subprocess.PIPE,
                stderr=asyncio.subprocess.PIPE,
            )
        except OSError as e:
            log.warning("Sync command failed: %s", e)
            return

        try:
            _, stderr = await asyncio.wait_for(
                process.communicate(), timeout=self.config.sync_timeout
            )
        except TimeoutError:
            log.warning(
                "Sync command timed out after %ss", self.config.sync_timeout
            )
            process.kill()
            await process.wait()
            return

        if process.returncode != 0:
            log.warning(
                "Sync command exited with %s: %s",
                process.returncode,
                stderr.decode().strip(),
            )
