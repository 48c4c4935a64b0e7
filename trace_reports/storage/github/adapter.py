"""GitHub repository storage adapter."""

import asyncio
import base64
import logging
from collections.abc import AsyncGenerator, Callable, Sequence
from contextlib import asynccontextmanager
from dataclasses import dataclass, field
from pathlib import Path

import aiohttp
from pydantic import TypeAdapter, ValidationError

from trace_reports.models.report import Report, ReportIndex, ReportIndexEntry
from trace_reports.storage.base import (
    RECOVERABLE_ERRORS,
    StorageAdapter,
    StorageAuthenticationError,
    StorageConflictError,
    StorageError,
    describe_error,
)
from trace_reports.storage.github.config import GitHubStorageConfig
from trace_reports.storage.github.models import ContentEntry, FileContent
from trace_reports.storage.index import (
    INDEX_PATH,
    empty_index,
    index_entry_for,
    remove_from_index,
    report_path,
    update_index,
)
from trace_reports.summary import render_markdown

log = logging.getLogger(__name__)

INDEX_WRITE_ATTEMPTS = 3

_listing_adapter = TypeAdapter(list[ContentEntry])


async def raise_for_response(response: aiohttp.ClientResponse, action: str) -> None:
    """Map an unsuccessful contents API response onto a storage error."""
    text = await response.text()
    message = f"Failed to {action}: {response.status} {text}"
    if response.status in (401, 403):
        raise StorageAuthenticationError(message)
    if response.status in (409, 422):
        raise StorageConflictError(message)
    raise StorageError(message)


@dataclass(frozen=True, kw_only=True)
class GitHubStorageAdapter(StorageAdapter):
    """Stores reports as files committed to a GitHub repository.

    Every write is a commit through the contents API. Index updates are
    conditional on the blob sha read in the same attempt, so a concurrent
    writer causes a re-read instead of a lost entry.
    """

    config: GitHubStorageConfig
    session: aiohttp.ClientSession = field(repr=False)

    @classmethod
    @asynccontextmanager
    async def from_config(
        cls, config: GitHubStorageConfig
    ) -> AsyncGenerator["GitHubStorageAdapter", None]:
        """Create adapter with managed session lifecycle."""
        headers = {
            "Authorization": f"Bearer {config.token.get_secret_value()}",
            "Accept": "application/vnd.github+json",
            "User-Agent": "trace-reports",
        }
        async with aiohttp.ClientSession(
            base_url=config.api_base_url,
            headers=headers,
            timeout=aiohttp.ClientTimeout(total=config.request_timeout),
        ) as session:
            yield cls(config=config, session=session)

    @property
    def repo_url(self) -> str:
        return f"/repos/{self.config.owner}/{self.config.repo}"

    def contents_url(self, path: str) -> str:
        return f"{self.repo_url}/contents/{path}"

    async def test_connection(self) -> bool:
        async with self.session.get(self.repo_url) as response:
            if response.status != 200:
                log.warning(
                    "Cannot access repository %s/%s: %s",
                    self.config.owner,
                    self.config.repo,
                    response.status,
                )
                return False
        return True

    async def get_file(self, path: str) -> FileContent | None:
        """Fetch a file with its blob sha, or None if it does not exist."""
        async with self.session.get(
            self.contents_url(path), params={"ref": self.config.branch}
        ) as response:
            if response.status == 404:
                return None
            if response.status != 200:
                await raise_for_response(response, f"read {path}")
            data = await response.json()

        return FileContent.model_validate(data)

    async def list_directory(self, path: str) -> Sequence[ContentEntry] | None:
        """List a directory, or None if it does not exist."""
        async with self.session.get(
            self.contents_url(path), params={"ref": self.config.branch}
        ) as response:
            if response.status == 404:
                return None
            if response.status != 200:
                await raise_for_response(response, f"list {path}")
            data = await response.json()

        return _listing_adapter.validate_python(data)

    async def put_file(
        self, path: str, content: bytes, message: str, *, sha: str | None = None
    ) -> None:
        """Create or update a file.

        With sha the write only succeeds if the file still has that blob;
        without it the file must not exist yet.
        """
        payload = {
            "message": message,
            "content": base64.b64encode(content).decode(),
            "branch": self.config.branch,
        }
        if sha is not None:
            payload["sha"] = sha

        async with self.session.put(self.contents_url(path), json=payload) as response:
            if response.status not in (200, 201):
                await raise_for_response(response, f"write {path}")

    async def write_file(self, path: str, content: bytes, message: str) -> str:
        """Create or overwrite a file regardless of its current content."""
        existing = await self.get_file(path)
        await self.put_file(
            path, content, message, sha=existing.sha if existing else None
        )
        return path

    async def delete_file(self, path: str, sha: str, message: str) -> None:
        payload = {"message": message, "sha": sha, "branch": self.config.branch}
        async with self.session.delete(
            self.contents_url(path), json=payload
        ) as response:
            if response.status != 200:
                await raise_for_response(response, f"delete {path}")

    async def ensure_storage_structure(self) -> None:
        if await self.get_file(INDEX_PATH) is not None:
            return

        log.info(
            "Initializing reports index in %s/%s", self.config.owner, self.config.repo
        )
        try:
            await self.put_file(
                INDEX_PATH,
                empty_index().model_dump_json(by_alias=True, indent=2).encode(),
                "Initialize reports index",
            )
        except StorageConflictError:
            log.info("Reports index was created concurrently")

    async def write_report(self, report: Report) -> Sequence[str]:
        folder = report_path(report.execution_id)
        message = f"Add test report {report.execution_id}"
        return [
            await self.write_file(
                f"{folder}/report.json",
                report.model_dump_json(by_alias=True, indent=2).encode(),
                message,
            ),
            await self.write_file(
                f"{folder}/summary.md", render_markdown(report).encode(), message
            ),
        ]

    async def write_asset(self, report_id: str, local_path: Path, name: str) -> str:
        content = await asyncio.to_thread(local_path.read_bytes)
        return await self.write_file(
            f"{report_path(report_id)}/assets/{name}",
            content,
            f"Add asset {name} to report {report_id}",
        )

    async def read_index(self) -> tuple[ReportIndex | None, str | None]:
        """Current index and its blob sha; (None, None) if there is none yet."""
        current = await self.get_file(INDEX_PATH)
        if current is None:
            return None, None
        try:
            return ReportIndex.model_validate_json(current.decoded()), current.sha
        except ValidationError as e:
            raise StorageError(f"Corrupt reports index: {e}") from e

    async def modify_index(
        self, change: Callable[[ReportIndex | None], ReportIndex], message: str
    ) -> ReportIndex:
        """Apply change to the latest index, re-reading after each conflict."""
        for attempt in range(1, INDEX_WRITE_ATTEMPTS + 1):
            existing, sha = await self.read_index()
            index = change(existing)
            try:
                await self.put_file(
                    INDEX_PATH,
                    index.model_dump_json(by_alias=True, indent=2).encode(),
                    message,
                    sha=sha,
                )
            except StorageConflictError:
                log.info(
                    "Reports index changed concurrently (attempt %d of %d)",
                    attempt,
                    INDEX_WRITE_ATTEMPTS,
                )
                continue
            return index

        raise StorageConflictError(
            f"Reports index kept changing after {INDEX_WRITE_ATTEMPTS} attempts"
        )

    async def update_reports_index(self, report: Report) -> None:
        entry = index_entry_for(report)
        index = await self.modify_index(
            lambda existing: update_index(existing, entry),
            f"Update reports index for {report.execution_id}",
        )
        log.info("Reports index now holds %d report(s)", len(index.reports))

    def get_report_url(self, report_id: str) -> str:
        return (
            f"{self.config.web_base_url}/{self.config.owner}/{self.config.repo}"
            f"/tree/{self.config.branch}/{report_path(report_id)}"
        )

    def get_dashboard_url(self) -> str:
        return self.config.pages_url or (
            f"https://{self.config.owner}.github.io/{self.config.repo}"
        )

    async def list_reports(self) -> Sequence[ReportIndexEntry]:
        try:
            index, _ = await self.read_index()
        except RECOVERABLE_ERRORS as e:
            log.warning("Failed to list reports: %s", describe_error(e))
            return []
        return list(index.reports) if index else []

    async def download_report(self, report_id: str) -> Report | None:
        stored = await self.get_file(f"{report_path(report_id)}/report.json")
        if stored is None:
            return None
        try:
            return Report.model_validate_json(stored.decoded())
        except ValidationError as e:
            log.warning("Corrupt report %s: %s", report_id, e)
            return None

    async def collect_files(self, path: str) -> Sequence[ContentEntry]:
        """All files below path, depth first."""
        entries = await self.list_directory(path)
        if entries is None:
            return []

        files: list[ContentEntry] = []
        for entry in entries:
            if entry.type == "dir":
                files.extend(await self.collect_files(entry.path))
            else:
                files.append(entry)
        return files

    async def delete_report(self, report_id: str) -> bool:
        files = await self.collect_files(report_path(report_id))
        if not files:
            return False

        message = f"Delete test report {report_id}"
        for entry in files:
            await self.delete_file(entry.path, entry.sha, message)

        await self.modify_index(
            lambda existing: remove_from_index(existing, report_id), message
        )
        log.info("Deleted report %s (%d file(s))", report_id, len(files))
        return True

    async def get_asset_url(self, report_id: str, asset_path: str) -> str:
        return (
            f"{self.config.raw_base_url}/{self.config.owner}/{self.config.repo}"
            f"/{self.config.branch}/{report_path(report_id)}/assets/{asset_path}"
        )
