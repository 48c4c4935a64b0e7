"""Tests for storage loading module."""

from pathlib import Path

import pytest
from pydantic import SecretStr

from trace_reports.storage.github import (
    GitHubStorageAdapter,
    GitHubStorageConfig,
    github_manifest,
)
from trace_reports.storage.loading import (
    StorageNotFoundError,
    load_storage_manifest,
    open_storage_adapter,
)
from trace_reports.storage.local_folder import (
    LocalFolderConfig,
    LocalFolderStorageAdapter,
    local_folder_manifest,
)
from trace_reports.storage.sharepoint import SharePointConfig, SharePointStorageAdapter


def test_load_storage_manifest_returns_manifest() -> None:
    """Loads storage manifest by key."""
    assert load_storage_manifest("github") is github_manifest
    assert load_storage_manifest("local-folder") is local_folder_manifest


def test_load_storage_manifest_raises_for_unknown_backend() -> None:
    """Raises StorageNotFoundError for unknown backend key."""
    with pytest.raises(StorageNotFoundError) as exc_info:
        load_storage_manifest("unknown-backend")

    assert "unknown-backend" in str(exc_info.value)
    assert "Available backends" in str(exc_info.value)


@pytest.mark.parametrize(
    "key", ["github", "local-folder", "sharepoint", "azure-files", "google-drive"]
)
def test_every_backend_registered(key: str) -> None:
    """Every backend type has a manifest whose config carries the same tag."""
    manifest = load_storage_manifest(key)

    assert manifest.config_cls.model_fields["type"].default == key


async def test_open_storage_adapter_local_folder(tmp_path: Path) -> None:
    """Opens the adapter matching the config's type tag."""
    config = LocalFolderConfig(base_path=tmp_path)

    async with open_storage_adapter(config) as adapter:
        assert isinstance(adapter, LocalFolderStorageAdapter)
        assert adapter.config is config


async def test_open_storage_adapter_github() -> None:
    """Opens a GitHub adapter with its own session."""
    config = GitHubStorageConfig(token=SecretStr("t"), owner="o", repo="r")

    async with open_storage_adapter(config) as adapter:
        assert isinstance(adapter, GitHubStorageAdapter)
        assert not adapter.session.closed


async def test_open_storage_adapter_stub() -> None:
    """Stub backends open without contacting anything."""
    config = SharePointConfig(
        site_url="https://example.sharepoint.com/sites/qa",
        tenant_id="tenant",
        client_id="client",
        client_secret=SecretStr("secret"),
        library_name="Reports",
    )

    async with open_storage_adapter(config) as adapter:
        assert isinstance(adapter, SharePointStorageAdapter)
