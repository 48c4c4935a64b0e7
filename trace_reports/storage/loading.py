"""Loading of storage backends from entry points."""

from contextlib import AbstractAsyncContextManager
from importlib.metadata import entry_points
from typing import Any

from trace_reports.storage.base import StorageAdapter
from trace_reports.storage.config import StorageConfig
from trace_reports.storage.manifest import StorageManifest

ENTRY_POINT_GROUP = "trace_reports.storage"


class StorageNotFoundError(Exception):
    """Raised when a storage backend is not found."""


def load_storage_manifest(key: str) -> StorageManifest[Any]:
    """Load a storage manifest by key.

    Args:
        key: The backend key as registered in pyproject.toml
             (e.g., "github", "local-folder")

    Returns:
        The storage manifest instance

    Raises:
        StorageNotFoundError: If no backend with the given key is found

    """
    entries = entry_points(group=ENTRY_POINT_GROUP)

    for entry in entries:
        if entry.name == key:
            manifest: StorageManifest[Any] = entry.load()
            return manifest

    available = sorted(e.name for e in entries)
    raise StorageNotFoundError(
        f"Storage backend '{key}' not found. Available backends: {available}"
    )


def open_storage_adapter(
    config: StorageConfig,
) -> AbstractAsyncContextManager[StorageAdapter]:
    """Open the adapter for a backend configuration, selected by its type tag."""
    manifest = load_storage_manifest(config.type)
    if not isinstance(config, manifest.config_cls):
        raise TypeError(
            f"Backend '{config.type}' expects {manifest.config_cls.__name__}, "
            f"got {type(config).__name__}"
        )
    return manifest.adapter_factory(config)
