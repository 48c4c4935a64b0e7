"""Tagged union of the configurations of every storage backend."""

from typing import Annotated, Any

from pydantic import Field, TypeAdapter

from trace_reports.storage.azure_files.config import AzureFilesConfig
from trace_reports.storage.github.config import GitHubStorageConfig
from trace_reports.storage.google_drive.config import GoogleDriveConfig
from trace_reports.storage.local_folder.config import LocalFolderConfig
from trace_reports.storage.sharepoint.config import SharePointConfig

StorageConfig = Annotated[
    GitHubStorageConfig
    | SharePointConfig
    | AzureFilesConfig
    | GoogleDriveConfig
    | LocalFolderConfig,
    Field(discriminator="type"),
]

_storage_config_adapter: TypeAdapter[StorageConfig] = TypeAdapter(StorageConfig)


def parse_storage_config(data: Any) -> StorageConfig:
    """Validate a mapping into the backend configuration its type names."""
    return _storage_config_adapter.validate_python(data)


def storage_config_for(key: str, data: dict[str, Any]) -> StorageConfig:
    """Validate backend options given separately from their type tag."""
    return parse_storage_config({**data, "type": key})
