"""Configuration for Azure Files storage."""

from typing import Literal

from pydantic import BaseModel, SecretStr


class AzureFilesConfig(BaseModel):
    """Configuration for an Azure Files share."""

    type: Literal["azure-files"] = "azure-files"
    storage_account: str
    share_name: str
    share_key: SecretStr
    sas_token: SecretStr | None = None
    folder_path: str = ""
