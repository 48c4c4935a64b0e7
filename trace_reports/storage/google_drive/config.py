"""Configuration for Google Drive storage."""

from typing import Literal

from pydantic import BaseModel, SecretStr


class GoogleDriveConfig(BaseModel):
    """Configuration for a Google Drive folder."""

    type: Literal["google-drive"] = "google-drive"
    service_account_key: SecretStr
    folder_id: str
