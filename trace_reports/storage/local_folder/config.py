"""Configuration for local folder storage."""

from pathlib import Path
from typing import Literal

from pydantic import BaseModel


class LocalFolderConfig(BaseModel):
    """Configuration for storage on a local or mounted folder."""

    type: Literal["local-folder"] = "local-folder"
    base_path: Path
    # Run after each upload, e.g. to push the folder to a network drive
    sync_command: str | None = None
    sync_timeout: float = 300
    dashboard_url: str | None = None
